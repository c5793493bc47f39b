"""
Hypodex - durable hypothesis storage with a rebuildable cross-session index.

Hypotheses live in one JSON file per research session under
``<base_dir>/.research/hypotheses/``; a derived index in
``.research/hypothesis-index.json`` supports cross-session filtering.
"""

__version__ = "0.1.0"

from hypodex.core.exceptions import DecodeError, HypodexError, InvalidHypothesisIdError
from hypodex.core.types import (
    Hypothesis,
    HypothesisCategory,
    HypothesisConfidence,
    HypothesisIndex,
    HypothesisState,
)
from hypodex.operators import HypothesisStorage

__all__ = [
    "__version__",
    "DecodeError",
    "HypodexError",
    "Hypothesis",
    "HypothesisCategory",
    "HypothesisConfidence",
    "HypothesisIndex",
    "HypothesisState",
    "HypothesisStorage",
    "InvalidHypothesisIdError",
]
