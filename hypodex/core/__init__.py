# Export canonical types
from .types import (
    INDEX_VERSION,
    Hypothesis,
    HypothesisCategory,
    HypothesisConfidence,
    HypothesisIndex,
    HypothesisOrigin,
    HypothesisState,
    IndexEntry,
    SessionHypothesisFile,
    StorageWarning,
)
from .ids import (
    HypothesisId,
    generate_hypothesis_id,
    is_valid_hypothesis_id,
    parse_hypothesis_id,
    session_for_hypothesis_id,
)
from .exceptions import (
    DataError,
    DecodeError,
    HypodexError,
    InvalidHypothesisIdError,
    SessionMismatchError,
    StorageError,
)

__all__ = [
    "INDEX_VERSION",
    "DataError",
    "DecodeError",
    "HypodexError",
    "Hypothesis",
    "HypothesisCategory",
    "HypothesisConfidence",
    "HypothesisId",
    "HypothesisIndex",
    "HypothesisOrigin",
    "HypothesisState",
    "IndexEntry",
    "InvalidHypothesisIdError",
    "SessionHypothesisFile",
    "SessionMismatchError",
    "StorageError",
    "StorageWarning",
    "generate_hypothesis_id",
    "is_valid_hypothesis_id",
    "parse_hypothesis_id",
    "session_for_hypothesis_id",
]
