"""
Custom exceptions for Hypodex.

All Hypodex-specific exceptions inherit from HypodexError.

Absent records are not exceptional: lookups return None and deletes
return False. Only faults the caller must act on are raised.
"""

from __future__ import annotations

from pathlib import Path


class HypodexError(Exception):
    """Base exception for all Hypodex errors."""

    pass


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class StorageError(HypodexError):
    """Base class for persisted-state errors."""

    pass


class DecodeError(StorageError):
    """A persisted file exists but cannot be parsed.

    Never treated as "empty". A file in this state needs manual recovery.
    """

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot decode {self.path}: {reason}")


# =============================================================================
# DATA ERRORS
# =============================================================================


class DataError(HypodexError):
    """Base class for record-level errors."""

    pass


class InvalidHypothesisIdError(DataError):
    """Hypothesis id does not match H-<SESSION>-<SEQ>, or cannot be formed."""

    def __init__(self, hypothesis_id: str, reason: str = "expected H-<SESSION>-<SEQ>"):
        self.hypothesis_id = hypothesis_id
        super().__init__(f"Invalid hypothesis id '{hypothesis_id}': {reason}")


class SessionMismatchError(DataError):
    """Record id encodes a different session than its session_id."""

    def __init__(self, hypothesis_id: str, session_id: str, id_session: str):
        self.hypothesis_id = hypothesis_id
        self.session_id = session_id
        self.id_session = id_session
        super().__init__(
            f"Hypothesis {hypothesis_id} belongs to session '{id_session}' "
            f"but was filed under '{session_id}'"
        )


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    # Base
    "HypodexError",
    # Storage
    "StorageError",
    "DecodeError",
    # Data
    "DataError",
    "InvalidHypothesisIdError",
    "SessionMismatchError",
]
