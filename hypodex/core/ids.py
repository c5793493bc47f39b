"""
Hypothesis identifier grammar.

Ids have the form H-<SESSION>-<SEQ>, where SEQ is exactly three digits.
The session part is captured greedily, so it may itself contain hyphens
and digits: "H-RS-2025-001-042" belongs to session "RS-2025-001".
"""

from __future__ import annotations

import re
from typing import Iterable, NamedTuple, Optional

from hypodex.core.exceptions import InvalidHypothesisIdError

HYPOTHESIS_ID_PATTERN = re.compile(r"^H-(?P<session>[A-Za-z0-9][\w-]*)-(?P<seq>\d{3})$", re.ASCII)
MAX_SEQUENCE = 999


class HypothesisId(NamedTuple):
    """A parsed hypothesis id."""

    session_id: str
    sequence: int

    def __str__(self) -> str:
        return format_hypothesis_id(self.session_id, self.sequence)


def parse_hypothesis_id(hypothesis_id: str) -> Optional[HypothesisId]:
    """Split an id into (session_id, sequence), or None if malformed."""
    if not isinstance(hypothesis_id, str):
        return None
    match = HYPOTHESIS_ID_PATTERN.fullmatch(hypothesis_id)
    if not match:
        return None
    return HypothesisId(match.group("session"), int(match.group("seq")))


def is_valid_hypothesis_id(hypothesis_id: str) -> bool:
    return parse_hypothesis_id(hypothesis_id) is not None


def session_for_hypothesis_id(hypothesis_id: str) -> Optional[str]:
    """Owning session encoded in the id, or None if malformed."""
    parsed = parse_hypothesis_id(hypothesis_id)
    return parsed.session_id if parsed else None


def format_hypothesis_id(session_id: str, sequence: int) -> str:
    return f"H-{session_id}-{sequence:03d}"


def generate_hypothesis_id(session_id: str, existing_ids: Iterable[str]) -> str:
    """
    Allocate the next id for a session.

    Sequences increase monotonically within a session: the result is one past
    the highest sequence among existing ids of that session, starting at 001.
    Ids belonging to other sessions are ignored.

    Raises:
        InvalidHypothesisIdError: if the session id cannot form a valid id,
            or the session has exhausted its sequence space.
    """
    sequences = [
        parsed.sequence
        for parsed in (parse_hypothesis_id(i) for i in existing_ids)
        if parsed is not None and parsed.session_id == session_id
    ]
    next_seq = max(sequences) + 1 if sequences else 1
    candidate = format_hypothesis_id(session_id, min(next_seq, MAX_SEQUENCE))

    if not is_valid_hypothesis_id(candidate) or session_for_hypothesis_id(candidate) != session_id:
        raise InvalidHypothesisIdError(candidate, f"session id '{session_id}' cannot form a hypothesis id")
    if next_seq > MAX_SEQUENCE:
        raise InvalidHypothesisIdError(candidate, f"session '{session_id}' has no sequence numbers left")
    return candidate


__all__ = [
    "HYPOTHESIS_ID_PATTERN",
    "MAX_SEQUENCE",
    "HypothesisId",
    "parse_hypothesis_id",
    "is_valid_hypothesis_id",
    "session_for_hypothesis_id",
    "format_hypothesis_id",
    "generate_hypothesis_id",
]
