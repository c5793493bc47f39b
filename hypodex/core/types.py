"""
Canonical Pydantic models for Hypodex.

These types are the single source of truth for persisted entities and are
imported by every other module. Field names are snake_case in Python and
camelCase on disk (sessionId, createdAt, ...).

Records arrive already validated by the hypothesis schema that owns them;
the models here only enforce structure. Unknown fields are kept so that a
load/save cycle never drops data written by a newer schema.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

INDEX_VERSION = "1.0.0"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-ready dict using on-disk key names, without unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --------------------------------------------------------------------------- #
# Enums
# --------------------------------------------------------------------------- #


class HypothesisCategory(str, Enum):
    """Logical role a hypothesis plays."""

    MECHANISTIC = "mechanistic"
    PHENOMENOLOGICAL = "phenomenological"
    BOUNDARY = "boundary"
    AUXILIARY = "auxiliary"
    THIRD_ALTERNATIVE = "third_alternative"


class HypothesisConfidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SPECULATIVE = "speculative"


class HypothesisState(str, Enum):
    """
    Lifecycle state.

    proposed -> active -> {confirmed, refuted, superseded, deferred},
    with active <-> deferred. Storage persists any value; it does not
    police transitions.
    """

    PROPOSED = "proposed"
    ACTIVE = "active"
    CONFIRMED = "confirmed"
    REFUTED = "refuted"
    SUPERSEDED = "superseded"
    DEFERRED = "deferred"


class HypothesisOrigin(str, Enum):
    """How the hypothesis came to exist."""

    PROPOSED = "proposed"
    THIRD_ALTERNATIVE = "third_alternative"
    REFINEMENT = "refinement"
    ANOMALY_SPAWNED = "anomaly_spawned"


# --------------------------------------------------------------------------- #
# Records
# --------------------------------------------------------------------------- #


class Hypothesis(_CamelModel):
    """A single tracked candidate explanation within a research session."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Global id, H-<SESSION>-<SEQ>")
    session_id: str = Field(..., min_length=1)
    statement: str
    category: HypothesisCategory
    confidence: HypothesisConfidence = HypothesisConfidence.MEDIUM
    state: HypothesisState = HypothesisState.PROPOSED
    origin: HypothesisOrigin = HypothesisOrigin.PROPOSED
    mechanism: Optional[str] = None

    # Links
    parent_id: Optional[str] = None
    spawned_from_anomaly: Optional[str] = None
    proposed_by: Optional[str] = None
    unresolved_critique_count: int = Field(default=0, ge=0)

    # Metadata
    tags: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(dict.fromkeys(value))
        return value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _tz_aware(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def has_mechanism(self) -> bool:
        return bool(self.mechanism and self.mechanism.strip())

    def matches_text(self, needle: str) -> bool:
        """Case-insensitive substring match on id, statement, mechanism, notes and tags.

        `needle` must already be lower-cased.
        """
        if needle in self.id.lower():
            return True
        if needle in self.statement.lower():
            return True
        if self.mechanism and needle in self.mechanism.lower():
            return True
        if self.notes and needle in self.notes.lower():
            return True
        return any(needle in tag.lower() for tag in self.tags)


class SessionHypothesisFile(_CamelModel):
    """The persisted unit: one file per research session."""

    model_config = ConfigDict(extra="allow")

    session_id: str
    created_at: datetime
    updated_at: datetime
    hypotheses: list[Hypothesis]

    @field_validator("created_at", "updated_at")
    @classmethod
    def _tz_aware(cls, value: datetime) -> datetime:
        return _as_utc(value)


# --------------------------------------------------------------------------- #
# Index
# --------------------------------------------------------------------------- #


class IndexEntry(_CamelModel):
    """Derived summary of one hypothesis."""

    id: str
    session_id: str
    category: HypothesisCategory
    confidence: HypothesisConfidence
    state: HypothesisState
    has_mechanism: bool
    unresolved_critique_count: int = 0
    last_updated: Optional[datetime] = None
    parent_id: Optional[str] = None
    spawned_from_anomaly: Optional[str] = None

    @classmethod
    def from_hypothesis(cls, hypothesis: Hypothesis) -> "IndexEntry":
        return cls(
            id=hypothesis.id,
            session_id=hypothesis.session_id,
            category=hypothesis.category,
            confidence=hypothesis.confidence,
            state=hypothesis.state,
            has_mechanism=hypothesis.has_mechanism,
            unresolved_critique_count=hypothesis.unresolved_critique_count,
            last_updated=hypothesis.updated_at,
            parent_id=hypothesis.parent_id,
            spawned_from_anomaly=hypothesis.spawned_from_anomaly,
        )


class StorageWarning(_CamelModel):
    """A session file left out of an index rebuild."""

    file: str
    message: str


class HypothesisIndex(_CamelModel):
    """Flat, rebuildable, non-authoritative index over every session file."""

    version: str = INDEX_VERSION
    built_at: datetime = Field(default_factory=utc_now)
    entries: list[IndexEntry] = Field(default_factory=list)
    warnings: Optional[list[StorageWarning]] = None

    @property
    def session_ids(self) -> list[str]:
        """Distinct sessions in entry order."""
        return list(dict.fromkeys(e.session_id for e in self.entries))


__all__ = [
    "INDEX_VERSION",
    "utc_now",
    # Enums
    "HypothesisCategory",
    "HypothesisConfidence",
    "HypothesisState",
    "HypothesisOrigin",
    # Records
    "Hypothesis",
    "SessionHypothesisFile",
    # Index
    "IndexEntry",
    "StorageWarning",
    "HypothesisIndex",
]
