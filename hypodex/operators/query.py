"""
Read operators: point lookup, state listing, free-text search, bulk listing.

Free-text search is a linear scan over every session file. There is no
inverted index; at a handful of sessions and infrequent queries the scan
is cheap enough.
"""

from __future__ import annotations

import logging
from typing import Optional

from hypodex.core.ids import session_for_hypothesis_id
from hypodex.core.types import (
    Hypothesis,
    HypothesisCategory,
    HypothesisConfidence,
    HypothesisState,
    IndexEntry,
)
from hypodex.storage.index import IndexCache
from hypodex.storage.record_store import RecordStore

logger = logging.getLogger(__name__)


class QueryEngine:
    """Read-only queries over the record store and the index."""

    def __init__(self, records: RecordStore, index: IndexCache):
        self.records = records
        self.index = index

    async def get_hypothesis_by_id(
        self, hypothesis_id: str, session_id: Optional[str] = None
    ) -> Optional[Hypothesis]:
        """
        Look up one hypothesis.

        Args:
            hypothesis_id: Global id, H-<SESSION>-<SEQ>.
            session_id: Session to read instead of the one the id encodes.

        Returns:
            The record, or None if the id is malformed or not stored. A
            malformed id touches no files.
        """
        id_session = session_for_hypothesis_id(hypothesis_id)
        if id_session is None:
            logger.debug(f"Malformed hypothesis id: {hypothesis_id!r}")
            return None

        hypotheses = await self.records.load_session_hypotheses(session_id or id_session)
        return next((h for h in hypotheses if h.id == hypothesis_id), None)

    async def get_session_hypotheses(self, session_id: str) -> list[Hypothesis]:
        return await self.records.load_session_hypotheses(session_id)

    async def get_hypotheses_by_state(self, state: HypothesisState | str) -> list[Hypothesis]:
        """
        All hypotheses currently in a given state.

        The index only narrows which sessions to read. Each of those is loaded
        fresh and filtered on the stored state, so a stale index cannot return a
        record that has since moved to another state.
        """
        state = HypothesisState(state)
        index = await self.index.load_index()
        session_ids = list(dict.fromkeys(e.session_id for e in index.entries if e.state == state))

        results: list[Hypothesis] = []
        for session_id in session_ids:
            hypotheses = await self.records.load_session_hypotheses(session_id)
            results.extend(h for h in hypotheses if h.state == state)
        return results

    async def get_active_hypotheses(self) -> list[Hypothesis]:
        return await self.get_hypotheses_by_state(HypothesisState.ACTIVE)

    async def filter_index(
        self,
        session_id: Optional[str] = None,
        state: Optional[HypothesisState | str] = None,
        category: Optional[HypothesisCategory | str] = None,
        confidence: Optional[HypothesisConfidence | str] = None,
        has_mechanism: Optional[bool] = None,
    ) -> list[IndexEntry]:
        """Index entries matching every given filter (None means any)."""
        state = HypothesisState(state) if state is not None else None
        category = HypothesisCategory(category) if category is not None else None
        confidence = HypothesisConfidence(confidence) if confidence is not None else None

        index = await self.index.load_index()
        return [
            e
            for e in index.entries
            if (session_id is None or e.session_id == session_id)
            and (state is None or e.state == state)
            and (category is None or e.category == category)
            and (confidence is None or e.confidence == confidence)
            and (has_mechanism is None or e.has_mechanism == has_mechanism)
        ]

    async def search_hypotheses(self, query: str) -> list[Hypothesis]:
        """
        Case-insensitive substring search across every session.

        Matches id, statement, mechanism, notes and tags. A blank query
        matches nothing.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return []

        matches = [h for h in await self.get_all_hypotheses() if h.matches_text(needle)]
        logger.debug(f"Search {query!r}: {len(matches)} match(es)")
        return matches

    async def get_all_hypotheses(self) -> list[Hypothesis]:
        """Every hypothesis, session by session, each session in stored order."""
        results: list[Hypothesis] = []
        for session_id in await self.records.list_session_ids():
            results.extend(await self.records.load_session_hypotheses(session_id))
        return results

    async def list_sessions(self) -> list[str]:
        """Session ids that have a persisted file."""
        return await self.records.list_session_ids()


__all__ = ["QueryEngine"]
