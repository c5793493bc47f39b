"""
Hypodex Operator System.

The HypothesisStorage class is the storage service: one value per store,
constructed with a base directory and its policy flags, and passed to
whatever needs it. There is no module-level instance.

Example usage:
    from hypodex.operators import HypothesisStorage

    storage = HypothesisStorage("path/to/project", auto_rebuild_index=False)
    await storage.save_hypothesis(hypothesis)
    print(await storage.search_hypotheses("chromatin"))
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from hypodex.core.types import (
    Hypothesis,
    HypothesisCategory,
    HypothesisConfidence,
    HypothesisIndex,
    HypothesisState,
    IndexEntry,
    SessionHypothesisFile,
)
from hypodex.operators.mutation import MutationGateway
from hypodex.operators.query import QueryEngine
from hypodex.operators.summary import render_hypotheses, render_index_summary
from hypodex.storage.index import CorruptionPolicy, IndexBuilder, IndexCache
from hypodex.storage.locks import SessionLocks
from hypodex.storage.paths import StorageLayout
from hypodex.storage.record_store import RecordStore

if TYPE_CHECKING:
    from hypodex.config import StorageSettings


class HypothesisStorage:
    """
    Main facade for the hypothesis store.

    Wires the record store, index, query engine and mutation gateway over
    one base directory.
    """

    def __init__(
        self,
        base_dir: Optional[Path | str] = None,
        auto_rebuild_index: bool = True,
        on_corrupt_session: CorruptionPolicy = "fail",
        serialize_writes: bool = True,
    ):
        """
        Initialize a storage service.

        Args:
            base_dir: Directory holding the .research/ tree. Defaults to cwd.
            auto_rebuild_index: Rebuild the index after every successful write.
            on_corrupt_session: "fail" or "skip" for unreadable session files
                during index rebuilds.
            serialize_writes: Hold a per-session lock around read-modify-write.
        """
        self.layout = StorageLayout(Path(base_dir) if base_dir is not None else Path.cwd())
        self.records = RecordStore(self.layout)
        self.builder = IndexBuilder(self.records, on_corrupt_session=on_corrupt_session)
        self.index = IndexCache(self.builder)
        self.queries = QueryEngine(self.records, self.index)
        self.mutations = MutationGateway(
            self.records,
            self.builder,
            SessionLocks(enabled=serialize_writes),
            auto_rebuild_index=auto_rebuild_index,
        )

    @classmethod
    def from_settings(cls, settings: "StorageSettings") -> "HypothesisStorage":
        return cls(
            base_dir=settings.base_dir,
            auto_rebuild_index=settings.auto_rebuild_index,
            on_corrupt_session=settings.on_corrupt_session,
            serialize_writes=settings.serialize_writes,
        )

    @property
    def base_dir(self) -> Path:
        return self.layout.base_dir

    @property
    def auto_rebuild_index(self) -> bool:
        return self.mutations.auto_rebuild_index

    def __repr__(self) -> str:
        return f"HypothesisStorage(base_dir={str(self.base_dir)!r}, auto_rebuild_index={self.auto_rebuild_index})"

    # ------------------------------------------------------------------ #
    # Session files
    # ------------------------------------------------------------------ #

    async def load_session_hypotheses(self, session_id: str) -> list[Hypothesis]:
        return await self.records.load_session_hypotheses(session_id)

    async def load_session_file(self, session_id: str) -> Optional[SessionHypothesisFile]:
        return await self.records.load_session_file(session_id)

    async def save_session_hypotheses(
        self, session_id: str, hypotheses: Iterable[Hypothesis]
    ) -> SessionHypothesisFile:
        return await self.mutations.replace_session_hypotheses(session_id, hypotheses)

    # ------------------------------------------------------------------ #
    # Single hypotheses
    # ------------------------------------------------------------------ #

    async def get_hypothesis_by_id(
        self, hypothesis_id: str, session_id: Optional[str] = None
    ) -> Optional[Hypothesis]:
        return await self.queries.get_hypothesis_by_id(hypothesis_id, session_id=session_id)

    async def save_hypothesis(self, hypothesis: Hypothesis) -> Hypothesis:
        return await self.mutations.save_hypothesis(hypothesis)

    async def delete_hypothesis(self, hypothesis_id: str) -> bool:
        return await self.mutations.delete_hypothesis(hypothesis_id)

    async def next_hypothesis_id(self, session_id: str) -> str:
        return await self.mutations.next_hypothesis_id(session_id)

    # ------------------------------------------------------------------ #
    # Index
    # ------------------------------------------------------------------ #

    async def rebuild_index(self, on_corrupt_session: Optional[CorruptionPolicy] = None) -> HypothesisIndex:
        return await self.builder.rebuild_index(on_corrupt_session=on_corrupt_session)

    async def load_index(self) -> HypothesisIndex:
        return await self.index.load_index()

    async def invalidate_index(self) -> bool:
        return await self.index.invalidate()

    async def filter_index(
        self,
        session_id: Optional[str] = None,
        state: Optional[HypothesisState | str] = None,
        category: Optional[HypothesisCategory | str] = None,
        confidence: Optional[HypothesisConfidence | str] = None,
        has_mechanism: Optional[bool] = None,
    ) -> list[IndexEntry]:
        return await self.queries.filter_index(
            session_id=session_id,
            state=state,
            category=category,
            confidence=confidence,
            has_mechanism=has_mechanism,
        )

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    async def get_hypotheses_by_state(self, state: HypothesisState | str) -> list[Hypothesis]:
        return await self.queries.get_hypotheses_by_state(state)

    async def get_active_hypotheses(self) -> list[Hypothesis]:
        return await self.queries.get_active_hypotheses()

    async def search_hypotheses(self, query: str) -> list[Hypothesis]:
        return await self.queries.search_hypotheses(query)

    async def get_all_hypotheses(self) -> list[Hypothesis]:
        return await self.queries.get_all_hypotheses()

    async def list_sessions(self) -> list[str]:
        return await self.queries.list_sessions()

    async def summary(self) -> str:
        """Human-readable summary of the index."""
        return render_index_summary(await self.load_index())

    async def render_all(self) -> str:
        return render_hypotheses(await self.get_all_hypotheses())


__all__ = [
    "HypothesisStorage",
    "MutationGateway",
    "QueryEngine",
]
