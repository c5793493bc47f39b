"""
Write operators: upsert and delete single hypotheses.

Every write is routed to the owning session's file and replaces the whole
file. With serialize_writes on, read-modify-write sequences on one session
are serialised within the process; across processes the last writer wins.
"""

from __future__ import annotations

import logging
from typing import Iterable

from hypodex.core.exceptions import InvalidHypothesisIdError, SessionMismatchError
from hypodex.core.ids import generate_hypothesis_id, session_for_hypothesis_id
from hypodex.core.types import Hypothesis, SessionHypothesisFile, utc_now
from hypodex.storage.index import IndexBuilder
from hypodex.storage.locks import SessionLocks
from hypodex.storage.record_store import RecordStore

logger = logging.getLogger(__name__)


class MutationGateway:
    """Single entry point for changes to stored hypotheses."""

    def __init__(
        self,
        records: RecordStore,
        builder: IndexBuilder,
        locks: SessionLocks,
        auto_rebuild_index: bool = True,
    ):
        self.records = records
        self.builder = builder
        self.locks = locks
        self.auto_rebuild_index = auto_rebuild_index

    async def _after_write(self) -> None:
        # A rebuild failure here surfaces to the caller; the write itself has landed.
        if self.auto_rebuild_index:
            await self.builder.rebuild_index()

    async def save_hypothesis(self, hypothesis: Hypothesis) -> Hypothesis:
        """
        Create or update a hypothesis in its session's file.

        An existing record with the same id is replaced in place, keeping its
        position and createdAt; otherwise the record is appended. updatedAt is
        refreshed either way.

        Returns:
            The record as stored.

        Raises:
            InvalidHypothesisIdError: if the id is not H-<SESSION>-<SEQ>.
            SessionMismatchError: if the id encodes a different session.
            DecodeError: if the session file is corrupt.
        """
        session_id = hypothesis.session_id
        id_session = session_for_hypothesis_id(hypothesis.id)
        if id_session is None:
            raise InvalidHypothesisIdError(hypothesis.id)
        if id_session != session_id:
            raise SessionMismatchError(hypothesis.id, session_id, id_session)

        async with self.locks.hold(session_id):
            hypotheses = await self.records.load_session_hypotheses(session_id)
            position = next((i for i, h in enumerate(hypotheses) if h.id == hypothesis.id), None)

            if position is None:
                stored = hypothesis.model_copy(update={"updated_at": utc_now()})
                hypotheses.append(stored)
                logger.debug(f"Appending {hypothesis.id} to session {session_id}")
            else:
                stored = hypothesis.model_copy(
                    update={
                        "created_at": hypotheses[position].created_at,
                        "updated_at": utc_now(),
                    }
                )
                hypotheses[position] = stored
                logger.debug(f"Replacing {hypothesis.id} at position {position} in session {session_id}")

            await self.records.save_session_hypotheses(session_id, hypotheses)

        await self._after_write()
        return stored

    async def delete_hypothesis(self, hypothesis_id: str) -> bool:
        """
        Remove a hypothesis from its session's file.

        The session is re-read at call time, never taken from an earlier
        snapshot. Returns False, without raising, when the id is malformed
        or not present at that moment, so deleting twice is harmless.
        """
        session_id = session_for_hypothesis_id(hypothesis_id)
        if session_id is None:
            return False

        async with self.locks.hold(session_id):
            hypotheses = await self.records.load_session_hypotheses(session_id)
            remaining = [h for h in hypotheses if h.id != hypothesis_id]
            if len(remaining) == len(hypotheses):
                return False
            await self.records.save_session_hypotheses(session_id, remaining)

        logger.info(f"Deleted hypothesis {hypothesis_id} from session {session_id}")
        await self._after_write()
        return True

    async def replace_session_hypotheses(
        self, session_id: str, hypotheses: Iterable[Hypothesis]
    ) -> SessionHypothesisFile:
        """Write a session's full list under the session lock."""
        async with self.locks.hold(session_id):
            record = await self.records.save_session_hypotheses(session_id, hypotheses)
        await self._after_write()
        return record

    async def next_hypothesis_id(self, session_id: str) -> str:
        """
        Next free id for a session, based on what is stored now.

        The id is not reserved: two callers asking before either saves get
        the same answer.
        """
        hypotheses = await self.records.load_session_hypotheses(session_id)
        return generate_hypothesis_id(session_id, (h.id for h in hypotheses))


__all__ = ["MutationGateway"]
