"""
Cross-session hypothesis index.

The index is a flat list of IndexEntry derived from every session file.
It is a cache: never authoritative, always recomputable, and safe to
delete. Deleting it and rebuilding reproduces equivalent content.

Storage: JSON file at {base_dir}/.research/hypothesis-index.json
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Literal, Optional

from pydantic import ValidationError

from hypodex.core.exceptions import DecodeError
from hypodex.core.types import HypothesisIndex, IndexEntry, StorageWarning
from hypodex.storage.record_store import RecordStore, read_text_or_none, write_text_atomic

logger = logging.getLogger(__name__)

CorruptionPolicy = Literal["fail", "skip"]


def _check_policy(policy: str) -> str:
    if policy not in ("fail", "skip"):
        raise ValueError(f"Unknown corruption policy: {policy}")
    return policy


class IndexBuilder:
    """Derives the index from every session file and persists it."""

    def __init__(self, records: RecordStore, on_corrupt_session: CorruptionPolicy = "fail"):
        self.records = records
        self.on_corrupt_session = _check_policy(on_corrupt_session)
        self._lock = asyncio.Lock()

    @property
    def index_path(self):
        return self.records.layout.index_path

    async def rebuild_index(self, on_corrupt_session: Optional[CorruptionPolicy] = None) -> HypothesisIndex:
        """
        Rebuild and persist the index from all session files.

        Args:
            on_corrupt_session: Override the builder's policy for this call.
                "fail" propagates the first DecodeError and writes nothing;
                "skip" leaves the file out and records a warning.

        Returns:
            The index that was written.

        Raises:
            ValueError: for a policy other than "fail" or "skip".
        """
        policy = _check_policy(on_corrupt_session or self.on_corrupt_session)
        async with self._lock:
            entries: list[IndexEntry] = []
            warnings: list[StorageWarning] = []

            for session_id, path in await self.records.list_session_files():
                try:
                    hypotheses = await self.records.load_session_hypotheses(session_id)
                except DecodeError as exc:
                    if policy == "fail":
                        raise
                    logger.warning(f"Skipping corrupt session file during index rebuild: {exc}")
                    warnings.append(StorageWarning(file=str(path), message=exc.reason))
                    continue
                entries.extend(IndexEntry.from_hypothesis(h) for h in hypotheses)

            index = HypothesisIndex(entries=entries, warnings=warnings or None)
            text = json.dumps(index.to_json_dict(), indent=2, ensure_ascii=False) + "\n"
            await asyncio.to_thread(write_text_atomic, self.index_path, text)

        logger.info(
            f"Rebuilt hypothesis index: {len(entries)} entries"
            + (f", {len(warnings)} file(s) skipped" if warnings else "")
        )
        return index


class IndexCache:
    """Reads the persisted index, rebuilding it when absent or unreadable.

    Does not detect staleness against the session files; callers that need
    a fresh view rebuild explicitly or enable auto-rebuild.
    """

    def __init__(self, builder: IndexBuilder):
        self.builder = builder

    @property
    def index_path(self):
        return self.builder.index_path

    async def load_index(self) -> HypothesisIndex:
        path = self.index_path
        text = await asyncio.to_thread(_read_index_text, path)
        if text is None:
            logger.debug(f"No index at {path}; building")
            return await self.builder.rebuild_index()

        try:
            return HypothesisIndex.model_validate_json(text)
        except ValidationError as exc:
            logger.warning(f"Hypothesis index {path} is unreadable ({exc.error_count()} error(s)); rebuilding")
            return await self.builder.rebuild_index()

    async def invalidate(self) -> bool:
        """Delete the persisted index. Returns True if a file was removed."""
        return await asyncio.to_thread(_unlink_if_exists, self.index_path)


def _read_index_text(path) -> Optional[str]:
    try:
        return read_text_or_none(path)
    except DecodeError:
        # Binary garbage in a cache file is handled like invalid JSON.
        return ""


def _unlink_if_exists(path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


__all__ = ["CorruptionPolicy", "IndexBuilder", "IndexCache"]
