"""
Per-session hypothesis files.

RecordStore is the only component that reads or writes session files; the
index and the operators go through it. Files are authoritative.

Storage: JSON file at {base_dir}/.research/hypotheses/{SESSION}-hypotheses.json
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Iterable, Optional
from uuid import uuid4

from pydantic import ValidationError

from hypodex.core.exceptions import DecodeError
from hypodex.core.types import Hypothesis, SessionHypothesisFile, utc_now
from hypodex.storage.paths import StorageLayout

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Blocking helpers (run via asyncio.to_thread)
# --------------------------------------------------------------------------- #


def read_text_or_none(path: Path) -> Optional[str]:
    """File contents, or None if the file does not exist."""
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(path, f"not valid UTF-8 ({exc.reason})") from exc


def write_text_atomic(path: Path, text: str) -> None:
    """Write to a sibling temp file, then replace the target in one step."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()


def _list_session_files(directory: Path) -> list[tuple[str, Path]]:
    try:
        names = sorted(p.name for p in directory.iterdir() if p.is_file())
    except FileNotFoundError:
        return []
    found = []
    for name in names:
        session_id = StorageLayout.session_id_from_filename(name)
        if session_id is not None:
            found.append((session_id, directory / name))
    return found


def decode_session_file(path: Path, text: str) -> SessionHypothesisFile:
    """Parse session file text. Raises DecodeError for anything malformed."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    if not isinstance(data, dict):
        raise DecodeError(path, "top level is not an object")
    if not isinstance(data.get("hypotheses"), list):
        raise DecodeError(path, "missing hypotheses[]")

    try:
        return SessionHypothesisFile.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(part) for part in first["loc"])
        raise DecodeError(
            path, f"{exc.error_count()} invalid field(s), first at {loc}: {first['msg']}"
        ) from exc


def encode_session_file(record: SessionHypothesisFile) -> str:
    return json.dumps(record.to_json_dict(), indent=2, ensure_ascii=False) + "\n"


# --------------------------------------------------------------------------- #
# RecordStore
# --------------------------------------------------------------------------- #


class RecordStore:
    """Reads and writes whole session files (last writer wins)."""

    def __init__(self, layout: StorageLayout):
        self.layout = layout

    async def load_session_file(self, session_id: str) -> Optional[SessionHypothesisFile]:
        """
        Load a session file with its timestamps.

        Returns:
            The parsed file, or None if the session has no file.

        Raises:
            DecodeError: if the file exists but cannot be parsed.
        """
        path = self.layout.session_file(session_id)
        text = await asyncio.to_thread(read_text_or_none, path)
        if text is None:
            return None
        record = decode_session_file(path, text)
        logger.debug(f"Loaded {len(record.hypotheses)} hypotheses from {path}")
        return record

    async def load_session_hypotheses(self, session_id: str) -> list[Hypothesis]:
        """Ordered hypotheses of a session; [] when no file exists."""
        record = await self.load_session_file(session_id)
        if record is None:
            return []
        return record.hypotheses

    async def save_session_hypotheses(
        self, session_id: str, hypotheses: Iterable[Hypothesis]
    ) -> SessionHypothesisFile:
        """
        Replace a session's file with the given list.

        The first write sets createdAt; every write sets updatedAt, strictly
        later than the previous one. List order is written as given, and
        unknown top-level keys of the existing file are kept.

        Raises:
            DecodeError: if an existing file is corrupt. The file is left
                untouched.
        """
        path = self.layout.session_file(session_id)
        existing = await self.load_session_file(session_id)

        now = utc_now()
        extra: dict = {}
        if existing is None:
            created_at = now
        else:
            created_at = existing.created_at
            extra = existing.model_extra or {}
            if now <= existing.updated_at:
                now = existing.updated_at + timedelta(microseconds=1)

        record = SessionHypothesisFile(
            session_id=session_id,
            created_at=created_at,
            updated_at=now,
            hypotheses=list(hypotheses),
            **extra,
        )
        await asyncio.to_thread(write_text_atomic, path, encode_session_file(record))
        logger.debug(f"Wrote {len(record.hypotheses)} hypotheses to {path}")
        return record

    async def list_session_files(self) -> list[tuple[str, Path]]:
        """(session_id, path) for every session file, in file-name order."""
        return await asyncio.to_thread(_list_session_files, self.layout.hypotheses_dir)

    async def list_session_ids(self) -> list[str]:
        return [session_id for session_id, _ in await self.list_session_files()]

    async def session_exists(self, session_id: str) -> bool:
        return await asyncio.to_thread(self.layout.session_file(session_id).is_file)


__all__ = [
    "RecordStore",
    "read_text_or_none",
    "decode_session_file",
    "encode_session_file",
    "write_text_atomic",
]
