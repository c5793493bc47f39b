"""
On-disk layout of a hypothesis store.

    <base_dir>/.research/
    ├── hypotheses/
    │   ├── <SESSION>-hypotheses.json
    │   └── ...
    └── hypothesis-index.json
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

RESEARCH_DIR = ".research"
HYPOTHESES_DIR = "hypotheses"
INDEX_FILE = "hypothesis-index.json"
SESSION_FILE_SUFFIX = "-hypotheses.json"

# Dots stay: session ids are often dotted thread ids.
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def sanitize_session_id(session_id: str) -> str:
    """Replace characters that are unsafe in a file name with '_'."""
    return _UNSAFE_FILENAME_CHARS.sub("_", session_id)


@dataclass(frozen=True)
class StorageLayout:
    """Paths of one store rooted at base_dir."""

    base_dir: Path

    @property
    def research_dir(self) -> Path:
        return self.base_dir / RESEARCH_DIR

    @property
    def hypotheses_dir(self) -> Path:
        return self.research_dir / HYPOTHESES_DIR

    @property
    def index_path(self) -> Path:
        return self.research_dir / INDEX_FILE

    def session_file(self, session_id: str) -> Path:
        return self.hypotheses_dir / f"{sanitize_session_id(session_id)}{SESSION_FILE_SUFFIX}"

    @staticmethod
    def session_id_from_filename(name: str) -> Optional[str]:
        """Session id for a session file name, or None for any other file."""
        if not name.endswith(SESSION_FILE_SUFFIX):
            return None
        session_id = name[: -len(SESSION_FILE_SUFFIX)]
        return session_id or None


__all__ = [
    "RESEARCH_DIR",
    "HYPOTHESES_DIR",
    "INDEX_FILE",
    "SESSION_FILE_SUFFIX",
    "sanitize_session_id",
    "StorageLayout",
]
