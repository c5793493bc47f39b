"""Shared fixtures for hypodex tests."""

import pytest

from hypodex.core.ids import session_for_hypothesis_id
from hypodex.core.types import Hypothesis, HypothesisCategory
from hypodex.operators import HypothesisStorage


@pytest.fixture
def make_hypothesis():
    """Factory for valid hypotheses; the session defaults to the one in the id."""

    def _make(hypothesis_id="H-TEST-001", session_id=None, statement=None, **kwargs):
        kwargs.setdefault("category", HypothesisCategory.MECHANISTIC)
        return Hypothesis(
            id=hypothesis_id,
            session_id=session_id or session_for_hypothesis_id(hypothesis_id),
            statement=statement or f"Statement for {hypothesis_id}",
            **kwargs,
        )

    return _make


@pytest.fixture
def storage(tmp_path):
    """Store with auto-rebuild off, so tests control when the index is built."""
    return HypothesisStorage(tmp_path, auto_rebuild_index=False)


@pytest.fixture
def auto_storage(tmp_path):
    return HypothesisStorage(tmp_path, auto_rebuild_index=True)


@pytest.fixture
def write_raw(tmp_path):
    """Drop arbitrary text where a session file would live."""

    def _write(session_id, text):
        path = tmp_path / ".research" / "hypotheses" / f"{session_id}-hypotheses.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
