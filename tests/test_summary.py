"""Tests for text renderings."""

import pytest

from hypodex.core.types import HypothesisIndex, HypothesisState, IndexEntry, StorageWarning
from hypodex.operators.summary import render_hypotheses, render_hypothesis_line, render_index_summary


def test_hypothesis_line(make_hypothesis):
    line = render_hypothesis_line(make_hypothesis("H-T-001", statement="Short claim"))
    assert line == "[proposed] H-T-001: Short claim (mechanistic, conf=medium)"


def test_long_statement_truncated(make_hypothesis):
    line = render_hypothesis_line(make_hypothesis(statement="x" * 200), max_len=20)
    assert "x" * 17 + "..." in line
    assert "x" * 18 not in line


def test_render_empty():
    assert render_hypotheses([]) == "No hypotheses stored."
    assert render_index_summary(HypothesisIndex()) == "No hypotheses indexed."


def test_index_summary_counts(make_hypothesis):
    hypotheses = [
        make_hypothesis("H-A-001", state=HypothesisState.ACTIVE, mechanism="m"),
        make_hypothesis("H-A-002", unresolved_critique_count=2),
        make_hypothesis("H-B-001", state=HypothesisState.ACTIVE),
    ]
    index = HypothesisIndex(
        entries=[IndexEntry.from_hypothesis(h) for h in hypotheses],
        warnings=[StorageWarning(file="x-hypotheses.json", message="invalid JSON")],
    )
    text = render_index_summary(index)

    assert "3 entries across 2 session(s)" in text
    assert "By session: A=2, B=1" in text
    assert "By state: active=2, proposed=1" in text
    assert "By category: mechanistic=3" in text
    assert "With mechanism: 1/3" in text
    assert "Unresolved critiques: 2" in text
    assert "Skipped x-hypotheses.json: invalid JSON" in text


@pytest.mark.asyncio
async def test_storage_summary(storage, make_hypothesis):
    assert await storage.summary() == "No hypotheses indexed."
    await storage.save_hypothesis(make_hypothesis("H-A-001"))
    await storage.rebuild_index()
    assert "1 entries across 1 session(s)" in await storage.summary()
    assert "H-A-001" in await storage.render_all()
