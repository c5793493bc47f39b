"""
Plain-text renderings of hypotheses and the index, for terminals and logs.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from hypodex.core.types import Hypothesis, HypothesisIndex


def _truncate(text: str, max_len: int) -> str:
    clean = text.replace("\n", " ").strip()
    if len(clean) > max_len:
        clean = clean[: max_len - 3] + "..."
    return clean


def render_hypothesis_line(hypothesis: Hypothesis, max_len: int = 80) -> str:
    """One line: state, id, statement, category and confidence."""
    return (
        f"[{hypothesis.state.value}] {hypothesis.id}: {_truncate(hypothesis.statement, max_len)} "
        f"({hypothesis.category.value}, conf={hypothesis.confidence.value})"
    )


def render_hypotheses(hypotheses: Iterable[Hypothesis]) -> str:
    lines = [render_hypothesis_line(h) for h in hypotheses]
    if not lines:
        return "No hypotheses stored."
    return "\n".join(lines)


def _format_counts(counter: Counter) -> str:
    return ", ".join(f"{key}={count}" for key, count in sorted(counter.items()))


def render_index_summary(index: HypothesisIndex) -> str:
    """Aggregate view of the index: counts by session, state and category."""
    if not index.entries and not index.warnings:
        return "No hypotheses indexed."

    entries = index.entries
    lines = [
        f"Hypothesis index v{index.version}: {len(entries)} entries "
        f"across {len(index.session_ids)} session(s)",
        f"Built at: {index.built_at.isoformat()}",
    ]
    if entries:
        lines.append(f"By session: {_format_counts(Counter(e.session_id for e in entries))}")
        lines.append(f"By state: {_format_counts(Counter(e.state.value for e in entries))}")
        lines.append(f"By category: {_format_counts(Counter(e.category.value for e in entries))}")
        lines.append(f"By confidence: {_format_counts(Counter(e.confidence.value for e in entries))}")
        with_mechanism = sum(1 for e in entries if e.has_mechanism)
        lines.append(f"With mechanism: {with_mechanism}/{len(entries)}")
        critiques = sum(e.unresolved_critique_count for e in entries)
        if critiques:
            lines.append(f"Unresolved critiques: {critiques}")

    for warning in index.warnings or []:
        lines.append(f"Skipped {warning.file}: {warning.message}")

    return "\n".join(lines)


__all__ = ["render_hypothesis_line", "render_hypotheses", "render_index_summary"]
