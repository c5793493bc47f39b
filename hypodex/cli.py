#!/usr/bin/env python3
"""
Hypodex CLI - inspect and maintain a hypothesis store.

Commands:
- sessions: List sessions with a hypothesis file
- list: List hypotheses (all, one session, or one state)
- show: Print one hypothesis as JSON
- active: List active hypotheses
- search: Free-text search across sessions
- add: Save hypotheses from a JSON file
- delete: Delete a hypothesis by id
- next-id: Next free hypothesis id for a session
- rebuild-index: Rebuild the cross-session index
- summary: Index summary

Example usage:
    hypodex sessions --base-dir ~/research
    hypodex list --state active
    hypodex search chromatin --json
    hypodex add new-hypotheses.json
    hypodex rebuild-index --skip-corrupt
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Optional, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from hypodex.config import get_settings
from hypodex.core.exceptions import HypodexError
from hypodex.core.types import Hypothesis, HypothesisState
from hypodex.logging_setup import setup_logging
from hypodex.operators import HypothesisStorage
from hypodex.operators.summary import render_index_summary

T = TypeVar("T")

console = Console()

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Hypodex - hypothesis storage and cross-session index",
    rich_markup_mode=None,
)

BASE_DIR_HELP = "Directory containing the .research/ tree (default: $HYPODEX_BASE_DIR or cwd)"


@app.callback()
def _configure(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
):
    setup_logging(log_level)


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _storage(base_dir: Optional[str]) -> HypothesisStorage:
    settings = get_settings()
    if base_dir:
        settings = settings.model_copy(update={"base_dir": Path(base_dir)})
    return HypothesisStorage.from_settings(settings)


def _run(coro: Awaitable[T]) -> T:
    """Run a storage coroutine, turning store errors into exit code 1."""
    try:
        return asyncio.run(coro)
    except HypodexError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _print_hypotheses(hypotheses: list[Hypothesis], as_json: bool) -> None:
    if as_json:
        _echo_json([h.to_json_dict() for h in hypotheses])
        return
    if not hypotheses:
        typer.echo("No hypotheses found.")
        return

    table = Table(show_lines=False)
    table.add_column("ID", no_wrap=True)
    table.add_column("Session", no_wrap=True)
    table.add_column("State")
    table.add_column("Category")
    table.add_column("Confidence")
    table.add_column("Statement")
    for h in hypotheses:
        table.add_row(h.id, h.session_id, h.state.value, h.category.value, h.confidence.value, h.statement)
    console.print(table)
    typer.echo(f"\nTotal: {len(hypotheses)} hypotheses")


# ------------------------------------------------------------------ #
# Read commands
# ------------------------------------------------------------------ #


@app.command()
def sessions(
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """List session ids that have a hypothesis file."""
    session_ids = _run(_storage(base_dir).list_sessions())
    if not session_ids:
        typer.echo("No sessions.")
        return
    for session_id in session_ids:
        typer.echo(session_id)


@app.command(name="list")
def list_hypotheses(
    session: Optional[str] = typer.Option(None, "--session", "-s", help="Only this session"),
    state: Optional[HypothesisState] = typer.Option(None, "--state", help="Only this lifecycle state"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """
    List hypotheses.

    Examples:
        hypodex list
        hypodex list --session RS-20251230
        hypodex list --state refuted --json
    """
    storage = _storage(base_dir)
    if session:
        hypotheses = _run(storage.load_session_hypotheses(session))
        if state:
            hypotheses = [h for h in hypotheses if h.state == state]
    elif state:
        hypotheses = _run(storage.get_hypotheses_by_state(state))
    else:
        hypotheses = _run(storage.get_all_hypotheses())
    _print_hypotheses(hypotheses, as_json)


@app.command()
def show(
    hypothesis_id: str = typer.Argument(..., help="Hypothesis id, H-<SESSION>-<SEQ>"),
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """Print one hypothesis as JSON."""
    hypothesis = _run(_storage(base_dir).get_hypothesis_by_id(hypothesis_id))
    if hypothesis is None:
        typer.echo(f"Hypothesis not found: {hypothesis_id}", err=True)
        raise typer.Exit(1)
    _echo_json(hypothesis.to_json_dict())


@app.command()
def active(
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """List hypotheses under active investigation."""
    _print_hypotheses(_run(_storage(base_dir).get_active_hypotheses()), as_json)


@app.command()
def search(
    query: str = typer.Argument(..., help="Case-insensitive text to find"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """
    Search statements, mechanisms, notes, tags and ids across all sessions.

    Examples:
        hypodex search chromatin
        hypodex search H-RS-20251230
    """
    if not query.strip():
        typer.echo("Please specify a non-blank search query", err=True)
        raise typer.Exit(1)
    _print_hypotheses(_run(_storage(base_dir).search_hypotheses(query)), as_json)


@app.command()
def summary(
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """Show index summary (counts by session, state and category)."""
    typer.echo(_run(_storage(base_dir).summary()))


# ------------------------------------------------------------------ #
# Write commands
# ------------------------------------------------------------------ #


@app.command()
def add(
    path: Path = typer.Argument(..., help="JSON file with one hypothesis object or a list of them"),
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """
    Save hypotheses from a JSON file (create or update by id).

    Example:
        hypodex add hypotheses.json
    """
    if not path.exists():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(1)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        items = payload if isinstance(payload, list) else [payload]
        hypotheses = [Hypothesis.model_validate(item) for item in items]
    except (json.JSONDecodeError, ValidationError) as exc:
        typer.echo(f"Invalid hypothesis file {path}: {exc}", err=True)
        raise typer.Exit(1)

    storage = _storage(base_dir)

    async def _save_all() -> list[Hypothesis]:
        return [await storage.save_hypothesis(h) for h in hypotheses]

    for stored in _run(_save_all()):
        typer.echo(f"Saved {stored.id}")


@app.command()
def delete(
    hypothesis_id: str = typer.Argument(..., help="Hypothesis id, H-<SESSION>-<SEQ>"),
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """Delete a hypothesis. Deleting a missing id is not an error."""
    if _run(_storage(base_dir).delete_hypothesis(hypothesis_id)):
        typer.echo(f"Deleted {hypothesis_id}")
    else:
        typer.echo(f"No hypothesis {hypothesis_id}; nothing deleted")


@app.command(name="next-id")
def next_id(
    session: str = typer.Argument(..., help="Session id"),
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """Print the next free hypothesis id for a session."""
    typer.echo(_run(_storage(base_dir).next_hypothesis_id(session)))


@app.command(name="rebuild-index")
def rebuild_index(
    skip_corrupt: bool = typer.Option(False, "--skip-corrupt", help="Skip undecodable session files instead of failing"),
    base_dir: Optional[str] = typer.Option(None, "--base-dir", "-d", help=BASE_DIR_HELP),
):
    """
    Rebuild the cross-session index from all session files.

    Fails on the first corrupt session file unless --skip-corrupt is given.
    """
    policy = "skip" if skip_corrupt else None
    index = _run(_storage(base_dir).rebuild_index(on_corrupt_session=policy))
    typer.echo(render_index_summary(index))


# ------------------------------------------------------------------ #
# Main entry point
# ------------------------------------------------------------------ #


def main():
    app(prog_name="hypodex")


if __name__ == "__main__":
    main()
