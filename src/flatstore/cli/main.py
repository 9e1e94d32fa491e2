"""CLI for flatstore: document and index commands.

Storage roots and indexes come from ``FLATSTORE_*`` env vars (see
:mod:`flatstore.core.config`).
"""

from __future__ import annotations

import json
from typing import Any, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from flatstore.core.config import AppSettings, ObservabilityConfig
from flatstore.core.logging_config import setup_logging
from flatstore.core.startup_checks import validate_settings
from flatstore.exceptions import FlatStoreError, NotFoundError
from flatstore.storage.document_store import DocumentStore
from flatstore.storage.factory import create_document_store, create_index
from flatstore.storage.index import Index
from flatstore.storage.paths import WILDCARD

app = typer.Typer(name="flatstore", help="Flat-file document store with secondary indexes")
console = Console()
err_console = Console(stderr=True)


def _settings(verbose: bool) -> AppSettings:
    settings = AppSettings()
    level = "DEBUG" if verbose else settings.observability.log_level
    setup_logging(ObservabilityConfig(log_level=level, json_logs=settings.observability.json_logs))
    validate_settings(settings)
    return settings


def _store(verbose: bool) -> DocumentStore:
    return create_document_store(_settings(verbose))


def _index(name: str, verbose: bool) -> Index:
    settings = _settings(verbose)
    try:
        return create_index(settings, name)
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0]), param_hint="NAME") from None


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Not valid JSON: {exc}", param_hint="VALUE") from None


def _fail(exc: FlatStoreError) -> NoReturn:
    err_console.print(f"[red]{type(exc).__name__}: {exc}[/red]")
    raise typer.Exit(code=1)


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=2, default=str)


# ── Documents ─────────────────────────────────────────────────────────


@app.command()
def get(
    key: str = typer.Argument(..., help="Document key"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print a document as JSON."""
    value = _store(verbose).get(key)
    if value is None:
        _fail(NotFoundError(f"No document {key!r}", key=key))
    if value is False:
        _fail(FlatStoreError(f"Document {key!r} could not be read", key=key))
    console.print_json(_dump(value))


@app.command()
def put(
    key: str = typer.Argument(..., help="Document key"),
    value: str = typer.Argument(..., help="Document as JSON"),
    mode: str = typer.Option("set", help="set (upsert), add (must be new) or replace (must exist)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Write a document."""
    if mode not in ("set", "add", "replace"):
        raise typer.BadParameter("Expected set, add or replace", param_hint="--mode")
    document = _parse_value(value)
    store = _store(verbose)
    result = getattr(store, mode)(key, document)
    if result is None:
        _fail(NotFoundError(f"No document {key!r} to replace", key=key))
    if result is False:
        _fail(FlatStoreError(f"{mode} failed for {key!r}", key=key))
    console.print(f"[green]Saved {key}[/green]")


@app.command()
def delete(
    key: str = typer.Argument(..., help="Document key"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Delete a document."""
    result = _store(verbose).delete(key)
    if result is None:
        console.print(f"[yellow]Nothing to delete for {key}[/yellow]")
        return
    if result is False:
        _fail(FlatStoreError(f"Delete failed for {key!r}", key=key))
    console.print(f"[green]Deleted {key}[/green]")


@app.command()
def find(
    where: Optional[List[str]] = typer.Option(None, "--where", "-w", help="field=json-value filter"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List documents, optionally filtered by field equality."""
    filters: dict[str, Any] = {}
    for clause in where or []:
        field, sep, raw = clause.partition("=")
        if not sep or not field:
            raise typer.BadParameter(f"Expected field=value, got {clause!r}", param_hint="--where")
        try:
            filters[field] = json.loads(raw)
        except json.JSONDecodeError:
            filters[field] = raw

    results = _store(verbose).find(**filters)
    if results is False:
        _fail(FlatStoreError("Scan aborted: a document could not be read"))

    table = Table(title=f"{len(results)} document(s)")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in results.items():
        table.add_row(key, json.dumps(value, ensure_ascii=False, default=str))
    console.print(table)


# ── Indexes ───────────────────────────────────────────────────────────


@app.command("index-get")
def index_get(
    name: str = typer.Argument(..., help="Configured index name"),
    key: str = typer.Argument(..., help="Document key, or '*' for any"),
    value: str = typer.Option(WILDCARD, "--value", help="Indexed value, or '*' for any"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print indexed values of a key, or keys holding a value."""
    for item in sorted(_index(name, verbose).get(key, value)):
        console.print(item, markup=False, highlight=False)


@app.command("index-add")
def index_add(
    name: str = typer.Argument(..., help="Configured index name"),
    key: str = typer.Argument(..., help="Document key"),
    values: List[str] = typer.Argument(..., help="Values to add"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Index new values for a document key."""
    if not _index(name, verbose).add(key, values):
        _fail(FlatStoreError(f"Could not add {values} for {key!r} (see log)", key=key))
    console.print(f"[green]Indexed {key}[/green]")


@app.command("index-set")
def index_set(
    name: str = typer.Argument(..., help="Configured index name"),
    key: str = typer.Argument(..., help="Document key"),
    values: Optional[List[str]] = typer.Argument(None, help="Complete set of values"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Replace the indexed values of a document key."""
    if not _index(name, verbose).set(key, values or []):
        _fail(FlatStoreError(f"Could not set {values or []} for {key!r} (see log)", key=key))
    console.print(f"[green]Indexed {key}[/green]")


@app.command("index-delete")
def index_delete(
    name: str = typer.Argument(..., help="Configured index name"),
    key: str = typer.Argument(..., help="Document key, or '*' for any"),
    value: str = typer.Option(WILDCARD, "--value", help="Indexed value, or '*' for any"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Remove index entries."""
    if not _index(name, verbose).delete(key, value):
        _fail(FlatStoreError(f"Could not delete entries for {key!r} (see log)", key=key))
    console.print(f"[green]Removed entries for {key}[/green]")


if __name__ == "__main__":
    app()
