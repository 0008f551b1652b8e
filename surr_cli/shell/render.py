"""Output rendering helpers for the shell."""

from __future__ import annotations

import json
import sys
from typing import IO, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from surr_cli import __version__
from surr_cli.shared.logging import Logger

from .session import SessionState
from .types import ConnectionStatus, Profile, QueryResult, SavedQuery

HELP_ROWS = (
    (".help", "Show help menu"),
    (".options", "Env variables"),
    (".set", "Set variable"),
    (".save", "Save profile|query"),
    (".show", "Show profiles|queries"),
    (".delete", "Delete profile|query"),
    (".run", "Run profile|query"),
)


def render_query_result(result: QueryResult, *, pretty: bool, stream: IO[str] | None = None) -> None:
    """Print a reply body, indented when ``pretty`` and the body parses as JSON."""
    output_stream = stream or sys.stdout
    body = result.body
    if pretty:
        try:
            body = json.dumps(json.loads(body), indent=2, ensure_ascii=False)
        except ValueError:
            pass  # not JSON: print as received
    print(body, file=output_stream)


def render_connection_status(status: ConnectionStatus, *, logger: Logger, status_code: int | None = None) -> None:
    if status is ConnectionStatus.HEALTHY:
        logger.success("Connection is OK!")
    elif status is ConnectionStatus.AUTH_FAILED:
        logger.error(
            "There was a problem with authentication.\nUse .set user <username> to reset credentials."
        )
    else:
        logger.error("Error!")
        if status_code is not None:
            logger.debug(f"Connection probe returned HTTP {status_code}")


def render_profiles(profiles: Sequence[Profile], *, stream: IO[str] | None = None) -> None:
    table = _table("ID", "NAME", "HOST", "PROTOCOL", "USER", "NAMESPACE", "DATABASE", "CREATION DATE")
    for profile in profiles:
        _add_row(
            table,
            _stringify(profile.id),
            profile.name,
            profile.host,
            profile.schema,
            profile.user,
            profile.namespace,
            profile.database,
            profile.created_at,
        )
    _print_table(table, stream)


def render_saved_queries(queries: Sequence[SavedQuery], *, stream: IO[str] | None = None) -> None:
    table = _table("ID", "NAME", "QUERY")
    for query in queries:
        _add_row(table, _stringify(query.id), query.name, query.text)
    _print_table(table, stream)


def render_options(session: SessionState, *, stream: IO[str] | None = None) -> None:
    table = _table("VARIABLE", "VALUE")
    _add_row(table, "Host", session.host)
    _add_row(table, "User", session.user)
    _add_row(table, "Namespace", session.namespace)
    _add_row(table, "Database", session.database)
    _add_row(table, "Schema", session.schema)
    _add_row(table, "Pretty", str(session.pretty).lower())
    _add_row(table, "Timeout", f"{session.timeout}s")
    _add_row(table, "Suggestion", str(session.suggestions))
    _print_table(table, stream)


def render_help(*, stream: IO[str] | None = None) -> None:
    table = _table("COMMAND", "DESCRIPTION")
    for command, description in HELP_ROWS:
        _add_row(table, command, description)
    _print_table(table, stream)


def render_banner(*, stream: IO[str] | None = None) -> None:
    console = _console(stream)
    console.print("######  [bold yellow]SurrealCLI[/bold yellow]  ######")
    console.print("Type `.help` for help menu.", markup=False)
    console.print(f"v {__version__}", markup=False)


def _table(*columns: str) -> Table:
    table = Table(box=box.SQUARE, show_header=True, header_style="bold")
    for column in columns:
        table.add_column(column)
    return table


def _print_table(table: Table, stream: IO[str] | None) -> None:
    console = _console(stream)
    console.print()
    console.print(table)
    console.print()


def _console(stream: IO[str] | None) -> Console:
    return Console(file=stream or sys.stdout, highlight=False)


def _stringify(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _add_row(table: Table, *values: str) -> None:
    # Cells hold user data and are never parsed as Rich markup.
    table.add_row(*(Text(value) for value in values))
