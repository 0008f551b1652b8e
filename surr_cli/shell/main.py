"""surrcli entrypoint."""

from __future__ import annotations

from dataclasses import replace
from typing import IO

import click
import requests

from surr_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors
from surr_cli.shared.config import VALID_SCHEMAS
from surr_cli.shared.database import connect
from surr_cli.shared.exceptions import NotFoundError

from .interpreter import Interpreter
from .repl import Repl
from .requester import RequestExecutor
from .session import SessionState, prompt_password
from .store import LocalStore


@click.command(help="SurrealCLI - client command line tool for managing SurrealDB.")
@click.option("-h", "--host", type=str, help="Host address (IP:PORT) without schema.")
@click.option("-u", "--user", type=str, help="Username.")
@click.option(
    "-p",
    "--pass",
    "password",
    type=str,
    envvar="SURRCLI_PASSWORD",
    help="Password (prompted without echo if not provided).",
)
@click.option("-D", "--database", type=str, help="Database name.")
@click.option("-N", "--namespace", type=str, help="Namespace.")
@click.option("-s", "--schema", type=click.Choice(VALID_SCHEMAS), help="Transport schema.")
@click.option("-q", "--query", type=str, help="Run a single query and exit.")
@click.option("--profile", type=str, help="Load a saved profile before anything else runs.")
@click.option("-t", "--timeout", type=click.IntRange(min=1), help="Request timeout in seconds.")
@click.option("--pretty/--raw", default=None, help="Pretty-print JSON replies.")
@click.option(
    "-c",
    "--suggestions",
    type=click.IntRange(min=0),
    help="Number of completion suggestions (0 to disable).",
)
@common_cli_options
@handle_cli_errors
def cli(
    cli_ctx: CLIContext,
    host: str | None,
    user: str | None,
    password: str | None,
    database: str | None,
    namespace: str | None,
    schema: str | None,
    query: str | None,
    profile: str | None,
    timeout: int | None,
    pretty: bool | None,
    suggestions: int | None,
) -> None:
    """Connect to a SurrealDB server and run queries interactively or one-shot."""
    logger = cli_ctx.logger
    defaults = cli_ctx.config.connection

    if password is None:
        password = prompt_password("[password]: ")

    overrides = {
        "host": host,
        "user": user,
        "namespace": namespace,
        "database": database,
        "schema": schema,
        "timeout": timeout,
        "pretty": pretty,
        "suggestions": suggestions,
    }
    settings = replace(defaults, **{key: value for key, value in overrides.items() if value is not None})
    session = SessionState.from_settings(settings, password=password)

    with connect(cli_ctx.config, apply_migrations=False) as connection, requests.Session() as http:
        store = LocalStore(connection)
        interpreter = Interpreter(
            session=session,
            store=store,
            executor=RequestExecutor(session, http=http, logger=logger),
            logger=logger,
        )

        if profile:
            try:
                session.load_from_profile(store.get_profile(profile))
                logger.debug(f"Profile {profile} loaded")
            except NotFoundError as exc:
                logger.error(str(exc))

        stdin = click.get_text_stream("stdin")
        if not _stdin_is_interactive(stdin):
            piped = stdin.readline().strip()
            if piped:
                interpreter.run_query(piped)
            return

        if query is not None:
            interpreter.run_query(query)
            return

        Repl(interpreter).start()


def _stdin_is_interactive(stream: IO[str]) -> bool:
    try:
        return stream.isatty()
    except ValueError:  # closed stream
        return False


def main() -> None:
    """Entry point for console_scripts."""
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
