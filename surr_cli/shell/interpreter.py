"""Command dispatch for the interactive shell."""

from __future__ import annotations

from typing import IO

from surr_cli.shared.exceptions import InvalidArgumentError, SurrCliError
from surr_cli.shared.logging import Logger

from . import render
from .commands import Command, CommandKind, parse_line
from .requester import RequestExecutor
from .session import SessionState
from .store import LocalStore
from .types import QueryResult, SavedQuery


class Interpreter:
    """Executes parsed commands against the session, the local store and the remote database."""

    def __init__(
        self,
        *,
        session: SessionState,
        store: LocalStore,
        executor: RequestExecutor,
        logger: Logger,
        stream: IO[str] | None = None,
    ) -> None:
        self.session = session
        self.store = store
        self.executor = executor
        self.logger = logger
        self.stream = stream

    def handle_line(self, line: str) -> bool:
        """Parse and execute one line, reporting any error. Returns True on success."""
        try:
            self.execute(parse_line(line))
        except SurrCliError as exc:
            self.logger.error(str(exc))
            return False
        return True

    def execute(self, command: Command) -> None:
        kind = command.kind
        if kind is CommandKind.EMPTY:
            return
        if kind is CommandKind.HELP:
            render.render_help(stream=self.stream)
        elif kind is CommandKind.OPTIONS:
            render.render_options(self.session, stream=self.stream)
        elif kind is CommandKind.SET:
            message = self.session.set_variable(_require(command.name), _require(command.value))
            self.logger.success(message)
        elif kind is CommandKind.SAVE_PROFILE:
            self.store.insert_profile(self.session.to_profile(_require(command.name)))
            self.logger.success("Profile saved.")
        elif kind is CommandKind.SAVE_QUERY:
            self._save_query(_require(command.name))
        elif kind is CommandKind.DELETE_PROFILE:
            name = _require(command.name)
            self.store.delete_profile(name)
            self.logger.success(f"{name} deleted.")
        elif kind is CommandKind.DELETE_QUERY:
            name = _require(command.name)
            self.store.delete_query(name)
            self.logger.success(f"{name} deleted.")
        elif kind is CommandKind.SHOW_PROFILES:
            render.render_profiles(self.store.list_profiles(), stream=self.stream)
        elif kind is CommandKind.SHOW_QUERIES:
            render.render_saved_queries(self.store.list_queries(), stream=self.stream)
        elif kind is CommandKind.RUN_PROFILE:
            profile = self.store.get_profile(_require(command.name))
            self.session.load_from_profile(profile)
            self.logger.success(f"Profile {profile.name} loaded.")
        elif kind is CommandKind.RUN_QUERY:
            text = self.store.get_query_text(_require(command.name))
            self.logger.success("Running query")
            self.run_query(text)
        elif kind is CommandKind.QUERY:
            self.run_query(_require(command.text))
        else:  # pragma: no cover - exhaustive over CommandKind
            raise InvalidArgumentError(f"Unsupported command: {kind.value}")

    def run_query(self, text: str) -> QueryResult:
        """Send a query, remember it as the last query and print the reply."""
        result = self.executor.execute(text)
        self.session.last_query = text
        render.render_query_result(result, pretty=self.session.pretty, stream=self.stream)
        return result

    def _save_query(self, name: str) -> None:
        if not self.session.last_query:
            raise InvalidArgumentError("No query to save.")
        self.store.insert_query(SavedQuery(name=name, text=self.session.last_query))
        self.logger.success("Query saved.")


def _require(value: str | None) -> str:
    if value is None:
        raise InvalidArgumentError("Missing command argument.")
    return value
