"""Interactive read-eval-print loop."""

from __future__ import annotations

from typing import Callable, Sequence

from surr_cli.shared.exceptions import TransportError

from . import render
from .interpreter import Interpreter

try:
    import readline  # type: ignore
except ImportError:  # pragma: no cover - e.g. Windows without pyreadline
    readline = None

KEYWORDS = (
    "SELECT",
    "FROM",
    "WHERE",
    "LIMIT",
    "CREATE",
    "RELATE",
    "CONTENT",
    "INFO",
    "FOR",
    "DB",
    "NS",
    "TABLE",
    "GROUP",
    "BY",
    ".help",
    ".options",
    ".set",
    ".save",
    ".show",
    ".delete",
    ".run",
    "query",
    "profile",
)

InputFunc = Callable[[str], str]


def complete_keywords(prefix: str, limit: int, keywords: Sequence[str] = KEYWORDS) -> list[str]:
    """Return at most ``limit`` keywords starting with ``prefix``; ``limit=0`` disables completion."""
    if limit <= 0:
        return []
    return [word for word in keywords if word.startswith(prefix)][:limit]


class Repl:
    """Reads lines until end-of-input and feeds them to the interpreter."""

    def __init__(self, interpreter: Interpreter, *, input_func: InputFunc = input) -> None:
        self.interpreter = interpreter
        self.input_func = input_func
        self.history: list[str] = []
        self._matches: list[str] = []

    @property
    def prompt(self) -> str:
        return f"[{self.interpreter.session.database}]> "

    def start(self) -> None:
        """Print the banner, probe the connection and run the loop."""
        render.render_banner(stream=self.interpreter.stream)
        self.probe_connection()
        self.install_completer()
        self.loop()

    def probe_connection(self) -> None:
        logger = self.interpreter.logger
        try:
            status, status_code = self.interpreter.executor.test_connection()
        except TransportError as exc:
            logger.error(f"Error! {exc}")
            return
        render.render_connection_status(status, logger=logger, status_code=status_code)

    def loop(self) -> None:
        logger = self.interpreter.logger
        while True:
            try:
                line = self.input_func(self.prompt)
            except KeyboardInterrupt:
                logger.warning("CTRL-C")
                continue
            except EOFError:
                logger.info("CTRL-D")
                break
            except OSError as exc:
                logger.error(f"Error: {exc}")
                break
            self.history.append(line)
            try:
                self.interpreter.handle_line(line)
            except KeyboardInterrupt:
                logger.warning("CTRL-C")

    def install_completer(self) -> None:
        if readline is None:
            return
        readline.set_completer(self._complete)
        readline.set_completer_delims(" \t\n")
        readline.parse_and_bind("tab: complete")

    def _complete(self, text: str, state: int) -> str | None:
        if state == 0:
            self._matches = complete_keywords(text, self.interpreter.session.suggestions)
        if state < len(self._matches):
            return self._matches[state]
        return None
