from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import pytest

from surr_cli.shared import paths
from surr_cli.shared.config import load_config
from surr_cli.shared.database import connect
from surr_cli.shell.interpreter import Interpreter
from surr_cli.shell.requester import RequestExecutor
from surr_cli.shell.session import SessionState
from surr_cli.shell.store import LocalStore


class StubLogger:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def of(self, level: str) -> list[str]:
        return [message for lvl, message in self.messages if lvl == level]


@dataclass
class StubResponse:
    text: str
    status_code: int
    encoding: str | None = "utf-8"
    chunks: list[bytes] | None = None
    closed: bool = False

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        if self.chunks is not None:
            yield from self.chunks
        else:
            yield self.text.encode("utf-8")

    def close(self) -> None:
        self.closed = True


@dataclass
class StubHttp:
    """Records POSTs and answers with a canned response or raises a canned error."""

    body: str = '[{"status":"OK","result":[]}]'
    status_code: int = 200
    error: BaseException | None = None
    chunks: list[bytes] | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)
    responses: list[StubResponse] = field(default_factory=list)

    def post(self, url: str, **kwargs: Any) -> StubResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        response = StubResponse(text=self.body, status_code=self.status_code, chunks=self.chunks)
        self.responses.append(response)
        return response

    def __enter__(self) -> StubHttp:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    @property
    def last_body(self) -> str:
        return self.calls[-1]["data"].decode("utf-8")


@pytest.fixture
def store(tmp_path: Path) -> Iterator[LocalStore]:
    env = {
        paths.CONFIG_DIR_ENV: str(tmp_path / "config"),
        paths.DATABASE_PATH_ENV: str(tmp_path / "surrcli.db"),
    }
    with connect(load_config(env=env)) as connection:
        yield LocalStore(connection)


@pytest.fixture
def session() -> SessionState:
    return SessionState(
        host="127.0.0.1:8000",
        namespace="surr",
        database="surr",
        user="root",
        password="root",
        schema="http",
        password_prompt=lambda label: "secret",
    )


@pytest.fixture
def http() -> StubHttp:
    return StubHttp()


@pytest.fixture
def logger() -> StubLogger:
    return StubLogger()


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def interpreter(
    session: SessionState,
    store: LocalStore,
    http: StubHttp,
    logger: StubLogger,
    output: io.StringIO,
) -> Interpreter:
    return Interpreter(
        session=session,
        store=store,
        executor=RequestExecutor(session, http=http, logger=logger),  # type: ignore[arg-type]
        logger=logger,  # type: ignore[arg-type]
        stream=output,
    )


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    # Rich falls back to 80 columns off-terminal, which would wrap wide profile rows.
    monkeypatch.setenv("COLUMNS", "200")
