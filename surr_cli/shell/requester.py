"""HTTP request execution against the remote database's /sql endpoint."""

from __future__ import annotations

import base64
from time import monotonic
from typing import Protocol

import requests

from surr_cli.shared.exceptions import InvalidArgumentError, TransportError
from surr_cli.shared.logging import Logger

from .session import SessionState
from .types import ConnectionStatus, QueryResult

SQL_ENDPOINT = "/sql"
PROBE_QUERY = "INFO FOR DB;"
CHUNK_SIZE = 8192


class HttpSession(Protocol):
    def post(self, url: str, **kwargs: object) -> requests.Response: ...


def basic_auth(user: str, password: str) -> str:
    """Return the value of a Basic Authorization header for the credentials."""
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _check_header_value(label: str, value: str) -> None:
    # http.client encodes header values as Latin-1.
    try:
        value.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise InvalidArgumentError(
            f"{label} '{value}' cannot be sent in an HTTP header; use Latin-1 characters only."
        ) from exc


class RequestExecutor:
    """Sends one POST per query using the live session's connection settings."""

    def __init__(
        self,
        session: SessionState,
        *,
        http: HttpSession | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._session = session
        self._http = http or requests.Session()
        self._logger = logger

    def url(self) -> str:
        return f"{self._session.base_url}{SQL_ENDPOINT}"

    def headers(self) -> dict[str, str]:
        _check_header_value("Namespace", self._session.namespace)
        _check_header_value("Database", self._session.database)
        return {
            "Authorization": basic_auth(self._session.user, self._session.password),
            "NS": self._session.namespace,
            "DB": self._session.database,
            "Accept": "application/json",
        }

    def execute(self, query: str) -> QueryResult:
        """Send ``query`` verbatim and return the body and status, whatever the status.

        ``timeout`` bounds the whole exchange: requests applies it to the
        connect and to each socket read, and the body is streamed so the
        overall deadline is also checked between chunks.
        """
        url = self.url()
        headers = self.headers()
        timeout = self._session.timeout
        self._debug(f"POST {url} (ns={self._session.namespace}, db={self._session.database})")
        deadline = monotonic() + timeout
        try:
            response = self._http.post(
                url,
                data=query.encode("utf-8"),
                headers=headers,
                timeout=(timeout, timeout),
                stream=True,
            )
            try:
                body = self._read_body(response, deadline)
            finally:
                response.close()
        except requests.exceptions.Timeout as exc:
            raise TransportError(f"Request to {url} timed out after {timeout}s.") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc
        self._debug(f"HTTP {response.status_code} from {url}")
        return QueryResult(body=body, status_code=response.status_code)

    def test_connection(self) -> tuple[ConnectionStatus, int]:
        """Probe the server and return its classification with the raw status code."""
        result = self.execute(PROBE_QUERY)
        return classify_status(result.status_code), result.status_code

    def _read_body(self, response: requests.Response, deadline: float) -> str:
        chunks: list[bytes] = []
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if monotonic() > deadline:
                raise requests.exceptions.Timeout("response body exceeded the request deadline")
            chunks.append(chunk)
        return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")

    def _debug(self, message: str) -> None:
        if self._logger is not None:
            self._logger.debug(message)


def classify_status(status_code: int) -> ConnectionStatus:
    if status_code == 200:
        return ConnectionStatus.HEALTHY
    if status_code == 403:
        return ConnectionStatus.AUTH_FAILED
    return ConnectionStatus.ERROR
