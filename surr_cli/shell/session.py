"""In-memory session state driving the next request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import click

from surr_cli.shared.config import VALID_SCHEMAS, ConnectionSettings
from surr_cli.shared.exceptions import InvalidArgumentError

from .types import Profile

PasswordPrompt = Callable[[str], str]

NAMESPACE_ALIASES = frozenset({"ns", "namespace", "nameserver"})
DATABASE_ALIASES = frozenset({"db", "database"})
SCHEMA_ALIASES = frozenset({"schema", "sch"})


def prompt_password(label: str) -> str:
    """Ask for a password on the terminal without echo.

    Returns an empty string when the prompt is cancelled.
    """
    try:
        return click.prompt(label, default="", hide_input=True, show_default=False, prompt_suffix="")
    except click.Abort:
        return ""


@dataclass(slots=True)
class SessionState:
    """Live connection configuration owned by the interpreter."""

    host: str
    namespace: str
    database: str
    user: str
    password: str = ""
    schema: str = "http"
    pretty: bool = True
    timeout: int = 5
    suggestions: int = 5
    last_query: str = ""
    password_prompt: PasswordPrompt = field(default=prompt_password, repr=False, compare=False)

    @classmethod
    def from_settings(
        cls,
        settings: ConnectionSettings,
        *,
        password: str = "",
        password_prompt: PasswordPrompt = prompt_password,
    ) -> SessionState:
        return cls(
            host=settings.host,
            namespace=settings.namespace,
            database=settings.database,
            user=settings.user,
            password=password,
            schema=settings.schema,
            pretty=settings.pretty,
            timeout=settings.timeout,
            suggestions=settings.suggestions,
            password_prompt=password_prompt,
        )

    def set_variable(self, name: str, value: str) -> str:
        """Apply a `.set` assignment and return a description of the change.

        Raises InvalidArgumentError for unknown variables and bad schema values;
        the session is left untouched in that case.
        """
        key = name.lower()
        if key == "user":
            self.user = value
            self.password = self._ask_password()
            return f"User <- {self.user}"
        if key == "host":
            self.host = value
            return f"Host <- {self.host}"
        if key == "pretty":
            self.pretty = not self.pretty
            return f"Pretty print <- {str(self.pretty).lower()}"
        if key in NAMESPACE_ALIASES:
            self.namespace = value
            return f"Namespace <- {self.namespace}"
        if key in DATABASE_ALIASES:
            self.database = value
            return f"Database <- {self.database}"
        if key in SCHEMA_ALIASES:
            if value not in VALID_SCHEMAS:
                raise InvalidArgumentError("Invalid schema. Must be http or https.")
            self.schema = value
            return f"Schema <- {self.schema}"
        raise InvalidArgumentError(f"No such option: {name}")

    def load_from_profile(self, profile: Profile) -> None:
        """Copy the connection fields of a profile; credentials and flags stay as they are."""
        self.host = profile.host
        self.schema = profile.schema
        self.user = profile.user
        self.namespace = profile.namespace
        self.database = profile.database

    def to_profile(self, name: str) -> Profile:
        return Profile(
            name=name,
            host=self.host,
            schema=self.schema,
            user=self.user,
            namespace=self.namespace,
            database=self.database,
        )

    @property
    def base_url(self) -> str:
        return f"{self.schema}://{self.host}"

    def _ask_password(self) -> str:
        try:
            return self.password_prompt(f"[password:{self.user}]: ")
        except (EOFError, KeyboardInterrupt, OSError, click.Abort):
            return ""
