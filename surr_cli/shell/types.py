"""Data structures shared across the shell modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class Profile:
    """Named connection context persisted in the local store.

    The password is never part of a profile.
    """

    name: str
    host: str
    schema: str
    user: str
    namespace: str
    database: str
    created_at: str = ""
    id: int | None = None


@dataclass(frozen=True, slots=True)
class SavedQuery:
    """Named query text persisted in the local store."""

    name: str
    text: str
    id: int | None = None


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Raw reply from the remote database; non-2xx statuses are carried as data."""

    body: str
    status_code: int


class ConnectionStatus(Enum):
    """Classification of the startup connection probe."""

    HEALTHY = "healthy"
    AUTH_FAILED = "auth_failed"
    ERROR = "error"
