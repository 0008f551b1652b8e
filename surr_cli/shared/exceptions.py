"""Project-wide custom exceptions."""

from __future__ import annotations


class SurrCliError(Exception):
    """Base exception for the surrcli client."""


class ConfigurationError(SurrCliError):
    """Raised when configuration loading or validation fails."""


class DatabaseError(SurrCliError):
    """Raised for local store failures."""


class StorageUnavailableError(DatabaseError):
    """Raised when the local store cannot be opened or initialised."""


class CommandError(SurrCliError):
    """Base class for errors reported back to the user for a single command."""


class ConflictError(CommandError):
    """Raised when saving under a name that already exists."""


class NotFoundError(CommandError):
    """Raised when a named profile or query does not exist."""


class InvalidArgumentError(CommandError):
    """Raised for bad arity, unknown sub-commands or invalid values."""


class TransportError(SurrCliError):
    """Raised when an HTTP request cannot be completed."""
