"""SurrealDB command-line client."""

__version__ = "0.5.0"
