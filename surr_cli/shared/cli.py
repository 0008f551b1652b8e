"""Shared CLI helpers and decorators."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar

import click

from .config import AppConfig, load_config
from .database import run_migrations
from .exceptions import ConfigurationError, StorageUnavailableError, SurrCliError
from .logging import Logger, get_logger

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(slots=True)
class CLIContext:
    """Runtime context shared across CLI invocations."""

    config: AppConfig
    db_path: Path
    verbose: bool
    logger: Logger


def common_cli_options(func: F) -> F:
    """Decorator injecting shared CLI options, store initialisation and context creation."""

    @click.option("--config", "config_path", type=click.Path(path_type=str), help="Path to config file.")
    @click.option("--db", "db_path", type=click.Path(path_type=str), help="Override local store path.")
    @click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
    @click.pass_context
    @functools.wraps(func)
    def wrapper(
        ctx: click.Context,
        *args: Any,
        config_path: str | None = None,
        db_path: str | None = None,
        verbose: bool = False,
        **kwargs: Any,
    ) -> Any:
        try:
            app_config = load_config(config_path)
        except ConfigurationError as exc:
            raise click.ClickException(str(exc)) from exc

        logger = get_logger(verbose=verbose)
        if db_path:
            app_config = app_config.with_database_path(db_path)

        try:
            run_migrations(app_config)
        except StorageUnavailableError as exc:
            raise click.ClickException(str(exc)) from exc
        logger.debug(f"Local store ready at {app_config.database.path}")

        cli_ctx = CLIContext(
            config=app_config,
            db_path=app_config.database.path,
            verbose=verbose,
            logger=logger,
        )
        ctx.obj = cli_ctx
        kwargs["cli_ctx"] = cli_ctx
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def handle_cli_errors(func: F) -> F:
    """Convert project exceptions into Click-friendly errors."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ConfigurationError as exc:
            raise click.ClickException(f"Configuration error: {exc}") from exc
        except SurrCliError as exc:
            raise click.ClickException(str(exc)) from exc
        except (click.ClickException, click.Abort, click.exceptions.Exit):
            raise
        except Exception as exc:  # pragma: no cover
            raise click.ClickException(f"Unexpected error: {exc}") from exc

    return wrapper  # type: ignore[return-value]
