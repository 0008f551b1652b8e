from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import click
import pytest
from click.testing import CliRunner

from surr_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors
from surr_cli.shared.exceptions import (
    ConfigurationError,
    NotFoundError,
    StorageUnavailableError,
    SurrCliError,
)


class DummyAppConfig:
    def __init__(self, path: Path) -> None:
        self.database = SimpleNamespace(path=path)

    def with_database_path(self, new_path: str | Path) -> DummyAppConfig:
        return DummyAppConfig(Path(new_path))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _stub_config(tmp_path: Path) -> DummyAppConfig:
    return DummyAppConfig(tmp_path / "db.sqlite")


def test_common_cli_options_runs_migrations(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, tmp_path: Path
) -> None:
    recorded: dict[str, Path] = {}

    monkeypatch.setattr(
        "surr_cli.shared.cli.load_config", lambda config_path: _stub_config(tmp_path)
    )

    def fake_run_migrations(app_config: DummyAppConfig) -> None:  # type: ignore[override]
        recorded["migrations_db"] = app_config.database.path

    monkeypatch.setattr("surr_cli.shared.cli.run_migrations", fake_run_migrations)

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"verbose={cli_ctx.verbose} db={cli_ctx.db_path}")

    result = runner.invoke(sample, [])

    assert result.exit_code == 0, result.output
    assert "verbose=False" in result.output
    assert recorded["migrations_db"].name == "db.sqlite"


def test_common_cli_options_applies_db_override(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, tmp_path: Path
) -> None:
    base_config = DummyAppConfig(tmp_path / "original.sqlite")

    def fake_load_config(config_path: str | None) -> DummyAppConfig:
        return base_config

    monkeypatch.setattr("surr_cli.shared.cli.load_config", fake_load_config)
    monkeypatch.setattr("surr_cli.shared.cli.run_migrations", lambda cfg: None)

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(str(cli_ctx.db_path))

    override_path = tmp_path / "override.sqlite"
    result = runner.invoke(sample, ["--db", str(override_path)])

    assert result.exit_code == 0, result.output
    assert override_path.as_posix() in result.output


def test_common_cli_options_aborts_when_store_unavailable(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        "surr_cli.shared.cli.load_config", lambda config_path: _stub_config(tmp_path)
    )

    def broken_migrations(app_config: DummyAppConfig) -> None:  # type: ignore[override]
        raise StorageUnavailableError("disk full")

    monkeypatch.setattr("surr_cli.shared.cli.run_migrations", broken_migrations)

    called = False

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        nonlocal called
        called = True

    result = runner.invoke(sample, [])

    assert result.exit_code != 0
    assert "disk full" in result.output
    assert called is False


def test_handle_cli_errors_wraps_known_exceptions() -> None:
    @handle_cli_errors
    def boom() -> None:
        raise SurrCliError("boom")

    with pytest.raises(click.ClickException) as excinfo:
        boom()
    assert str(excinfo.value) == "boom"


def test_handle_cli_errors_wraps_command_errors() -> None:
    @handle_cli_errors
    def missing() -> None:
        raise NotFoundError("Query does not exist.")

    with pytest.raises(click.ClickException) as excinfo:
        missing()
    assert str(excinfo.value) == "Query does not exist."


def test_handle_cli_errors_formats_configuration_errors() -> None:
    @handle_cli_errors
    def misconfigured() -> None:
        raise ConfigurationError("missing value")

    with pytest.raises(click.ClickException) as excinfo:
        misconfigured()
    assert "Configuration error" in str(excinfo.value)


def test_handle_cli_errors_wraps_unexpected_exceptions() -> None:
    @handle_cli_errors
    def explode() -> None:
        raise RuntimeError("kapow")

    with pytest.raises(click.ClickException) as excinfo:
        explode()
    assert "Unexpected error: kapow" == str(excinfo.value)
