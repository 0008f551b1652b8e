from __future__ import annotations

from pathlib import Path

import pytest

from surr_cli.shared import paths
from surr_cli.shared.config import AppConfig, load_config
from surr_cli.shared.exceptions import ConfigurationError


def _isolated_env(tmp_path: Path) -> dict[str, str]:
    return {
        paths.CONFIG_DIR_ENV: str(tmp_path / "config"),
        paths.DATABASE_PATH_ENV: str(tmp_path / "surrcli.db"),
    }


def test_load_config_defaults(tmp_path: Path) -> None:
    cfg = load_config(env=_isolated_env(tmp_path))
    assert isinstance(cfg, AppConfig)
    assert cfg.database.path == tmp_path / "surrcli.db"
    assert cfg.connection.host == "127.0.0.1:8000"
    assert cfg.connection.user == "root"
    assert cfg.connection.namespace == "surr"
    assert cfg.connection.database == "surr"
    assert cfg.connection.schema == "http"
    assert cfg.connection.timeout == 5
    assert cfg.connection.pretty is True
    assert cfg.connection.suggestions == 5


def test_load_config_from_yaml(tmp_path: Path) -> None:
    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir()
    cfg_file = cfg_dir / "config.yaml"
    cfg_file.write_text(
        """
        database:
          path: ~/alt.db
        connection:
          host: db.example.com:443
          schema: https
          pretty: false
        """,
        encoding="utf-8",
    )
    env = {paths.CONFIG_DIR_ENV: str(cfg_dir)}
    cfg = load_config(env=env)
    assert cfg.source_path == cfg_file
    assert cfg.database.path == paths.resolve_path("~/alt.db")
    assert cfg.connection.host == "db.example.com:443"
    assert cfg.connection.schema == "https"
    assert cfg.connection.pretty is False
    assert cfg.connection.user == "root"


@pytest.mark.parametrize("raw, expected", [('"false"', False), ('"yes"', True), ("0", False)])
def test_load_config_coerces_quoted_pretty_flag(tmp_path: Path, raw: str, expected: bool) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(f"connection:\n  pretty: {raw}\n", encoding="utf-8")
    cfg = load_config(config_path=cfg_file, env=_isolated_env(tmp_path))
    assert cfg.connection.pretty is expected


def test_load_config_rejects_unparseable_pretty_flag(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text('connection:\n  pretty: "sometimes"\n', encoding="utf-8")
    with pytest.raises(ConfigurationError, match="boolean"):
        load_config(config_path=cfg_file, env=_isolated_env(tmp_path))


def test_load_config_env_overrides(tmp_path: Path) -> None:
    env = _isolated_env(tmp_path) | {
        "SURRCLI_HOST": "10.0.0.5:8000",
        "SURRCLI_USER": "alice",
        "SURRCLI_TIMEOUT": "30",
        "SURRCLI_PRETTY": "off",
        "SURRCLI_SUGGESTIONS": "0",
    }
    cfg = load_config(env=env)
    assert cfg.connection.host == "10.0.0.5:8000"
    assert cfg.connection.user == "alice"
    assert cfg.connection.timeout == 30
    assert cfg.connection.pretty is False
    assert cfg.connection.suggestions == 0


def test_load_config_invalid_env_value(tmp_path: Path) -> None:
    env = _isolated_env(tmp_path) | {"SURRCLI_PRETTY": "maybe"}
    with pytest.raises(ConfigurationError):
        load_config(env=env)


def test_load_config_rejects_unknown_schema(tmp_path: Path) -> None:
    env = _isolated_env(tmp_path) | {"SURRCLI_SCHEMA": "ftp"}
    with pytest.raises(ConfigurationError, match="schema"):
        load_config(env=env)


def test_load_config_rejects_non_positive_timeout(tmp_path: Path) -> None:
    env = _isolated_env(tmp_path) | {"SURRCLI_TIMEOUT": "0"}
    with pytest.raises(ConfigurationError, match="timeout"):
        load_config(env=env)


def test_load_config_requires_mapping_root(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_config(config_path=cfg_file, env=_isolated_env(tmp_path))


def test_with_database_path_returns_copy(tmp_path: Path) -> None:
    cfg = load_config(env=_isolated_env(tmp_path))
    moved = cfg.with_database_path(tmp_path / "other.db")
    assert moved.database.path == tmp_path / "other.db"
    assert cfg.database.path == tmp_path / "surrcli.db"
