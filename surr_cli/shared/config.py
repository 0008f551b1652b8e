"""Configuration loading utilities for the surrcli client."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from . import paths
from .exceptions import ConfigurationError

VALID_SCHEMAS = ("http", "https")


@dataclass(frozen=True, slots=True)
class DatabaseSettings:
    """Local store configuration."""

    path: Path


@dataclass(frozen=True, slots=True)
class ConnectionSettings:
    """Startup defaults for the remote database session."""

    host: str
    user: str
    namespace: str
    database: str
    schema: str  # "http" or "https"
    timeout: int
    pretty: bool
    suggestions: int


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    source_path: Path
    database: DatabaseSettings
    connection: ConnectionSettings

    def with_database_path(self, new_path: str | Path) -> AppConfig:
        """Return a copy with an updated local store path."""
        resolved = paths.resolve_path(new_path)
        new_db = replace(self.database, path=resolved)
        return replace(self, database=new_db)


def _default_config(env: Mapping[str, str]) -> dict[str, Any]:
    return {
        "database": {"path": str(paths.default_database_path(env=env))},
        "connection": {
            "host": "127.0.0.1:8000",
            "user": "root",
            "namespace": "surr",
            "database": "surr",
            "schema": "http",
            "timeout": 5,
            "pretty": True,
            "suggestions": 5,
        },
    }


ENV_OVERRIDE_SPEC: dict[str, tuple[str, type]] = {
    "database.path": (paths.DATABASE_PATH_ENV, str),
    "connection.host": ("SURRCLI_HOST", str),
    "connection.user": ("SURRCLI_USER", str),
    "connection.namespace": ("SURRCLI_NAMESPACE", str),
    "connection.database": ("SURRCLI_DATABASE", str),
    "connection.schema": ("SURRCLI_SCHEMA", str),
    "connection.timeout": ("SURRCLI_TIMEOUT", int),
    "connection.pretty": ("SURRCLI_PRETTY", bool),
    "connection.suggestions": ("SURRCLI_SUGGESTIONS", int),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(env or os.environ)
    resolved_config_path = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved_config_path)
    defaults = _default_config(env)
    merged: dict[str, Any] = _deep_merge(defaults, file_data)
    merged = _apply_env_overrides(merged, env)
    return _build_config(merged, resolved_config_path)


def _resolve_config_path(
    config_path: str | Path | None, env: Mapping[str, str]
) -> Path:
    if config_path:
        return paths.resolve_path(config_path)
    return paths.default_config_path(env=env)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
        return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    config_copy = _deep_merge(config, {})
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        _assign_nested(config_copy, dotted_key.split("."), value)
    return config_copy


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    cleaned = raw.strip()
    if expected_type is bool:
        lowered = cleaned.lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError("expected boolean (true/false)")
    if expected_type is int:
        return int(cleaned)
    return cleaned


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return _coerce_env_value(value, bool)
    if isinstance(value, (bool, int)):
        return bool(value)
    raise TypeError(f"expected boolean, got {type(value).__name__}")


def _assign_nested(target: MutableMapping[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def _build_config(data: Mapping[str, Any], source_path: Path) -> AppConfig:
    try:
        database = DatabaseSettings(path=paths.resolve_path(data["database"]["path"]))
        conn_cfg = data["connection"]
        connection = ConnectionSettings(
            host=str(conn_cfg["host"]),
            user=str(conn_cfg["user"]),
            namespace=str(conn_cfg["namespace"]),
            database=str(conn_cfg["database"]),
            schema=str(conn_cfg["schema"]),
            timeout=int(conn_cfg["timeout"]),
            pretty=_coerce_bool(conn_cfg["pretty"]),
            suggestions=int(conn_cfg["suggestions"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    if connection.schema not in VALID_SCHEMAS:
        raise ConfigurationError(
            f"connection.schema must be one of {', '.join(VALID_SCHEMAS)}; got '{connection.schema}'."
        )
    if connection.timeout <= 0:
        raise ConfigurationError("connection.timeout must be a positive number of seconds.")
    if connection.suggestions < 0:
        raise ConfigurationError("connection.suggestions must not be negative.")

    return AppConfig(
        source_path=source_path,
        database=database,
        connection=connection,
    )
