from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, field_validator

ENV_PREFIX = "SQLITEHELPER_"


class ClientSettings(BaseModel):
    filename: str | None = None
    log_queries: bool = False
    log_results: bool = False
    timeout_s: float = 5.0
    # SQLite rejects N'...' literals, so the client does not prefix by default.
    wide_literal_prefix: str = ""

    model_config = ConfigDict(extra="ignore")

    @field_validator("timeout_s")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value < 0:
            raise ValueError("timeout_s must be non-negative")
        return value

    @field_validator("wide_literal_prefix")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        if value and not value.isalpha():
            raise ValueError("wide_literal_prefix must contain letters only, e.g. 'N'")
        return value


def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)  # type: ignore[index]
        else:
            target[key] = value
    return target


def _load_toml(path: Path | None) -> Dict[str, Any]:
    if path is None or not path.exists():
        return {}
    with path.open("rb") as f:
        data = tomllib.load(f)
    section = data.get("sqlitehelper", data)
    return dict(section) if isinstance(section, dict) else {}


def _extract_prefixed(source: Dict[str, str], *, prefix: str = ENV_PREFIX, delimiter: str = "__") -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for key, value in source.items():
        if not key.startswith(prefix):
            continue
        path = key.removeprefix(prefix).split(delimiter)
        target = data
        for part in path[:-1]:
            target = target.setdefault(part.lower(), {})
        target[path[-1].lower()] = value
    return data


def load_settings(
    *,
    config_path: Path | None = None,
    overrides: Dict[str, Any] | None = None,
) -> ClientSettings:
    """Merge TOML config, ``SQLITEHELPER_*`` environment variables and overrides.

    Later sources win. A TOML file may keep the options at top level or under
    a ``[sqlitehelper]`` table.
    """
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    merged: Dict[str, Any] = {}
    _deep_update(merged, _load_toml(config_path))
    _deep_update(merged, _extract_prefixed(dict(os.environ)))
    if overrides:
        _deep_update(merged, {k: v for k, v in overrides.items() if v is not None})

    return ClientSettings(**merged)


__all__ = ["ENV_PREFIX", "ClientSettings", "load_settings"]
