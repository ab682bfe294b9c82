"""
Configuration Loader (``kitstock_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen dataclasses
of ``kitstock_config.schema``.  Runtime callers go through
``kitstock_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Required keys are required: a missing ``config_id``, ``version`` or
  ``database.url`` raises ``KeyError``; no silent defaults.
* ``compute_checksum`` is deterministic for the same parsed content.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong value types  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from kitstock_config.schema import (
    CategorySeed,
    DatabaseSettings,
    KitStockConfig,
    LoggingSettings,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load one YAML file; an empty file yields an empty dict."""
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def parse_database(data: dict[str, Any]) -> DatabaseSettings:
    return DatabaseSettings(
        url=data["url"],
        echo=bool(data.get("echo", False)),
        pool_size=int(data.get("pool_size", 20)),
        max_overflow=int(data.get("max_overflow", 10)),
        pool_pre_ping=bool(data.get("pool_pre_ping", True)),
        pool_timeout=int(data.get("pool_timeout", 30)),
        pool_recycle=int(data.get("pool_recycle", 1800)),
        sqlite_busy_timeout=float(data.get("sqlite_busy_timeout", 30.0)),
        create_schema=bool(data.get("create_schema", False)),
    )


def parse_logging(data: dict[str, Any]) -> LoggingSettings:
    level = str(data.get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"logging.level must be one of {', '.join(_LOG_LEVELS)}, got {level!r}")
    return LoggingSettings(level=level)


def parse_category_seeds(data: dict[str, Any]) -> tuple[CategorySeed, ...]:
    return tuple(
        CategorySeed(item_kind=item_kind, names=tuple(names or ()))
        for item_kind, names in sorted(data.items())
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 over the canonical JSON form of the parsed YAML."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_config(data: dict[str, Any]) -> KitStockConfig:
    return KitStockConfig(
        config_id=data["config_id"],
        version=int(data["version"]),
        database=parse_database(data["database"]),
        logging=parse_logging(data.get("logging") or {}),
        custom_categories=parse_category_seeds(data.get("custom_categories") or {}),
        checksum=compute_checksum(data),
    )


def load_config(path: Path) -> KitStockConfig:
    return parse_config(load_yaml_file(path))
