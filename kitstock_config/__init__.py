"""
kitstock_config -- single public entrypoint for runtime configuration.

Responsibility:
    ``get_active_config()`` is the only way to obtain configuration.  No
    other component reads configuration files or environment variables.

Architecture position:
    Sits above ``kitstock_kernel`` and below ``kitstock_services``.  The
    kernel never imports from this package; ``bridges`` translates a
    loaded config into kernel calls.

Failure modes:
    - ``FileNotFoundError`` -- configuration file missing.
    - ``KeyError`` / ``ValueError`` -- required key missing or wrong type.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``KITSTOCK_CONFIG_TRACE`` log entry with the config id, version,
    checksum and database dialect.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path

from kitstock_config.loader import load_config
from kitstock_config.schema import (
    CategorySeed,
    DatabaseSettings,
    KitStockConfig,
    LoggingSettings,
)

__all__ = [
    "CategorySeed",
    "DatabaseSettings",
    "KitStockConfig",
    "LoggingSettings",
    "get_active_config",
]

_logger = logging.getLogger("kitstock_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

DATABASE_URL_ENV = "KITSTOCK_DATABASE_URL"


def get_active_config(config_path: Path | str | None = None) -> KitStockConfig:
    """The ONLY public configuration entrypoint.

    Loads ``config_path`` (default: ``kitstock_config/sets/default.yaml``)
    and applies the ``KITSTOCK_DATABASE_URL`` environment override.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        KeyError: If a required key is missing.
        ValueError: If a value has the wrong type.
    """
    path = Path(config_path) if config_path is not None else _DEFAULT_CONFIG_PATH
    config = load_config(path)

    url_override = os.environ.get(DATABASE_URL_ENV)
    if url_override:
        config = dataclasses.replace(
            config,
            database=dataclasses.replace(config.database, url=url_override),
        )

    _logger.info(
        "KITSTOCK_CONFIG_TRACE",
        extra={
            "trace_type": "KITSTOCK_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "database_dialect": config.database.url.split(":", 1)[0],
            "database_url_overridden": bool(url_override),
        },
    )
    return config
