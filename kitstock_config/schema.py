"""
KitStockConfig schema.

Typed, frozen form of a configuration set.  YAML files are parsed into
these types by the loader; nothing else in the system reads the YAML.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection and pool settings passed to init_engine_from_url."""

    url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_pre_ping: bool = True
    pool_timeout: int = 30
    pool_recycle: int = 1800
    sqlite_busy_timeout: float = 30.0
    create_schema: bool = False


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class CategorySeed:
    """Custom category tags expected to exist for an item kind."""

    item_kind: str
    names: tuple[str, ...] = ()


@dataclass(frozen=True)
class KitStockConfig:
    """A complete, loaded configuration set."""

    config_id: str
    version: int
    database: DatabaseSettings
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    custom_categories: tuple[CategorySeed, ...] = ()
    checksum: str = ""
