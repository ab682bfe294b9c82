"""
Bridges from a loaded KitStockConfig into kernel calls.

The kernel takes plain arguments; these helpers unpack the config so the
kernel never has to import ``kitstock_config``.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.engine import Engine

from kitstock_config.schema import KitStockConfig
from kitstock_kernel.db.engine import create_tables, init_engine_from_url, session_scope
from kitstock_kernel.exceptions import DuplicateCategoryError
from kitstock_kernel.logging_config import configure_logging, get_logger
from kitstock_kernel.services.category_registry import CategoryRegistry

logger = get_logger("config.bridges")


def init_engine(config: KitStockConfig) -> Engine:
    """Initialise the kernel engine (and optionally the schema) from config."""
    db = config.database
    engine = init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_pre_ping=db.pool_pre_ping,
        pool_timeout=db.pool_timeout,
        pool_recycle=db.pool_recycle,
        sqlite_busy_timeout=db.sqlite_busy_timeout,
    )
    if db.create_schema:
        create_tables()
    return engine


def init_logging(config: KitStockConfig) -> None:
    configure_logging(level=config.logging.level)


def ensure_custom_categories(config: KitStockConfig, actor_id: UUID) -> list[str]:
    """
    Register configured category tags that do not exist yet.

    Returns the tags newly registered, as ``<item_kind>:<tag>``.
    """
    registered: list[str] = []
    with session_scope() as session:
        registry = CategoryRegistry(session)
        for seed in config.custom_categories:
            for name in seed.names:
                try:
                    info = registry.register(seed.item_kind, name, actor_id)
                except DuplicateCategoryError:
                    continue
                registered.append(f"{info.item_kind.value}:{info.name}")

    if registered:
        logger.info("custom_categories_seeded", extra={"categories": registered})
    return registered
