"""
Wiring: configuration -> logging -> engine -> categories -> InventoryAPI.
"""

from __future__ import annotations

from kitstock_config import KitStockConfig, get_active_config
from kitstock_config.bridges import ensure_custom_categories, init_engine, init_logging
from kitstock_kernel.db.engine import get_session_factory
from kitstock_kernel.domain.identity import IdentityProvider
from kitstock_services.inventory_api import InventoryAPI


def build_api(
    identity_provider: IdentityProvider,
    config: KitStockConfig | None = None,
) -> InventoryAPI:
    """
    Build a ready-to-use InventoryAPI.

    Loads the active config when none is given, configures logging,
    initialises the engine (creating tables when ``create_schema`` is set),
    registers any ``custom_categories`` that do not exist yet as the
    current user, and binds the API to the resulting session factory.

    Raises:
        UnauthenticatedError: categories are configured but nobody is
            logged in to register them.
    """
    config = config or get_active_config()
    init_logging(config)
    init_engine(config)
    if any(seed.names for seed in config.custom_categories):
        ensure_custom_categories(config, identity_provider.current_user().id)
    return InventoryAPI(get_session_factory(), identity_provider)
