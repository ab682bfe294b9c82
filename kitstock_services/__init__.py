"""
kitstock_services -- request boundary over the kitstock kernel.

Dependency direction:
    kitstock_services/ -> kitstock_kernel/  (allowed)
    kitstock_kernel/   -> kitstock_services/ (FORBIDDEN)
"""

from kitstock_services.bootstrap import build_api
from kitstock_services.inventory_api import InventoryAPI

__all__ = ["InventoryAPI", "build_api"]
