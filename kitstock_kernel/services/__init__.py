"""Write-side services for the kitstock kernel.  Services flush; callers commit."""

from kitstock_kernel.services.assignment_lifecycle import AssignmentLifecycle
from kitstock_kernel.services.catalog_service import CatalogService
from kitstock_kernel.services.category_registry import CategoryRegistry
from kitstock_kernel.services.client_directory import ClientDirectory
from kitstock_kernel.services.kit_composition import KitComposition
from kitstock_kernel.services.sequence_service import SequenceService
from kitstock_kernel.services.stock_ledger import StockLedger

__all__ = [
    "AssignmentLifecycle",
    "CatalogService",
    "CategoryRegistry",
    "ClientDirectory",
    "KitComposition",
    "SequenceService",
    "StockLedger",
]
