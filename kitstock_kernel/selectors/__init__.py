"""Read-only selectors returning DTOs."""

from kitstock_kernel.selectors.assignment_selector import AssignmentSelector
from kitstock_kernel.selectors.inventory_selector import InventorySelector

__all__ = ["AssignmentSelector", "InventorySelector"]
