"""ORM models for the kitstock kernel."""

from kitstock_kernel.models.assignment import KitAssignment
from kitstock_kernel.models.category import CustomCategory
from kitstock_kernel.models.client import Client
from kitstock_kernel.models.inventory import PreprocessedGood, RawMaterial
from kitstock_kernel.models.kit import Kit, KitMaterialLine
from kitstock_kernel.models.sequence import SequenceCounter

__all__ = [
    "RawMaterial",
    "PreprocessedGood",
    "Kit",
    "KitMaterialLine",
    "Client",
    "KitAssignment",
    "CustomCategory",
    "SequenceCounter",
]
