"""
Value enumerations for the kitstock domain.

Stored as strings in the database (``String(n)`` columns); the enums are
the only accepted spellings at the service boundary.
"""

from enum import Enum


class ItemKind(str, Enum):
    """The three disjoint stock-bearing item classes."""

    RAW_MATERIAL = "raw_material"
    PREPROCESSED_GOOD = "preprocessed_good"
    KIT = "kit"


class MaterialType(str, Enum):
    """Material classes a kit BOM line may reference."""

    RAW = "raw"
    PREPROCESSED = "preprocessed"

    @property
    def item_kind(self) -> ItemKind:
        if self is MaterialType.RAW:
            return ItemKind.RAW_MATERIAL
        return ItemKind.PREPROCESSED_GOOD


class Program(str, Enum):
    """Curriculum track a kit belongs to."""

    ROBOTICS = "robotics"
    CSTEM = "cstem"


class DeliveryType(str, Enum):
    SINGLE = "single"
    RECURRING = "recurring"


class AssignmentStatus(str, Enum):
    """Kit assignment lifecycle status.

    PENDING -> DELIVERED or PENDING -> CANCELLED; both targets are terminal.
    """

    PENDING = "pending"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class RawMaterialCategory(str, Enum):
    """Well-known raw material tags.  Extensions live in custom_categories."""

    ELECTRONICS = "electronics"
    FOAM = "foam"
    MDF = "mdf"
    FASTENERS = "fasteners"
    STATIONERY = "stationery"
    TUBES = "tubes"
    PRINTABLES = "printables"
    CORRUGATED_SHEETS = "corrugated_sheets"


class PreprocessedCategory(str, Enum):
    """Well-known pre-processed goods tags.  Extensions live in custom_categories."""

    LASER_CUT = "laser_cut"
    THREE_D_PRINTED = "3d_printed"
    PAINTED = "painted"
    ASSEMBLED = "assembled"
    OTHERS = "others"


WELL_KNOWN_CATEGORIES: dict[ItemKind, tuple[str, ...]] = {
    ItemKind.RAW_MATERIAL: tuple(c.value for c in RawMaterialCategory),
    ItemKind.PREPROCESSED_GOOD: tuple(c.value for c in PreprocessedCategory),
}
