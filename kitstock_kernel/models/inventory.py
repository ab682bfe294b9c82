"""
Module: kitstock_kernel.models.inventory
Responsibility: ORM persistence for the two material classes a kit is
    built from: raw materials and pre-processed goods (cut, printed,
    painted or assembled in-house).
Architecture position: Kernel > Models.  May import from db/base.py and domain/.

Invariants enforced:
    - stock_level >= 0, backed by a CHECK constraint so no code path
      can persist a negative counter.
    stock_level is mutated only through StockLedger; category tags are
    validated by CategoryRegistry before they reach these rows.

Failure modes:
    - IntegrityError if a write would violate ck_*_stock_non_negative.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kitstock_kernel.db.base import TrackedBase
from kitstock_kernel.domain.dtos import MaterialInfo
from kitstock_kernel.domain.values import ItemKind


class StockedMaterialMixin:
    """Columns shared by both material tables."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Well-known enum value or a registered custom tag
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    stock_level: Mapped[int] = mapped_column(nullable=False, default=0)

    # Display unit, e.g. "pieces", "sheets", "meters"
    unit: Mapped[str] = mapped_column(String(50), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def label(self) -> str:
        return self.name


class RawMaterial(StockedMaterialMixin, TrackedBase):
    """Purchased material held in stock as received."""

    __tablename__ = "raw_materials"

    __table_args__ = (
        CheckConstraint("stock_level >= 0", name="ck_raw_material_stock_non_negative"),
        Index("idx_raw_material_category", "category"),
    )

    supplier: Mapped[str | None] = mapped_column(String(255), nullable=True)

    unit_price: Mapped[Decimal | None] = mapped_column(nullable=True)

    def to_dto(self) -> MaterialInfo:
        return MaterialInfo(
            id=self.id,
            kind=ItemKind.RAW_MATERIAL,
            name=self.name,
            category=self.category,
            stock_level=self.stock_level,
            unit=self.unit,
            description=self.description,
            supplier=self.supplier,
            unit_price=self.unit_price,
        )

    def __repr__(self) -> str:
        return f"<RawMaterial {self.name}: {self.stock_level} {self.unit}>"


class PreprocessedGood(StockedMaterialMixin, TrackedBase):
    """Material that has gone through internal processing."""

    __tablename__ = "preprocessed_goods"

    __table_args__ = (
        CheckConstraint("stock_level >= 0", name="ck_preprocessed_stock_non_negative"),
        Index("idx_preprocessed_category", "category"),
    )

    processing_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dto(self) -> MaterialInfo:
        return MaterialInfo(
            id=self.id,
            kind=ItemKind.PREPROCESSED_GOOD,
            name=self.name,
            category=self.category,
            stock_level=self.stock_level,
            unit=self.unit,
            description=self.description,
            processing_notes=self.processing_notes,
        )

    def __repr__(self) -> str:
        return f"<PreprocessedGood {self.name}: {self.stock_level} {self.unit}>"
