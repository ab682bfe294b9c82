"""
Module: kitstock_kernel.models.kit
Responsibility: ORM persistence for kits and their bill of materials.
Architecture position: Kernel > Models.  May import from db/base.py and domain/.

Invariants enforced:
    - kit stock_level >= 0 (CHECK constraint).
    - serial_number is unique across kits (uq_kit_serial_number).
    KitMaterialLine.quantity > 0 (CHECK constraint); a line is deleted with
    its kit (ON DELETE CASCADE).
    material_id has no foreign key: it points into raw_materials or
    preprocessed_goods depending on material_type.  Existence is checked
    when the line is added; later dangling references are reported by
    KitComposition.resolve().

Failure modes:
    - IntegrityError on duplicate serial_number (translated to
      DuplicateSerialNumberError by CatalogService).
"""

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from kitstock_kernel.db.base import TrackedBase, UUIDString
from kitstock_kernel.domain.dtos import KitInfo, KitMaterialLineInfo
from kitstock_kernel.domain.values import MaterialType, Program


class Kit(TrackedBase):
    """
    An assembled educational kit.

    stock_level counts assembled units on hand.  It is built up by the
    assembly workflow (recorded through StockLedger.set_stock) and
    committed to clients by AssignmentLifecycle.
    """

    __tablename__ = "kits"

    __table_args__ = (
        UniqueConstraint("serial_number", name="uq_kit_serial_number"),
        CheckConstraint("stock_level >= 0", name="ck_kit_stock_non_negative"),
        Index("idx_kit_program", "program"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    serial_number: Mapped[str] = mapped_column(String(100), nullable=False)

    program: Mapped[Program] = mapped_column(String(20), nullable=False)

    grade_level: Mapped[str | None] = mapped_column(String(50), nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    stock_level: Mapped[int] = mapped_column(nullable=False, default=0)

    @property
    def label(self) -> str:
        return f"{self.name} ({self.serial_number})"

    def to_dto(self) -> KitInfo:
        return KitInfo(
            id=self.id,
            name=self.name,
            serial_number=self.serial_number,
            program=Program(self.program),
            stock_level=self.stock_level,
            grade_level=self.grade_level,
            description=self.description,
        )

    def __repr__(self) -> str:
        return f"<Kit {self.serial_number}: {self.name} stock={self.stock_level}>"


class KitMaterialLine(TrackedBase):
    """
    One BOM line: ``quantity`` units of a material per assembled kit.

    Lines are grouped into packets (physical pouches) by packet_number /
    packet_name; ``sequence`` records insertion order within the kit.
    """

    __tablename__ = "kit_material_lines"

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_kit_line_quantity_positive"),
        Index("idx_kit_line_kit", "kit_id"),
        Index("idx_kit_line_kit_packet", "kit_id", "packet_number"),
    )

    kit_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("kits.id", ondelete="CASCADE"),
        nullable=False,
    )

    material_type: Mapped[MaterialType] = mapped_column(String(20), nullable=False)

    material_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    quantity: Mapped[int] = mapped_column(nullable=False)

    packet_number: Mapped[int | None] = mapped_column(nullable=True)

    packet_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    sequence: Mapped[int] = mapped_column(nullable=False)

    def to_dto(self) -> KitMaterialLineInfo:
        return KitMaterialLineInfo(
            id=self.id,
            kit_id=self.kit_id,
            material_type=MaterialType(self.material_type),
            material_id=self.material_id,
            quantity=self.quantity,
            sequence=self.sequence,
            packet_number=self.packet_number,
            packet_name=self.packet_name,
        )

    def __repr__(self) -> str:
        return (
            f"<KitMaterialLine kit={self.kit_id} {self.material_type}:"
            f"{self.material_id} x{self.quantity}>"
        )
