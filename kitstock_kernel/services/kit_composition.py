"""
KitComposition -- a kit's bill of materials.

Responsibility:
    Maintains the ordered material lines of each kit.  A line says "one
    assembled kit needs ``quantity`` units of this raw material or
    pre-processed good", optionally grouped into a numbered packet.

Architecture position:
    Kernel > Services.  Read-only from AssignmentLifecycle's point of view:
    assigning kits never touches component stock, and nothing here calls
    StockLedger.

Invariants enforced:
    - a line references an existing material of its declared
      material_type when it is created.  References that dangle later
      (the material was removed) are reported by resolve(), never
      repaired.
    - quantity > 0.
    - ``sequence`` comes from a per-kit counter (SequenceService), so
      insertion order survives concurrent add_line calls.

Failure modes:
    - ItemNotFoundError: kit or material id does not resolve.
    - MaterialLineNotFoundError: remove_line on an absent line.
    - DanglingMaterialReferenceError: resolve() on a line whose material
      is gone.
    - InvalidArgumentError: quantity <= 0, unknown material_type.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from kitstock_kernel.domain.dtos import KitMaterialLineInfo, MaterialInfo
from kitstock_kernel.domain.validation import (
    parse_enum,
    parse_uuid,
    require_positive_int,
)
from kitstock_kernel.domain.values import ItemKind, MaterialType
from kitstock_kernel.exceptions import (
    DanglingMaterialReferenceError,
    InvalidArgumentError,
    ItemNotFoundError,
    MaterialLineNotFoundError,
)
from kitstock_kernel.logging_config import get_logger
from kitstock_kernel.models.kit import Kit, KitMaterialLine
from kitstock_kernel.services.base import BaseService
from kitstock_kernel.services.sequence_service import (
    SequenceService,
    kit_line_sequence_name,
)
from kitstock_kernel.services.stock_ledger import stock_model

logger = get_logger("services.kit_composition")


class KitComposition(BaseService[KitMaterialLine]):
    """BOM line maintenance and material resolution for kits."""

    def __init__(self, session, sequences: SequenceService | None = None):
        super().__init__(session)
        self._sequences = sequences or SequenceService(session)

    def _require_kit(self, kit_id: UUID) -> Kit:
        kit = self.session.get(Kit, kit_id)
        if kit is None:
            raise ItemNotFoundError(ItemKind.KIT.value, str(kit_id))
        return kit

    def _find_material(self, material_type: MaterialType, material_id: UUID):
        return self.session.get(stock_model(material_type.item_kind), material_id)

    def add_line(
        self,
        kit_id: UUID | str,
        material_type: MaterialType | str,
        material_id: UUID | str,
        quantity: int,
        actor_id: UUID,
        packet_number: int | None = None,
        packet_name: str | None = None,
    ) -> UUID:
        """
        Append a material line to a kit and return the new line id.

        Raises:
            ItemNotFoundError: kit or material does not resolve.
            InvalidArgumentError: quantity <= 0, unknown material_type, or a
                packet_number that is not a positive integer.
        """
        kit_id = parse_uuid(kit_id, "kit_id")
        material_type = parse_enum(MaterialType, material_type, "material_type")
        material_id = parse_uuid(material_id, "material_id")
        quantity = require_positive_int(quantity, "quantity")
        if packet_number is not None:
            packet_number = require_positive_int(packet_number, "packet_number")

        self._require_kit(kit_id)

        # INVARIANT: material must exist in the table its type names.
        if self._find_material(material_type, material_id) is None:
            raise ItemNotFoundError(material_type.item_kind.value, str(material_id))

        line = KitMaterialLine(
            kit_id=kit_id,
            material_type=material_type.value,
            material_id=material_id,
            quantity=quantity,
            packet_number=packet_number,
            packet_name=packet_name,
            sequence=self._sequences.next_value(kit_line_sequence_name(kit_id)),
            created_by_id=actor_id,
        )
        self.session.add(line)
        self.session.flush()

        logger.info(
            "kit_line_added",
            extra={
                "kit_id": str(kit_id),
                "line_id": str(line.id),
                "material_type": material_type.value,
                "material_id": str(material_id),
                "quantity": quantity,
                "packet_number": packet_number,
            },
        )
        return line.id

    def remove_line(self, line_id: UUID | str) -> None:
        """
        Delete a line.

        Raises:
            MaterialLineNotFoundError: no such line.  Removing twice is an
                error, not a no-op.
        """
        line_id = parse_uuid(line_id, "line_id")
        line = self.session.get(KitMaterialLine, line_id)
        if line is None:
            raise MaterialLineNotFoundError(str(line_id))

        kit_id = line.kit_id
        self.session.delete(line)
        self.session.flush()
        logger.info(
            "kit_line_removed",
            extra={"kit_id": str(kit_id), "line_id": str(line_id)},
        )

    def list_lines(self, kit_id: UUID | str) -> list[KitMaterialLineInfo]:
        """
        Lines of a kit, grouped by packet number (unpacketed lines last),
        then in insertion order.  Always a fresh read.
        """
        kit_id = parse_uuid(kit_id, "kit_id")
        self._require_kit(kit_id)

        rows = self.session.execute(
            select(KitMaterialLine)
            .where(KitMaterialLine.kit_id == kit_id)
            .order_by(
                KitMaterialLine.packet_number.is_(None),
                KitMaterialLine.packet_number,
                KitMaterialLine.sequence,
            )
            .execution_options(populate_existing=True)
        ).scalars()
        return [row.to_dto() for row in rows]

    def resolve(
        self,
        line: KitMaterialLineInfo | KitMaterialLine | UUID | str,
    ) -> tuple[MaterialType, MaterialInfo]:
        """
        Follow a line to its material.

        Accepts a line DTO, ORM row or line id.

        Raises:
            MaterialLineNotFoundError: a line id that does not resolve.
            DanglingMaterialReferenceError: the material has been removed.
        """
        if not isinstance(line, (KitMaterialLineInfo, KitMaterialLine)):
            line_id = parse_uuid(line, "line_id")
            line = self.session.get(KitMaterialLine, line_id)
            if line is None:
                raise MaterialLineNotFoundError(str(line_id))

        try:
            material_type = MaterialType(line.material_type)
        except ValueError:
            raise InvalidArgumentError(
                "material_type", f"'{line.material_type}' is not a material type"
            ) from None

        material = self._find_material(material_type, line.material_id)
        if material is None:
            logger.warning(
                "kit_line_dangling",
                extra={
                    "line_id": str(line.id),
                    "material_type": material_type.value,
                    "material_id": str(line.material_id),
                },
            )
            raise DanglingMaterialReferenceError(
                str(line.id), material_type.value, str(line.material_id)
            )
        return material_type, material.to_dto()
