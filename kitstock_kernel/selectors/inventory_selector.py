"""
Module: kitstock_kernel.selectors.inventory_selector
Responsibility: Catalog listings and the kit detail view (kit plus its
    resolved bill of materials).
Architecture position: Kernel > Selectors.  Read-only.

kit_detail is a display path: a line whose material has been removed is
returned with ``material=None`` instead of raising, so one dangling line
does not hide the rest of the kit.  KitComposition.resolve() is the
raising variant.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from kitstock_kernel.domain.dtos import KitDetail, KitInfo, MaterialInfo, ResolvedMaterialLine
from kitstock_kernel.domain.validation import normalize_category, parse_enum, parse_uuid
from kitstock_kernel.domain.values import ItemKind, MaterialType, Program
from kitstock_kernel.exceptions import ItemNotFoundError
from kitstock_kernel.models.inventory import PreprocessedGood, RawMaterial
from kitstock_kernel.models.kit import Kit, KitMaterialLine
from kitstock_kernel.selectors.base import BaseSelector

_MATERIAL_MODELS = {
    MaterialType.RAW: RawMaterial,
    MaterialType.PREPROCESSED: PreprocessedGood,
}


class InventorySelector(BaseSelector[Kit]):
    def kits_by_program(self, program: Program | str) -> list[KitInfo]:
        program = parse_enum(Program, program, "program")
        rows = self.session.execute(
            select(Kit).where(Kit.program == program.value).order_by(Kit.serial_number)
        ).scalars()
        return [row.to_dto() for row in rows]

    def raw_materials_by_category(self, category: str) -> list[MaterialInfo]:
        rows = self.session.execute(
            select(RawMaterial)
            .where(RawMaterial.category == normalize_category(category))
            .order_by(RawMaterial.name, RawMaterial.id)
        ).scalars()
        return [row.to_dto() for row in rows]

    def preprocessed_goods_by_category(self, category: str) -> list[MaterialInfo]:
        rows = self.session.execute(
            select(PreprocessedGood)
            .where(PreprocessedGood.category == normalize_category(category))
            .order_by(PreprocessedGood.name, PreprocessedGood.id)
        ).scalars()
        return [row.to_dto() for row in rows]

    def kit_detail(self, kit_id: UUID | str) -> KitDetail:
        """
        Kit with every BOM line and its material, in list_lines order.

        Raises:
            ItemNotFoundError: unknown kit.
        """
        kit_id = parse_uuid(kit_id, "kit_id")
        kit = self.session.get(Kit, kit_id)
        if kit is None:
            raise ItemNotFoundError(ItemKind.KIT.value, str(kit_id))

        lines = self.session.execute(
            select(KitMaterialLine)
            .where(KitMaterialLine.kit_id == kit_id)
            .order_by(
                KitMaterialLine.packet_number.is_(None),
                KitMaterialLine.packet_number,
                KitMaterialLine.sequence,
            )
        ).scalars().all()

        # One query per material table instead of one per line
        wanted: dict[MaterialType, set[UUID]] = {t: set() for t in _MATERIAL_MODELS}
        for line in lines:
            wanted[MaterialType(line.material_type)].add(line.material_id)

        found: dict[tuple[MaterialType, UUID], MaterialInfo] = {}
        for material_type, ids in wanted.items():
            if not ids:
                continue
            model = _MATERIAL_MODELS[material_type]
            for row in self.session.execute(select(model).where(model.id.in_(ids))).scalars():
                found[(material_type, row.id)] = row.to_dto()

        resolved = tuple(
            ResolvedMaterialLine(
                line=line.to_dto(),
                material=found.get((MaterialType(line.material_type), line.material_id)),
            )
            for line in lines
        )
        return KitDetail(kit=kit.to_dto(), lines=resolved)
