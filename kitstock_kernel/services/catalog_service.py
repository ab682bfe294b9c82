"""
Service layer for the item catalog.

Creates and looks up raw materials, pre-processed goods and kits.  Stock
counters are only initialised here; every later change goes through
StockLedger.

Returns MaterialInfo / KitInfo DTOs instead of ORM entities.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from kitstock_kernel.domain.dtos import KitInfo, MaterialInfo
from kitstock_kernel.domain.validation import (
    parse_enum,
    parse_uuid,
    require_non_negative_int,
    require_text,
)
from kitstock_kernel.domain.values import ItemKind, Program
from kitstock_kernel.exceptions import (
    DuplicateSerialNumberError,
    InvalidArgumentError,
    ItemNotFoundError,
)
from kitstock_kernel.logging_config import get_logger
from kitstock_kernel.models.inventory import PreprocessedGood, RawMaterial
from kitstock_kernel.models.kit import Kit
from kitstock_kernel.services.base import BaseService
from kitstock_kernel.services.category_registry import CategoryRegistry

logger = get_logger("services.catalog")


class CatalogService(BaseService[Kit]):
    """
    Service for creating catalog items.

    Enforces:
        - names and units are non-empty;
        - categories are well-known or registered (CategoryRegistry);
        - initial stock is a non-negative integer;
        - kit serial numbers are unique (pre-check, then the
          uq_kit_serial_number constraint for concurrent creators).
    """

    def __init__(self, session, categories: CategoryRegistry | None = None):
        super().__init__(session)
        self._categories = categories or CategoryRegistry(session)

    def _get(self, model, kind: ItemKind, item_id: UUID | str):
        item_id = parse_uuid(item_id, "item_id")
        item = self.session.get(model, item_id)
        if item is None:
            raise ItemNotFoundError(kind.value, str(item_id))
        return item

    # -----------------------------------------------------------------
    # Materials
    # -----------------------------------------------------------------

    def create_raw_material(
        self,
        name: str,
        category: str,
        stock_level: int,
        unit: str,
        actor_id: UUID,
        description: str | None = None,
        supplier: str | None = None,
        unit_price: Decimal | None = None,
    ) -> MaterialInfo:
        """
        Create a raw material with an opening stock level.

        Raises:
            InvalidArgumentError: empty name/unit, negative stock or price.
            UnknownCategoryError: category is not a raw material tag.
        """
        if unit_price is not None:
            unit_price = Decimal(str(unit_price))
            if unit_price < 0:
                raise InvalidArgumentError("unit_price", "must not be negative")

        material = RawMaterial(
            name=require_text(name, "name"),
            category=self._categories.validate(ItemKind.RAW_MATERIAL, category),
            stock_level=require_non_negative_int(stock_level, "stock_level"),
            unit=require_text(unit, "unit"),
            description=description,
            supplier=supplier,
            unit_price=unit_price,
            created_by_id=actor_id,
        )
        self.session.add(material)
        self.session.flush()

        logger.info(
            "raw_material_created",
            extra={
                "item_id": str(material.id),
                "category": material.category,
                "stock_level": material.stock_level,
            },
        )
        return material.to_dto()

    def create_preprocessed_good(
        self,
        name: str,
        category: str,
        stock_level: int,
        unit: str,
        actor_id: UUID,
        description: str | None = None,
        processing_notes: str | None = None,
    ) -> MaterialInfo:
        """Create a pre-processed good with an opening stock level."""
        good = PreprocessedGood(
            name=require_text(name, "name"),
            category=self._categories.validate(ItemKind.PREPROCESSED_GOOD, category),
            stock_level=require_non_negative_int(stock_level, "stock_level"),
            unit=require_text(unit, "unit"),
            description=description,
            processing_notes=processing_notes,
            created_by_id=actor_id,
        )
        self.session.add(good)
        self.session.flush()

        logger.info(
            "preprocessed_good_created",
            extra={
                "item_id": str(good.id),
                "category": good.category,
                "stock_level": good.stock_level,
            },
        )
        return good.to_dto()

    def get_raw_material(self, item_id: UUID | str) -> MaterialInfo:
        return self._get(RawMaterial, ItemKind.RAW_MATERIAL, item_id).to_dto()

    def get_preprocessed_good(self, item_id: UUID | str) -> MaterialInfo:
        return self._get(PreprocessedGood, ItemKind.PREPROCESSED_GOOD, item_id).to_dto()

    # -----------------------------------------------------------------
    # Kits
    # -----------------------------------------------------------------

    def create_kit(
        self,
        name: str,
        serial_number: str,
        program: Program | str,
        actor_id: UUID,
        grade_level: str | None = None,
        description: str | None = None,
    ) -> KitInfo:
        """
        Create a kit with stock 0.

        Assembled units are recorded afterwards with StockLedger.set_stock.

        Raises:
            DuplicateSerialNumberError: serial number already in use.
            InvalidArgumentError: empty name/serial or unknown program.
        """
        serial_number = require_text(serial_number, "serial_number")
        kit = Kit(
            name=require_text(name, "name"),
            serial_number=serial_number,
            program=parse_enum(Program, program, "program").value,
            grade_level=grade_level,
            description=description,
            stock_level=0,
            created_by_id=actor_id,
        )

        # INVARIANT: pre-check for a clear error, constraint for races.
        existing = self.session.execute(
            select(Kit.id).where(Kit.serial_number == serial_number)
        ).scalar_one_or_none()
        if existing is not None:
            raise DuplicateSerialNumberError(serial_number)

        savepoint = self.session.begin_nested()
        try:
            self.session.add(kit)
            self.session.flush()
            savepoint.commit()
        except IntegrityError:
            savepoint.rollback()
            raise DuplicateSerialNumberError(serial_number) from None

        logger.info(
            "kit_created",
            extra={
                "kit_id": str(kit.id),
                "serial_number": serial_number,
                "program": kit.program,
            },
        )
        return kit.to_dto()

    def get_kit(self, kit_id: UUID | str) -> KitInfo:
        return self._get(Kit, ItemKind.KIT, kit_id).to_dto()

    def get_kit_by_serial(self, serial_number: str) -> KitInfo:
        kit = self.session.execute(
            select(Kit).where(Kit.serial_number == serial_number)
        ).scalar_one_or_none()
        if kit is None:
            raise ItemNotFoundError(ItemKind.KIT.value, serial_number)
        return kit.to_dto()
