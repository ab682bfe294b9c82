"""
CatalogService tests: material and kit creation, serial uniqueness.
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from kitstock_kernel.domain.values import ItemKind, Program
from kitstock_kernel.exceptions import (
    DuplicateSerialNumberError,
    InvalidArgumentError,
    ItemNotFoundError,
    UnknownCategoryError,
)
from kitstock_kernel.models.kit import Kit


class TestCreateRawMaterial:
    def test_creates_with_opening_stock(self, catalog, test_actor_id):
        material = catalog.create_raw_material(
            name="Arduino Uno R3",
            category="electronics",
            stock_level=25,
            unit="pieces",
            actor_id=test_actor_id,
            supplier="Robu.in",
            unit_price=Decimal("450.00"),
        )

        assert material.kind == ItemKind.RAW_MATERIAL
        assert material.category == "electronics"
        assert material.stock_level == 25
        assert material.unit_price == Decimal("450.00")
        assert catalog.get_raw_material(material.id) == material

    def test_category_normalised(self, catalog, test_actor_id):
        material = catalog.create_raw_material(
            "Corrugated Board A3", "  Corrugated Sheets ", 10, "sheets", test_actor_id
        )
        assert material.category == "corrugated_sheets"

    def test_unknown_category_rejected(self, catalog, test_actor_id):
        with pytest.raises(UnknownCategoryError) as exc_info:
            catalog.create_raw_material("Bamboo Sticks", "bamboo", 10, "pieces", test_actor_id)
        assert exc_info.value.category == "bamboo"
        assert exc_info.value.argument == "category"

    def test_preprocessed_tag_not_valid_for_raw(self, catalog, test_actor_id):
        with pytest.raises(UnknownCategoryError):
            catalog.create_raw_material("Cut Panels", "laser_cut", 10, "pieces", test_actor_id)

    def test_negative_stock_rejected(self, catalog, test_actor_id):
        with pytest.raises(InvalidArgumentError) as exc_info:
            catalog.create_raw_material("Wire", "electronics", -1, "meters", test_actor_id)
        assert exc_info.value.argument == "stock_level"

    def test_negative_price_rejected(self, catalog, test_actor_id):
        with pytest.raises(InvalidArgumentError) as exc_info:
            catalog.create_raw_material(
                "Wire", "electronics", 1, "meters", test_actor_id, unit_price="-2"
            )
        assert exc_info.value.argument == "unit_price"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, catalog, test_actor_id, name):
        with pytest.raises(InvalidArgumentError) as exc_info:
            catalog.create_raw_material(name, "foam", 1, "pieces", test_actor_id)
        assert exc_info.value.argument == "name"


class TestCreatePreprocessedGood:
    def test_creates(self, catalog, test_actor_id):
        good = catalog.create_preprocessed_good(
            "Laser Cut Chassis", "laser_cut", 60, "pieces", test_actor_id,
            processing_notes="3mm MDF",
        )
        assert good.kind == ItemKind.PREPROCESSED_GOOD
        assert good.processing_notes == "3mm MDF"
        assert catalog.get_preprocessed_good(good.id).stock_level == 60

    def test_three_d_printed_tag(self, catalog, test_actor_id):
        good = catalog.create_preprocessed_good(
            "Gear Set", "3D Printed", 5, "sets", test_actor_id
        )
        assert good.category == "3d_printed"

    def test_get_unknown(self, catalog):
        with pytest.raises(ItemNotFoundError) as exc_info:
            catalog.get_preprocessed_good(uuid4())
        assert exc_info.value.kind == "preprocessed_good"


class TestCreateKit:
    def test_starts_with_zero_stock(self, catalog, test_actor_id):
        kit = catalog.create_kit(
            "CSTEM Explorer Kit", "CST-001", "cstem", test_actor_id, grade_level="3-5"
        )
        assert kit.stock_level == 0
        assert kit.program == Program.CSTEM
        assert kit.label == "CSTEM Explorer Kit (CST-001)"

    def test_duplicate_serial_rejected_first_kit_intact(self, session, catalog, test_actor_id):
        """Second kit with an existing serial fails; the first is unaffected."""
        first = catalog.create_kit("Robotics Starter Kit", "ROB-001", "robotics", test_actor_id)

        with pytest.raises(DuplicateSerialNumberError) as exc_info:
            catalog.create_kit("Another Kit", "ROB-001", "cstem", test_actor_id)

        assert exc_info.value.serial_number == "ROB-001"
        assert catalog.get_kit_by_serial("ROB-001") == first
        count = session.execute(
            select(func.count()).select_from(Kit).where(Kit.serial_number == "ROB-001")
        ).scalar_one()
        assert count == 1

    def test_serial_is_trimmed_before_uniqueness_check(self, catalog, test_actor_id):
        catalog.create_kit("Kit", "ROB-002", "robotics", test_actor_id)
        with pytest.raises(DuplicateSerialNumberError):
            catalog.create_kit("Kit", "  ROB-002 ", "robotics", test_actor_id)

    def test_unknown_program_rejected(self, catalog, test_actor_id):
        with pytest.raises(InvalidArgumentError) as exc_info:
            catalog.create_kit("Kit", "ART-001", "art", test_actor_id)
        assert exc_info.value.argument == "program"

    def test_get_kit_by_unknown_serial(self, catalog):
        with pytest.raises(ItemNotFoundError):
            catalog.get_kit_by_serial("NOPE-404")

    def test_logged(self, catalog, test_actor_id, captured_logs):
        kit = catalog.create_kit("Kit", "ROB-010", Program.ROBOTICS, test_actor_id)
        [record] = [r for r in captured_logs() if r["message"] == "kit_created"]
        assert record["kit_id"] == str(kit.id)
        assert record["serial_number"] == "ROB-010"
