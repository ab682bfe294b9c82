"""
InventorySelector tests: catalog listings and kit detail.
"""

from uuid import uuid4

import pytest

from kitstock_kernel.domain.values import MaterialType, Program
from kitstock_kernel.exceptions import InvalidArgumentError, ItemNotFoundError
from kitstock_kernel.models.inventory import RawMaterial


class TestListings:
    def test_kits_by_program_ordered_by_serial(self, inventory_selector, create_kit):
        create_kit(serial_number="ROB-002")
        create_kit(serial_number="CST-001", name="CSTEM Explorer Kit", program=Program.CSTEM)
        create_kit(serial_number="ROB-001")

        robotics = inventory_selector.kits_by_program("robotics")
        assert [k.serial_number for k in robotics] == ["ROB-001", "ROB-002"]
        assert [k.serial_number for k in inventory_selector.kits_by_program(Program.CSTEM)] == [
            "CST-001"
        ]

    def test_unknown_program(self, inventory_selector):
        with pytest.raises(InvalidArgumentError):
            inventory_selector.kits_by_program("art")

    def test_raw_materials_by_category(self, inventory_selector, create_raw_material):
        create_raw_material(name="Foam Balls", category="foam")
        create_raw_material(name="Arduino Nano", category="electronics")
        create_raw_material(name="EVA Foam Sheet 2mm", category="foam")

        names = [m.name for m in inventory_selector.raw_materials_by_category("Foam")]
        assert names == ["EVA Foam Sheet 2mm", "Foam Balls"]

    def test_preprocessed_goods_by_category(
        self, inventory_selector, create_preprocessed_good
    ):
        create_preprocessed_good(name="Laser Cut Chassis", category="laser_cut")
        good = create_preprocessed_good()

        [listed] = inventory_selector.preprocessed_goods_by_category("3d_printed")
        assert listed == good


class TestKitDetail:
    def test_lines_resolved_in_bom_order(
        self, inventory_selector, composition, kit, raw_material, preprocessed_good,
        test_actor_id,
    ):
        loose = composition.add_line(kit.id, MaterialType.RAW, raw_material.id, 2, test_actor_id)
        packed = composition.add_line(
            kit.id, MaterialType.PREPROCESSED, preprocessed_good.id, 4, test_actor_id,
            packet_number=1, packet_name="Packet A",
        )

        detail = inventory_selector.kit_detail(kit.id)
        assert detail.kit.id == kit.id
        assert [r.line.id for r in detail.lines] == [packed, loose]
        assert detail.lines[0].material == preprocessed_good
        assert detail.lines[1].material.name == raw_material.name
        assert not any(r.is_dangling for r in detail.lines)

    def test_dangling_line_flagged(
        self, session, inventory_selector, composition, kit, raw_material, preprocessed_good,
        test_actor_id,
    ):
        dangling = composition.add_line(kit.id, MaterialType.RAW, raw_material.id, 2, test_actor_id)
        composition.add_line(
            kit.id, MaterialType.PREPROCESSED, preprocessed_good.id, 1, test_actor_id
        )
        session.delete(session.get(RawMaterial, raw_material.id))
        session.flush()

        detail = inventory_selector.kit_detail(kit.id)
        flags = {r.line.id: r.is_dangling for r in detail.lines}
        assert flags[dangling] is True
        assert sum(flags.values()) == 1

    def test_unknown_kit(self, inventory_selector):
        with pytest.raises(ItemNotFoundError):
            inventory_selector.kit_detail(uuid4())
