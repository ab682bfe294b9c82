"""
Catalog factories shared by fixtures and by tests that need real commits.

Each helper goes through the kernel services, so rows look exactly as
production writes them.
"""

from datetime import date
from uuid import uuid4

from kitstock_kernel.domain.identity import Actor
from kitstock_kernel.domain.values import ItemKind, Program
from kitstock_kernel.services import CatalogService, ClientDirectory, StockLedger

# Test actor for all test operations
TEST_ACTOR = Actor(id=uuid4(), name="Test Operator", role="inventory_manager")
TEST_ACTOR_ID = TEST_ACTOR.id

DELIVERY_DATE = date(2026, 11, 2)


def make_kit(session, stock=10, serial_number=None, name="Robotics Starter Kit",
             program=Program.ROBOTICS, actor_id=TEST_ACTOR_ID):
    """Create a kit and record ``stock`` assembled units."""
    catalog = CatalogService(session)
    kit = catalog.create_kit(
        name=name,
        serial_number=serial_number or f"ROB-{uuid4().hex[:8].upper()}",
        program=program,
        actor_id=actor_id,
        grade_level="6-8",
    )
    if stock:
        StockLedger(session).set_stock(ItemKind.KIT, kit.id, stock)
    return catalog.get_kit(kit.id)


def make_client(session, name="Green Valley Public School", actor_id=TEST_ACTOR_ID):
    return ClientDirectory(session).create_client(
        name=name,
        contact_person="Anita Kumar",
        actor_id=actor_id,
        email="anita.kumar@gvps.edu",
        city="Mumbai",
        state="MH",
        pincode="400001",
    )


def make_raw_material(session, stock=500, name="EVA Foam Sheet 2mm", category="foam",
                      actor_id=TEST_ACTOR_ID):
    return CatalogService(session).create_raw_material(
        name=name,
        category=category,
        stock_level=stock,
        unit="pieces",
        actor_id=actor_id,
        supplier="FoamWorks",
    )


def make_preprocessed_good(session, stock=150, name="3D Printed Servo Brackets",
                           category="3d_printed", actor_id=TEST_ACTOR_ID):
    return CatalogService(session).create_preprocessed_good(
        name=name,
        category=category,
        stock_level=stock,
        unit="pieces",
        actor_id=actor_id,
        processing_notes="0.2mm layer height",
    )
