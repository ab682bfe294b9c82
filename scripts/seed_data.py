#!/usr/bin/env python3
"""
Seed the database with a small, realistic inventory.

Creates two clients, four raw materials, three pre-processed goods, three
kits with assembled stock, a two-packet bill of materials for the robotics
starter kit and two pending assignments.  Everything goes through the
kernel services, so stock counters and logs look exactly as they would in
production.  Skips seeding when any kit already exists.

Usage:
    python3 scripts/seed_data.py
    KITSTOCK_DATABASE_URL=postgresql://... python3 scripts/seed_data.py
"""

import sys
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select

from kitstock_config import get_active_config
from kitstock_config.bridges import ensure_custom_categories, init_engine, init_logging
from kitstock_kernel.db.engine import create_tables, session_scope
from kitstock_kernel.domain.identity import Actor
from kitstock_kernel.domain.values import DeliveryType, ItemKind, MaterialType, Program
from kitstock_kernel.logging_config import get_logger
from kitstock_kernel.models.kit import Kit
from kitstock_kernel.services import (
    AssignmentLifecycle,
    CatalogService,
    ClientDirectory,
    KitComposition,
    StockLedger,
)

logger = get_logger("scripts.seed")

SEED_ACTOR = Actor(id=uuid4(), name="Seed Script", role="admin")

CLIENTS = [
    dict(
        name="Green Valley Public School",
        contact_person="Anita Kumar",
        email="anita.kumar@gvps.edu",
        phone="98765-43210",
        address="12 Palm Street",
        city="Mumbai",
        state="MH",
        pincode="400001",
    ),
    dict(
        name="Blue Ridge Academy",
        contact_person="Rahul Verma",
        email="rahul.verma@blueridge.edu",
        phone="91234-56780",
        address="98 Hill View Road",
        city="Pune",
        state="MH",
        pincode="411001",
    ),
]

RAW_MATERIALS = [
    ("EVA Foam Sheet 2mm", "foam", 500, "pieces", "High-density EVA foam for models", "FoamWorks", "10"),
    ("MDF Board 3mm", "mdf", 200, "sheets", "Laser-compatible MDF", "WoodCraft", "80"),
    ("M3 Screws Assorted", "fasteners", 1000, "pieces", "Assortment for assembly", "BoltHub", "2"),
    ("Copper Wire 22AWG", "electronics", 300, "meters", "Flexible stranded wire", "ElectroMart", "5"),
]

PREPROCESSED_GOODS = [
    ("Laser Cut MDF Gears", "laser_cut", 120, "sets", "Varied gear sizes", "Cut on 40W laser"),
    ("3D Printed Servo Brackets", "3d_printed", 150, "pieces", "PLA brackets for micro servos", "0.2mm layer height"),
    ("Painted Base Plates", "painted", 80, "pieces", "Primed and painted plates", "Acrylic matte"),
]

# (name, serial, program, grade, description, assembled units)
KITS = [
    ("Robotics Starter Kit", "ROB-001", Program.ROBOTICS, "6-8", "Basics of robotics with servos & gears", 10),
    ("CSTEM Curious Minds", "CST-101", Program.CSTEM, "3-5", "Fun experiments for early learners", 15),
    ("Advanced Robotics Kit", "ROB-200", Program.ROBOTICS, "9-10", "Advanced mechanisms and control", 5),
]


def seed(session) -> dict[str, int]:
    actor_id = SEED_ACTOR.id
    catalog = CatalogService(session)
    clients = ClientDirectory(session)
    ledger = StockLedger(session)
    composition = KitComposition(session)
    lifecycle = AssignmentLifecycle(session, ledger=ledger)

    client_ids = [clients.create_client(actor_id=actor_id, **c).id for c in CLIENTS]

    raw_ids = [
        catalog.create_raw_material(
            name, category, stock, unit, actor_id,
            description=description, supplier=supplier, unit_price=Decimal(price),
        ).id
        for name, category, stock, unit, description, supplier, price in RAW_MATERIALS
    ]

    good_ids = [
        catalog.create_preprocessed_good(
            name, category, stock, unit, actor_id,
            description=description, processing_notes=notes,
        ).id
        for name, category, stock, unit, description, notes in PREPROCESSED_GOODS
    ]

    kit_ids = []
    for name, serial, program, grade, description, assembled in KITS:
        kit = catalog.create_kit(
            name, serial, program, actor_id, grade_level=grade, description=description,
        )
        ledger.set_stock(ItemKind.KIT, kit.id, assembled)
        kit_ids.append(kit.id)

    # Pouching plan for the starter kit
    composition.add_line(
        kit_ids[0], MaterialType.RAW, raw_ids[0], 5, actor_id,
        packet_number=1, packet_name="Packet A",
    )
    composition.add_line(
        kit_ids[0], MaterialType.PREPROCESSED, good_ids[1], 2, actor_id,
        packet_number=2, packet_name="Packet B",
    )

    today = date.today()
    lifecycle.create(
        client_ids[0], kit_ids[0], 2, DeliveryType.SINGLE, today, SEED_ACTOR,
        notes="Urgent delivery",
    )
    lifecycle.create(
        client_ids[1], kit_ids[1], 3, DeliveryType.SINGLE, today + timedelta(days=7), SEED_ACTOR,
        notes="Handle with care",
    )

    return {
        "clients": len(client_ids),
        "raw_materials": len(raw_ids),
        "preprocessed_goods": len(good_ids),
        "kits": len(kit_ids),
        "kit_lines": 2,
        "assignments": 2,
    }


def main() -> int:
    config = get_active_config()
    init_logging(config)
    init_engine(config)
    create_tables()
    ensure_custom_categories(config, SEED_ACTOR.id)

    with session_scope() as session:
        if session.execute(select(Kit.id).limit(1)).first() is not None:
            print("Already seeded.")
            return 0
        counts = seed(session)

    logger.info("seed_completed", extra=counts)
    print("Seed completed: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
