"""
Immutable DTOs returned by services and selectors.

Pure domain objects with no ORM dependencies: services convert ORM rows to
these before returning, so callers never hold live session state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from kitstock_kernel.domain.identity import Actor
from kitstock_kernel.domain.values import (
    AssignmentStatus,
    DeliveryType,
    ItemKind,
    MaterialType,
    Program,
)


@dataclass(frozen=True)
class MaterialInfo:
    """Raw material or pre-processed good."""

    id: UUID
    kind: ItemKind
    name: str
    category: str
    stock_level: int
    unit: str
    description: str | None = None
    supplier: str | None = None
    unit_price: Decimal | None = None
    processing_notes: str | None = None


@dataclass(frozen=True)
class KitInfo:
    id: UUID
    name: str
    serial_number: str
    program: Program
    stock_level: int
    grade_level: str | None = None
    description: str | None = None

    @property
    def label(self) -> str:
        return f"{self.name} ({self.serial_number})"


@dataclass(frozen=True)
class KitMaterialLineInfo:
    id: UUID
    kit_id: UUID
    material_type: MaterialType
    material_id: UUID
    quantity: int
    sequence: int
    packet_number: int | None = None
    packet_name: str | None = None


@dataclass(frozen=True)
class ResolvedMaterialLine:
    """A BOM line with its referenced material, for display.

    ``material`` is None when the reference dangles.
    """

    line: KitMaterialLineInfo
    material: MaterialInfo | None

    @property
    def is_dangling(self) -> bool:
        return self.material is None


@dataclass(frozen=True)
class KitDetail:
    kit: KitInfo
    lines: tuple[ResolvedMaterialLine, ...]


@dataclass(frozen=True)
class ClientInfo:
    id: UUID
    name: str
    contact_person: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None


@dataclass(frozen=True)
class AssignmentInfo:
    id: UUID
    client_id: UUID
    kit_id: UUID
    quantity: int
    delivery_type: DeliveryType
    delivery_date: date
    status: AssignmentStatus
    assigned_by_id: UUID
    notes: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class AssignmentView:
    """Assignment joined with its client, kit and assigning user."""

    assignment: AssignmentInfo
    client: ClientInfo | None
    kit: KitInfo | None
    assigned_by: Actor | None


@dataclass(frozen=True)
class CategoryInfo:
    id: UUID
    item_kind: ItemKind
    name: str
    created_by_id: UUID
