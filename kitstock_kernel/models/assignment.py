"""
Module: kitstock_kernel.models.assignment
Responsibility: ORM persistence for kit assignments: a commitment of
    ``quantity`` units of one kit to one client for delivery on a date.
Architecture position: Kernel > Models.  May import from db/base.py and domain/.

Invariants enforced:
    - quantity > 0 (CHECK constraint) and fixed at creation; only status
      changes afterwards.
    - Rows are created only by AssignmentLifecycle, after the kit stock
      decrement has succeeded in the same transaction.
    - status moves pending -> delivered | cancelled and never back;
      enforced by AssignmentLifecycle against ASSIGNMENT_WORKFLOW.

Indexes back the two read paths: by client ordered by delivery date, and
by delivery date range.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kitstock_kernel.db.base import TrackedBase, UUIDString
from kitstock_kernel.domain.dtos import AssignmentInfo
from kitstock_kernel.domain.values import AssignmentStatus, DeliveryType


class KitAssignment(TrackedBase):
    __tablename__ = "kit_assignments"

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_assignment_quantity_positive"),
        Index("idx_assignment_client_date", "client_id", "delivery_date"),
        Index("idx_assignment_kit", "kit_id"),
        Index("idx_assignment_delivery_date", "delivery_date"),
        Index("idx_assignment_status", "status"),
    )

    client_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("clients.id"),
        nullable=False,
    )

    kit_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("kits.id"),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(nullable=False)

    delivery_type: Mapped[DeliveryType] = mapped_column(String(20), nullable=False)

    delivery_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[AssignmentStatus] = mapped_column(
        String(20),
        nullable=False,
        default=AssignmentStatus.PENDING,
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Acting user at creation (IdentityProvider id, no FK)
    assigned_by_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    @property
    def is_terminal(self) -> bool:
        return self.status in (AssignmentStatus.DELIVERED, AssignmentStatus.CANCELLED)

    def to_dto(self) -> AssignmentInfo:
        return AssignmentInfo(
            id=self.id,
            client_id=self.client_id,
            kit_id=self.kit_id,
            quantity=self.quantity,
            delivery_type=DeliveryType(self.delivery_type),
            delivery_date=self.delivery_date,
            status=AssignmentStatus(self.status),
            assigned_by_id=self.assigned_by_id,
            notes=self.notes,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return (
            f"<KitAssignment kit={self.kit_id} client={self.client_id} "
            f"x{self.quantity} {self.status}>"
        )
