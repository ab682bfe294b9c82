"""
AssignmentLifecycle -- committing kit stock to clients.

Responsibility:
    Creates kit assignments and moves them through the assignment workflow
    (``ASSIGNMENT_WORKFLOW``), driving StockLedger so that kit stock always
    reflects outstanding commitments.

Architecture position:
    Kernel > Services.  Write path: AssignmentLifecycle -> StockLedger ->
    persisted assignment, all inside the caller's transaction.

Invariants enforced:
    - a pending commitment never drives kit stock negative.  create()
      decrements the kit through StockLedger.adjust_stock (one
      conditional UPDATE) and only then inserts the assignment row.
      If the decrement fails nothing is written; if a later step fails
      the caller's rollback undoes the decrement.
    - status moves pending -> delivered or pending -> cancelled and
      never back.  The assignment row is locked (SELECT ... FOR UPDATE)
      for the duration of a transition so two concurrent transitions
      cannot both leave pending.
    - pending -> cancelled releases the committed quantity back to the kit
      in the same transaction.  pending -> delivered leaves stock alone.

Failure modes:
    - UnauthenticatedError: no acting user.
    - ClientNotFoundError / ItemNotFoundError / AssignmentNotFoundError.
    - InsufficientStockError: kit stock below the requested quantity.
    - InvalidTransitionError: edge not in the workflow.
    - InvalidArgumentError: quantity <= 0, malformed date, unknown
      delivery type or status, start > end.

Audit relevance:
    ``assignment_created`` and ``assignment_transitioned`` are logged with
    the acting user, kit, client and quantity.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select

from kitstock_kernel.domain.dtos import AssignmentInfo
from kitstock_kernel.domain.identity import Actor, require_actor
from kitstock_kernel.domain.validation import (
    parse_calendar_date,
    parse_enum,
    parse_uuid,
    require_positive_int,
)
from kitstock_kernel.domain.values import AssignmentStatus, DeliveryType, ItemKind
from kitstock_kernel.domain.workflow import ASSIGNMENT_WORKFLOW, Workflow
from kitstock_kernel.exceptions import (
    AssignmentNotFoundError,
    ClientNotFoundError,
    InvalidArgumentError,
    InvalidTransitionError,
)
from kitstock_kernel.logging_config import get_logger
from kitstock_kernel.models.assignment import KitAssignment
from kitstock_kernel.models.client import Client
from kitstock_kernel.services.base import BaseService
from kitstock_kernel.services.stock_ledger import StockLedger

logger = get_logger("services.assignment_lifecycle")


def _ordered(stmt):
    return stmt.order_by(
        KitAssignment.delivery_date,
        KitAssignment.created_at,
        KitAssignment.id,
    )


class AssignmentLifecycle(BaseService[KitAssignment]):
    """
    Create and transition kit assignments.

    Contract:
        All methods work inside the caller's transaction and flush only.
        Returns AssignmentInfo DTOs.
    """

    def __init__(
        self,
        session,
        ledger: StockLedger | None = None,
        workflow: Workflow = ASSIGNMENT_WORKFLOW,
    ):
        super().__init__(session)
        self._ledger = ledger or StockLedger(session)
        self._workflow = workflow

    def _require_client(self, client_id: UUID) -> None:
        if self.session.get(Client, client_id) is None:
            raise ClientNotFoundError(str(client_id))

    def create(
        self,
        client_id: UUID | str,
        kit_id: UUID | str,
        quantity: int,
        delivery_type: DeliveryType | str,
        delivery_date: date | str,
        actor: Actor | None,
        notes: str | None = None,
    ) -> AssignmentInfo:
        """
        Commit ``quantity`` units of a kit to a client.

        Postconditions:
            - kit stock_level decreased by ``quantity``;
            - a pending assignment exists;
            - both are flushed in the caller's transaction, or neither is.

        Raises:
            UnauthenticatedError, InvalidArgumentError, ClientNotFoundError,
            ItemNotFoundError (kit), InsufficientStockError.
        """
        actor = require_actor(actor, "create_assignment")
        client_id = parse_uuid(client_id, "client_id")
        kit_id = parse_uuid(kit_id, "kit_id")
        quantity = require_positive_int(quantity, "quantity")
        delivery_type = parse_enum(DeliveryType, delivery_type, "delivery_type")
        delivery_date = parse_calendar_date(delivery_date, "delivery_date")

        self._require_client(client_id)

        # INVARIANT: check and decrement are the same statement;
        # the row below is written only after it succeeds.
        remaining = self._ledger.adjust_stock(ItemKind.KIT, kit_id, -quantity)

        assignment = KitAssignment(
            client_id=client_id,
            kit_id=kit_id,
            quantity=quantity,
            delivery_type=delivery_type.value,
            delivery_date=delivery_date,
            status=self._workflow.initial_state,
            notes=notes,
            assigned_by_id=actor.id,
            created_by_id=actor.id,
        )
        self.session.add(assignment)
        self.session.flush()

        logger.info(
            "assignment_created",
            extra={
                "assignment_id": str(assignment.id),
                "client_id": str(client_id),
                "kit_id": str(kit_id),
                "quantity": quantity,
                "delivery_date": delivery_date,
                "kit_stock_remaining": remaining,
                "actor_id": str(actor.id),
            },
        )
        return assignment.to_dto()

    def transition(
        self,
        assignment_id: UUID | str,
        new_status: AssignmentStatus | str,
        actor: Actor | None,
    ) -> AssignmentInfo:
        """
        Move an assignment along a workflow edge.

        Raises:
            UnauthenticatedError: no acting user.
            InvalidArgumentError: ``new_status`` is not a status.
            AssignmentNotFoundError: unknown assignment.
            InvalidTransitionError: edge not allowed (including
                pending -> pending and anything out of a terminal state).
        """
        actor = require_actor(actor, "update_assignment_status")
        assignment_id = parse_uuid(assignment_id, "assignment_id")
        new_status = parse_enum(AssignmentStatus, new_status, "status")

        # INVARIANT: lock the row so the current status cannot change
        # under us.
        assignment = self.session.execute(
            select(KitAssignment)
            .where(KitAssignment.id == assignment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if assignment is None:
            raise AssignmentNotFoundError(str(assignment_id))

        from_status = AssignmentStatus(assignment.status)
        transition = self._workflow.find_transition(from_status.value, new_status.value)
        if transition is None:
            logger.warning(
                "assignment_transition_rejected",
                extra={
                    "assignment_id": str(assignment_id),
                    "from_status": from_status.value,
                    "to_status": new_status.value,
                },
            )
            raise InvalidTransitionError(
                str(assignment_id), from_status.value, new_status.value
            )

        if transition.stock_delta_sign:
            self._ledger.adjust_stock(
                ItemKind.KIT,
                assignment.kit_id,
                transition.stock_delta_sign * assignment.quantity,
            )

        assignment.status = new_status.value
        assignment.updated_by_id = actor.id
        self.session.flush()

        logger.info(
            "assignment_transitioned",
            extra={
                "assignment_id": str(assignment_id),
                "action": transition.action,
                "from_status": from_status.value,
                "to_status": new_status.value,
                "kit_id": str(assignment.kit_id),
                "stock_released": transition.stock_delta_sign * assignment.quantity,
                "actor_id": str(actor.id),
            },
        )
        return assignment.to_dto()

    def get(self, assignment_id: UUID | str) -> AssignmentInfo:
        assignment_id = parse_uuid(assignment_id, "assignment_id")
        assignment = self.session.get(KitAssignment, assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(str(assignment_id))
        return assignment.to_dto()

    def list_by_client(self, client_id: UUID | str) -> list[AssignmentInfo]:
        """
        Assignments of one client, earliest delivery first.

        Raises:
            ClientNotFoundError: unknown client.
        """
        client_id = parse_uuid(client_id, "client_id")
        self._require_client(client_id)

        rows = self.session.execute(
            _ordered(select(KitAssignment).where(KitAssignment.client_id == client_id))
        ).scalars()
        return [row.to_dto() for row in rows]

    def list_by_date_range(
        self,
        start: date | str,
        end: date | str,
    ) -> list[AssignmentInfo]:
        """
        Assignments with ``start <= delivery_date <= end``, ascending.

        Raises:
            InvalidArgumentError: malformed date or start after end.
        """
        start = parse_calendar_date(start, "start")
        end = parse_calendar_date(end, "end")
        if start > end:
            raise InvalidArgumentError("start", f"{start} is after end {end}")

        rows = self.session.execute(
            _ordered(
                select(KitAssignment).where(
                    KitAssignment.delivery_date >= start,
                    KitAssignment.delivery_date <= end,
                )
            )
        ).scalars()
        return [row.to_dto() for row in rows]
