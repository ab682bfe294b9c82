"""
InventoryAPI -- the request boundary of the kitstock engine.

Responsibility:
    One method per external operation.  Each call is its own unit of work:
    a fresh session, one transaction, commit on success and rollback on
    any exception (``session_scope``).  Mutations take the acting user from
    the IdentityProvider; a missing user is an UnauthenticatedError and
    nothing is written.

Architecture position:
    Services -- outer layer over kitstock_kernel.  The kernel never imports
    from here.

Invariants enforced:
    - No partial success: create_assignment commits the kit decrement and
      the assignment row together or neither.
    - Every call runs under a fresh ``correlation_id`` in LogContext, with
      the acting user bound as ``actor_id``.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Generator
from uuid import UUID, uuid4

from sqlalchemy.orm import Session, sessionmaker

from kitstock_kernel.db.engine import session_scope
from kitstock_kernel.domain.dtos import AssignmentInfo, AssignmentView
from kitstock_kernel.domain.identity import Actor, IdentityProvider
from kitstock_kernel.domain.values import AssignmentStatus, DeliveryType, ItemKind, MaterialType
from kitstock_kernel.exceptions import InvalidArgumentError
from kitstock_kernel.logging_config import LogContext, get_logger
from kitstock_kernel.selectors.assignment_selector import AssignmentSelector
from kitstock_kernel.services.assignment_lifecycle import AssignmentLifecycle
from kitstock_kernel.services.kit_composition import KitComposition
from kitstock_kernel.services.stock_ledger import StockLedger

logger = get_logger("api.inventory")


class InventoryAPI:
    """
    Transaction-per-call facade over the kernel services.

    Usage:
        api = InventoryAPI(get_session_factory(), identity_provider)
        assignment_id = api.create_assignment(client_id, kit_id, 4, "single", "2026-11-02")
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        identity_provider: IdentityProvider,
    ):
        self._session_factory = session_factory
        self._identity = identity_provider

    @contextmanager
    def _unit_of_work(
        self,
        operation: str,
        mutating: bool = True,
    ) -> Generator[tuple[Session, Actor | None], None, None]:
        actor = self._identity.current_user() if mutating else None
        with LogContext.bind(
            correlation_id=uuid4(),
            actor_id=actor.id if actor is not None else None,
        ):
            logger.debug("api_call_started", extra={"operation": operation})
            with session_scope(self._session_factory) as session:
                yield session, actor
            logger.debug("api_call_completed", extra={"operation": operation})

    # -----------------------------------------------------------------
    # Assignments
    # -----------------------------------------------------------------

    def create_assignment(
        self,
        client_id: UUID | str,
        kit_id: UUID | str,
        quantity: int,
        delivery_type: DeliveryType | str,
        delivery_date: date | str,
        notes: str | None = None,
    ) -> UUID:
        """
        Commit kit stock to a client and return the new assignment id.

        Raises:
            UnauthenticatedError, InvalidArgumentError, ClientNotFoundError,
            ItemNotFoundError, InsufficientStockError.
        """
        with LogContext.bind(client_id=client_id, kit_id=kit_id):
            with self._unit_of_work("create_assignment") as (session, actor):
                assignment = AssignmentLifecycle(session).create(
                    client_id=client_id,
                    kit_id=kit_id,
                    quantity=quantity,
                    delivery_type=delivery_type,
                    delivery_date=delivery_date,
                    actor=actor,
                    notes=notes,
                )
        return assignment.id

    def update_assignment_status(
        self,
        assignment_id: UUID | str,
        status: AssignmentStatus | str,
    ) -> AssignmentInfo:
        """
        Deliver or cancel a pending assignment.

        Raises:
            UnauthenticatedError, InvalidArgumentError,
            AssignmentNotFoundError, InvalidTransitionError.
        """
        with LogContext.bind(assignment_id=assignment_id):
            with self._unit_of_work("update_assignment_status") as (session, actor):
                return AssignmentLifecycle(session).transition(assignment_id, status, actor)

    def get_assignments_by_client(self, client_id: UUID | str) -> list[AssignmentView]:
        with self._unit_of_work("get_assignments_by_client", mutating=False) as (session, _):
            return AssignmentSelector(session, self._identity).views_by_client(client_id)

    def get_assignments_by_date_range(
        self,
        start: date | str,
        end: date | str,
    ) -> list[AssignmentView]:
        with self._unit_of_work("get_assignments_by_date_range", mutating=False) as (
            session,
            _,
        ):
            return AssignmentSelector(session, self._identity).views_by_date_range(start, end)

    # -----------------------------------------------------------------
    # Kit composition and stock
    # -----------------------------------------------------------------

    def add_kit_material_line(
        self,
        kit_id: UUID | str,
        material_type: MaterialType | str,
        material_id: UUID | str,
        quantity: int,
        packet_number: int | None = None,
        packet_name: str | None = None,
    ) -> UUID:
        with LogContext.bind(kit_id=kit_id):
            with self._unit_of_work("add_kit_material_line") as (session, actor):
                return KitComposition(session).add_line(
                    kit_id=kit_id,
                    material_type=material_type,
                    material_id=material_id,
                    quantity=quantity,
                    actor_id=actor.id,
                    packet_number=packet_number,
                    packet_name=packet_name,
                )

    def adjust_material_stock(
        self,
        kind: ItemKind | str,
        item_id: UUID | str,
        delta: int | None = None,
        absolute: int | None = None,
    ) -> int:
        """
        Apply a relative ``delta`` or set an ``absolute`` level.

        Exactly one of the two must be given.  Returns the new level.

        Raises:
            UnauthenticatedError, InvalidArgumentError, ItemNotFoundError,
            InsufficientStockError.
        """
        if (delta is None) == (absolute is None):
            raise InvalidArgumentError("delta", "exactly one of delta or absolute is required")

        with self._unit_of_work("adjust_material_stock") as (session, _):
            ledger = StockLedger(session)
            if delta is not None:
                return ledger.adjust_stock(kind, item_id, delta)
            return ledger.set_stock(kind, item_id, absolute)
