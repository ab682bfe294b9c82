"""
Module: kitstock_kernel.selectors.assignment_selector
Responsibility: Display reads for kit assignments.  Joins each assignment
    with its client and kit, and resolves the assigning user through an
    optional IdentityProvider.
Architecture position: Kernel > Selectors.  Read-only.

Ordering matches AssignmentLifecycle: delivery date ascending, then
creation time, then id.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select

from kitstock_kernel.domain.dtos import AssignmentView
from kitstock_kernel.domain.identity import IdentityProvider
from kitstock_kernel.domain.validation import parse_calendar_date, parse_uuid
from kitstock_kernel.exceptions import ClientNotFoundError, InvalidArgumentError
from kitstock_kernel.models.assignment import KitAssignment
from kitstock_kernel.models.client import Client
from kitstock_kernel.models.kit import Kit
from kitstock_kernel.selectors.base import BaseSelector


class AssignmentSelector(BaseSelector[KitAssignment]):
    """Assignment listings joined with client, kit and assigning user."""

    def __init__(self, session, identity_provider: IdentityProvider | None = None):
        super().__init__(session)
        self._identity = identity_provider

    def _views(self, *criteria) -> list[AssignmentView]:
        stmt = (
            select(KitAssignment, Client, Kit)
            .outerjoin(Client, Client.id == KitAssignment.client_id)
            .outerjoin(Kit, Kit.id == KitAssignment.kit_id)
            .where(*criteria)
            .order_by(
                KitAssignment.delivery_date,
                KitAssignment.created_at,
                KitAssignment.id,
            )
        )
        views = []
        for assignment, client, kit in self.session.execute(stmt):
            assigned_by = None
            if self._identity is not None:
                assigned_by = self._identity.get_user(assignment.assigned_by_id)
            views.append(
                AssignmentView(
                    assignment=assignment.to_dto(),
                    client=client.to_dto() if client is not None else None,
                    kit=kit.to_dto() if kit is not None else None,
                    assigned_by=assigned_by,
                )
            )
        return views

    def list_all(self) -> list[AssignmentView]:
        return self._views()

    def views_by_client(self, client_id: UUID | str) -> list[AssignmentView]:
        client_id = parse_uuid(client_id, "client_id")
        if self.session.get(Client, client_id) is None:
            raise ClientNotFoundError(str(client_id))
        return self._views(KitAssignment.client_id == client_id)

    def views_by_date_range(self, start: date | str, end: date | str) -> list[AssignmentView]:
        """Inclusive on both ends."""
        start = parse_calendar_date(start, "start")
        end = parse_calendar_date(end, "end")
        if start > end:
            raise InvalidArgumentError("start", f"{start} is after end {end}")
        return self._views(
            KitAssignment.delivery_date >= start,
            KitAssignment.delivery_date <= end,
        )
