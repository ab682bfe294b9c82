"""
Service layer for client records.

A plain contact store: clients are referenced by kit assignments and hold
no stock.  Returns ClientInfo DTOs instead of ORM entities.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from kitstock_kernel.domain.dtos import ClientInfo
from kitstock_kernel.domain.validation import parse_uuid, require_text
from kitstock_kernel.exceptions import ClientNotFoundError, InvalidArgumentError
from kitstock_kernel.logging_config import get_logger
from kitstock_kernel.models.client import Client
from kitstock_kernel.services.base import BaseService

logger = get_logger("services.client_directory")

_OPTIONAL_FIELDS = ("email", "phone", "address", "city", "state", "pincode")
_REQUIRED_FIELDS = ("name", "contact_person")


class ClientDirectory(BaseService[Client]):
    """CRUD for clients, minus deletion and search."""

    def _get_by_id(self, client_id: UUID | str) -> Client:
        client_id = parse_uuid(client_id, "client_id")
        client = self.session.get(Client, client_id)
        if client is None:
            raise ClientNotFoundError(str(client_id))
        return client

    def get(self, client_id: UUID | str) -> ClientInfo:
        """
        Get a client by id.

        Raises:
            ClientNotFoundError: If the client doesn't exist.
        """
        return self._get_by_id(client_id).to_dto()

    def list_clients(self) -> list[ClientInfo]:
        """All clients ordered by name."""
        rows = self.session.execute(
            select(Client).order_by(Client.name, Client.id)
        ).scalars()
        return [row.to_dto() for row in rows]

    def create_client(
        self,
        name: str,
        contact_person: str,
        actor_id: UUID,
        email: str | None = None,
        phone: str | None = None,
        address: str | None = None,
        city: str | None = None,
        state: str | None = None,
        pincode: str | None = None,
    ) -> ClientInfo:
        """
        Create a client.

        Raises:
            InvalidArgumentError: empty name or contact person.
        """
        client = Client(
            name=require_text(name, "name"),
            contact_person=require_text(contact_person, "contact_person"),
            email=email,
            phone=phone,
            address=address,
            city=city,
            state=state,
            pincode=pincode,
            created_by_id=actor_id,
        )
        self.session.add(client)
        self.session.flush()

        logger.info("client_created", extra={"client_id": str(client.id)})
        return client.to_dto()

    def update_client(self, client_id: UUID | str, actor_id: UUID, **fields) -> ClientInfo:
        """
        Update contact fields.  Only the keyword arguments given are changed.

        Raises:
            ClientNotFoundError: If the client doesn't exist.
            InvalidArgumentError: unknown field, or blanking a required one.
        """
        client = self._get_by_id(client_id)

        for field, value in fields.items():
            if field in _REQUIRED_FIELDS:
                value = require_text(value, field)
            elif field not in _OPTIONAL_FIELDS:
                raise InvalidArgumentError(field, "not an editable client field")
            setattr(client, field, value)

        client.updated_by_id = actor_id
        self.session.flush()

        logger.info(
            "client_updated",
            extra={"client_id": str(client.id), "fields": sorted(fields)},
        )
        return client.to_dto()
