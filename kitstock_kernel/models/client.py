"""
Module: kitstock_kernel.models.client
Responsibility: Plain contact record for a client (school, academy).
    No stock-bearing fields; referenced by kit assignments as a foreign key
    target only.
"""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kitstock_kernel.db.base import TrackedBase
from kitstock_kernel.domain.dtos import ClientInfo


class Client(TrackedBase):
    __tablename__ = "clients"

    __table_args__ = (Index("idx_client_name", "name"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    contact_person: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pincode: Mapped[str | None] = mapped_column(String(20), nullable=True)

    def to_dto(self) -> ClientInfo:
        return ClientInfo(
            id=self.id,
            name=self.name,
            contact_person=self.contact_person,
            email=self.email,
            phone=self.phone,
            address=self.address,
            city=self.city,
            state=self.state,
            pincode=self.pincode,
        )

    def __repr__(self) -> str:
        return f"<Client {self.name} ({self.contact_person})>"
