"""
Module: kitstock_kernel.db.base
Responsibility: Declarative base for every kitstock table: UUID keys, the
    column type map, and the creation/update bookkeeping columns.
Architecture position: Kernel > DB.  Imported by every model; imports
    nothing else from the kernel.

Invariants enforced:
    - Every row is keyed by a uuid4 assigned in Python before INSERT and
      never reassigned.
    - Counters are BigInteger and prices Numeric(12, 2); no float column
      exists anywhere in the schema.
    - Every TrackedBase row names the user that created it.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, Date, DateTime, Numeric, String, func
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    Python ``UUID`` column.

    Native ``uuid`` on PostgreSQL; a 36-character string on other
    backends (SQLite in development and tests).
    """

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, UUID):
            value = UUID(str(value))
        return value if dialect.name == "postgresql" else str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, UUID):
            return value
        return UUID(value)


class Base(DeclarativeBase):
    """Root of the kitstock metadata."""

    type_annotation_map: ClassVar[dict] = {
        UUID: UUIDString(),
        int: BigInteger,
        Decimal: Numeric(12, 2),
        date: Date,
        datetime: DateTime(timezone=True),
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Adds who/when columns.

    ``created_at`` and ``updated_at`` come from the database clock;
    ``updated_at`` is refreshed on every UPDATE issued through the ORM.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    created_by_id: Mapped[UUID] = mapped_column(nullable=False)

    updated_by_id: Mapped[UUID | None] = mapped_column(nullable=True)
