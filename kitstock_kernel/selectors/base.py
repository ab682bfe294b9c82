"""
Module: kitstock_kernel.selectors.base
Responsibility: Abstract base class for read-only query selectors.  Selectors
    are the display side of the kernel: joined views of assignments, kits
    and materials for listing screens.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain/.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only: selectors never add, delete, flush or commit.
    - DTO return convention: frozen dataclasses, never ORM instances.
    - The caller owns the session and its transaction.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from kitstock_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """Stores the caller's session for subclass queries."""

    def __init__(self, session: Session):
        self.session = session
