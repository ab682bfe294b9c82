"""
BaseService -- abstract base for all kitstock kernel services.

Responsibility:
    Common constructor and session contract for every write-side service.
    A service receives a SQLAlchemy ``Session`` from its caller and uses
    ``session.flush()`` to make changes visible inside the caller's
    transaction.

Architecture position:
    Kernel > Services.  Every class in ``kitstock_kernel/services/`` that
    mutates rows extends this class.

Invariants enforced:
    - Services flush, never commit or roll back.  The caller (the
      InventoryAPI unit of work, a script, or the test harness) owns the
      transaction, so a kit decrement and the assignment row it backs are
      committed together or not at all.

Failure modes:
    - A subclass that commits on its own breaks the all-or-nothing
      guarantee of AssignmentLifecycle.create().
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from kitstock_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Contract:
        Accepts an open ``Session`` and persists through ``flush()`` within
        the active transaction.

    Non-goals:
        - Does NOT manage the transaction lifecycle.
        - Does NOT provide display reads; those live in
          ``kitstock_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session
