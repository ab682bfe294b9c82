"""
Per-kit line numbering.

Material lines keep the order they were added in.  ``KitComposition``
asks this module for the next number of a kit's ``kit_lines:<kit id>``
counter and stores it on the new line.

The counter row is read with ``SELECT ... FOR UPDATE`` and bumped in the
caller's transaction, so two writers adding lines to the same kit are
serialized and a rollback gives the number back.  Numbers are never
derived from ``max(sequence) + 1`` over the lines table.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kitstock_kernel.logging_config import get_logger
from kitstock_kernel.models.sequence import SequenceCounter

logger = get_logger("services.sequence")


def kit_line_sequence_name(kit_id) -> str:
    return f"kit_lines:{kit_id}"


class SequenceService:
    def __init__(self, session: Session):
        self._session = session

    def _fetch(self, name: str, *, lock: bool) -> SequenceCounter | None:
        stmt = select(SequenceCounter).where(SequenceCounter.name == name)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self._session.execute(stmt).scalar_one_or_none()

    def _create(self, name: str) -> SequenceCounter:
        """Insert a fresh counter at 0, or lock the one a concurrent writer just inserted."""
        nested = self._session.begin_nested()
        counter = SequenceCounter(name=name, current_value=0)
        self._session.add(counter)
        try:
            self._session.flush()
        except IntegrityError:
            nested.rollback()
            logger.debug("sequence_counter_exists", extra={"sequence_name": name})
            existing = self._fetch(name, lock=True)
            if existing is None:
                raise
            return existing
        nested.commit()
        return counter

    def next_value(self, name: str) -> int:
        """Return the next number for ``name``, starting at 1."""
        counter = self._fetch(name, lock=True) or self._create(name)
        counter.current_value += 1
        self._session.flush()
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": name, "value": counter.current_value},
        )
        return counter.current_value

    def current_value(self, name: str) -> int | None:
        counter = self._fetch(name, lock=False)
        return None if counter is None else counter.current_value
