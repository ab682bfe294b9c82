"""
Module: kitstock_kernel.models.sequence
Responsibility: Named counter rows backing SequenceService.

Each row is a named sequence with its current value.  Values are handed
out by incrementing the locked row, never by aggregate max + 1.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from kitstock_kernel.db.base import Base


class SequenceCounter(Base):
    __tablename__ = "sequence_counters"

    # e.g. "kit_lines:<kit uuid>"
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    current_value: Mapped[int] = mapped_column(nullable=False, default=0)
