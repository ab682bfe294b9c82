"""
Boundary validation helpers.

Pure functions, zero I/O.  Each one either returns the normalised value or
raises InvalidArgumentError naming the offending argument.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import TypeVar
from uuid import UUID

from kitstock_kernel.exceptions import InvalidArgumentError

E = TypeVar("E", bound=Enum)

# Largest value a stock or quantity column (BIGINT) can hold.
MAX_COUNT = 2**63 - 1


def parse_enum(enum_cls: type[E], value: E | str, argument: str) -> E:
    """Coerce a string (or enum member) into ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(m.value) for m in enum_cls)
        raise InvalidArgumentError(
            argument, f"'{value}' is not one of: {allowed}"
        ) from None


def require_int(value: object, argument: str) -> int:
    """An integer whose magnitude fits the BIGINT counter columns."""
    # bool is an int subclass; True is not a quantity.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(argument, f"expected an integer, got {value!r}")
    if abs(value) > MAX_COUNT:
        raise InvalidArgumentError(argument, f"must be within +/-{MAX_COUNT}, got {value}")
    return value


def require_positive_int(value: object, argument: str) -> int:
    value = require_int(value, argument)
    if value <= 0:
        raise InvalidArgumentError(argument, f"must be greater than 0, got {value}")
    return value


def require_non_negative_int(value: object, argument: str) -> int:
    value = require_int(value, argument)
    if value < 0:
        raise InvalidArgumentError(argument, f"must not be negative, got {value}")
    return value


def require_text(value: object, argument: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(argument, "must be a non-empty string")
    return value.strip()


def parse_calendar_date(value: date | str, argument: str = "delivery_date") -> date:
    """Accept a ``date``, a ``datetime`` (its calendar day) or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise InvalidArgumentError(argument, f"'{value}' is not a calendar date (YYYY-MM-DD)")


def parse_uuid(value: UUID | str, argument: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidArgumentError(argument, f"'{value}' is not a valid id") from None


def normalize_category(value: object) -> str:
    """Trim, lower-case and join words with underscores."""
    text = require_text(value, "category")
    return "_".join(text.lower().split())
