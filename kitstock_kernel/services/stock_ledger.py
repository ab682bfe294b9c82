"""
StockLedger -- the authoritative stock counters.

Responsibility:
    Reads and mutates ``stock_level`` for the three stock-bearing item
    classes: raw materials, pre-processed goods and kits.  This is the
    only write path for any stock counter.

Architecture position:
    Kernel > Services.  Called by AssignmentLifecycle (kit commit and
    release) and by the InventoryAPI facade (operator adjustments).

Invariants enforced:
    - stock_level >= 0 at all observable times.  A decrement is one
      conditional statement:

          UPDATE <table>
             SET stock_level = stock_level + :delta
           WHERE id = :id AND stock_level + :delta >= 0
          RETURNING stock_level

      There is no read-check-write in Python.  On PostgreSQL
      (READ COMMITTED) a concurrent writer waits on the row lock and
      re-evaluates the predicate against the committed value; on SQLite
      writers are serialized by BEGIN IMMEDIATE.  Two decrements that
      together overdraw therefore yield exactly one success.  The
      CHECK constraints on every stock table back this up.

Failure modes:
    - ItemNotFoundError: id does not resolve for the given kind.
    - InsufficientStockError: delta would drive the counter negative.
      Carries the item label, the available quantity and the amount
      requested.
    - InvalidArgumentError: delta/value not an integer, value < 0, unknown
      kind.

Audit relevance:
    Every successful mutation logs ``stock_adjusted`` / ``stock_set``;
    every refused decrement logs ``stock_adjust_rejected``.
"""

from uuid import UUID

from sqlalchemy import select, update

from kitstock_kernel.db.base import TrackedBase
from kitstock_kernel.domain.validation import (
    MAX_COUNT,
    parse_enum,
    parse_uuid,
    require_int,
    require_non_negative_int,
)
from kitstock_kernel.domain.values import ItemKind
from kitstock_kernel.exceptions import (
    InsufficientStockError,
    InvalidArgumentError,
    ItemNotFoundError,
)
from kitstock_kernel.logging_config import get_logger
from kitstock_kernel.models.inventory import PreprocessedGood, RawMaterial
from kitstock_kernel.models.kit import Kit
from kitstock_kernel.services.base import BaseService

logger = get_logger("services.stock_ledger")

STOCK_MODELS: dict[ItemKind, type[TrackedBase]] = {
    ItemKind.RAW_MATERIAL: RawMaterial,
    ItemKind.PREPROCESSED_GOOD: PreprocessedGood,
    ItemKind.KIT: Kit,
}


def stock_model(kind: ItemKind | str) -> type[TrackedBase]:
    """Map an item kind to the ORM class holding its counter."""
    return STOCK_MODELS[parse_enum(ItemKind, kind, "kind")]


class StockLedger(BaseService[TrackedBase]):
    """
    Atomic check-and-adjust over stock counters.

    Contract:
        Every method takes an item kind (``ItemKind`` or its string value)
        and an item id, and works within the caller's transaction.

    Non-goals:
        - Does NOT emit domain events.
        - Does NOT retry on conflict; failures surface to the caller.
    """

    def _expire_cached(self, model: type[TrackedBase], item_id: UUID) -> None:
        # The UPDATE bypasses the identity map; drop any stale counter.
        key = self.session.identity_key(model, item_id)
        cached = self.session.identity_map.get(key)
        if cached is not None:
            self.session.expire(cached, ["stock_level"])

    def get_stock(self, kind: ItemKind | str, item_id: UUID | str) -> int:
        """Current stock level, read from the database."""
        kind = parse_enum(ItemKind, kind, "kind")
        item_id = parse_uuid(item_id, "item_id")
        model = STOCK_MODELS[kind]

        level = self.session.execute(
            select(model.stock_level).where(model.id == item_id)
        ).scalar_one_or_none()
        if level is None:
            raise ItemNotFoundError(kind.value, str(item_id))
        return level

    def adjust_stock(
        self,
        kind: ItemKind | str,
        item_id: UUID | str,
        delta: int,
    ) -> int:
        """
        Add ``delta`` (negative to decrement) and return the new level.

        Raises:
            InvalidArgumentError: delta is not an integer, or the result
                would not fit the counter column.
            ItemNotFoundError: id does not resolve.
            InsufficientStockError: the result would be negative.
        """
        kind = parse_enum(ItemKind, kind, "kind")
        item_id = parse_uuid(item_id, "item_id")
        delta = require_int(delta, "delta")
        model = STOCK_MODELS[kind]

        # INVARIANT: single conditional UPDATE, predicate checked by
        # the database under the row lock.  Neither bound adds to the
        # counter, so the predicate itself cannot overflow BIGINT.
        if delta < 0:
            within_bounds = model.stock_level >= -delta
        else:
            within_bounds = model.stock_level <= MAX_COUNT - delta
        new_level = self.session.execute(
            update(model)
            .where(model.id == item_id, within_bounds)
            .values(stock_level=model.stock_level + delta)
            .returning(model.stock_level)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()

        if new_level is None:
            item = self.session.get(model, item_id, populate_existing=True)
            if item is None:
                raise ItemNotFoundError(kind.value, str(item_id))
            if delta > 0:
                raise InvalidArgumentError(
                    "delta", f"would raise stock above {MAX_COUNT} (currently {item.stock_level})"
                )
            logger.warning(
                "stock_adjust_rejected",
                extra={
                    "item_kind": kind.value,
                    "item_id": str(item_id),
                    "delta": delta,
                    "available": item.stock_level,
                },
            )
            raise InsufficientStockError(item.label, item.stock_level, -delta)

        self._expire_cached(model, item_id)
        logger.info(
            "stock_adjusted",
            extra={
                "item_kind": kind.value,
                "item_id": str(item_id),
                "delta": delta,
                "stock_level": new_level,
            },
        )
        return new_level

    def set_stock(self, kind: ItemKind | str, item_id: UUID | str, value: int) -> int:
        """
        Overwrite the counter with an absolute ``value`` (>= 0).

        Used for physical stock-takes and for recording assembled kits.
        """
        kind = parse_enum(ItemKind, kind, "kind")
        item_id = parse_uuid(item_id, "item_id")
        value = require_non_negative_int(value, "value")
        model = STOCK_MODELS[kind]

        new_level = self.session.execute(
            update(model)
            .where(model.id == item_id)
            .values(stock_level=value)
            .returning(model.stock_level)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()
        if new_level is None:
            raise ItemNotFoundError(kind.value, str(item_id))

        self._expire_cached(model, item_id)
        logger.info(
            "stock_set",
            extra={
                "item_kind": kind.value,
                "item_id": str(item_id),
                "stock_level": new_level,
            },
        )
        return new_level
