"""JSON log output and LogContext propagation."""

import json
import logging
import threading
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from kitstock_kernel.domain.values import AssignmentStatus
from kitstock_kernel.exceptions import InsufficientStockError, InvalidTransitionError
from kitstock_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


@pytest.fixture
def log_stream():
    """Configure kitstock logging at DEBUG into an in-memory stream."""
    stream = StringIO()
    configure_logging(stream=stream, level=logging.DEBUG)
    return stream


def records(stream: StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


log = get_logger("tests.logging")


class TestRecordShape:
    def test_core_keys(self, log_stream):
        log.info("kit_created")

        (rec,) = records(log_stream)
        assert rec["message"] == "kit_created"
        assert rec["level"] == "INFO"
        assert rec["logger"] == "kitstock_kernel.tests.logging"
        assert rec["ts"].endswith("+00:00")

    def test_extra_becomes_top_level(self, log_stream):
        log.info("stock_adjusted", extra={"item_kind": "kit", "delta": -3, "stock_level": 2})

        (rec,) = records(log_stream)
        assert (rec["item_kind"], rec["delta"], rec["stock_level"]) == ("kit", -3, 2)

    def test_values_rendered_as_strings(self, log_stream):
        kit_id = uuid4()
        log.info(
            "assignment_created",
            extra={
                "kit_ref": kit_id,
                "delivery_date": date(2026, 11, 2),
                "unit_price": Decimal("80.00"),
                "status": AssignmentStatus.DELIVERED,
            },
        )

        (rec,) = records(log_stream)
        assert rec["kit_ref"] == str(kit_id)
        assert rec["delivery_date"] == "2026-11-02"
        assert rec["unit_price"] == "80.00"
        assert rec["status"] == "delivered"

    def test_one_json_object_per_line(self, log_stream):
        log.debug("a")
        log.info("b", extra={"k": 1})
        log.warning("c")

        assert [r["message"] for r in records(log_stream)] == ["a", "b", "c"]

    def test_formatter_usable_on_plain_handler(self):
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter())
        configure_logging(handler=handler)

        log.info("client_registered")

        assert records(stream)[0]["message"] == "client_registered"

    def test_below_configured_level_dropped(self):
        stream = StringIO()
        configure_logging(stream=stream, level="WARNING")

        log.info("quiet")
        log.warning("loud")

        assert [r["message"] for r in records(stream)] == ["loud"]


class TestExceptionFields:
    def test_plain_exception(self, log_stream):
        try:
            raise ValueError("boom")
        except ValueError:
            log.error("unexpected", exc_info=True)

        (rec,) = records(log_stream)
        assert rec["exc_type"] == "ValueError"
        assert rec["exc_message"] == "boom"
        assert "exc_code" not in rec
        assert "Traceback" in rec["traceback"]

    def test_insufficient_stock_context(self, log_stream):
        try:
            raise InsufficientStockError("Robotics Starter Kit (ROB-001)", 3, 5)
        except InsufficientStockError:
            log.warning("create_rejected", exc_info=True)

        (rec,) = records(log_stream)
        assert rec["exc_code"] == "INSUFFICIENT_STOCK"
        assert rec["exc_item_label"] == "Robotics Starter Kit (ROB-001)"
        assert rec["exc_available"] == 3
        assert rec["exc_requested"] == 5

    def test_invalid_transition_context(self, log_stream):
        try:
            raise InvalidTransitionError("a-1", "delivered", "pending")
        except InvalidTransitionError:
            log.warning("transition_rejected", exc_info=True)

        (rec,) = records(log_stream)
        assert rec["exc_code"] == "INVALID_TRANSITION"
        assert (rec["exc_from_status"], rec["exc_to_status"]) == ("delivered", "pending")


class TestLogContext:
    def test_fields_stamped_on_records(self, log_stream):
        LogContext.set(correlation_id="req-9", kit_id="kit-1")
        log.info("line_added")

        (rec,) = records(log_stream)
        assert rec["correlation_id"] == "req-9"
        assert rec["kit_id"] == "kit-1"
        assert "actor_id" not in rec

    def test_extra_does_not_override_context(self, log_stream):
        LogContext.set(kit_id="from-context")
        log.info("x", extra={"kit_id": "from-extra"})

        assert records(log_stream)[0]["kit_id"] == "from-context"

    def test_set_skips_none(self):
        LogContext.set(correlation_id="c", client_id=None)
        assert LogContext.get_all() == {"correlation_id": "c"}

    def test_set_rejects_unknown_field(self):
        with pytest.raises(TypeError, match="warehouse_id"):
            LogContext.set(warehouse_id="w")

    def test_clear(self):
        LogContext.set(actor_id="u", assignment_id="a")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_nests_and_restores(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner", client_id="cl"):
            assert LogContext.get_all() == {"correlation_id": "inner", "client_id": "cl"}
        assert LogContext.get_all() == {"correlation_id": "outer"}

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(assignment_id=uuid4()):
                raise RuntimeError
        assert LogContext.get_all() == {}

    def test_bind_ignores_unknown_and_none(self):
        with LogContext.bind(correlation_id="c", not_a_field="x", actor_id=None):
            assert LogContext.get_all() == {"correlation_id": "c"}

    def test_context_is_per_thread(self):
        LogContext.set(correlation_id="main")

        def worker():
            LogContext.set(correlation_id="worker")

        t = threading.Thread(target=worker)
        t.start()
        t.join()

        assert LogContext.get_all() == {"correlation_id": "main"}


def json_handlers() -> list[logging.Handler]:
    return [
        h
        for h in logging.getLogger("kitstock_kernel").handlers
        if isinstance(h.formatter, StructuredFormatter)
    ]


class TestConfigure:
    def test_second_call_is_noop(self):
        first, second = StringIO(), StringIO()
        configure_logging(stream=first)
        configure_logging(stream=second)

        assert len(json_handlers()) == 1
        log.warning("once")
        assert records(first)[0]["message"] == "once"
        assert second.getvalue() == ""

    def test_reset_detaches_only_its_handler(self):
        other = logging.NullHandler()
        kitstock_root = logging.getLogger("kitstock_kernel")
        kitstock_root.addHandler(other)
        try:
            configure_logging(stream=StringIO())
            reset_logging()

            assert json_handlers() == []
            assert other in kitstock_root.handlers
        finally:
            kitstock_root.removeHandler(other)

    def test_get_logger_prefixes_name(self):
        assert get_logger("services.stock_ledger").name == "kitstock_kernel.services.stock_ledger"
