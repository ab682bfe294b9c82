"""Boundary validation helpers."""

from datetime import date, datetime
from uuid import uuid4

import pytest

from kitstock_kernel.domain.validation import (
    MAX_COUNT,
    normalize_category,
    parse_calendar_date,
    parse_enum,
    parse_uuid,
    require_int,
    require_non_negative_int,
    require_positive_int,
    require_text,
)
from kitstock_kernel.domain.values import DeliveryType
from kitstock_kernel.exceptions import InvalidArgumentError


class TestParseEnum:
    def test_member_passes_through(self):
        assert parse_enum(DeliveryType, DeliveryType.RECURRING, "t") is DeliveryType.RECURRING

    def test_string_coerced(self):
        assert parse_enum(DeliveryType, "single", "t") is DeliveryType.SINGLE

    def test_unknown_lists_allowed_values(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_enum(DeliveryType, "weekly", "delivery_type")
        assert exc_info.value.argument == "delivery_type"
        assert "single" in exc_info.value.reason
        assert "recurring" in exc_info.value.reason


class TestIntegers:
    @pytest.mark.parametrize("value", [1, 7, 10**6])
    def test_positive_ok(self, value):
        assert require_positive_int(value, "quantity") == value

    @pytest.mark.parametrize("value", [0, -1, 1.0, "1", True, None])
    def test_positive_rejects(self, value):
        with pytest.raises(InvalidArgumentError):
            require_positive_int(value, "quantity")

    def test_non_negative_allows_zero(self):
        assert require_non_negative_int(0, "stock_level") == 0

    def test_non_negative_rejects_negative(self):
        with pytest.raises(InvalidArgumentError, match="must not be negative"):
            require_non_negative_int(-3, "stock_level")

    def test_column_range_is_the_bound(self):
        assert require_int(MAX_COUNT, "delta") == MAX_COUNT
        assert require_int(-MAX_COUNT, "delta") == -MAX_COUNT

    @pytest.mark.parametrize("value", [MAX_COUNT + 1, -(MAX_COUNT + 1), 2**100])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            require_int(value, "delta")
        assert exc_info.value.argument == "delta"


class TestDates:
    def test_date_passes_through(self):
        assert parse_calendar_date(date(2026, 11, 2)) == date(2026, 11, 2)

    def test_iso_string(self):
        assert parse_calendar_date(" 2026-02-28 ") == date(2026, 2, 28)

    def test_datetime_reduced_to_its_day(self):
        parsed = parse_calendar_date(datetime(2026, 1, 1, 12, 30), "start")
        assert parsed == date(2026, 1, 1)
        assert type(parsed) is date

    @pytest.mark.parametrize("value", ["2026-02-30", "02/11/2026", "", None, 20261102])
    def test_rejects(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_calendar_date(value, "delivery_date")
        assert exc_info.value.argument == "delivery_date"


class TestText:
    def test_strips(self):
        assert require_text("  ROB-001 ", "serial_number") == "ROB-001"

    @pytest.mark.parametrize("value", ["", "   ", None, 12])
    def test_rejects(self, value):
        with pytest.raises(InvalidArgumentError):
            require_text(value, "name")

    @pytest.mark.parametrize(
        "raw, tag",
        [("Foam", "foam"), ("  Laser  Cut ", "laser_cut"), ("3D Printed", "3d_printed")],
    )
    def test_normalize_category(self, raw, tag):
        assert normalize_category(raw) == tag


class TestUuid:
    def test_string_and_uuid(self):
        uid = uuid4()
        assert parse_uuid(uid, "id") is uid
        assert parse_uuid(str(uid), "id") == uid

    def test_malformed(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_uuid("ROB-001", "kit_id")
        assert exc_info.value.argument == "kit_id"
