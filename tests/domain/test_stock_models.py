"""Tests for stock domain models, DTO coercion and the clock helpers."""

from dataclasses import FrozenInstanceError
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from stock_kernel.domain.clock import DeterministicClock, local_midnight
from stock_kernel.domain.dtos import ItemCandidate, clean_text, coerce_int
from stock_kernel.domain.models import (
    Item,
    MovementKind,
    OpnameStatus,
    StockOpname,
    Transaction,
)
from stock_kernel.exceptions import (
    DifferenceMismatchError,
    InvalidMovementKindError,
    InvalidQuantityError,
    StockKernelError,
    ValidationFailedError,
)

NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def _txn(**overrides) -> Transaction:
    fields = dict(
        id="t1",
        item_id="1",
        item_name="Laptop",
        kind=MovementKind.IN,
        quantity=5,
        date=NOW,
    )
    fields.update(overrides)
    return Transaction(**fields)


class TestMovementKind:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (MovementKind.IN, MovementKind.IN),
            ("MASUK", MovementKind.IN),
            ("KELUAR", MovementKind.OUT),
            ("IN", MovementKind.IN),
            ("out", MovementKind.OUT),
            (" in ", MovementKind.IN),
        ],
    )
    def test_parse_accepts_values_and_names(self, raw, expected):
        assert MovementKind.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["", "TRANSFER", "masuk-keluar", 1, None])
    def test_parse_rejects_unknown(self, raw):
        with pytest.raises(InvalidMovementKindError) as exc_info:
            MovementKind.parse(raw)
        assert exc_info.value.code == "INVALID_MOVEMENT_KIND"

    def test_sign(self):
        assert MovementKind.IN.sign == 1
        assert MovementKind.OUT.sign == -1


class TestTransaction:
    def test_signed_quantity(self):
        assert _txn(kind=MovementKind.IN, quantity=7).signed_quantity == 7
        assert _txn(kind=MovementKind.OUT, quantity=7).signed_quantity == -7

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True, "3"])
    def test_rejects_non_positive_or_non_int_quantity(self, quantity):
        with pytest.raises(InvalidQuantityError):
            _txn(quantity=quantity)

    def test_is_frozen(self):
        txn = _txn()
        with pytest.raises(FrozenInstanceError):
            txn.quantity = 10


class TestStockOpname:
    def test_create_derives_difference(self):
        opname = StockOpname.create(
            id="o1",
            item_id="1",
            item_name="Laptop",
            system_stock=35,
            actual_stock=30,
            date=NOW,
        )
        assert opname.difference == -5
        assert opname.status is OpnameStatus.RESOLVED

    def test_zero_difference_allowed(self):
        opname = StockOpname.create(
            id="o1", item_id="1", item_name="Laptop", system_stock=8, actual_stock=8, date=NOW
        )
        assert opname.difference == 0

    def test_mismatched_difference_rejected(self):
        with pytest.raises(DifferenceMismatchError) as exc_info:
            StockOpname(
                id="o1",
                item_id="1",
                item_name="Laptop",
                system_stock=10,
                actual_stock=12,
                difference=3,
                date=NOW,
            )
        assert exc_info.value.difference == 3
        assert isinstance(exc_info.value, ValidationFailedError)


class TestItem:
    @pytest.mark.parametrize("stock, low", [(4, True), (5, True), (6, False), (-2, True)])
    def test_low_stock_threshold_is_inclusive(self, stock, low):
        item = Item(
            id="1", sku="A", name="A", category="Umum", stock=stock,
            unit="Pcs", min_stock=5, last_updated=NOW,
        )
        assert item.is_low_stock is low


class TestCoercion:
    @pytest.mark.parametrize(
        "raw, expected",
        [(12, 12), (12.0, 12), ("12", 12), (" 12 ", 12), ("12.0", 12), ("-3", -3)],
    )
    def test_coerce_int_accepts(self, raw, expected):
        assert coerce_int(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "  ", "abc", 1.5, "2.5", True, [1]])
    def test_coerce_int_rejects(self, raw):
        assert coerce_int(raw) is None

    def test_clean_text(self):
        assert clean_text("  Pcs ") == "Pcs"
        assert clean_text("   ") is None
        assert clean_text(None) is None
        assert clean_text(1001.0) == "1001"

    def test_candidate_from_row_accepts_both_min_stock_spellings(self):
        assert ItemCandidate.from_row({"minStock": "7"}).min_stock == 7
        assert ItemCandidate.from_row({"min_stock": 9}).min_stock == 9

    def test_candidate_supplied_fields_skip_missing(self):
        candidate = ItemCandidate.from_row({"sku": "A-1", "stock": "n/a", "unit": ""})
        assert candidate.supplied_fields() == {"sku": "A-1"}


class TestClock:
    def test_deterministic_clock_advance(self):
        clock = DeterministicClock(NOW)
        assert clock.now() == NOW
        clock.advance(90)
        assert clock.now() == NOW + timedelta(seconds=90)

    def test_local_midnight_with_zone(self):
        jakarta = ZoneInfo("Asia/Jakarta")
        midnight = local_midnight(date(2024, 2, 10), jakarta)
        assert midnight == datetime(2024, 2, 10, tzinfo=jakarta)
        assert midnight.astimezone(timezone.utc) == datetime(2024, 2, 9, 17, 0, tzinfo=timezone.utc)

    def test_local_midnight_host_zone_is_aware(self):
        midnight = local_midnight(date(2024, 2, 10))
        assert midnight.tzinfo is not None
        assert (midnight.hour, midnight.minute) == (0, 0)


def test_every_kernel_error_has_a_code():
    import stock_kernel.exceptions as exc_module

    for name in dir(exc_module):
        obj = getattr(exc_module, name)
        if isinstance(obj, type) and issubclass(obj, StockKernelError):
            assert obj.code and obj.code.isupper()
