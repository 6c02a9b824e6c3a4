"""Unit tests for order currency arithmetic."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.pricing import line_total, order_total, round_currency

pytestmark = pytest.mark.unit


class TestRoundCurrency:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("9.990", "9.99"),
            ("0.005", "0.01"),
            ("0.004", "0.00"),
            ("2.675", "2.68"),
            ("10", "10.00"),
        ],
    )
    def test_rounds_half_up_to_cents(self, value, expected):
        assert round_currency(Decimal(value)) == Decimal(expected)


class TestLineTotal:
    def test_multiplies_and_rounds_once(self):
        assert line_total(Decimal("4.995"), 2) == Decimal("9.99")

    def test_sub_cent_price_rounds_up_per_line(self):
        # 1.005 * 1 rounds to 1.01, not 1.00
        assert line_total(Decimal("1.005"), 1) == Decimal("1.01")

    def test_whole_price(self):
        assert line_total(Decimal("10.00"), 3) == Decimal("30.00")


class TestOrderTotal:
    def test_sums_rounded_lines(self):
        lines = [line_total(Decimal("10.00"), 3), line_total(Decimal("4.995"), 2)]
        assert order_total(lines) == Decimal("39.99")

    def test_empty_is_zero(self):
        assert order_total([]) == Decimal("0.00")

    def test_total_differs_from_rounding_the_raw_sum(self):
        # Three lines of 0.005 each: per-line rounding gives 0.03,
        # rounding the raw sum (0.015) would give 0.02.
        lines = [line_total(Decimal("0.005"), 1) for _ in range(3)]
        assert order_total(lines) == Decimal("0.03")
