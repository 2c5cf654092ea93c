"""Tests for forward/reverse VAT calculations and invoice totals."""

from decimal import Decimal

import pytest

from vatbe.calculator import (
    calculate_invoice,
    from_excl_vat,
    from_excl_vat_with_rate,
    from_incl_vat,
    round_belgian,
)
from vatbe.errors import InvalidArgumentError
from vatbe.models import InvoiceLine
from vatbe.rates import RateTable, VatRate, VatRateCategory


# ---------------------------------------------------------------------------
# round_belgian
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "value, expected",
    [
        ("6.9993", "7.00"),
        ("0.005", "0.01"),
        ("0.015", "0.02"),
        ("2.675", "2.68"),
        ("0.0049", "0.00"),
        ("-0.005", "-0.01"),
    ],
)
def test_round_belgian_half_away_from_zero(value, expected):
    assert round_belgian(Decimal(value)) == Decimal(expected)


# ---------------------------------------------------------------------------
# from_excl_vat
# ---------------------------------------------------------------------------

def test_from_excl_vat_standard_rate():
    result = from_excl_vat(Decimal("100.00"), VatRateCategory.ELECTRONICS)

    assert result.rate == VatRate.STANDARD
    assert result.category == VatRateCategory.ELECTRONICS
    assert result.amount_excl_vat == Decimal("100.00")
    assert result.vat_amount == Decimal("21.00")
    assert result.amount_incl_vat == Decimal("121.00")
    assert result.rate_percentage == Decimal("21")


def test_from_excl_vat_reduced_rate():
    result = from_excl_vat(Decimal("100.00"), VatRateCategory.BASIC_FOOD)

    assert result.rate == VatRate.REDUCED
    assert result.vat_amount == Decimal("6.00")
    assert result.amount_incl_vat == Decimal("106.00")


def test_from_excl_vat_intermediate_rate():
    result = from_excl_vat(Decimal("100.00"), VatRateCategory.RESTAURANT_FOOD)

    assert result.rate == VatRate.INTERMEDIATE
    assert result.vat_amount == Decimal("12.00")
    assert result.amount_incl_vat == Decimal("112.00")


def test_from_excl_vat_zero_rate():
    result = from_excl_vat(Decimal("100.00"), VatRateCategory.EXPORT_OUTSIDE_EU)

    assert result.rate == VatRate.ZERO
    assert result.vat_amount == Decimal("0.00")
    assert result.amount_incl_vat == Decimal("100.00")


def test_from_excl_vat_rounds_up():
    # 33.33 * 21% = 6.9993
    result = from_excl_vat(Decimal("33.33"), VatRateCategory.STANDARD)

    assert result.vat_amount == Decimal("7.00")
    assert result.amount_incl_vat == Decimal("40.33")


def test_from_excl_vat_zero_amount():
    result = from_excl_vat(Decimal("0"), VatRateCategory.STANDARD)

    assert result.amount_excl_vat == 0
    assert result.vat_amount == 0
    assert result.amount_incl_vat == 0


def test_from_excl_vat_accepts_int_str_and_float():
    assert from_excl_vat(100, VatRateCategory.STANDARD).vat_amount == Decimal("21.00")
    assert from_excl_vat("100.00", VatRateCategory.STANDARD).vat_amount == Decimal("21.00")
    # 0.1 + 0.2 would drift as a binary float
    result = from_excl_vat(0.3, VatRateCategory.STANDARD)
    assert result.amount_excl_vat == Decimal("0.3")
    assert result.vat_amount == Decimal("0.06")


def test_from_excl_vat_incl_is_exact_sum_for_every_category():
    amounts = ["0", "0.01", "0.05", "1.99", "33.33", "99.995", "1234.567", "1000000"]
    for category in VatRateCategory:
        for raw in amounts:
            result = from_excl_vat(Decimal(raw), category)
            assert result.amount_incl_vat == result.amount_excl_vat + result.vat_amount
            assert result.vat_amount == round_belgian(Decimal(raw) * Decimal(int(result.rate)) / 100)


@pytest.mark.parametrize("amount", [Decimal("-10"), Decimal("-0.01"), -1, "-5"])
def test_from_excl_vat_negative_amount_raises(amount):
    with pytest.raises(InvalidArgumentError):
        from_excl_vat(amount, VatRateCategory.STANDARD)


def test_from_excl_vat_non_numeric_raises():
    with pytest.raises(InvalidArgumentError):
        from_excl_vat("ten", VatRateCategory.STANDARD)


def test_from_excl_vat_uses_given_rate_table():
    table = RateTable({VatRateCategory.ELECTRONICS: VatRate.REDUCED})
    result = from_excl_vat(Decimal("100"), VatRateCategory.ELECTRONICS, rates=table)
    assert result.vat_amount == Decimal("6.00")

    fallback = from_excl_vat(Decimal("100"), VatRateCategory.BOOKS, rates=table)
    assert fallback.rate == VatRate.STANDARD


def test_calculation_str():
    result = from_excl_vat(Decimal("100"), VatRateCategory.ELECTRONICS)
    assert str(result) == "Excl: 100.00 EUR | VAT 21%: 21.00 EUR | Incl: 121.00 EUR"


# ---------------------------------------------------------------------------
# from_incl_vat
# ---------------------------------------------------------------------------

def test_from_incl_vat_standard_rate():
    result = from_incl_vat(Decimal("121.00"), VatRateCategory.ELECTRONICS)

    assert result.amount_incl_vat == Decimal("121.00")
    assert result.amount_excl_vat == Decimal("100.00")
    assert result.vat_amount == Decimal("21.00")


def test_from_incl_vat_reduced_rate():
    result = from_incl_vat(Decimal("106.00"), VatRateCategory.BASIC_FOOD)

    assert result.amount_excl_vat == Decimal("100.00")
    assert result.vat_amount == Decimal("6.00")


def test_from_incl_vat_zero_rate():
    result = from_incl_vat(Decimal("50.00"), VatRateCategory.USED_GOODS)

    assert result.amount_excl_vat == Decimal("50.00")
    assert result.vat_amount == Decimal("0.00")


def test_from_incl_vat_tax_is_rounded_residual():
    # 0.03 / 1.21 = 0.0248 -> 0.02; tax is what is left over
    result = from_incl_vat(Decimal("0.03"), VatRateCategory.STANDARD)

    assert result.amount_excl_vat == Decimal("0.02")
    assert result.vat_amount == Decimal("0.01")


def test_directions_are_not_exact_inverses():
    reverse = from_incl_vat(Decimal("0.03"), VatRateCategory.STANDARD)
    forward = from_excl_vat(reverse.amount_excl_vat, VatRateCategory.STANDARD)

    assert forward.vat_amount == Decimal("0.00")
    assert forward.amount_incl_vat != reverse.amount_incl_vat


def test_from_incl_vat_sub_cent_input():
    # 10.005 / 1.06 = 9.4387 -> 9.44; residual 0.565 -> 0.57
    result = from_incl_vat(Decimal("10.005"), VatRateCategory.BASIC_FOOD)

    assert result.amount_excl_vat == Decimal("9.44")
    assert result.vat_amount == Decimal("0.57")
    assert result.amount_incl_vat == Decimal("10.005")


@pytest.mark.parametrize(
    "amount, excl, vat",
    [
        (Decimal("0.015"), Decimal("0.02"), Decimal("-0.01")),
        (Decimal("0.005"), Decimal("0.01"), Decimal("-0.01")),
    ],
)
def test_from_incl_vat_zero_rate_half_cent(amount, excl, vat):
    # Both roundings go half away from zero, so the residual can dip below zero.
    result = from_incl_vat(amount, VatRateCategory.USED_GOODS)

    assert result.amount_excl_vat == excl
    assert result.vat_amount == vat
    assert result.amount_incl_vat == amount


@pytest.mark.parametrize("amount", [Decimal("-10"), Decimal("-0.01")])
def test_from_incl_vat_negative_amount_raises(amount):
    with pytest.raises(InvalidArgumentError):
        from_incl_vat(amount, VatRateCategory.STANDARD)


# ---------------------------------------------------------------------------
# from_excl_vat_with_rate
# ---------------------------------------------------------------------------

def test_from_excl_vat_with_rate():
    result = from_excl_vat_with_rate(Decimal("200"), VatRate.REDUCED)

    assert result.rate == VatRate.REDUCED
    assert result.vat_amount == Decimal("12.00")
    assert result.amount_incl_vat == Decimal("212.00")
    assert result.category == VatRateCategory.STANDARD


def test_from_excl_vat_with_rate_accepts_int_rate():
    result = from_excl_vat_with_rate(Decimal("50"), 12)  # type: ignore[arg-type]
    assert result.rate == VatRate.INTERMEDIATE
    assert result.vat_amount == Decimal("6.00")


def test_from_excl_vat_with_rate_negative_raises():
    with pytest.raises(InvalidArgumentError):
        from_excl_vat_with_rate(Decimal("-1"), VatRate.STANDARD)


# ---------------------------------------------------------------------------
# calculate_invoice
# ---------------------------------------------------------------------------

class TestMixedRateInvoice:
    @pytest.fixture(autouse=True)
    def calculate(self):
        self.lines = [
            InvoiceLine(description="Laptop", amount_excl_vat=Decimal("1000"), category=VatRateCategory.ELECTRONICS),
            InvoiceLine(description="Bread", amount_excl_vat=Decimal("5"), category=VatRateCategory.BASIC_FOOD),
            InvoiceLine(description="Meal", amount_excl_vat=Decimal("20"), category=VatRateCategory.RESTAURANT_FOOD),
        ]
        self.totals = calculate_invoice(self.lines)

    def test_total_excl(self):
        assert self.totals.total_excl_vat == Decimal("1025.00")

    def test_total_vat(self):
        expected = (
            Decimal("1000") * Decimal("0.21")
            + Decimal("5") * Decimal("0.06")
            + Decimal("20") * Decimal("0.12")
        )
        assert self.totals.total_vat == expected

    def test_total_incl(self):
        assert self.totals.total_incl_vat == Decimal("1237.70")

    def test_three_groups(self):
        assert len(self.totals.vat_by_rate) == 3

    def test_groups_ascending_by_rate(self):
        assert [g.rate for g in self.totals.vat_by_rate] == [
            VatRate.REDUCED,
            VatRate.INTERMEDIATE,
            VatRate.STANDARD,
        ]

    def test_group_sums_match_totals(self):
        assert sum(g.base_amount for g in self.totals.vat_by_rate) == self.totals.total_excl_vat
        assert sum(g.vat_amount for g in self.totals.vat_by_rate) == self.totals.total_vat


def test_calculate_invoice_groups_by_rate_not_category():
    lines = [
        InvoiceLine(description="Item A", amount_excl_vat=Decimal("100"), category=VatRateCategory.ELECTRONICS),
        InvoiceLine(description="Item B", amount_excl_vat=Decimal("200"), category=VatRateCategory.CLOTHING),
    ]

    totals = calculate_invoice(lines)

    assert len(totals.vat_by_rate) == 1
    group = totals.vat_by_rate[0]
    assert group.rate == VatRate.STANDARD
    assert group.base_amount == Decimal("300")
    assert group.vat_amount == Decimal("63.00")


def test_calculate_invoice_totals_are_sums_of_rounded_lines():
    # each line rounds 0.0063 -> 0.01; the unrounded sum would give 0.02
    lines = [
        InvoiceLine(description=f"Sticker {i}", amount_excl_vat=Decimal("0.03"), category=VatRateCategory.STANDARD)
        for i in range(3)
    ]

    totals = calculate_invoice(lines)

    assert totals.total_vat == Decimal("0.03")
    assert totals.total_incl_vat == Decimal("0.12")
    assert totals.vat_by_rate[0].vat_amount == Decimal("0.03")


def test_calculate_invoice_empty():
    totals = calculate_invoice([])

    assert totals.total_excl_vat == 0
    assert totals.total_vat == 0
    assert totals.total_incl_vat == 0
    assert totals.vat_by_rate == []


def test_calculate_invoice_negative_line_raises():
    lines = [
        InvoiceLine(description="Refund", amount_excl_vat=Decimal("-5"), category=VatRateCategory.STANDARD),
    ]
    with pytest.raises(InvalidArgumentError):
        calculate_invoice(lines)


def test_calculate_invoice_with_custom_table():
    table = RateTable({VatRateCategory.CLOTHING: VatRate.ZERO})
    lines = [
        InvoiceLine(description="Coat", amount_excl_vat=Decimal("80"), category=VatRateCategory.CLOTHING),
        InvoiceLine(description="Phone", amount_excl_vat=Decimal("100"), category=VatRateCategory.ELECTRONICS),
    ]

    totals = calculate_invoice(lines, rates=table)

    assert [g.rate for g in totals.vat_by_rate] == [VatRate.ZERO, VatRate.STANDARD]
    assert totals.total_vat == Decimal("21.00")
