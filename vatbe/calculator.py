"""Belgian VAT calculations.

Amounts are EUR and handled as :class:`~decimal.Decimal` throughout. Tax is
rounded to the cent, half away from zero.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from vatbe.errors import InvalidArgumentError
from vatbe.models import InvoiceLine, InvoiceTotals, VatCalculation, VatGroup
from vatbe.parse_utils import CENT, to_amount
from vatbe.rates import BELGIAN_VAT_RATES, RateTable, VatRate, VatRateCategory

_ZERO = Decimal("0")


def round_belgian(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _non_negative(value: Decimal | int | float | str, name: str) -> Decimal:
    amount = to_amount(value)
    if amount < 0:
        raise InvalidArgumentError(f"{name} must be non-negative, got {amount}")
    return amount


def from_excl_vat(
    amount_excl_vat: Decimal | int | float | str,
    category: VatRateCategory,
    *,
    rates: RateTable = BELGIAN_VAT_RATES,
) -> VatCalculation:
    amount = _non_negative(amount_excl_vat, "amount_excl_vat")
    rate = rates.get_rate(category)
    vat_amount = round_belgian(amount * rate.fraction)

    return VatCalculation(
        amount_excl_vat=amount,
        vat_amount=vat_amount,
        amount_incl_vat=amount + vat_amount,
        rate=rate,
        category=category,
    )


def from_incl_vat(
    amount_incl_vat: Decimal | int | float | str,
    category: VatRateCategory,
    *,
    rates: RateTable = BELGIAN_VAT_RATES,
) -> VatCalculation:
    """Split a VAT-inclusive amount into its base and tax.

    The tax is the rounded residual ``incl - excl``, not ``incl * r / (1 + r)``.
    The two can differ by a cent, so this is not an exact inverse of
    :func:`from_excl_vat`.
    """
    amount = _non_negative(amount_incl_vat, "amount_incl_vat")
    rate = rates.get_rate(category)
    amount_excl = round_belgian(amount / (1 + rate.fraction))
    vat_amount = round_belgian(amount - amount_excl)

    return VatCalculation(
        amount_excl_vat=amount_excl,
        vat_amount=vat_amount,
        amount_incl_vat=amount,
        rate=rate,
        category=category,
    )


def from_excl_vat_with_rate(
    amount_excl_vat: Decimal | int | float | str,
    rate: VatRate,
) -> VatCalculation:
    """Forward calculation with an explicit rate, reported under the standard category."""
    amount = _non_negative(amount_excl_vat, "amount_excl_vat")
    rate = VatRate(rate)
    vat_amount = round_belgian(amount * rate.fraction)

    return VatCalculation(
        amount_excl_vat=amount,
        vat_amount=vat_amount,
        amount_incl_vat=amount + vat_amount,
        rate=rate,
        category=VatRateCategory.STANDARD,
    )


def calculate_invoice(
    lines: Iterable[InvoiceLine],
    *,
    rates: RateTable = BELGIAN_VAT_RATES,
) -> InvoiceTotals:
    calculations = [
        from_excl_vat(line.amount_excl_vat, line.category, rates=rates) for line in lines
    ]

    groups: dict[VatRate, list[VatCalculation]] = {}
    for calc in calculations:
        groups.setdefault(calc.rate, []).append(calc)

    vat_by_rate = [
        VatGroup(
            rate=rate,
            base_amount=sum((c.amount_excl_vat for c in grouped), _ZERO),
            vat_amount=sum((c.vat_amount for c in grouped), _ZERO),
        )
        for rate, grouped in sorted(groups.items())
    ]

    return InvoiceTotals(
        total_excl_vat=sum((c.amount_excl_vat for c in calculations), _ZERO),
        total_vat=sum((c.vat_amount for c in calculations), _ZERO),
        total_incl_vat=sum((c.amount_incl_vat for c in calculations), _ZERO),
        vat_by_rate=vat_by_rate,
    )
