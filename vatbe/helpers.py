"""One-call shortcuts over the identifier and calculation APIs."""

from __future__ import annotations

from decimal import Decimal

from vatbe import calculator
from vatbe.identifiers import EnterpriseNumber, VatNumber
from vatbe.models import VatCalculation
from vatbe.rates import BELGIAN_VAT_RATES, VatRate, VatRateCategory


def is_belgian_enterprise_number(value: str | None) -> bool:
    return EnterpriseNumber.is_valid(value)


def format_as_enterprise_number(value: str) -> str:
    """``"0402206045"`` -> ``"0402.206.045"``; raises FormatError when invalid."""
    return EnterpriseNumber.parse(value).to_formatted()


def is_belgian_vat_number(value: str | None) -> bool:
    return VatNumber.is_valid(value)


def with_belgian_vat(amount_excl_vat: Decimal | int | str, category: VatRateCategory) -> VatCalculation:
    return calculator.from_excl_vat(amount_excl_vat, category)


def extract_belgian_vat(amount_incl_vat: Decimal | int | str, category: VatRateCategory) -> VatCalculation:
    return calculator.from_incl_vat(amount_incl_vat, category)


def get_belgian_vat_rate(category: VatRateCategory) -> VatRate:
    return BELGIAN_VAT_RATES.get_rate(category)
