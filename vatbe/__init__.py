"""Belgian enterprise/VAT number validation and VAT calculations."""

from vatbe.calculator import (
    calculate_invoice,
    from_excl_vat,
    from_excl_vat_with_rate,
    from_incl_vat,
    round_belgian,
)
from vatbe.errors import FormatError, InvalidArgumentError, VatBeError
from vatbe.helpers import (
    extract_belgian_vat,
    format_as_enterprise_number,
    get_belgian_vat_rate,
    is_belgian_enterprise_number,
    is_belgian_vat_number,
    with_belgian_vat,
)
from vatbe.identifiers import EnterpriseNumber, VatNumber
from vatbe.models import InvoiceLine, InvoiceTotals, VatCalculation, VatGroup, ViesResult
from vatbe.rates import BELGIAN_VAT_RATES, RateTable, VatRate, VatRateCategory

__all__ = [
    "BELGIAN_VAT_RATES",
    "EnterpriseNumber",
    "FormatError",
    "InvalidArgumentError",
    "InvoiceLine",
    "InvoiceTotals",
    "RateTable",
    "VatBeError",
    "VatCalculation",
    "VatGroup",
    "VatNumber",
    "VatRate",
    "VatRateCategory",
    "ViesResult",
    "calculate_invoice",
    "extract_belgian_vat",
    "format_as_enterprise_number",
    "from_excl_vat",
    "from_excl_vat_with_rate",
    "from_incl_vat",
    "get_belgian_vat_rate",
    "is_belgian_enterprise_number",
    "is_belgian_vat_number",
    "round_belgian",
    "with_belgian_vat",
]
