from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from vatbe.rates import VatRate, VatRateCategory


class VatCalculation(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_excl_vat: Decimal
    vat_amount: Decimal
    amount_incl_vat: Decimal
    rate: VatRate
    category: VatRateCategory

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rate_percentage(self) -> Decimal:
        return Decimal(int(self.rate))

    def __str__(self) -> str:
        return (
            f"Excl: {self.amount_excl_vat:.2f} EUR | "
            f"VAT {int(self.rate)}%: {self.vat_amount:.2f} EUR | "
            f"Incl: {self.amount_incl_vat:.2f} EUR"
        )


class InvoiceLine(BaseModel):
    description: str
    amount_excl_vat: Decimal
    category: VatRateCategory = VatRateCategory.STANDARD


class VatGroup(BaseModel):
    """Per-rate subtotal for an invoice footer."""

    rate: VatRate
    base_amount: Decimal
    vat_amount: Decimal


class InvoiceTotals(BaseModel):
    total_excl_vat: Decimal
    total_vat: Decimal
    total_incl_vat: Decimal
    vat_by_rate: list[VatGroup] = []


class ViesResult(BaseModel):
    is_valid: bool
    country_code: str
    vat_number: str
    trader_name: Optional[str] = None
    trader_address: Optional[str] = None
    validated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_date: Optional[datetime] = None
    request_identifier: Optional[str] = None
    error: Optional[str] = None

    def __str__(self) -> str:
        if self.is_valid:
            return f"VALID {self.country_code}{self.vat_number} | {self.trader_name} | {self.trader_address}"
        suffix = f" ({self.error})" if self.error else ""
        return f"INVALID {self.country_code}{self.vat_number}{suffix}"
