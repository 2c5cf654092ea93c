"""Belgian VAT rates and the category -> rate table (SPF Finances, 2026)."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping


class VatRate(IntEnum):
    ZERO = 0  # used goods, exports
    REDUCED = 6  # food, medicine, books, renovation of older housing
    INTERMEDIATE = 12  # restaurant food, coal, margarine
    STANDARD = 21

    @property
    def fraction(self) -> Decimal:
        return Decimal(int(self)) / Decimal(100)


class VatRateCategory(str, Enum):
    # 0%
    USED_GOODS = "used_goods"
    EXPORT_OUTSIDE_EU = "export_outside_eu"

    # 6%
    BASIC_FOOD = "basic_food"
    PHARMACEUTICAL = "pharmaceutical"
    BOOKS = "books"
    NEWSPAPERS = "newspapers"
    AGRICULTURAL_PRODUCTS = "agricultural_products"
    WATER_SUPPLY = "water_supply"
    HOTEL_ACCOMMODATION = "hotel_accommodation"
    PUBLIC_TRANSPORT = "public_transport"
    SOCIAL_HOUSING_CONSTRUCTION = "social_housing_construction"
    SOCIAL_HOUSING_RENOVATION = "social_housing_renovation"
    RESIDENTIAL_RENOVATION = "residential_renovation"  # buildings older than 10 years

    # 12%
    RESTAURANT_FOOD = "restaurant_food"  # drinks stay at 21%
    COAL = "coal"
    SOCIAL_HOUSING = "social_housing"
    MARGARINE = "margarine"
    PHYTOPHARMACEUTICALS = "phytopharmaceuticals"

    # 21%
    STANDARD = "standard"
    DIGITAL_SERVICES = "digital_services"
    CLOTHING = "clothing"
    ELECTRONICS = "electronics"
    VEHICLES = "vehicles"
    REAL_ESTATE_NEW = "real_estate_new"
    ALCOHOL = "alcohol"
    TOBACCO = "tobacco"
    RESTAURANT_DRINKS = "restaurant_drinks"


class RateTable:
    """Read-only mapping of categories to statutory rates.

    Lookups never fail: a category missing from the table gets the standard
    rate.
    """

    def __init__(self, rates: Mapping[VatRateCategory, VatRate]) -> None:
        self._rates: Mapping[VatRateCategory, VatRate] = MappingProxyType(dict(rates))

    def get_rate(self, category: VatRateCategory) -> VatRate:
        return self._rates.get(category, VatRate.STANDARD)

    def get_rate_fraction(self, category: VatRateCategory) -> Decimal:
        return self.get_rate(category).fraction

    def categories_for_rate(self, rate: VatRate) -> frozenset[VatRateCategory]:
        return frozenset(category for category, value in self._rates.items() if value == rate)

    def all_rates(self) -> Mapping[VatRateCategory, VatRate]:
        return self._rates

    def __contains__(self, category: object) -> bool:
        return category in self._rates

    def __len__(self) -> int:
        return len(self._rates)


_BELGIAN_RATES: dict[VatRateCategory, VatRate] = {
    VatRateCategory.USED_GOODS: VatRate.ZERO,
    VatRateCategory.EXPORT_OUTSIDE_EU: VatRate.ZERO,

    VatRateCategory.BASIC_FOOD: VatRate.REDUCED,
    VatRateCategory.PHARMACEUTICAL: VatRate.REDUCED,
    VatRateCategory.BOOKS: VatRate.REDUCED,
    VatRateCategory.NEWSPAPERS: VatRate.REDUCED,
    VatRateCategory.AGRICULTURAL_PRODUCTS: VatRate.REDUCED,
    VatRateCategory.WATER_SUPPLY: VatRate.REDUCED,
    VatRateCategory.HOTEL_ACCOMMODATION: VatRate.REDUCED,
    VatRateCategory.PUBLIC_TRANSPORT: VatRate.REDUCED,
    VatRateCategory.SOCIAL_HOUSING_CONSTRUCTION: VatRate.REDUCED,
    VatRateCategory.SOCIAL_HOUSING_RENOVATION: VatRate.REDUCED,
    VatRateCategory.RESIDENTIAL_RENOVATION: VatRate.REDUCED,

    VatRateCategory.RESTAURANT_FOOD: VatRate.INTERMEDIATE,
    VatRateCategory.COAL: VatRate.INTERMEDIATE,
    VatRateCategory.SOCIAL_HOUSING: VatRate.INTERMEDIATE,
    VatRateCategory.MARGARINE: VatRate.INTERMEDIATE,
    VatRateCategory.PHYTOPHARMACEUTICALS: VatRate.INTERMEDIATE,

    VatRateCategory.STANDARD: VatRate.STANDARD,
    VatRateCategory.DIGITAL_SERVICES: VatRate.STANDARD,
    VatRateCategory.CLOTHING: VatRate.STANDARD,
    VatRateCategory.ELECTRONICS: VatRate.STANDARD,
    VatRateCategory.VEHICLES: VatRate.STANDARD,
    VatRateCategory.REAL_ESTATE_NEW: VatRate.STANDARD,
    VatRateCategory.ALCOHOL: VatRate.STANDARD,
    VatRateCategory.TOBACCO: VatRate.STANDARD,
    VatRateCategory.RESTAURANT_DRINKS: VatRate.STANDARD,
}

BELGIAN_VAT_RATES = RateTable(_BELGIAN_RATES)
