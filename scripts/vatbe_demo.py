#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
from decimal import Decimal

from vatbe.calculator import calculate_invoice, from_excl_vat, from_incl_vat
from vatbe.errors import InvalidArgumentError
from vatbe.helpers import extract_belgian_vat, with_belgian_vat
from vatbe.identifiers import EnterpriseNumber, VatNumber
from vatbe.models import InvoiceLine
from vatbe.parse_utils import parse_money
from vatbe.rates import BELGIAN_VAT_RATES, VatRate, VatRateCategory
from vatbe.vies_client import ViesClient


DEMO_ENTERPRISE_NUMBERS = [
    "0402.206.045",
    "0403.199.702",
    "BE0123.456.749",
    "0000000000",
    "0412345678",
    "not-a-number",
]

DEMO_VAT_NUMBERS = [
    "BE0402.206.045",
    "BE 0403.199.702",
    "BE9999999999",
    "FR12345678901",
    "0402.206.045",
]

DEMO_INVOICE = [
    InvoiceLine(description="Laptop", amount_excl_vat=Decimal("1000.00"), category=VatRateCategory.ELECTRONICS),
    InvoiceLine(description="Bread", amount_excl_vat=Decimal("5.00"), category=VatRateCategory.BASIC_FOOD),
    InvoiceLine(description="Lunch", amount_excl_vat=Decimal("20.00"), category=VatRateCategory.RESTAURANT_FOOD),
    InvoiceLine(description="Wine", amount_excl_vat=Decimal("12.50"), category=VatRateCategory.RESTAURANT_DRINKS),
]


def _section(title: str) -> None:
    print()
    print(f"-- {title} " + "-" * max(0, 60 - len(title)))


def _show_enterprise_number(value: str) -> None:
    en = EnterpriseNumber.try_parse(value)
    if en is None:
        print(f"  x {value:<25} -> INVALID")
    else:
        print(f"  v {value:<25} -> {en.to_formatted()} (VAT: {en.to_vat_number().to_compact()})")


def _show_vat_number(value: str) -> None:
    vat = VatNumber.try_parse(value)
    if vat is None:
        print(f"  x {value:<25} -> INVALID")
    else:
        print(f"  v {value:<25} -> {vat.to_formatted()}")


def run_demo() -> None:
    _section("Enterprise numbers (KBO/BCE)")
    for value in DEMO_ENTERPRISE_NUMBERS:
        _show_enterprise_number(value)

    _section("VAT numbers (BTW/TVA)")
    for value in DEMO_VAT_NUMBERS:
        _show_vat_number(value)

    _section("VAT rates")
    for rate in VatRate:
        names = sorted(c.value for c in BELGIAN_VAT_RATES.categories_for_rate(rate))
        print(f"  {int(rate):>2}%  {', '.join(names)}")

    _section("Calculations")
    print(f"  100.00 electronics      {with_belgian_vat(Decimal('100.00'), VatRateCategory.ELECTRONICS)}")
    print(f"  100.00 basic food       {with_belgian_vat(Decimal('100.00'), VatRateCategory.BASIC_FOOD)}")
    print(f"  121.00 incl electronics {extract_belgian_vat(Decimal('121.00'), VatRateCategory.ELECTRONICS)}")

    _section("Mixed-rate invoice")
    totals = calculate_invoice(DEMO_INVOICE)
    for line in DEMO_INVOICE:
        print(f"  {line.description:<10} {line.amount_excl_vat:>10.2f}  {line.category.value}")
    for group in totals.vat_by_rate:
        print(f"  VAT {int(group.rate):>2}% on {group.base_amount:>10.2f} = {group.vat_amount:>8.2f}")
    print(f"  Total excl {totals.total_excl_vat:>10.2f}")
    print(f"  Total VAT  {totals.total_vat:>10.2f}")
    print(f"  Total incl {totals.total_incl_vat:>10.2f}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Belgian enterprise/VAT number and VAT calculation demo.")
    parser.add_argument("--number", help="Enterprise or VAT number to validate, e.g. BE 0402.206.045")
    parser.add_argument("--vies", action="store_true", help="Look --number up in the EU VIES service")
    parser.add_argument("--amount", help="Amount to calculate VAT for, e.g. 1.234,56")
    parser.add_argument(
        "--category",
        default=VatRateCategory.STANDARD.value,
        choices=[c.value for c in VatRateCategory],
        help="VAT rate category, default standard",
    )
    parser.add_argument("--incl", action="store_true", help="Treat --amount as VAT-inclusive")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.vies and not args.number:
        raise SystemExit("--vies requires --number")

    if not args.number and not args.amount:
        run_demo()
        return

    if args.number:
        _show_enterprise_number(args.number)
        _show_vat_number(args.number)
        if args.vies:
            en = EnterpriseNumber.try_parse(args.number)
            if en is None:
                raise SystemExit(f"'{args.number}' is not a valid Belgian enterprise number")
            with ViesClient() as client:
                result = client.validate(en.to_vat_number())
            print(json.dumps(result.model_dump(mode="json"), indent=2))

    if args.amount:
        amount = parse_money(args.amount)
        if amount is None:
            raise SystemExit(f"Unsupported amount: {args.amount}")
        category = VatRateCategory(args.category)
        try:
            calc = from_incl_vat(amount, category) if args.incl else from_excl_vat(amount, category)
        except InvalidArgumentError as exc:
            raise SystemExit(str(exc)) from exc
        print(f"  {calc}")


if __name__ == "__main__":
    main()
