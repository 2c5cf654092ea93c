from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from dateutil import parser as date_parser

from vatbe.errors import InvalidArgumentError


_MONEY_RE = re.compile(r"-?\d[\d.,]*")

# Separators allowed inside an identifier: space, dot, dash, slash
SEPARATORS_RE = re.compile(r"[\s.\-/]")

CENT = Decimal("0.01")


def to_amount(value: Decimal | int | float | str) -> Decimal:
    """Coerce a monetary input to an exact :class:`Decimal`.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Amount must be numeric, got {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidArgumentError(f"Amount must be numeric, got {value!r}") from None
    else:
        raise InvalidArgumentError(f"Amount must be numeric, got {value!r}")

    if not amount.is_finite():
        raise InvalidArgumentError(f"Amount must be finite, got {value!r}")
    return amount


def parse_money(value: str | None) -> Optional[Decimal]:
    """Parse a human-entered amount such as ``€ 1.234,56`` or ``1,466.93``.

    When both separators appear, the last one is the decimal mark. A lone
    comma followed by one or two digits is a decimal comma (Belgian style),
    otherwise it groups thousands.
    """
    if not value:
        return None

    cleaned = value.strip()
    cleaned = cleaned.replace("€", "").replace("EUR", "").replace("£", "").replace("$", "")
    cleaned = cleaned.replace(" ", "").replace("\u00a0", "")

    match = _MONEY_RE.search(cleaned)
    if not match:
        return None

    number = match.group(0).rstrip(".,")
    if "," in number and "." in number:
        if number.rfind(",") > number.rfind("."):
            number = number.replace(".", "").replace(",", ".")
        else:
            number = number.replace(",", "")
    elif "," in number:
        head, _, tail = number.rpartition(",")
        if len(tail) in (1, 2) and "," not in head:
            number = f"{head}.{tail}"
        else:
            number = number.replace(",", "")
    elif number.count(".") > 1:
        number = number.replace(".", "")

    try:
        return Decimal(number)
    except InvalidOperation:
        return None


def parse_timestamp(value: str | None) -> Optional[datetime]:
    if not value:
        return None

    cleaned = value.strip()
    if not cleaned:
        return None

    try:
        return date_parser.isoparse(cleaned)
    except (ValueError, TypeError, OverflowError):
        pass

    try:
        return date_parser.parse(cleaned)
    except (ValueError, TypeError, OverflowError):
        return None

