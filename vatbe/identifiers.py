"""Belgian enterprise numbers (KBO/BCE) and VAT numbers (BTW/TVA).

An enterprise number is 10 digits, ``0XXX.XXX.XXX``; the last two digits are
``97 - (first eight digits mod 97)``. The VAT number is the same digits with
a ``BE`` prefix.
"""

from __future__ import annotations

import logging
import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from vatbe.errors import FormatError
from vatbe.parse_utils import SEPARATORS_RE

logger = logging.getLogger(__name__)

COUNTRY_CODE = "BE"

_DIGITS_RE = re.compile(r"\d{10}", re.ASCII)


def normalize(value: str) -> str:
    """Strip a leading ``BE`` prefix and every space, dot, dash and slash."""
    cleaned = value.strip()
    if cleaned[:2].upper() == COUNTRY_CODE:
        cleaned = cleaned[2:].lstrip()
    return SEPARATORS_RE.sub("", cleaned)


def _checksum_ok(digits: str) -> bool:
    if not _DIGITS_RE.fullmatch(digits):
        return False

    body = int(digits[:8])
    if body == 0:
        return False

    check = int(digits[8:])
    return 97 - body % 97 == check


class EnterpriseNumber(BaseModel):
    model_config = ConfigDict(frozen=True)

    digits: str

    @field_validator("digits")
    @classmethod
    def _validate_digits(cls, value: str) -> str:
        if not _checksum_ok(value):
            raise ValueError(f"'{value}' fails the modulus 97 check")
        return value

    @classmethod
    def try_parse(cls, value: Optional[str]) -> Optional[EnterpriseNumber]:
        """Parse free-form input such as ``BE 0402.206.045``; ``None`` if invalid."""
        if value is None or not value.strip():
            return None

        digits = normalize(value)
        if not _checksum_ok(digits):
            logger.debug("Rejected enterprise number input %r", value)
            return None
        return cls(digits=digits)

    @classmethod
    def parse(cls, value: Optional[str]) -> EnterpriseNumber:
        result = cls.try_parse(value)
        if result is None:
            raise FormatError(value, "enterprise number")
        return result

    @classmethod
    def is_valid(cls, value: Optional[str]) -> bool:
        return cls.try_parse(value) is not None

    def to_formatted(self) -> str:
        d = self.digits
        return f"{d[:4]}.{d[4:7]}.{d[7:]}"

    def to_vat_number(self) -> VatNumber:
        return VatNumber.from_enterprise_number(self)

    def __str__(self) -> str:
        return self.to_formatted()


class VatNumber(BaseModel):
    model_config = ConfigDict(frozen=True)

    enterprise_number: EnterpriseNumber
    country_code: Literal["BE"] = COUNTRY_CODE

    @classmethod
    def from_enterprise_number(cls, enterprise_number: EnterpriseNumber) -> VatNumber:
        return cls(enterprise_number=enterprise_number)

    @classmethod
    def try_parse(cls, value: Optional[str]) -> Optional[VatNumber]:
        """Parse ``BE0402206045`` style input. The ``BE`` prefix is mandatory."""
        if value is None or not value.strip():
            return None

        cleaned = value.strip()
        if cleaned[:2].upper() != COUNTRY_CODE:
            return None

        enterprise_number = EnterpriseNumber.try_parse(cleaned)
        if enterprise_number is None:
            return None
        return cls(enterprise_number=enterprise_number)

    @classmethod
    def parse(cls, value: Optional[str]) -> VatNumber:
        result = cls.try_parse(value)
        if result is None:
            raise FormatError(value, "VAT number")
        return result

    @classmethod
    def is_valid(cls, value: Optional[str]) -> bool:
        return cls.try_parse(value) is not None

    @property
    def digits(self) -> str:
        return self.enterprise_number.digits

    def to_compact(self) -> str:
        return f"{self.country_code}{self.digits}"

    def to_formatted(self) -> str:
        return f"{self.country_code} {self.enterprise_number.to_formatted()}"

    def to_vies_format(self) -> str:
        return self.to_compact()

    def __str__(self) -> str:
        return self.to_formatted()
