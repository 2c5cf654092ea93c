from __future__ import annotations


class VatBeError(Exception):
    pass


class FormatError(VatBeError, ValueError):
    """Input is not a valid Belgian enterprise or VAT number."""

    def __init__(self, value: str | None, kind: str = "enterprise number") -> None:
        self.value = value
        self.kind = kind
        super().__init__(f"'{value}' is not a valid Belgian {kind}.")


class InvalidArgumentError(VatBeError, ValueError):
    """Amount rejected before any VAT calculation."""
