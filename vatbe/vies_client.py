from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

import requests

from vatbe.identifiers import VatNumber
from vatbe.models import ViesResult
from vatbe.parse_utils import parse_timestamp

VIES_API_BASE = "https://ec.europa.eu/taxation_customs/vies/rest-api"
DEFAULT_TIMEOUT = 10.0
logger = logging.getLogger(__name__)

# VIES userError values that describe the outcome rather than a failure
_NON_ERROR_CODES = {"VALID"}


def _get_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    return value.strip() if value else None


def _get_timeout() -> float:
    raw = _get_env("VIES_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning("Invalid VIES_TIMEOUT value: %s", raw)
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        logger.warning("Invalid VIES_TIMEOUT value: %s", raw)
        return DEFAULT_TIMEOUT
    return timeout


def _null_if_unknown(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == "---":
        return None
    return text


class RemoteVatValidator(Protocol):
    """Authoritative lookup of a VAT number (VIES or a test double)."""

    def validate(self, vat_number: VatNumber) -> ViesResult:
        ...

    def validate_number(self, country_code: str, number: str) -> ViesResult:
        ...


class ViesClient:
    """Client for the EU VIES REST API.

    Lookups never raise for service or transport problems; they come back as
    an invalid :class:`ViesResult` with ``error`` describing what went wrong.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.base_url = (base_url or _get_env("VIES_BASE_URL") or VIES_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else _get_timeout()

    def __enter__(self) -> ViesClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def validate(self, vat_number: VatNumber) -> ViesResult:
        return self.validate_number(vat_number.country_code, vat_number.digits)

    def validate_number(self, country_code: str, number: str) -> ViesResult:
        if not country_code or not country_code.strip():
            raise ValueError("country_code is required")
        if not number or not number.strip():
            raise ValueError("number is required")

        country_code = country_code.strip().upper()
        number = number.strip()
        url = f"{self.base_url}/ms/{country_code}/vat/{number}"

        try:
            resp = self.session.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.info("VIES lookup timed out for %s%s", country_code, number)
            return self._failure(country_code, number, "Request timed out")
        except requests.RequestException as exc:
            logger.info("VIES lookup failed for %s%s: %s", country_code, number, exc)
            return self._failure(country_code, number, f"HTTP error: {exc}")

        if resp.status_code >= 400:
            logger.info("VIES returned HTTP %s for %s%s", resp.status_code, country_code, number)
            return self._failure(
                country_code, number, f"VIES service error: HTTP {resp.status_code}"
            )

        if not resp.content or not resp.content.strip():
            return self._failure(country_code, number, "Empty response from VIES")

        try:
            data = resp.json()
        except ValueError:
            logger.info("VIES returned a non-JSON body: %s", resp.text[:200])
            return self._failure(country_code, number, "Malformed response from VIES")

        if data is None:
            return self._failure(country_code, number, "Empty response from VIES")
        if not isinstance(data, dict):
            return self._failure(country_code, number, "Malformed response from VIES")

        return self._result_from_payload(data, country_code, number)

    def _result_from_payload(
        self, data: Dict[str, Any], country_code: str, number: str
    ) -> ViesResult:
        error = _null_if_unknown(data.get("userError"))
        if error in _NON_ERROR_CODES:
            error = None

        return ViesResult(
            is_valid=bool(data.get("isValid")),
            country_code=_null_if_unknown(data.get("countryCode")) or country_code,
            vat_number=_null_if_unknown(data.get("vatNumber")) or number,
            trader_name=_null_if_unknown(data.get("name")),
            trader_address=_null_if_unknown(data.get("address")),
            validated_at=datetime.now(timezone.utc),
            request_date=parse_timestamp(_null_if_unknown(data.get("requestDate"))),
            request_identifier=_null_if_unknown(data.get("requestIdentifier")),
            error=error,
        )

    @staticmethod
    def _failure(country_code: str, number: str, error: str) -> ViesResult:
        return ViesResult(
            is_valid=False,
            country_code=country_code,
            vat_number=number,
            validated_at=datetime.now(timezone.utc),
            error=error,
        )
