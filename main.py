from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from pydantic import ValidationError

from vatbe.calculator import (
    calculate_invoice,
    from_excl_vat,
    from_excl_vat_with_rate,
    from_incl_vat,
)
from vatbe.errors import InvalidArgumentError
from vatbe.identifiers import EnterpriseNumber, VatNumber, normalize
from vatbe.models import InvoiceLine
from vatbe.rates import BELGIAN_VAT_RATES, VatRate, VatRateCategory
from vatbe.vies_client import RemoteVatValidator, ViesClient


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("vatbe")

APP_VERSION = os.getenv("APP_VERSION", "0.1.0")
VIES_ENABLED = os.getenv("VIES_ENABLED", "").lower() in {"1", "true", "yes", "on"}

app = FastAPI(title="vatbe")

_vies_client: Optional[RemoteVatValidator] = None


def _get_vies_client() -> RemoteVatValidator:
    global _vies_client
    if _vies_client is None:
        _vies_client = ViesClient()
    return _vies_client


def _parse_category(raw: Any) -> VatRateCategory:
    text = str(raw or "").strip().lower()
    try:
        return VatRateCategory(text)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown category: {raw}",
        ) from None


def _parse_rate(raw: Any) -> VatRate:
    try:
        return VatRate(int(raw))
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown VAT rate: {raw}",
        ) from None


async def _json_object(request: Request) -> Dict[str, Any]:
    try:
        payload = await request.json()
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload") from exc

    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="JSON payload must be an object")
    return payload


@app.get("/version")
async def version() -> Dict[str, Any]:
    return {
        "status": "ok",
        "service": "vatbe",
        "app_version": APP_VERSION,
        "vies_enabled": VIES_ENABLED,
    }


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/enterprise-numbers/{value:path}")
async def enterprise_number(value: str) -> Dict[str, Any]:
    en = EnterpriseNumber.try_parse(value)
    if en is None:
        return {
            "input": value,
            "normalized": normalize(value),
            "valid": False,
            "digits": None,
            "formatted": None,
            "vat_number": None,
        }
    return {
        "input": value,
        "normalized": en.digits,
        "valid": True,
        "digits": en.digits,
        "formatted": en.to_formatted(),
        "vat_number": en.to_vat_number().to_compact(),
    }


@app.get("/vat-numbers/{value:path}/vies")
def vat_number_vies(value: str) -> Dict[str, Any]:
    if not VIES_ENABLED:
        return {"status": "disabled"}

    vat = VatNumber.try_parse(value)
    if vat is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"'{value}' is not a valid Belgian VAT number.",
        )

    try:
        result = _get_vies_client().validate(vat)
    except Exception as exc:
        logger.exception("VIES lookup failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    if result.error:
        logger.info("VIES lookup for %s returned error: %s", vat.to_compact(), result.error)
    return result.model_dump(mode="json")


@app.get("/vat-numbers/{value:path}")
async def vat_number(value: str) -> Dict[str, Any]:
    vat = VatNumber.try_parse(value)
    if vat is None:
        return {"input": value, "valid": False, "compact": None, "formatted": None}
    return {
        "input": value,
        "valid": True,
        "compact": vat.to_compact(),
        "formatted": vat.to_formatted(),
    }


@app.get("/rates")
async def rates() -> Dict[str, Any]:
    items = [
        {"category": category.value, "rate": int(rate)}
        for category, rate in BELGIAN_VAT_RATES.all_rates().items()
    ]
    return {"count": len(items), "items": items}


@app.get("/rates/{rate}")
async def rate_categories(rate: int) -> Dict[str, Any]:
    try:
        vat_rate = VatRate(rate)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown VAT rate: {rate}") from None

    categories = sorted(c.value for c in BELGIAN_VAT_RATES.categories_for_rate(vat_rate))
    return {"rate": int(vat_rate), "categories": categories}


@app.post("/calculate")
async def calculate(request: Request) -> Dict[str, Any]:
    payload = await _json_object(request)
    amount = payload.get("amount")
    if amount is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing amount")

    direction = str(payload.get("direction") or "excl").lower()
    if direction not in {"excl", "incl"}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="direction must be 'excl' or 'incl'")

    try:
        if payload.get("rate") is not None:
            if direction != "excl":
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="An explicit rate only supports direction 'excl'",
                )
            result = from_excl_vat_with_rate(amount, _parse_rate(payload["rate"]))
        elif direction == "incl":
            result = from_incl_vat(amount, _parse_category(payload.get("category")))
        else:
            result = from_excl_vat(amount, _parse_category(payload.get("category")))
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    data = result.model_dump(mode="json")
    data["display"] = str(result)
    return data


@app.post("/invoice")
async def invoice(request: Request) -> Dict[str, Any]:
    payload = await _json_object(request)
    raw_lines = payload.get("lines")
    if not isinstance(raw_lines, list) or not raw_lines:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="lines must be a non-empty list")

    try:
        lines = [InvoiceLine.model_validate(line) for line in raw_lines]
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid invoice line: {exc.errors()[0].get('msg')}",
        ) from exc

    try:
        totals = calculate_invoice(lines)
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return totals.model_dump(mode="json")
