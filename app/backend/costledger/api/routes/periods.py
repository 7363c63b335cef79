"""Reporting period endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from costledger.services.cash_flow_service import serialize_period
from costledger.services.periods import generate_periods, parse_scheme

router = APIRouter(tags=["periods"])


@router.get("/periods")
def list_periods(
    scheme: str = Query(default="monthly"),
    year: int = Query(...),
) -> dict[str, object]:
    resolved = parse_scheme(scheme)
    periods = generate_periods(resolved, year)
    return {
        "scheme": resolved.value,
        "year": year,
        "items": [serialize_period(period) for period in periods],
    }
