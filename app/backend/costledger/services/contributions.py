"""Dated monetary contributions and lenient coercion of upstream values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

ZERO = Decimal("0.00")
Q2 = Decimal("0.01")

# period_id -> accumulated amount
CategorySeries = dict[str, Decimal]


def q2(value: Decimal) -> Decimal:
    return value.quantize(Q2)


def coerce_amount(value: object) -> Decimal:
    """Best-effort conversion of an upstream amount; anything malformed is zero."""

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def coerce_date(value: object) -> date | None:
    """Accept dates, datetimes and ISO strings (date part only); otherwise None."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


@dataclass(slots=True, frozen=True)
class Contribution:
    category_key: str
    date: date
    amount: Decimal
    dimension_tags: Mapping[str, object] = field(default_factory=dict)
