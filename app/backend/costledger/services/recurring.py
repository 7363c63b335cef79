"""Expansion of installment-based obligations into dated contributions."""

from __future__ import annotations

import calendar
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from costledger.services.contributions import Contribution, coerce_amount, coerce_date


@dataclass(slots=True, frozen=True)
class RecurringObligation:
    start_date: date
    installment_count: int
    installment_amount: Decimal
    dimension_tags: Mapping[str, object] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> RecurringObligation | None:
        """Build from a fixed-cost schedule record; incomplete records give None."""

        start = coerce_date(record.get("start_date"))
        raw_count = record.get("installment_count")
        raw_amount = record.get("installment_amount")
        if start is None or raw_count is None or raw_amount is None:
            return None
        try:
            count = int(raw_count)
        except (TypeError, ValueError):
            return None
        tags = {
            key: value
            for key, value in record.items()
            if key not in {"start_date", "installment_count", "installment_amount"}
        }
        return cls(
            start_date=start,
            installment_count=count,
            installment_amount=coerce_amount(raw_amount),
            dimension_tags=tags,
        )


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping the day to the end of the target month."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def expand_obligation(obligation: RecurringObligation, year: int, category_key: str = "fixed_costs") -> Iterator[Contribution]:
    """Yield one contribution per installment that falls inside ``year``."""

    for index in range(max(obligation.installment_count, 0)):
        due = add_months(obligation.start_date, index)
        if due.year > year:
            return
        if due.year != year:
            continue
        yield Contribution(
            category_key=category_key,
            date=due,
            amount=obligation.installment_amount,
            dimension_tags=obligation.dimension_tags,
        )
