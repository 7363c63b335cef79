from __future__ import annotations

from datetime import date
from decimal import Decimal

from costledger.services.category_aggregation import aggregate_contributions
from costledger.services.periods import PeriodScheme, generate_periods
from costledger.services.recurring import RecurringObligation, add_months, expand_obligation


def _obligation(start: date, count: int, amount: str = "100000") -> RecurringObligation:
    return RecurringObligation(start_date=start, installment_count=count, installment_amount=Decimal(amount))


def test_installments_expand_monthly_from_start_date() -> None:
    contributions = list(expand_obligation(_obligation(date(2024, 1, 15), 3), 2024))

    assert [c.date for c in contributions] == [date(2024, 1, 15), date(2024, 2, 15), date(2024, 3, 15)]
    assert all(c.amount == Decimal("100000") for c in contributions)
    assert all(c.category_key == "fixed_costs" for c in contributions)


def test_expanded_installments_aggregate_per_month() -> None:
    periods = generate_periods(PeriodScheme.MONTHLY, 2024)
    contributions = expand_obligation(_obligation(date(2024, 1, 15), 3), 2024)

    series = aggregate_contributions(contributions, periods, PeriodScheme.MONTHLY, 2024)

    assert series["month-1"] == series["month-2"] == series["month-3"] == Decimal("100000")
    assert all(series[f"month-{month}"] == 0 for month in range(4, 13))


def test_month_end_start_clamps_without_drifting() -> None:
    contributions = list(expand_obligation(_obligation(date(2024, 1, 31), 4), 2024))

    assert [c.date for c in contributions] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_only_installments_inside_the_year_are_emitted() -> None:
    contributions = list(expand_obligation(_obligation(date(2023, 11, 10), 6), 2024))

    assert [c.date for c in contributions] == [
        date(2024, 1, 10),
        date(2024, 2, 10),
        date(2024, 3, 10),
        date(2024, 4, 10),
    ]
    assert list(expand_obligation(_obligation(date(2025, 1, 1), 3), 2024)) == []


def test_zero_and_negative_counts_emit_nothing() -> None:
    assert list(expand_obligation(_obligation(date(2024, 1, 1), 0), 2024)) == []
    assert list(expand_obligation(_obligation(date(2024, 1, 1), -2), 2024)) == []


def test_add_months_crosses_year_boundary() -> None:
    assert add_months(date(2023, 12, 31), 2) == date(2024, 2, 29)
    assert add_months(date(2024, 5, 20), 12) == date(2025, 5, 20)


def test_from_record_reads_schedule_fields() -> None:
    obligation = RecurringObligation.from_record(
        {"start_date": "2024-02-01", "installment_count": "2", "installment_amount": "50000.50", "name": "Arriendo"}
    )

    assert obligation is not None
    assert obligation.start_date == date(2024, 2, 1)
    assert obligation.installment_count == 2
    assert obligation.installment_amount == Decimal("50000.50")
    assert obligation.dimension_tags == {"name": "Arriendo"}


def test_from_record_returns_none_for_incomplete_schedule() -> None:
    assert RecurringObligation.from_record({"start_date": None, "installment_count": 1, "installment_amount": 1}) is None
    assert RecurringObligation.from_record({"start_date": "2024-01-01", "installment_amount": 1}) is None
    assert (
        RecurringObligation.from_record({"start_date": "2024-01-01", "installment_count": "x", "installment_amount": 1})
        is None
    )
