"""Reporting period generation and date-to-period mapping."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import date, timedelta

from costledger.core.errors import SchemeConstructionError

WEEKS_PER_YEAR = 52

MONTH_LABELS = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)


class PeriodScheme(str, enum.Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


_SCHEME_ALIASES = {"annual": PeriodScheme.YEARLY}


@dataclass(slots=True, frozen=True)
class Period:
    id: str
    scheme: PeriodScheme
    ordinal: int
    start_date: date
    end_date: date
    label: str

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date


def parse_scheme(value: PeriodScheme | str) -> PeriodScheme:
    if isinstance(value, PeriodScheme):
        return value
    normalized = str(value).strip().lower()
    if normalized in _SCHEME_ALIASES:
        return _SCHEME_ALIASES[normalized]
    try:
        return PeriodScheme(normalized)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in PeriodScheme)
        raise SchemeConstructionError(f"Unknown period scheme '{value}'; expected one of: {allowed}.") from exc


def _validate_year(year: object) -> int:
    # The last weekly period may run into the following year, hence the upper bound.
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9998:
        raise SchemeConstructionError(f"Invalid reporting year: {year!r}.")
    return year


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def first_monday_on_or_after(value: date) -> date:
    return value + timedelta(days=(7 - value.weekday()) % 7)


def _weekly(year: int) -> list[Period]:
    anchor = first_monday_on_or_after(date(year, 1, 1))
    periods: list[Period] = []
    for index in range(WEEKS_PER_YEAR):
        start = anchor + timedelta(days=7 * index)
        end = start + timedelta(days=6)
        periods.append(
            Period(
                id=f"week-{index + 1}",
                scheme=PeriodScheme.WEEKLY,
                ordinal=index + 1,
                start_date=start,
                end_date=end,
                label=f"{start:%d/%m} - {end:%d/%m}",
            )
        )
    return periods


def _monthly(year: int) -> list[Period]:
    return [
        Period(
            id=f"month-{month}",
            scheme=PeriodScheme.MONTHLY,
            ordinal=month,
            start_date=date(year, month, 1),
            end_date=_month_end(year, month),
            label=MONTH_LABELS[month - 1],
        )
        for month in range(1, 13)
    ]


def _quarterly(year: int) -> list[Period]:
    return [
        Period(
            id=f"quarter-{quarter}",
            scheme=PeriodScheme.QUARTERLY,
            ordinal=quarter,
            start_date=date(year, 3 * quarter - 2, 1),
            end_date=_month_end(year, 3 * quarter),
            label=f"Q{quarter}",
        )
        for quarter in range(1, 5)
    ]


def _yearly(year: int) -> list[Period]:
    return [
        Period(
            id=f"year-{year}",
            scheme=PeriodScheme.YEARLY,
            ordinal=1,
            start_date=date(year, 1, 1),
            end_date=date(year, 12, 31),
            label=str(year),
        )
    ]


_GENERATORS = {
    PeriodScheme.WEEKLY: _weekly,
    PeriodScheme.MONTHLY: _monthly,
    PeriodScheme.QUARTERLY: _quarterly,
    PeriodScheme.YEARLY: _yearly,
}


def generate_periods(scheme: PeriodScheme | str, year: int) -> list[Period]:
    """Build the ordered period list for a scheme and year.

    Weekly periods are 52 consecutive Monday-to-Sunday blocks starting at the
    first Monday on or after January 1st. This is an approximation of ISO
    weeks: days before that Monday and after the 52nd week are not covered,
    while the date mapper still assigns them to week 1 or week 52.
    """

    resolved = parse_scheme(scheme)
    return _GENERATORS[resolved](_validate_year(year))


def week_number(value: date) -> int:
    day_offset = (value - date(value.year, 1, 1)).days
    return min(max(math.ceil((day_offset + 1) / 7), 1), WEEKS_PER_YEAR)


def quarter_number(value: date) -> int:
    return (value.month - 1) // 3 + 1


def map_date_to_period(value: date, periods: list[Period], scheme: PeriodScheme | str) -> str | None:
    """Return the id of the period bucket for ``value``.

    Callers must pass a date from the same year the periods were built for.
    """

    if not periods:
        return None
    resolved = parse_scheme(scheme)
    if resolved is PeriodScheme.WEEKLY:
        return f"week-{week_number(value)}"
    if resolved is PeriodScheme.MONTHLY:
        return f"month-{value.month}"
    if resolved is PeriodScheme.QUARTERLY:
        return f"quarter-{quarter_number(value)}"
    return periods[0].id
