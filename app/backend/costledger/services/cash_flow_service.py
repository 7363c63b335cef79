"""Cost and cash-flow report builders on top of the aggregation result."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from costledger.services.accumulation import CashFlowTotals, cash_flow_totals, cumulative, period_totals, series_total
from costledger.services.aggregation_service import AggregationResult, FinancialAggregationService
from costledger.services.category_aggregation import (
    aggregate_contributions,
    contributions_from_records,
    initialize_empty,
    sanitize_category_name,
)
from costledger.services.contributions import CategorySeries, q2
from costledger.services.formatting import format_clp
from costledger.services.ledger_providers import IncomeCategoryRef, IncomeProvider, LedgerProviders
from costledger.services.periods import Period, PeriodScheme, generate_periods, parse_scheme

logger = logging.getLogger(__name__)

INCOME_PATH = "/ingresos"


@dataclass(slots=True)
class IncomeSeries:
    key: str
    name: str
    series: CategorySeries
    failed: bool = False


@dataclass(slots=True)
class CashFlowReport:
    scheme: PeriodScheme
    year: int
    periods: list[Period]
    income: list[IncomeSeries]
    expenses: AggregationResult
    totals: CashFlowTotals
    failed_income: list[str] = field(default_factory=list)


def income_key(category: IncomeCategoryRef) -> str:
    return f"income_{sanitize_category_name(category.name)}"


def _amounts(series: Mapping[str, Decimal], periods: list[Period]) -> dict[str, str]:
    return {period.id: str(q2(series[period.id])) for period in periods}


def _formatted(series: Mapping[str, Decimal], periods: list[Period]) -> dict[str, str]:
    return {period.id: format_clp(series[period.id]) for period in periods}


def serialize_period(period: Period) -> dict[str, object]:
    return {
        "id": period.id,
        "ordinal": period.ordinal,
        "label": period.label,
        "start_date": period.start_date.isoformat(),
        "end_date": period.end_date.isoformat(),
    }


def _serialize_row(key: str, name: str, path: str, series: CategorySeries, periods: list[Period]) -> dict[str, object]:
    total = q2(series_total(series))
    return {
        "key": key,
        "name": name,
        "path": path,
        "amounts": _amounts(series, periods),
        "formatted": _formatted(series, periods),
        "total": str(total),
        "total_formatted": format_clp(total),
    }


def _serialize_series(series: CategorySeries, periods: list[Period]) -> dict[str, object]:
    return {"amounts": _amounts(series, periods), "formatted": _formatted(series, periods)}


def serialize_cost_report(result: AggregationResult, *, request_tag: str | None = None) -> dict[str, object]:
    periods = result.periods
    series_by_key = result.as_mapping()
    totals = period_totals(series_by_key.values(), periods)
    grand = q2(series_total(totals))
    return {
        "scheme": result.scheme.value,
        "year": result.year,
        "request_tag": request_tag,
        "periods": [serialize_period(period) for period in periods],
        "rows": [
            _serialize_row(key, result.display_name(key), result.path(key), series, periods)
            for key, series in series_by_key.items()
        ],
        "totals": _serialize_series(totals, periods),
        "cumulative": _serialize_series(cumulative(totals, periods), periods),
        "grand_total": str(grand),
        "grand_total_formatted": format_clp(grand),
    }


def serialize_cash_flow_report(report: CashFlowReport, *, request_tag: str | None = None) -> dict[str, object]:
    periods = report.periods
    expenses = report.expenses
    totals = report.totals
    return {
        "scheme": report.scheme.value,
        "year": report.year,
        "request_tag": request_tag,
        "periods": [serialize_period(period) for period in periods],
        "income": [
            _serialize_row(item.key, item.name, INCOME_PATH, item.series, periods) for item in report.income
        ],
        "expenses": [
            _serialize_row(key, expenses.display_name(key), expenses.path(key), series, periods)
            for key, series in expenses.as_mapping().items()
        ],
        "totals": {
            "income": _serialize_series(totals.income, periods),
            "expense": _serialize_series(totals.expense, periods),
            "net": _serialize_series(totals.net, periods),
        },
        "cumulative": {
            "income": _serialize_series(totals.cumulative_income, periods),
            "expense": _serialize_series(totals.cumulative_expense, periods),
            "net": _serialize_series(totals.cumulative_net, periods),
        },
        "grand_total": {
            "income": str(q2(totals.grand_total_income)),
            "expense": str(q2(totals.grand_total_expense)),
            "net": str(q2(totals.grand_total_net)),
        },
        "failed_income": report.failed_income,
    }


class CashFlowService:
    """Income per income category against the aggregated cost categories."""

    def __init__(self, providers: LedgerProviders, income: IncomeProvider, *, strict: bool | None = None) -> None:
        self.income = income
        self.aggregation = FinancialAggregationService(providers, strict=strict)

    async def build(
        self,
        scheme: PeriodScheme | str,
        year: int,
        cost_center_id: UUID | None = None,
        *,
        strict: bool | None = None,
    ) -> CashFlowReport:
        resolved = parse_scheme(scheme)
        periods = generate_periods(resolved, year)

        expenses, income = await asyncio.gather(
            self.aggregation.aggregate(resolved, year, cost_center_id, strict=strict),
            self._income(periods, resolved, year, cost_center_id),
            return_exceptions=True,
        )
        if isinstance(expenses, BaseException):
            raise expenses
        if isinstance(income, BaseException):
            raise income
        totals = cash_flow_totals(
            (item.series for item in income),
            expenses.as_mapping().values(),
            periods,
        )
        return CashFlowReport(
            scheme=resolved,
            year=year,
            periods=periods,
            income=income,
            expenses=expenses,
            totals=totals,
            failed_income=[item.key for item in income if item.failed],
        )

    async def _income(
        self,
        periods: list[Period],
        scheme: PeriodScheme,
        year: int,
        cost_center_id: UUID | None,
    ) -> list[IncomeSeries]:
        try:
            categories = await self.income.list_categories()
        except Exception:
            logger.error("Income categories unavailable; reporting no income rows", exc_info=True)
            return []
        return list(
            await asyncio.gather(
                *(self._income_category(category, periods, scheme, year, cost_center_id) for category in categories)
            )
        )

    async def _income_category(
        self,
        category: IncomeCategoryRef,
        periods: list[Period],
        scheme: PeriodScheme,
        year: int,
        cost_center_id: UUID | None,
    ) -> IncomeSeries:
        key = income_key(category)
        try:
            records = await self.income.list_records(category, year, cost_center_id)
            series = aggregate_contributions(contributions_from_records(key, records), periods, scheme, year)
        except Exception:
            logger.warning("Income category '%s' failed; reporting zero series", category.name, exc_info=True)
            return IncomeSeries(key=key, name=category.name, series=initialize_empty(periods), failed=True)
        return IncomeSeries(key=key, name=category.name, series=series)
