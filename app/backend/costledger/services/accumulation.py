"""Running totals over chronologically ordered period series."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from costledger.services.contributions import ZERO, CategorySeries
from costledger.services.periods import Period


def cumulative(series: Mapping[str, Decimal], periods: list[Period]) -> CategorySeries:
    """Running sum in the order of ``periods``; ids missing from the series count as zero."""

    running = ZERO
    accumulated: CategorySeries = {}
    for period in periods:
        running += series.get(period.id, ZERO)
        accumulated[period.id] = running
    return accumulated


def period_totals(series_list: Iterable[Mapping[str, Decimal]], periods: list[Period]) -> CategorySeries:
    totals: CategorySeries = {period.id: ZERO for period in periods}
    for series in series_list:
        for period in periods:
            totals[period.id] += series.get(period.id, ZERO)
    return totals


def net_series(
    income: Mapping[str, Decimal],
    expense: Mapping[str, Decimal],
    periods: list[Period],
) -> CategorySeries:
    return {period.id: income.get(period.id, ZERO) - expense.get(period.id, ZERO) for period in periods}


def series_total(series: Mapping[str, Decimal]) -> Decimal:
    return sum(series.values(), ZERO)


def grand_total(series_list: Iterable[Mapping[str, Decimal]]) -> Decimal:
    return sum((series_total(series) for series in series_list), ZERO)


@dataclass(slots=True)
class CashFlowTotals:
    income: CategorySeries
    expense: CategorySeries
    net: CategorySeries
    cumulative_income: CategorySeries
    cumulative_expense: CategorySeries
    cumulative_net: CategorySeries

    @property
    def grand_total_income(self) -> Decimal:
        return series_total(self.income)

    @property
    def grand_total_expense(self) -> Decimal:
        return series_total(self.expense)

    @property
    def grand_total_net(self) -> Decimal:
        return self.grand_total_income - self.grand_total_expense


def cash_flow_totals(
    income_series: Iterable[Mapping[str, Decimal]],
    expense_series: Iterable[Mapping[str, Decimal]],
    periods: list[Period],
) -> CashFlowTotals:
    """Net is taken per period first and then accumulated."""

    income = period_totals(income_series, periods)
    expense = period_totals(expense_series, periods)
    net = net_series(income, expense, periods)
    return CashFlowTotals(
        income=income,
        expense=expense,
        net=net,
        cumulative_income=cumulative(income, periods),
        cumulative_expense=cumulative(expense, periods),
        cumulative_net=cumulative(net, periods),
    )
