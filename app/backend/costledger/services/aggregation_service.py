"""Concurrent, failure-tolerant aggregation of cost categories per period."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from costledger.core.config import get_settings
from costledger.core.errors import CategoryAggregationError, SourceUnavailableError
from costledger.services.category_aggregation import (
    DiscoveredCategory,
    PredefinedCategory,
    aggregate_contributions,
    category_display_name,
    category_path,
    contributions_from_records,
    index_categories,
    initialize_empty,
)
from costledger.services.contributions import ZERO, CategorySeries, Contribution, coerce_amount
from costledger.services.ledger_providers import LedgerProviders, LedgerRecord
from costledger.services.periods import Period, PeriodScheme, generate_periods, parse_scheme
from costledger.services.recurring import RecurringObligation, expand_obligation

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


@dataclass(slots=True)
class AggregationResult:
    scheme: PeriodScheme
    year: int
    periods: list[Period]
    predefined: dict[PredefinedCategory, CategorySeries]
    dynamic: dict[str, CategorySeries] = field(default_factory=dict)
    categories: dict[str, DiscoveredCategory] = field(default_factory=dict)

    @property
    def payroll(self) -> CategorySeries:
        return self.predefined[PredefinedCategory.PAYROLL]

    @property
    def factoring(self) -> CategorySeries:
        return self.predefined[PredefinedCategory.FACTORING]

    @property
    def statutory_contributions(self) -> CategorySeries:
        return self.predefined[PredefinedCategory.STATUTORY_CONTRIBUTIONS]

    @property
    def fixed_costs(self) -> CategorySeries:
        return self.predefined[PredefinedCategory.FIXED_COSTS]

    def category_keys(self) -> list[str]:
        return [category.value for category in PredefinedCategory] + list(self.dynamic)

    def series(self, key: str | PredefinedCategory) -> CategorySeries:
        try:
            return self.predefined[PredefinedCategory(key)]
        except ValueError:
            return self.dynamic[str(key)]

    def as_mapping(self) -> dict[str, CategorySeries]:
        return {key: self.series(key) for key in self.category_keys()}

    def display_name(self, key: str) -> str:
        return category_display_name(key, self.categories)

    def path(self, key: str) -> str:
        return category_path(key, self.categories)


@dataclass(slots=True, frozen=True)
class CategoryOutcome:
    key: str
    series: CategorySeries
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def merge_outcomes(periods: list[Period], outcomes: Iterable[CategoryOutcome]) -> tuple[
    dict[PredefinedCategory, CategorySeries],
    dict[str, CategorySeries],
]:
    """Pure reduction of settled outcomes; predefined keys are always filled."""

    predefined = {category: initialize_empty(periods) for category in PredefinedCategory}
    dynamic: dict[str, CategorySeries] = {}
    for outcome in outcomes:
        series = outcome.series if outcome.ok else initialize_empty(periods)
        try:
            predefined[PredefinedCategory(outcome.key)] = series
        except ValueError:
            dynamic[outcome.key] = series
    return predefined, dynamic


def _matches_cost_center(record: LedgerRecord, cost_center_id: UUID | None) -> bool:
    if cost_center_id is None or "cost_center_id" not in record:
        return True
    return str(record["cost_center_id"]) == str(cost_center_id)


def payroll_contributions(records: Iterable[LedgerRecord]) -> list[Contribution]:
    normalized = []
    for record in records:
        amount = coerce_amount(record.get("amount"))
        if amount == ZERO:
            amount = coerce_amount(record.get("net_salary"))
        normalized.append({**record, "amount": amount})
    return contributions_from_records(PredefinedCategory.PAYROLL.value, normalized)


def factoring_contributions(records: Iterable[LedgerRecord]) -> list[Contribution]:
    # Factoring cost is the financed amount times the interest percentage.
    normalized = [
        {
            **record,
            "amount": coerce_amount(record.get("amount")) * coerce_amount(record.get("interest_rate")) / HUNDRED,
        }
        for record in records
    ]
    return contributions_from_records(PredefinedCategory.FACTORING.value, normalized)


def fixed_cost_contributions(records: Iterable[LedgerRecord], year: int) -> list[Contribution]:
    contributions: list[Contribution] = []
    for record in records:
        obligation = RecurringObligation.from_record(record)
        if obligation is None:
            continue
        contributions.extend(expand_obligation(obligation, year, PredefinedCategory.FIXED_COSTS.value))
    return contributions


class FinancialAggregationService:
    """Fan out one task per cost category and merge the settled results."""

    def __init__(self, providers: LedgerProviders, *, strict: bool | None = None) -> None:
        self.providers = providers
        self.strict = get_settings().aggregation_strict_mode if strict is None else strict

    async def aggregate(
        self,
        scheme: PeriodScheme | str,
        year: int,
        cost_center_id: UUID | None = None,
        *,
        strict: bool | None = None,
    ) -> AggregationResult:
        resolved = parse_scheme(scheme)
        # Invalid scheme/year is fatal and raised before any source is touched.
        periods = generate_periods(resolved, year)

        categories = await self._discover_categories()

        tasks: list[tuple[str, Callable[[], Awaitable[list[Contribution]]]]] = [
            (PredefinedCategory.PAYROLL.value, lambda: self._payroll(year, cost_center_id)),
            (PredefinedCategory.FACTORING.value, lambda: self._factoring(year, cost_center_id)),
            (
                PredefinedCategory.STATUTORY_CONTRIBUTIONS.value,
                lambda: self._statutory_contributions(year, cost_center_id),
            ),
            (PredefinedCategory.FIXED_COSTS.value, lambda: self._fixed_costs(year, cost_center_id)),
        ]
        for key, category in categories.items():
            tasks.append((key, self._category_loader(key, category, year, cost_center_id)))

        outcomes = await asyncio.gather(
            *(self._run_category(key, loader, periods, resolved, year) for key, loader in tasks)
        )

        failed = [outcome.key for outcome in outcomes if not outcome.ok]
        if failed and (self.strict if strict is None else strict):
            raise CategoryAggregationError(failed)

        predefined, dynamic = merge_outcomes(periods, outcomes)
        logger.info(
            "Aggregated %d categories for %s %s (%d failed)",
            len(outcomes),
            resolved.value,
            year,
            len(failed),
        )
        return AggregationResult(
            scheme=resolved,
            year=year,
            periods=periods,
            predefined=predefined,
            dynamic=dynamic,
            categories=categories,
        )

    async def _discover_categories(self) -> dict[str, DiscoveredCategory]:
        try:
            discovered = await self.providers.category_directory.list_active_categories()
            indexed = index_categories(discovered or [])
        except Exception:
            logger.error("Category directory unavailable; continuing with predefined categories only", exc_info=True)
            return {}
        reserved = {category.value for category in PredefinedCategory}
        for key in reserved.intersection(indexed):
            logger.warning("Discovered category key '%s' shadows a predefined category; ignored", key)
            del indexed[key]
        return indexed

    async def _run_category(
        self,
        key: str,
        loader: Callable[[], Awaitable[list[Contribution]]],
        periods: list[Period],
        scheme: PeriodScheme,
        year: int,
    ) -> CategoryOutcome:
        try:
            contributions = await loader()
            series = aggregate_contributions(contributions, periods, scheme, year)
        except Exception as exc:
            logger.warning("Category '%s' failed; reporting zero series", key, exc_info=True)
            return CategoryOutcome(key=key, series=initialize_empty(periods), error=SourceUnavailableError(key, str(exc)))
        return CategoryOutcome(key=key, series=series)

    async def _payroll(self, year: int, cost_center_id: UUID | None) -> list[Contribution]:
        records = await self.providers.payroll.list_records(year, cost_center_id)
        return payroll_contributions(r for r in records if _matches_cost_center(r, cost_center_id))

    async def _factoring(self, year: int, cost_center_id: UUID | None) -> list[Contribution]:
        records = await self.providers.factoring.list_records(year, cost_center_id)
        return factoring_contributions(r for r in records if _matches_cost_center(r, cost_center_id))

    async def _statutory_contributions(self, year: int, cost_center_id: UUID | None) -> list[Contribution]:
        records = await self.providers.statutory_contributions.list_records(year, cost_center_id)
        return contributions_from_records(
            PredefinedCategory.STATUTORY_CONTRIBUTIONS.value,
            (r for r in records if _matches_cost_center(r, cost_center_id)),
        )

    async def _fixed_costs(self, year: int, cost_center_id: UUID | None) -> list[Contribution]:
        records = await self.providers.fixed_costs.list_records(year, cost_center_id)
        return fixed_cost_contributions((r for r in records if _matches_cost_center(r, cost_center_id)), year)

    def _category_loader(
        self,
        key: str,
        category: DiscoveredCategory,
        year: int,
        cost_center_id: UUID | None,
    ) -> Callable[[], Awaitable[list[Contribution]]]:
        async def load() -> list[Contribution]:
            items = await self.providers.category_items.list_items(category, year, cost_center_id)
            return contributions_from_records(key, (r for r in items if _matches_cost_center(r, cost_center_id)))

        return load
