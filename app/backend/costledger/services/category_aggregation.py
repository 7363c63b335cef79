"""Per-category, per-period bucketing of contributions."""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from costledger.models.entities import AccountCategoryType
from costledger.services.contributions import ZERO, CategorySeries, Contribution, coerce_amount, coerce_date
from costledger.services.periods import Period, PeriodScheme, map_date_to_period

logger = logging.getLogger(__name__)

CATEGORY_NAME_KEY_LENGTH = 20
_NON_ALNUM = re.compile(r"[^a-z0-9]")

CATEGORY_PATHS = {
    AccountCategoryType.MANO_OBRA.value: "/costos/mano-obra",
    AccountCategoryType.MAQUINARIA.value: "/costos/maquinaria",
    AccountCategoryType.MATERIALES.value: "/costos/materiales",
    AccountCategoryType.COMBUSTIBLES.value: "/costos/combustibles",
    AccountCategoryType.GASTOS_GENERALES.value: "/costos/gastos-generales",
}
OTHER_CATEGORY_PATH = "/costos/otros"
UNKNOWN_CATEGORY_PATH = "/costos/categorias"


class PredefinedCategory(str, enum.Enum):
    PAYROLL = "payroll"
    FACTORING = "factoring"
    STATUTORY_CONTRIBUTIONS = "statutory_contributions"
    FIXED_COSTS = "fixed_costs"

    @property
    def display_name(self) -> str:
        return _PREDEFINED_LABELS[self]

    @property
    def path(self) -> str:
        return _PREDEFINED_PATHS[self]


_PREDEFINED_LABELS = {
    PredefinedCategory.PAYROLL: "Remuneraciones",
    PredefinedCategory.FACTORING: "Factoring",
    PredefinedCategory.STATUTORY_CONTRIBUTIONS: "Previsionales",
    PredefinedCategory.FIXED_COSTS: "Costos Fijos",
}
_PREDEFINED_PATHS = {
    PredefinedCategory.PAYROLL: "/costos/remuneraciones",
    PredefinedCategory.FACTORING: "/costos/factoring",
    PredefinedCategory.STATUTORY_CONTRIBUTIONS: "/costos/previsionales",
    PredefinedCategory.FIXED_COSTS: "/costos/costos-fijos",
}


@dataclass(slots=True, frozen=True)
class DiscoveredCategory:
    """Active account category as returned by the category directory."""

    id: object
    type_code: str
    name: str

    @property
    def key(self) -> str:
        return category_key(self.type_code, self.name)


def sanitize_category_name(name: str) -> str:
    return _NON_ALNUM.sub("", name.lower())[:CATEGORY_NAME_KEY_LENGTH]


def category_key(type_code: str, name: str) -> str:
    return f"{type_code.lower()}_{sanitize_category_name(name)}"


def index_categories(categories: Iterable[DiscoveredCategory]) -> dict[str, DiscoveredCategory]:
    """Key categories by slug; on a collision the later category wins."""

    indexed: dict[str, DiscoveredCategory] = {}
    for category in categories:
        key = category.key
        previous = indexed.get(key)
        if previous is not None and previous.id != category.id:
            logger.warning(
                "Category key collision on '%s': '%s' replaces '%s'",
                key,
                category.name,
                previous.name,
            )
        indexed[key] = category
    return indexed


def initialize_empty(periods: list[Period]) -> CategorySeries:
    return {period.id: ZERO for period in periods}


def accumulate(
    series: CategorySeries,
    contribution: Contribution,
    periods: list[Period],
    scheme: PeriodScheme | str,
) -> CategorySeries:
    period_id = map_date_to_period(contribution.date, periods, scheme)
    if period_id is None or period_id not in series:
        return series
    series[period_id] += coerce_amount(contribution.amount)
    return series


def aggregate_contributions(
    contributions: Iterable[Contribution],
    periods: list[Period],
    scheme: PeriodScheme | str,
    year: int,
) -> CategorySeries:
    """Fold contributions dated in ``year`` into a fresh zero-filled series."""

    series = initialize_empty(periods)
    for contribution in contributions:
        if contribution.date.year != year:
            continue
        accumulate(series, contribution, periods, scheme)
    return series


def contributions_from_records(
    category: str,
    records: Iterable[Mapping[str, object]],
    *,
    date_field: str = "date",
    amount_field: str = "amount",
) -> list[Contribution]:
    """Turn raw provider records into contributions; undated records are dropped."""

    contributions: list[Contribution] = []
    for record in records:
        record_date = coerce_date(record.get(date_field))
        if record_date is None:
            continue
        contributions.append(
            Contribution(
                category_key=category,
                date=record_date,
                amount=coerce_amount(record.get(amount_field)),
                dimension_tags={
                    key: value for key, value in record.items() if key not in {date_field, amount_field}
                },
            )
        )
    return contributions


def series_sum(series: Mapping[str, Decimal]) -> Decimal:
    return sum(series.values(), ZERO)


def category_display_name(key: str, categories: Mapping[str, DiscoveredCategory]) -> str:
    try:
        return PredefinedCategory(key).display_name
    except ValueError:
        pass
    category = categories.get(key)
    if category is not None:
        return category.name
    _, _, tail = key.partition("_")
    return tail.replace("_", " ") if tail else key


def category_path(key: str, categories: Mapping[str, DiscoveredCategory]) -> str:
    try:
        return PredefinedCategory(key).path
    except ValueError:
        pass
    category = categories.get(key)
    if category is None:
        return UNKNOWN_CATEGORY_PATH
    return CATEGORY_PATHS.get(category.type_code.lower(), OTHER_CATEGORY_PATH)


def group_by_type(categories: Iterable[DiscoveredCategory]) -> dict[str, list[DiscoveredCategory]]:
    grouped: dict[str, list[DiscoveredCategory]] = {}
    for category in categories:
        grouped.setdefault(category.type_code.lower(), []).append(category)
    return grouped
