"""Budget waterfall: direct costs, indirect layers, tax and unit prices.

This is the single implementation of the estimate arithmetic. The estimate
endpoint and the estimate document both call ``calculate_budget``; policy rates
come from settings through ``BudgetRates`` and are never repeated elsewhere.

Every layer is rounded to cents before it feeds the next one, so the additive
identities (``indirect.total = overhead + profit + contingency``,
``final.total = direct.total + indirect.total + tax``) hold exactly.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation

from costledger.core.config import Settings, get_settings
from costledger.core.errors import ConfigurationInvariantError
from costledger.services.contributions import ZERO, coerce_amount, q2

HUNDRED = Decimal("100")


@dataclass(slots=True, frozen=True)
class BudgetRates:
    overhead_rate: Decimal
    profit_rate: Decimal
    contingency_rate: Decimal
    tax_rate: Decimal
    unit_conversion: Decimal
    default_area: Decimal

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> BudgetRates:
        settings = settings or get_settings()
        return cls(
            overhead_rate=settings.budget_overhead_rate,
            profit_rate=settings.budget_profit_rate,
            contingency_rate=settings.budget_contingency_rate,
            tax_rate=settings.budget_tax_rate,
            unit_conversion=settings.budget_unit_conversion,
            default_area=settings.budget_default_area_m2,
        )


@dataclass(slots=True, frozen=True)
class DirectCosts:
    materials: Decimal
    labor: Decimal
    equipment: Decimal
    subcontracts: Decimal
    total: Decimal


@dataclass(slots=True, frozen=True)
class IndirectCosts:
    overhead: Decimal
    profit: Decimal
    contingency: Decimal
    total: Decimal


@dataclass(slots=True, frozen=True)
class FinalBudget:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    total_in_unit: Decimal
    unit_price: Decimal


@dataclass(slots=True, frozen=True)
class BudgetBreakdown:
    direct: DirectCosts
    indirect: IndirectCosts
    final: FinalBudget
    area: Decimal
    rates: BudgetRates

    def to_payload(self) -> dict[str, dict[str, str]]:
        return {
            section: {name: str(value) for name, value in asdict(getattr(self, section)).items()}
            for section in ("direct", "indirect", "final")
        }


def _to_decimal(value: object, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationInvariantError(f"{field_name} must be a number.")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ConfigurationInvariantError(f"{field_name} must be a number.") from exc
    if not amount.is_finite():
        raise ConfigurationInvariantError(f"{field_name} must be finite.")
    return amount


def _resolve_area(area: object, rates: BudgetRates, allow_default_area: bool) -> Decimal:
    resolved = None if area is None else _to_decimal(area, "area")
    if resolved is not None and resolved > ZERO:
        return resolved
    if allow_default_area:
        return rates.default_area
    raise ConfigurationInvariantError("area must be greater than zero.")


def calculate_budget(
    materials: object,
    labor: object,
    equipment: object,
    subcontracts: object = ZERO,
    area: object = None,
    *,
    rates: BudgetRates | None = None,
    allow_default_area: bool = False,
) -> BudgetBreakdown:
    """Compute the full budget breakdown from direct costs and built area.

    A missing or non-positive area is a contract violation unless the caller
    opts into the configured default area with ``allow_default_area``.
    """

    rates = rates or BudgetRates.from_settings()
    direct_inputs = {
        "materials": _to_decimal(materials, "materials"),
        "labor": _to_decimal(labor, "labor"),
        "equipment": _to_decimal(equipment, "equipment"),
        "subcontracts": _to_decimal(subcontracts, "subcontracts"),
    }
    for name, value in direct_inputs.items():
        if value < ZERO:
            raise ConfigurationInvariantError(f"{name} must be greater or equal zero.")
    resolved_area = _resolve_area(area, rates, allow_default_area)

    direct_values = {name: q2(value) for name, value in direct_inputs.items()}
    direct_total = q2(sum(direct_values.values(), ZERO))
    direct = DirectCosts(total=direct_total, **direct_values)

    overhead = q2(direct_total * rates.overhead_rate)
    # Profit is charged on direct costs plus overhead.
    profit = q2((direct_total + overhead) * rates.profit_rate)
    contingency = q2(direct_total * rates.contingency_rate)
    indirect = IndirectCosts(
        overhead=overhead,
        profit=profit,
        contingency=contingency,
        total=overhead + profit + contingency,
    )

    subtotal = direct.total + indirect.total
    tax = q2(subtotal * rates.tax_rate)
    total = subtotal + tax
    final = FinalBudget(
        subtotal=subtotal,
        tax=tax,
        total=total,
        total_in_unit=q2(total / rates.unit_conversion),
        unit_price=q2(total / resolved_area),
    )
    return BudgetBreakdown(direct=direct, indirect=indirect, final=final, area=resolved_area, rates=rates)


def sum_line_items(items: Iterable[Mapping[str, object]] | None, field_name: str = "subtotal") -> Decimal:
    """Sum line-item subtotals; malformed or missing values count as zero."""

    return sum((coerce_amount(item.get(field_name)) for item in items or ()), ZERO)


def breakdown_from_line_items(
    materials_items: Iterable[Mapping[str, object]] | None,
    labor_items: Iterable[Mapping[str, object]] | None,
    equipment_items: Iterable[Mapping[str, object]] | None,
    subcontracts: object = ZERO,
    area: object = None,
    *,
    rates: BudgetRates | None = None,
    allow_default_area: bool = False,
) -> BudgetBreakdown:
    """Recompute the waterfall from itemized analysis results."""

    return calculate_budget(
        sum_line_items(materials_items),
        sum_line_items(labor_items),
        sum_line_items(equipment_items),
        subcontracts,
        area,
        rates=rates,
        allow_default_area=allow_default_area,
    )


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole == ZERO:
        return ZERO
    return q2(part * HUNDRED / whole)


def cost_shares(breakdown: BudgetBreakdown) -> dict[str, Decimal]:
    """Shares of the direct total, in percent."""

    direct_total = breakdown.direct.total
    return {
        "materials_percentage": _percent(breakdown.direct.materials, direct_total),
        "labor_percentage": _percent(breakdown.direct.labor, direct_total),
        "equipment_percentage": _percent(breakdown.direct.equipment, direct_total),
        "overhead_percentage": _percent(breakdown.indirect.total, direct_total),
    }
