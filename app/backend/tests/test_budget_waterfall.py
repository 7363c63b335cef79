from __future__ import annotations

from decimal import Decimal

import pytest

from costledger.core.config import Settings
from costledger.core.errors import ConfigurationInvariantError
from costledger.services.budget_waterfall import (
    BudgetRates,
    breakdown_from_line_items,
    calculate_budget,
    cost_shares,
    sum_line_items,
)

RATES = BudgetRates.from_settings(Settings())


def test_reference_estimate() -> None:
    breakdown = calculate_budget(1_000_000, 2_000_000, 500_000, 0, 100, rates=RATES)

    assert breakdown.direct.total == Decimal("3500000.00")
    assert breakdown.indirect.overhead == Decimal("420000.00")
    assert breakdown.indirect.profit == Decimal("392000.00")
    assert breakdown.indirect.contingency == Decimal("175000.00")
    assert breakdown.indirect.total == Decimal("987000.00")
    assert breakdown.final.subtotal == Decimal("4487000.00")
    assert breakdown.final.tax == Decimal("852530.00")
    assert breakdown.final.total == Decimal("5339530.00")
    assert breakdown.final.unit_price == Decimal("53395.30")
    assert breakdown.final.total_in_unit == Decimal("148.32")


def test_layers_add_up_exactly() -> None:
    breakdown = calculate_budget("123456.78", "98765.43", "5555.55", "777.77", "87.5", rates=RATES)

    direct = breakdown.direct
    assert direct.total == direct.materials + direct.labor + direct.equipment + direct.subcontracts
    assert breakdown.indirect.total == (
        breakdown.indirect.overhead + breakdown.indirect.profit + breakdown.indirect.contingency
    )
    assert breakdown.final.total == direct.total + breakdown.indirect.total + breakdown.final.tax
    assert abs(breakdown.final.unit_price * Decimal("87.5") - breakdown.final.total) <= Decimal("0.01") * Decimal(
        "87.5"
    )


def test_rates_come_from_configuration() -> None:
    rates = BudgetRates.from_settings(
        Settings(
            budget_overhead_rate=Decimal("0"),
            budget_profit_rate=Decimal("0"),
            budget_contingency_rate=Decimal("0"),
            budget_tax_rate=Decimal("0"),
        )
    )

    breakdown = calculate_budget(100, 200, 300, area=10, rates=rates)

    assert breakdown.final.total == Decimal("600.00")
    assert breakdown.final.unit_price == Decimal("60.00")


@pytest.mark.parametrize("area", [None, 0, -5, "0"])
def test_missing_or_non_positive_area_is_rejected(area: object) -> None:
    with pytest.raises(ConfigurationInvariantError):
        calculate_budget(1, 1, 1, 0, area, rates=RATES)


def test_default_area_is_opt_in() -> None:
    breakdown = calculate_budget(1_000_000, 2_000_000, 500_000, rates=RATES, allow_default_area=True)

    assert breakdown.area == Decimal("100")
    assert breakdown.final.unit_price == Decimal("53395.30")


@pytest.mark.parametrize("field", ["materials", "labor", "equipment", "subcontracts"])
def test_negative_direct_costs_are_rejected(field: str) -> None:
    values = {"materials": 1, "labor": 1, "equipment": 1, "subcontracts": 0, field: -1}

    with pytest.raises(ConfigurationInvariantError, match=field):
        calculate_budget(area=10, rates=RATES, **values)


@pytest.mark.parametrize("value", ["abc", "NaN", True, None])
def test_non_numeric_inputs_are_rejected(value: object) -> None:
    with pytest.raises(ConfigurationInvariantError):
        calculate_budget(value, 1, 1, area=10, rates=RATES)


def test_cost_shares() -> None:
    shares = cost_shares(calculate_budget(1_000_000, 2_000_000, 500_000, area=100, rates=RATES))

    assert shares == {
        "materials_percentage": Decimal("28.57"),
        "labor_percentage": Decimal("57.14"),
        "equipment_percentage": Decimal("14.29"),
        "overhead_percentage": Decimal("28.20"),
    }


def test_cost_shares_of_empty_budget_are_zero() -> None:
    shares = cost_shares(calculate_budget(0, 0, 0, area=1, rates=RATES))

    assert set(shares.values()) == {Decimal("0")}


def test_line_items_are_summed_leniently() -> None:
    items = [{"subtotal": "1000.50"}, {"subtotal": None}, {"subtotal": "x"}, {}, {"subtotal": 499.5}]

    assert sum_line_items(items) == Decimal("1500.00")
    assert sum_line_items(None) == Decimal("0")


def test_breakdown_from_line_items() -> None:
    breakdown = breakdown_from_line_items(
        [{"subtotal": 600_000}, {"subtotal": 400_000}],
        [{"subtotal": 2_000_000}],
        [{"subtotal": 500_000}],
        area=100,
        rates=RATES,
    )

    assert breakdown.final.total == Decimal("5339530.00")
