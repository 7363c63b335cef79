"""Structured content of the estimate document (cover, summary, cost tables)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from costledger.services.budget_waterfall import BudgetBreakdown, BudgetRates, calculate_budget, cost_shares
from costledger.services.contributions import ZERO
from costledger.services.formatting import format_clp, format_percent, format_uf

DOCUMENT_TITLE = "ANÁLISIS PRESUPUESTARIO"
DOCUMENT_SUBTITLE = "Informe Detallado de Costos"


@dataclass(slots=True)
class EstimateDocumentInput:
    project_name: str
    materials: Decimal
    labor: Decimal
    equipment: Decimal
    subcontracts: Decimal = ZERO
    area: Decimal | None = None
    location: str | None = None
    issued_on: date | None = None
    risks: Sequence[str] = field(default_factory=list)
    recommendations: Sequence[str] = field(default_factory=list)
    allow_default_area: bool = False


def _row(label: str, amount: Decimal, *, emphasis: bool = False) -> dict[str, object]:
    return {"label": label, "amount": str(amount), "formatted": format_clp(amount), "emphasis": emphasis}


def _direct_rows(breakdown: BudgetBreakdown) -> list[dict[str, object]]:
    direct = breakdown.direct
    rows = [
        _row("Materiales", direct.materials),
        _row("Mano de Obra", direct.labor),
        _row("Equipos", direct.equipment),
    ]
    if direct.subcontracts > ZERO:
        rows.append(_row("Subcontratos", direct.subcontracts))
    rows.append(_row("TOTAL COSTOS DIRECTOS", direct.total, emphasis=True))
    return rows


def _indirect_rows(breakdown: BudgetBreakdown) -> list[dict[str, object]]:
    indirect = breakdown.indirect
    rates = breakdown.rates
    return [
        _row(f"Gastos Generales ({format_percent(rates.overhead_rate)} CD)", indirect.overhead),
        _row(f"Utilidad ({format_percent(rates.profit_rate)} CD+GG)", indirect.profit),
        _row(f"Contingencia ({format_percent(rates.contingency_rate)} CD)", indirect.contingency),
        _row("TOTAL COSTOS INDIRECTOS", indirect.total, emphasis=True),
    ]


def _final_rows(breakdown: BudgetBreakdown) -> list[dict[str, object]]:
    final = breakdown.final
    return [
        _row("Total Costos Directos (CD)", breakdown.direct.total),
        _row("Total Costos Indirectos (CI)", breakdown.indirect.total),
        _row("SUBTOTAL NETO (CD + CI)", final.subtotal),
        _row(f"IVA ({format_percent(breakdown.rates.tax_rate)})", final.tax),
        _row("TOTAL GENERAL", final.total, emphasis=True),
    ]


def build_estimate_document(data: EstimateDocumentInput, *, rates: BudgetRates | None = None) -> dict[str, object]:
    breakdown = calculate_budget(
        data.materials,
        data.labor,
        data.equipment,
        data.subcontracts,
        data.area,
        rates=rates,
        allow_default_area=data.allow_default_area,
    )
    final = breakdown.final
    return {
        "cover": {
            "title": DOCUMENT_TITLE,
            "subtitle": DOCUMENT_SUBTITLE,
            "project_name": data.project_name,
            "location": data.location,
            "area_m2": str(breakdown.area),
            "issued_on": (data.issued_on or date.today()).isoformat(),
        },
        "summary": {
            "total": str(final.total),
            "total_formatted": format_clp(final.total),
            "total_in_unit": str(final.total_in_unit),
            "total_in_unit_formatted": format_uf(final.total_in_unit),
            "unit_price": str(final.unit_price),
            "unit_price_formatted": format_clp(final.unit_price),
        },
        "detail": {
            "direct": _direct_rows(breakdown),
            "indirect": _indirect_rows(breakdown),
            "final": _final_rows(breakdown),
        },
        "shares": {name: str(value) for name, value in cost_shares(breakdown).items()},
        "risks": list(data.risks),
        "recommendations": list(data.recommendations),
        "breakdown": breakdown.to_payload(),
    }
