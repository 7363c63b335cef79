"""Budget estimate endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from costledger.services.budget_waterfall import breakdown_from_line_items, calculate_budget, cost_shares
from costledger.services.estimate_document import EstimateDocumentInput, build_estimate_document

router = APIRouter(prefix="/budgets", tags=["budgets"])


class LineItemPayload(BaseModel):
    description: str = Field(default="", max_length=500)
    quantity: Decimal | None = None
    unit: str | None = Field(default=None, max_length=32)
    unit_price: Decimal | None = None
    subtotal: Decimal | None = None


class EstimatePayload(BaseModel):
    materials: Decimal = Decimal("0")
    labor: Decimal = Decimal("0")
    equipment: Decimal = Decimal("0")
    subcontracts: Decimal = Decimal("0")
    area: Decimal | None = None
    use_default_area: bool = False


class ItemizedEstimatePayload(BaseModel):
    materials_items: list[LineItemPayload] = Field(default_factory=list)
    labor_items: list[LineItemPayload] = Field(default_factory=list)
    equipment_items: list[LineItemPayload] = Field(default_factory=list)
    subcontracts: Decimal = Decimal("0")
    area: Decimal | None = None
    use_default_area: bool = False


class EstimateDocumentPayload(EstimatePayload):
    project_name: str = Field(min_length=1, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    issued_on: date | None = None
    risks: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


@router.post("/estimate")
def estimate(payload: EstimatePayload) -> dict[str, object]:
    breakdown = calculate_budget(
        payload.materials,
        payload.labor,
        payload.equipment,
        payload.subcontracts,
        payload.area,
        allow_default_area=payload.use_default_area,
    )
    return {
        **breakdown.to_payload(),
        "area": str(breakdown.area),
        "shares": {name: str(value) for name, value in cost_shares(breakdown).items()},
    }


@router.post("/estimate-itemized")
def estimate_itemized(payload: ItemizedEstimatePayload) -> dict[str, object]:
    breakdown = breakdown_from_line_items(
        [item.model_dump() for item in payload.materials_items],
        [item.model_dump() for item in payload.labor_items],
        [item.model_dump() for item in payload.equipment_items],
        payload.subcontracts,
        payload.area,
        allow_default_area=payload.use_default_area,
    )
    return {
        **breakdown.to_payload(),
        "area": str(breakdown.area),
        "shares": {name: str(value) for name, value in cost_shares(breakdown).items()},
    }


@router.post("/estimate-document")
def estimate_document(payload: EstimateDocumentPayload) -> dict[str, object]:
    return build_estimate_document(
        EstimateDocumentInput(
            project_name=payload.project_name,
            materials=payload.materials,
            labor=payload.labor,
            equipment=payload.equipment,
            subcontracts=payload.subcontracts,
            area=payload.area,
            location=payload.location,
            issued_on=payload.issued_on,
            risks=payload.risks,
            recommendations=payload.recommendations,
            allow_default_area=payload.use_default_area,
        )
    )
