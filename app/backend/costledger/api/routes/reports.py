"""Cost and cash-flow report endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import sessionmaker

from costledger.db.dependencies import get_session_factory
from costledger.services.aggregation_service import FinancialAggregationService
from costledger.services.cash_flow_service import CashFlowService, serialize_cash_flow_report, serialize_cost_report
from costledger.services.ledger_providers import SqlIncomeProvider, sql_ledger_providers

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/costs")
async def get_cost_report(
    year: int = Query(...),
    scheme: str = Query(default="monthly"),
    cost_center_id: UUID | None = Query(default=None),
    request_tag: str | None = Query(default=None, max_length=128),
    strict: bool | None = Query(default=None),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> dict[str, object]:
    service = FinancialAggregationService(sql_ledger_providers(session_factory))
    result = await service.aggregate(scheme, year, cost_center_id, strict=strict)
    return serialize_cost_report(result, request_tag=request_tag)


@router.get("/cash-flow")
async def get_cash_flow_report(
    year: int = Query(...),
    scheme: str = Query(default="monthly"),
    cost_center_id: UUID | None = Query(default=None),
    request_tag: str | None = Query(default=None, max_length=128),
    strict: bool | None = Query(default=None),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> dict[str, object]:
    service = CashFlowService(sql_ledger_providers(session_factory), SqlIncomeProvider(session_factory))
    report = await service.build(scheme, year, cost_center_id, strict=strict)
    return serialize_cash_flow_report(report, request_tag=request_tag)
