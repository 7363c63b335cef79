from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from costledger.core.errors import SourceUnavailableError
from costledger.db.dependencies import get_session_factory
from costledger.models.entities import (
    AccountCategory,
    CostCenter,
    FactoringOperation,
    FixedCost,
    IncomeCategory,
    IncomeEntry,
    PayrollEntry,
    PurchaseOrderItem,
    StatutoryContribution,
)
from costledger.services.ledger_providers import SqlPayrollProvider


def _create_cost_center(db: Session, *, code: str, name: str) -> CostCenter:
    row = CostCenter(code=code, name=name, active=True, created_at=datetime.utcnow())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _seed_ledger(db: Session) -> tuple[uuid.UUID, uuid.UUID]:
    site = _create_cost_center(db, code="OB-01", name="Obra Los Aromos")
    other = _create_cost_center(db, code="OB-02", name="Obra El Roble")
    cement = AccountCategory(code="MAT-01", name="Cemento", type_code="materiales", active=True)
    retired = AccountCategory(code="MAT-99", name="Obsoleto", type_code="materiales", active=False)
    sales = IncomeCategory(name="Estados de Pago", active=True)
    db.add_all([cement, retired, sales])
    db.flush()
    db.add_all(
        [
            PayrollEntry(
                cost_center_id=site.id,
                employee_name="Juan Pérez",
                period_year=2024,
                period_month=1,
                payment_date=date(2024, 1, 31),
                amount=Decimal("1500000"),
                net_salary=Decimal("1200000"),
            ),
            PayrollEntry(
                cost_center_id=site.id,
                employee_name="María Soto",
                period_year=2024,
                period_month=2,
                payment_date=None,
                amount=None,
                net_salary=Decimal("900000"),
            ),
            PayrollEntry(
                cost_center_id=other.id,
                employee_name="Pedro Rojas",
                period_year=2024,
                period_month=1,
                payment_date=date(2024, 1, 31),
                amount=Decimal("1000000"),
                net_salary=Decimal("800000"),
            ),
            FactoringOperation(
                cost_center_id=site.id,
                entity_name="Banco Sur",
                factoring_date=date(2024, 3, 10),
                amount=Decimal("1000000"),
                interest_rate=Decimal("2.5"),
            ),
            StatutoryContribution(
                cost_center_id=site.id,
                employee_name="Juan Pérez",
                contribution_type="AFP",
                contribution_date=date(2024, 4, 15),
                amount=Decimal("250000"),
            ),
            FixedCost(
                cost_center_id=site.id,
                name="Arriendo bodega",
                start_date=date(2023, 12, 15),
                quota_count=3,
                quota_value=Decimal("100000"),
            ),
            PurchaseOrderItem(
                account_category_id=cement.id,
                cost_center_id=site.id,
                order_number="OC-100",
                description="Cemento especial",
                item_date=date(2024, 5, 20),
                total=Decimal("800000"),
            ),
            PurchaseOrderItem(
                account_category_id=retired.id,
                cost_center_id=site.id,
                order_number="OC-101",
                description="Item histórico",
                item_date=date(2024, 5, 21),
                total=Decimal("999999"),
            ),
            IncomeEntry(
                income_category_id=sales.id,
                cost_center_id=site.id,
                document_number="EP-1",
                income_date=date(2024, 6, 30),
                total_amount=Decimal("6000000"),
            ),
        ]
    )
    db.commit()
    return site.id, other.id


def test_periods_endpoint(client: TestClient) -> None:
    response = client.get("/api/v1/periods", params={"scheme": "quarterly", "year": 2024})

    assert response.status_code == 200
    body = response.json()
    assert body["scheme"] == "quarterly"
    assert [item["id"] for item in body["items"]] == ["quarter-1", "quarter-2", "quarter-3", "quarter-4"]
    assert body["items"][0]["start_date"] == "2024-01-01"


def test_periods_endpoint_rejects_unknown_scheme(client: TestClient) -> None:
    response = client.get("/api/v1/periods", params={"scheme": "fortnightly", "year": 2024})

    assert response.status_code == 422
    assert "fortnightly" in response.json()["detail"]


def test_cost_report_aggregates_all_sources(client: TestClient, db_session: Session) -> None:
    site_id, _ = _seed_ledger(db_session)

    response = client.get(
        "/api/v1/reports/costs",
        params={"scheme": "monthly", "year": 2024, "cost_center_id": str(site_id), "request_tag": "req-7"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["request_tag"] == "req-7"
    rows = {row["key"]: row for row in body["rows"]}
    assert list(rows) == ["payroll", "factoring", "statutory_contributions", "fixed_costs", "materiales_cemento"]
    assert rows["payroll"]["amounts"]["month-1"] == "1500000.00"
    assert rows["payroll"]["amounts"]["month-2"] == "900000.00"
    assert rows["factoring"]["amounts"]["month-3"] == "25000.00"
    assert rows["statutory_contributions"]["amounts"]["month-4"] == "250000.00"
    assert rows["fixed_costs"]["amounts"]["month-1"] == "100000.00"
    assert rows["fixed_costs"]["amounts"]["month-2"] == "100000.00"
    assert rows["fixed_costs"]["amounts"]["month-3"] == "0.00"
    assert rows["materiales_cemento"]["path"] == "/costos/materiales"
    assert rows["materiales_cemento"]["total_formatted"] == "$800.000"
    assert body["grand_total"] == "3675000.00"
    assert body["cumulative"]["amounts"]["month-12"] == body["grand_total"]


def test_cost_report_without_cost_center_includes_every_site(client: TestClient, db_session: Session) -> None:
    _seed_ledger(db_session)

    response = client.get("/api/v1/reports/costs", params={"scheme": "yearly", "year": 2024})

    assert response.status_code == 200
    payroll = next(row for row in response.json()["rows"] if row["key"] == "payroll")
    assert payroll["amounts"] == {"year-2024": "3400000.00"}


def test_cash_flow_report(client: TestClient, db_session: Session) -> None:
    site_id, _ = _seed_ledger(db_session)

    response = client.get(
        "/api/v1/reports/cash-flow",
        params={"scheme": "quarterly", "year": 2024, "cost_center_id": str(site_id)},
    )

    assert response.status_code == 200
    body = response.json()
    assert [row["name"] for row in body["income"]] == ["Estados de Pago"]
    assert body["totals"]["income"]["amounts"]["quarter-2"] == "6000000.00"
    assert body["totals"]["expense"]["amounts"]["quarter-1"] == "2625000.00"
    assert body["totals"]["net"]["amounts"]["quarter-1"] == "-2625000.00"
    assert body["cumulative"]["net"]["amounts"]["quarter-4"] == "2325000.00"
    assert body["grand_total"] == {"income": "6000000.00", "expense": "3675000.00", "net": "2325000.00"}


def test_cost_report_rejects_invalid_year(client: TestClient) -> None:
    response = client.get("/api/v1/reports/costs", params={"scheme": "monthly", "year": 0})

    assert response.status_code == 422


def _unavailable_session() -> Session:
    raise ConnectionError("database unavailable")


def test_unavailable_sources_degrade_to_zero_rows(client: TestClient) -> None:
    client.app.dependency_overrides[get_session_factory] = lambda: _unavailable_session

    response = client.get("/api/v1/reports/costs", params={"scheme": "quarterly", "year": 2024})

    assert response.status_code == 200
    body = response.json()
    assert [row["key"] for row in body["rows"]] == [
        "payroll",
        "factoring",
        "statutory_contributions",
        "fixed_costs",
    ]
    assert body["grand_total"] == "0.00"


def test_strict_mode_reports_failed_sources(client: TestClient) -> None:
    client.app.dependency_overrides[get_session_factory] = lambda: _unavailable_session

    response = client.get("/api/v1/reports/costs", params={"scheme": "monthly", "year": 2024, "strict": "true"})

    assert response.status_code == 502
    assert response.json()["failed_categories"] == [
        "payroll",
        "factoring",
        "statutory_contributions",
        "fixed_costs",
    ]


@pytest.mark.asyncio
async def test_payroll_outage_is_reported_when_every_month_fails() -> None:
    provider = SqlPayrollProvider(_unavailable_session)

    with pytest.raises(SourceUnavailableError) as exc_info:
        await provider.list_records(2024)

    assert exc_info.value.category_key == "payroll"


class _FebruaryDownPayrollProvider(SqlPayrollProvider):
    async def list_month(self, year: int, month: int, cost_center_id: uuid.UUID | None = None) -> list[dict[str, object]]:
        if month == 2:
            raise ConnectionError("payroll February unavailable")
        return await super().list_month(year, month, cost_center_id)


@pytest.mark.asyncio
async def test_payroll_skips_individual_failed_months(session_factory: sessionmaker, db_session: Session) -> None:
    site_id, _ = _seed_ledger(db_session)

    records = await _FebruaryDownPayrollProvider(session_factory).list_records(2024, site_id)

    assert [record["amount"] for record in records] == [Decimal("1500000")]
