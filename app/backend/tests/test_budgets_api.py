from __future__ import annotations

from fastapi.testclient import TestClient

REFERENCE_PAYLOAD = {"materials": "1000000", "labor": "2000000", "equipment": "500000", "area": "100"}


def test_estimate_endpoint_returns_waterfall(client: TestClient) -> None:
    response = client.post("/api/v1/budgets/estimate", json=REFERENCE_PAYLOAD)

    assert response.status_code == 200
    body = response.json()
    assert body["direct"]["total"] == "3500000.00"
    assert body["indirect"] == {
        "overhead": "420000.00",
        "profit": "392000.00",
        "contingency": "175000.00",
        "total": "987000.00",
    }
    assert body["final"]["total"] == "5339530.00"
    assert body["final"]["unit_price"] == "53395.30"
    assert body["shares"]["overhead_percentage"] == "28.20"


def test_estimate_endpoint_requires_positive_area(client: TestClient) -> None:
    response = client.post("/api/v1/budgets/estimate", json={**REFERENCE_PAYLOAD, "area": "0"})

    assert response.status_code == 422
    assert response.json()["detail"] == "area must be greater than zero."


def test_estimate_endpoint_default_area_is_opt_in(client: TestClient) -> None:
    payload = {key: value for key, value in REFERENCE_PAYLOAD.items() if key != "area"}

    rejected = client.post("/api/v1/budgets/estimate", json=payload)
    accepted = client.post("/api/v1/budgets/estimate", json={**payload, "use_default_area": True})

    assert rejected.status_code == 422
    assert accepted.status_code == 200
    assert accepted.json()["area"] == "100"


def test_estimate_endpoint_rejects_negative_costs(client: TestClient) -> None:
    response = client.post("/api/v1/budgets/estimate", json={**REFERENCE_PAYLOAD, "labor": "-1"})

    assert response.status_code == 422


def test_itemized_estimate_sums_line_items(client: TestClient) -> None:
    response = client.post(
        "/api/v1/budgets/estimate-itemized",
        json={
            "materials_items": [
                {"description": "Cemento", "quantity": "100", "unit": "saco", "unit_price": "6000", "subtotal": "600000"},
                {"description": "Fierro", "subtotal": "400000"},
            ],
            "labor_items": [{"description": "Cuadrilla", "subtotal": "2000000"}],
            "equipment_items": [{"description": "Betonera"}, {"description": "Andamios", "subtotal": "500000"}],
            "area": "100",
        },
    )

    assert response.status_code == 200
    assert response.json()["final"]["total"] == "5339530.00"


def test_estimate_document_endpoint(client: TestClient) -> None:
    response = client.post(
        "/api/v1/budgets/estimate-document",
        json={
            **REFERENCE_PAYLOAD,
            "project_name": "Edificio Los Aromos",
            "issued_on": "2026-03-02",
            "recommendations": ["Licitar subcontratos con anticipación"],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["summary"]["total_formatted"] == "$5.339.530"
    assert body["summary"]["total_in_unit_formatted"] == "UF 148,32"
    assert body["detail"]["indirect"][0]["label"] == "Gastos Generales (12% CD)"
    assert body["recommendations"] == ["Licitar subcontratos con anticipación"]
    assert body["breakdown"]["final"]["total"] == "5339530.00"


def test_estimate_document_requires_project_name(client: TestClient) -> None:
    response = client.post("/api/v1/budgets/estimate-document", json={**REFERENCE_PAYLOAD, "project_name": ""})

    assert response.status_code == 422
