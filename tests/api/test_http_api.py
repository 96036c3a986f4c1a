from __future__ import annotations

import pytest

from src.school_billing.school_billing.container import build_container
from src.school_billing.school_billing.main import create_app
from src.school_billing.school_billing.storage.memory_store import InMemoryDocumentStore


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=build_container(store=InMemoryDocumentStore()))
    return app.test_client()


def _post(client, url, body):
    return client.post(url, json=body)


def test_enroll_pay_and_report(client):
    cycle = _post(client, "/api/cycles", {"name": "Summer 2025", "startDate": "2025-01-01", "endDate": "2025-03-31"}).get_json()
    course = _post(client, "/api/courses", {"name": "Math", "price": "100"}).get_json()
    school_class = _post(client, "/api/classes", {"courseId": course["id"], "cycleId": cycle["id"]}).get_json()
    student = _post(client, "/api/students", {"firstName": "Juan", "lastName": "Perez"}).get_json()

    resp = _post(
        client,
        "/api/enrollments",
        {"studentId": student["id"], "classId": school_class["id"], "date": "2025-01-15"},
    )
    assert resp.status_code == 201
    installments = resp.get_json()["installments"]
    assert [i["amount"] for i in installments] == ["100.00", "100.00", "100.00"]
    assert installments[0]["dueDate"] == "2025-01-15"

    paid = _post(client, f"/api/installments/{installments[0]['id']}/payments", {"date": "2025-01-15"})
    assert paid.status_code == 201

    fees = client.get(f"/api/reports/fees?cycle_id={cycle['id']}&today=2025-03-31").get_json()
    assert fees["totalDebt"] == "200.00"

    dashboard = client.get(f"/api/reports/dashboard?cycle_id={cycle['id']}&month=2025-01").get_json()
    assert dashboard["totalCollected"] == "100.00"
    assert dashboard["collectedThisMonth"] == "100.00"


def test_domain_errors_are_json_400(client):
    resp = _post(client, "/api/cycles", {"name": "Bad", "startDate": "2025-03-01", "endDate": "2025-01-01"})

    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_month_discount_endpoint(client):
    cycle = _post(client, "/api/cycles", {"name": "Summer 2025", "startDate": "2025-01-01", "endDate": "2025-03-31"}).get_json()
    _post(
        client,
        f"/api/cycles/{cycle['id']}/events",
        {"name": "Carnival", "startDate": "2025-02-25", "endDate": "2025-03-02", "discountPercentage": 50},
    )

    body = client.get(f"/api/cycles/{cycle['id']}/discounts?month=2025-2").get_json()

    assert body == {"percentage": 50, "notes": "Carnival (50%)"}
