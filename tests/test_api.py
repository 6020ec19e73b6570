"""
Tests for the /api endpoints.

These tests use FastAPI TestClient against an in‑memory FarmStore holding
the demo population, swapped in through ``app.dependency_overrides``.
"""

from decimal import Decimal
from urllib.parse import unquote

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from api.deps import get_store
from api.main import app
from pollito.farm_db import DBFarmStore


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


INVOICE = {
    "clientName": "Comedor La Esquina",
    "clientPhone": "9716-4446",
    "concept": "Pollo entero",
    "quantity": 20,
    "pounds": 100,
    "pricePerPound": 12.50,
}


def _quantities(client):
    return [c["quantity"] for c in client.get("/api/coops").json()]


# ---------- health-check ----------
def test_root(client):
    assert client.get("/").json()["status"] == "ok"


# ---------- coops ----------
def test_list_coops_camel_case(client):
    coops = client.get("/api/coops").json()
    assert [c["number"] for c in coops] == [1, 2, 3, 4, 5, 6, 7]
    assert coops[0]["entryDate"] == "2024-11-15"
    assert coops[0]["status"] == "active"


def test_put_coop_twice_is_idempotent(client):
    body = {"quantity": 300, "entryDate": "2024-12-01"}
    first = client.put("/api/coops/2", json=body)
    second = client.put("/api/coops/2", json=body)
    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert client.get("/api/coops/2").json()["quantity"] == 300


def test_put_unknown_coop(client):
    resp = client.put("/api/coops/99", json={"quantity": 1})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Coop not found"}


def test_put_coop_negative_quantity_rejected(client):
    resp = client.put("/api/coops/1", json={"quantity": -5})
    assert resp.status_code == 400
    assert "quantity" in resp.json()["message"]


# ---------- purchases ----------
def test_chicken_purchase_rotates(client):
    resp = client.post("/api/purchases", json={
        "type": "chicken", "quantity": 500, "price": "2500.00", "supplier": "Granja Sur",
    })
    assert resp.status_code == 200
    assert resp.json()["type"] == "chicken"
    assert _quantities(client) == [380, 420, 360, 480, 390, 370, 500]


def test_purchase_with_unknown_type_rejected(client):
    resp = client.post("/api/purchases", json={
        "type": "tractor", "quantity": 1, "price": "1", "supplier": "X",
    })
    assert resp.status_code == 400
    assert "message" in resp.json()
    assert client.get("/api/purchases").json() == []


# ---------- mortalities ----------
def test_mortality_flow(client):
    client.post("/api/mortalities", json={"coopNumber": 3, "quantity": 50, "cause": "disease"})
    assert _quantities(client)[2] == 370
    resp = client.post("/api/mortalities", json={"coopNumber": 3, "quantity": 500, "cause": "unknown"})
    assert resp.status_code == 200
    assert _quantities(client)[2] == 370
    assert len(client.get("/api/mortalities").json()) == 2


# ---------- invoices ----------
def test_create_invoice(client):
    data = client.post("/api/invoices", json=INVOICE).json()
    assert data["invoiceNumber"] == "Fact-0001"
    assert Decimal(data["total"]) == Decimal("1250.00")
    assert data["status"] == "paid"
    assert _quantities(client)[0] == 430

    second = client.post("/api/invoices", json=INVOICE).json()
    assert second["invoiceNumber"] == "Fact-0002"


def test_invoice_total_cannot_be_forced(client):
    data = client.post("/api/invoices", json={**INVOICE, "total": 1}).json()
    assert Decimal(data["total"]) == Decimal("1250.00")


def test_update_invoice(client):
    created = client.post("/api/invoices", json=INVOICE).json()
    resp = client.put(f"/api/invoices/{created['id']}", json={"status": "pending", "pounds": 80})
    assert resp.status_code == 200
    assert resp.json()["status"] == "pending"
    assert Decimal(resp.json()["total"]) == Decimal("1000.00")


def test_delete_invoice_keeps_stock(client):
    created = client.post("/api/invoices", json=INVOICE).json()
    resp = client.delete(f"/api/invoices/{created['id']}")
    assert resp.json() == {"message": "Invoice deleted successfully"}
    assert client.get("/api/invoices").json() == []
    assert _quantities(client)[0] == 430


def test_delete_unknown_invoice(client):
    resp = client.delete("/api/invoices/42")
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invoice not found"}


def test_share_invoice_on_whatsapp(client):
    created = client.post("/api/invoices", json=INVOICE).json()
    resp = client.get(f"/api/invoices/{created['id']}/whatsapp")
    assert resp.status_code == 200
    share = resp.json()
    assert "📋 *Factura:* Fact-0001" in share["message"]
    assert "💰 *Total: L. 1250.00*" in share["message"]
    assert share["url"].startswith("https://wa.me/97164446?text=")
    assert unquote(share["url"].split("?text=", 1)[1]) == share["message"]


def test_share_unknown_invoice(client):
    resp = client.get("/api/invoices/42/whatsapp")
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invoice not found"}


# ---------- expenses & activities ----------
def test_expenses(client):
    resp = client.post("/api/expenses", json={"category": "utilities", "description": "Light", "amount": 1850})
    assert resp.status_code == 200
    assert Decimal(client.get("/api/expenses").json()[0]["amount"]) == Decimal("1850.00")


def test_activities(client):
    created = client.post("/api/activities", json={
        "type": "vaccination", "coopNumber": 7, "scheduledDate": "2024-12-03T07:00:00",
    }).json()
    assert created["completed"] is False
    assert created["recurring"] is False

    resp = client.put(f"/api/activities/{created['id']}", json={"completed": True})
    assert resp.json()["completed"] is True
    assert resp.json()["coopNumber"] == 7


def test_activities_with_and_without_offset(client):
    aware = client.post("/api/activities", json={"type": "cleaning", "scheduledDate": "2024-12-03T07:00:00Z"})
    naive = client.post("/api/activities", json={"type": "feeding", "scheduledDate": "2024-12-04T07:00:00"})
    assert aware.status_code == naive.status_code == 200

    resp = client.get("/api/activities")
    assert resp.status_code == 200
    assert [a["type"] for a in resp.json()] == ["feeding", "cleaning"]

    moved = client.put(f"/api/activities/{naive.json()['id']}",
                       json={"scheduledDate": "2024-12-01T07:00:00+02:00"})
    assert moved.status_code == 200
    assert [a["type"] for a in client.get("/api/activities").json()] == ["cleaning", "feeding"]


def test_update_unknown_activity(client):
    resp = client.put("/api/activities/3", json={"completed": True})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Activity not found"}


# ---------- dashboard ----------
def test_dashboard(client):
    client.post("/api/invoices", json=INVOICE)
    data = client.get("/api/dashboard").json()
    assert data["totalChickens"] == 2830
    assert data["chickensSold"] == 20
    assert Decimal(data["salesTotal"]) == Decimal("1250.00")
    assert len(data["coops"]) == 7
    assert {"number", "quantity", "ageInDays", "ageCategory"} <= set(data["coops"][0])


# ---------- SQLite backend ----------
@pytest.fixture
def db_client(clock):
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    store = DBFarmStore(engine, coop_count=7, clock=clock)
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_sqlite_backend_accepts_every_create(db_client):
    posts = {
        "/api/purchases": {"type": "chicken", "quantity": 500, "price": "2500.00", "supplier": "Granja Sur"},
        "/api/expenses": {"category": "utilities", "description": "Light", "amount": 1850},
        "/api/activities": {"type": "cleaning", "scheduledDate": "2024-12-03T07:00:00Z"},
        "/api/invoices": INVOICE,
        "/api/mortalities": {"coopNumber": 3, "quantity": 1, "cause": "natural"},
    }
    for path, body in posts.items():
        resp = db_client.post(path, json=body)
        assert resp.status_code == 200, (path, resp.json())
        assert len(db_client.get(path).json()) == 1

    db_client.post("/api/activities", json={"type": "feeding", "scheduledDate": "2024-12-04T07:00:00"})
    assert [a["type"] for a in db_client.get("/api/activities").json()] == ["feeding", "cleaning"]
    assert _quantities(db_client)[-1] == 500
