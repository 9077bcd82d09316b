import pytest

from loyalty_api.app.core.seed import BEAUTY_SALON_ID, COFFEE_HOUSE_ID

pytestmark = pytest.mark.integration

BASE = "/api/v1/companies/"


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["environment"] == "test"
    assert body["timestamp"]


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/api/v1/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Route not found"}


def test_list_companies(client):
    r = client.get(BASE)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert {c["id"] for c in body["data"]} == {COFFEE_HOUSE_ID, BEAUTY_SALON_ID}


def test_company_detail_embeds_programs(client):
    r = client.get(f"{BASE}{COFFEE_HOUSE_ID}")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["name"] == "Coffee House Demo"
    assert len(data["loyaltyPrograms"]) == 1
    assert data["stats"]["totalWalletPasses"] == 1


def test_company_not_found(client):
    r = client.get(f"{BASE}550e8400-e29b-41d4-a716-000000000000")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Company not found"}


def test_create_update_delete_company(client):
    r = client.post(BASE, json={"name": "Tea Room", "adminEmail": "boss@tea.io", "logo": "https://tea.io/logo.png"})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "Company created successfully"
    company_id = body["data"]["id"]
    assert body["data"]["admin_email"] == "boss@tea.io"

    r = client.put(f"{BASE}{company_id}", json={"name": "Tea Hall", "adminEmail": "boss@tea.io"})
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Tea Hall"
    assert r.json()["data"]["logo"] is None

    assert client.delete(f"{BASE}{company_id}").status_code == 200
    assert client.delete(f"{BASE}{company_id}").status_code == 404
    assert client.get(BASE).json()["count"] == 2


def test_create_company_validation(client):
    r = client.post(BASE, json={"name": "T", "adminEmail": "not-an-email"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    assert {d["field"] for d in body["details"]} == {"name", "adminEmail"}


def test_company_stats(client):
    r = client.get(f"{BASE}{COFFEE_HOUSE_ID}/stats")
    assert r.status_code == 200
    assert r.json()["data"] == {"loyaltyPrograms": 1, "walletPasses": 1, "users": 1}
