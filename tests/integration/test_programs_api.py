import pytest

from loyalty_api.app.core.seed import BEAUTY_SALON_ID, COFFEE_HOUSE_ID, COFFEE_PROGRAM_ID, IVAN_ID

pytestmark = pytest.mark.integration

BASE = "/api/v1/loyalty-programs/"


def test_list_programs_with_company_name(client):
    body = client.get(BASE).json()
    assert body["count"] == 1
    assert body["data"][0]["company_name"] == "Coffee House Demo"


def test_filter_by_company(client):
    r = client.get(BASE, params={"companyId": BEAUTY_SALON_ID})
    assert r.status_code == 200
    assert r.json() == {"success": True, "data": [], "count": 0}


def test_get_program_counts_users(client):
    data = client.get(f"{BASE}{COFFEE_PROGRAM_ID}").json()["data"]
    assert data["usersCount"] == 1
    assert data["template"] == "coffee"


def test_get_program_with_details(client):
    data = client.get(f"{BASE}{COFFEE_PROGRAM_ID}", params={"includeDetails": "true"}).json()["data"]
    assert [u["id"] for u in data["users"]] == [IVAN_ID]
    assert data["stats"]["totalPoints"] == 150
    assert len(data["walletPasses"]) == 1


def test_program_lifecycle(client):
    payload = {
        "companyId": COFFEE_HOUSE_ID,
        "name": "Espresso Club",
        "template": "premium",
        "inviteLink": "https://ly.app/join/espresso",
    }
    r = client.post(BASE, json=payload)
    assert r.status_code == 201, r.text
    program_id = r.json()["data"]["id"]

    r = client.put(f"{BASE}{program_id}", json={**payload, "name": "Espresso Club+"})
    assert r.json()["data"]["name"] == "Espresso Club+"

    assert client.get(BASE, params={"companyId": COFFEE_HOUSE_ID}).json()["count"] == 2
    assert client.delete(f"{BASE}{program_id}").status_code == 200
    r = client.get(f"{BASE}{program_id}")
    assert r.status_code == 404
    assert r.json()["error"] == "Loyalty program not found"


def test_invalid_template_rejected(client):
    r = client.post(BASE, json={
        "companyId": COFFEE_HOUSE_ID,
        "name": "Odd",
        "template": "casino",
        "inviteLink": "https://ly.app/join/odd",
    })
    assert r.status_code == 400
    assert [d["field"] for d in r.json()["details"]] == ["template"]
