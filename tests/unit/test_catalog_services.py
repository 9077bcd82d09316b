import pytest

from loyalty_api.app.core.seed import (
    BEAUTY_PASS_ID,
    BEAUTY_SALON_ID,
    COFFEE_HOUSE_ID,
    COFFEE_PASS_ID,
    COFFEE_PROGRAM_ID,
    IVAN_ID,
    MARIA_ID,
)
from loyalty_api.app.core.tables import Table
from loyalty_api.app.schemas.company import CompanyCreate, CompanyUpdate
from loyalty_api.app.schemas.loyalty import LoyaltyProgramCreate
from loyalty_api.app.schemas.wallet_pass import WalletPassCreate, WalletPassUpdate
from loyalty_api.app.services.analytics_service import AnalyticsService
from loyalty_api.app.services.company_service import CompanyService
from loyalty_api.app.services.loyalty_service import LoyaltyProgramService
from loyalty_api.app.services.wallet_pass_service import WalletPassService, generate_serial_number

pytestmark = pytest.mark.asyncio


async def test_company_crud(empty_store):
    company = await CompanyService.create_company(empty_store, CompanyCreate(name="Tea Room", admin_email="boss@tea.io", logo=""))
    assert company["logo"] is None
    updated = await CompanyService.update_company(
        empty_store, company["id"], CompanyUpdate(name="Tea Hall", admin_email="boss@tea.io")
    )
    assert updated["name"] == "Tea Hall"
    assert await CompanyService.delete_company(empty_store, company["id"]) is True
    assert await CompanyService.delete_company(empty_store, company["id"]) is False
    assert await CompanyService.get_company(empty_store, company["id"]) is None


async def test_company_detail_and_stats(store):
    detail = await CompanyService.get_company_with_programs(store, COFFEE_HOUSE_ID)
    assert [p["id"] for p in detail["loyaltyPrograms"]] == [COFFEE_PROGRAM_ID]
    assert [p["id"] for p in detail["walletPasses"]] == [COFFEE_PASS_ID]
    assert detail["stats"] == {"totalLoyaltyPrograms": 1, "totalWalletPasses": 1}

    assert await CompanyService.get_stats(store, COFFEE_HOUSE_ID) == {"loyaltyPrograms": 1, "walletPasses": 1, "users": 1}
    assert await CompanyService.get_stats(store, BEAUTY_SALON_ID) == {"loyaltyPrograms": 0, "walletPasses": 1, "users": 0}
    assert await CompanyService.get_stats(store, "missing") is None


async def test_programs_carry_company_name(store):
    [program] = await LoyaltyProgramService.list_programs(store, company_id=COFFEE_HOUSE_ID)
    assert program["company_name"] == "Coffee House Demo"
    assert await LoyaltyProgramService.list_programs(store, company_id=BEAUTY_SALON_ID) == []
    assert await LoyaltyProgramService.get_users_count(store, COFFEE_PROGRAM_ID) == 1


async def test_program_details(store):
    store.rows(Table.LOYALTY_PROGRAM_USERS).append(
        {"id": "m2", "user_id": MARIA_ID, "loyalty_program_id": COFFEE_PROGRAM_ID, "joined_at": "2030-01-01T00:00:00+00:00"}
    )
    details = await LoyaltyProgramService.get_with_details(store, COFFEE_PROGRAM_ID)
    assert [u["id"] for u in details["users"]] == [MARIA_ID, IVAN_ID]
    assert details["stats"] == {"totalUsers": 2, "totalWalletPasses": 1, "totalPoints": 470, "averagePoints": 235}
    assert await LoyaltyProgramService.get_with_details(store, "missing") is None


async def test_create_and_delete_program(store):
    program = await LoyaltyProgramService.create_program(
        store,
        LoyaltyProgramCreate(
            company_id=BEAUTY_SALON_ID, name="Glow", template="beauty", invite_link="https://ly.app/join/glow"
        ),
    )
    assert (await LoyaltyProgramService.get_program(store, program["id"]))["company_name"] == "Beauty Salon Demo"
    assert await LoyaltyProgramService.delete_program(store, COFFEE_PROGRAM_ID) is True
    assert await store(Table.LOYALTY_PROGRAM_USERS).count() == 0


async def test_passes_listing_decodes_json(store):
    passes = await WalletPassService.list_passes(store)
    by_id = {p["id"]: p for p in passes}
    assert by_id[COFFEE_PASS_ID]["loyalty_program_name"] == "Coffee Loyalty Program"
    assert by_id[BEAUTY_PASS_ID]["company_name"] == "Beauty Salon Demo"
    assert "loyalty_program_name" not in by_id[BEAUTY_PASS_ID]
    assert by_id[COFFEE_PASS_ID]["barcodes"][0]["message"] == "LY-COFFEE-001"
    assert isinstance(by_id[COFFEE_PASS_ID]["fields"], dict)
    assert store.rows(Table.WALLET_PASSES)[0]["fields"].startswith("{")


async def test_create_pass_fills_defaults(store):
    data = WalletPassCreate(organization_name="Tea Room", company_id=COFFEE_HOUSE_ID, pass_type="coupon")
    wallet_pass = await WalletPassService.create_pass(store, data)
    assert wallet_pass["serial_number"].startswith("LY-")
    assert wallet_pass["pass_type_identifier"].startswith("pass.com.ly.")
    assert wallet_pass["background_color"] == "#1976D2"
    assert wallet_pass["company_name"] == "Coffee House Demo"
    assert wallet_pass["fields"] == {}
    assert wallet_pass["barcodes"] == []
    assert [p["id"] for p in await WalletPassService.list_passes(store, pass_type="coupon")] == [wallet_pass["id"]]


async def test_update_pass_changes_only_given_fields(store):
    updated = await WalletPassService.update_pass(
        store, BEAUTY_PASS_ID, WalletPassUpdate(description="Gold card", barcodes=[{"format": "PKBarcodeFormatQR", "message": "B1"}])
    )
    assert updated["description"] == "Gold card"
    assert updated["barcodes"][0]["message"] == "B1"
    assert updated["serial_number"] == "LY-BEAUTY-001"
    assert await WalletPassService.update_pass(store, "missing", WalletPassUpdate(description="x")) is None


async def test_assign_and_list_user_passes(store):
    result = await WalletPassService.assign_to_user(store, BEAUTY_PASS_ID, MARIA_ID)
    assert result["user"]["id"] == MARIA_ID
    [wallet_pass] = await WalletPassService.list_user_passes(store, MARIA_ID)
    assert wallet_pass["id"] == BEAUTY_PASS_ID
    assert "assigned_at" in wallet_pass
    with pytest.raises(LookupError):
        await WalletPassService.assign_to_user(store, BEAUTY_PASS_ID, "missing")


async def test_delete_pass_drops_assignments(store):
    assert await WalletPassService.delete_pass(store, COFFEE_PASS_ID) is True
    assert await WalletPassService.list_user_passes(store, IVAN_ID) == []
    assert await WalletPassService.find_by_serial_number(store, "LY-COFFEE-001") is None


async def test_pass_stats(store):
    store.rows(Table.WALLET_PASSES)[1]["created_at"] = "2001-01-01T00:00:00+00:00"
    stats = await WalletPassService.get_stats(store)
    assert stats == {"total": 2, "byType": {"storeCard": 2}, "recentCount": 1}


async def test_serial_number_format():
    serial = generate_serial_number()
    prefix, millis, suffix = serial.split("-")
    assert prefix == "LY"
    assert millis.isdigit()
    assert len(suffix) == 9


async def test_dashboard(store):
    dashboard = await AnalyticsService.dashboard(store)
    assert dashboard["overview"] == {
        "totalCompanies": 2,
        "totalLoyaltyPrograms": 1,
        "totalUsers": 2,
        "totalPasses": 2,
        "usersWithPasses": 1,
    }
    assert dashboard["points"] == {"total": 470, "average": 235}


async def test_company_and_program_analytics(store):
    company = await AnalyticsService.company_analytics(store, COFFEE_HOUSE_ID)
    assert company["overview"] == {"totalPrograms": 1, "totalUsers": 1, "averageUsersPerProgram": 1}
    assert company["performance"]["topPerformingProgram"]["programId"] == COFFEE_PROGRAM_ID
    assert company["performance"]["totalPointsIssued"] == 150

    await store(Table.USERS).where("id", IVAN_ID).update({"points": 1200}).returning("id")
    program = await AnalyticsService.program_analytics(store, COFFEE_PROGRAM_ID)
    assert program["overview"]["topUser"]["id"] == IVAN_ID
    assert program["userSegmentation"] == {"highValue": 1, "mediumValue": 0, "lowValue": 0}
    assert await AnalyticsService.program_analytics(store, "missing") is None
