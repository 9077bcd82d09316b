import pytest

from loyalty_api.app.core.seed import BEAUTY_SALON_ID, COFFEE_HOUSE_ID, IVAN_ID, MARIA_ID
from loyalty_api.app.core.tables import Table

pytestmark = pytest.mark.asyncio


async def test_insert_then_lookup_by_id(empty_store):
    [created] = await empty_store("users").insert({"name": "A", "points": 0}).returning("*")
    assert created["id"]
    rows = await empty_store("users").where("id", created["id"])
    assert rows == [created]
    assert rows[0]["name"] == "A"


async def test_insert_keeps_supplied_id_and_accepts_many(empty_store):
    result = empty_store("companies").insert([{"id": "C1", "name": "One"}, {"name": "Two"}])
    ids = [row["id"] for row in await result.returning("id")]
    assert ids[0] == "C1"
    assert len(set(ids)) == 2
    assert await empty_store("companies").count() == 2


async def test_generated_ids_are_unique(empty_store):
    for _ in range(50):
        empty_store("users").insert({"name": "x"})
    ids = [row["id"] for row in empty_store.rows("users")]
    assert len(set(ids)) == 50


async def test_returning_projects_fields(empty_store):
    rows = await empty_store("users").insert({"name": "A", "email": "a@example.com"}).returning("id", "name as label")
    assert set(rows[0]) == {"id", "label"}
    assert rows[0]["label"] == "A"


async def test_update_changes_rows_in_place(store):
    rows = await store(Table.USERS).where("id", MARIA_ID).update({"name": "Maria S.", "updated_at": "fixed"}).returning("*")
    assert rows[0]["name"] == "Maria S."
    assert rows[0]["updated_at"] == "fixed"
    assert rows[0]["points"] == 320
    stored = await store(Table.USERS).where("id", MARIA_ID).first()
    assert stored["name"] == "Maria S."


async def test_update_sets_updated_at(store):
    store.rows(Table.COMPANIES)[0]["updated_at"] = "2000-01-01T00:00:00+00:00"
    [company] = await store(Table.COMPANIES).where("id", COFFEE_HOUSE_ID).update({"logo": "https://x.io/l.png"}).returning("*")
    assert company["updated_at"] > "2000-01-01T00:00:00+00:00"
    assert company["logo"] == "https://x.io/l.png"


async def test_update_without_match_returns_nothing(store):
    assert await store(Table.USERS).where("id", "missing").update({"name": "x"}).returning("*") == []


async def test_increment_and_decrement(store):
    [user] = await store(Table.USERS).where("id", IVAN_ID).increment("points", 50).returning("points")
    assert user == {"points": 200}
    [user] = await store(Table.USERS).where("id", IVAN_ID).decrement("points", 30).returning("points")
    assert user["points"] == 170
    assert (await store(Table.USERS).where("id", IVAN_ID).first())["points"] == 170


async def test_increment_treats_absent_value_as_zero(empty_store):
    empty_store("users").insert([{"id": "U1"}, {"id": "U2", "points": None}])
    rows = await empty_store("users").increment("points", 5).returning("points")
    assert [r["points"] for r in rows] == [5, 5]


async def test_delete_reports_true_count(store):
    removed = await store(Table.COMPANIES).where("id", BEAUTY_SALON_ID).delete()
    assert removed == 1
    assert [c["id"] for c in await store(Table.COMPANIES)] == [COFFEE_HOUSE_ID]
    assert await store(Table.COMPANIES).where("id", BEAUTY_SALON_ID).delete() == 0


async def test_delete_allows_filters_after_marking(store):
    removed = await store(Table.USERS).delete().where("id", IVAN_ID)
    assert removed == 1
    assert [u["id"] for u in await store(Table.USERS)] == [MARIA_ID]


async def test_del_removes_only_matching_rows(empty_store):
    empty_store("wallet_passes").insert([
        {"id": "P1", "pass_type": "coupon"},
        {"id": "P2", "pass_type": "storeCard"},
        {"id": "P3", "pass_type": "coupon"},
    ])
    assert await empty_store("wallet_passes").where("pass_type", "coupon").del_() == 2
    assert [p["id"] for p in empty_store.rows("wallet_passes")] == ["P2"]


async def test_delete_keeps_live_list_identity(store):
    live = store.rows(Table.USERS)
    await store(Table.USERS).where("id", IVAN_ID).del_()
    assert store.rows(Table.USERS) is live
    assert len(live) == 1


async def test_increment_replaces_non_numeric_values(empty_store):
    empty_store("users").insert([
        {"id": "U1", "points": "150"},
        {"id": "U2", "points": True},
        {"id": "U3", "points": 1.5},
    ])
    rows = await empty_store("users").increment("points", 50).returning("points")
    assert [r["points"] for r in rows] == [50, 50, 51.5]


async def test_count_on_delete_marked_builder_deletes(store):
    assert await store(Table.USERS).where("id", IVAN_ID).delete().count() == 1
    assert await store(Table.USERS).where("id", IVAN_ID).count() == 0


async def test_first_on_delete_marked_builder_is_rejected(store):
    with pytest.raises(ValueError):
        await store(Table.USERS).where("id", IVAN_ID).delete().first()
    assert await store(Table.USERS).count() == 2
