import asyncio

import pytest

from loyalty_api.app.core.query import QueryBuilder
from loyalty_api.app.core.store import Store
from loyalty_api.app.core.tables import Table, UnknownTableError


def test_open_accepts_enum_and_name(empty_store):
    assert isinstance(empty_store.open(Table.USERS), QueryBuilder)
    assert empty_store("users").table is Table.USERS


def test_unknown_table_is_rejected(empty_store):
    with pytest.raises(UnknownTableError) as exc:
        empty_store("orders")
    assert exc.value.name == "orders"
    assert isinstance(exc.value, LookupError)


def test_rows_are_live(empty_store):
    rows = empty_store.rows(Table.COMPANIES)
    rows.append({"id": "C1", "name": "Coffee"})
    assert empty_store.rows("companies") == [{"id": "C1", "name": "Coffee"}]


def test_load_copies_seed_rows():
    seed = {"companies": [{"id": "C1", "name": "Coffee"}]}
    store = Store(seed)
    seed["companies"][0]["name"] = "Changed"
    assert store.rows(Table.COMPANIES)[0]["name"] == "Coffee"


def test_seeded_store_contents(store):
    assert len(store.rows(Table.COMPANIES)) == 2
    assert len(store.rows(Table.USERS)) == 2
    assert len(store.rows(Table.WALLET_PASSES)) == 2
    assert len(store.rows(Table.LOYALTY_PROGRAM_USERS)) == 1


def test_clear_empties_every_table(store):
    store.clear()
    assert all(store.rows(table) == [] for table in Table)


@pytest.mark.asyncio
async def test_raw_statement_returns_no_rows(empty_store):
    assert await empty_store.raw("SELECT 1") == {"rows": []}


def test_lock_is_usable_across_event_loops():
    db = Store()

    async def hold(order, tag):
        async with db.lock:
            order.append(tag)
            await asyncio.sleep(0)

    async def contend():
        order = []
        await asyncio.gather(hold(order, "a"), hold(order, "b"))
        return order

    assert asyncio.run(contend()) == ["a", "b"]
    assert asyncio.run(contend()) == ["a", "b"]
