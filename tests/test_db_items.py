"""Tests for the SQLite and in-memory item stores."""

import sqlite3

import pytest

from navicart.grocery.db import (
    ItemChange,
    MemoryItemStore,
    SQLiteItemStore,
    StoreError,
    ensure_schema,
)
from navicart.grocery.models import Item


@pytest.fixture
def db(tmp_path):
    """Create a temporary SQLiteItemStore."""
    store = SQLiteItemStore(db_path=tmp_path / "test.db")
    yield store
    store.close()


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    if request.param == "memory":
        yield MemoryItemStore()
        return
    sqlite_store = SQLiteItemStore(db_path=tmp_path / "test.db")
    yield sqlite_store
    sqlite_store.close()


def test_ensure_schema_creates_tables(tmp_path):
    conn = ensure_schema(tmp_path / "nested" / "schema.db")
    tables = {
        row[0]
        for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    }
    assert {"grocery_items", "schema_version"} <= tables
    assert conn.execute("SELECT version FROM schema_version").fetchone()[0] == 1
    conn.close()


def test_ensure_schema_is_repeatable(tmp_path):
    path = tmp_path / "schema.db"
    ensure_schema(path).close()
    conn = ensure_schema(path)
    assert conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0] == 1
    conn.close()


class TestItemStore:
    @pytest.mark.asyncio
    async def test_insert_and_list(self, store):
        first = await store.insert(Item(text="Apple", category="Produce", created_at=1.0))
        second = await store.insert(
            Item(text="Milk", category="Dairy", quantity=2, created_at=2.0)
        )

        items = await store.list()
        assert [i.id for i in items] == [first, second]
        assert items[1].text == "Milk"
        assert items[1].quantity == 2
        assert items[1].completed is False

    @pytest.mark.asyncio
    async def test_update_fields(self, store):
        item_id = await store.insert(Item(text="Apple", category="Produce"))
        await store.update(item_id, quantity=4, completed=True)

        item = await store.get(item_id)
        assert item.quantity == 4
        assert item.completed is True

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_field(self, store):
        item_id = await store.insert(Item(text="Apple", category="Produce"))
        with pytest.raises(ValueError, match="created_at"):
            await store.update(item_id, created_at=0.0)

    @pytest.mark.asyncio
    async def test_update_rejects_zero_quantity(self, store):
        item_id = await store.insert(Item(text="Apple", category="Produce"))
        with pytest.raises(ValueError):
            await store.update(item_id, quantity=0)

    @pytest.mark.asyncio
    async def test_update_missing_item(self, store):
        with pytest.raises(StoreError):
            await store.update(999, quantity=2)

    @pytest.mark.asyncio
    async def test_delete(self, store):
        item_id = await store.insert(Item(text="Apple", category="Produce"))
        await store.delete(item_id)
        await store.delete(item_id)  # missing id is not an error
        assert await store.list() == []
        assert await store.get(item_id) is None

    @pytest.mark.asyncio
    async def test_list_returns_copies(self, store):
        item_id = await store.insert(Item(text="Apple", category="Produce"))
        (item,) = await store.list()
        item.quantity = 50
        assert (await store.get(item_id)).quantity == 1

    @pytest.mark.asyncio
    async def test_subscribe_notifies_changes(self, store):
        changes = []
        unsubscribe = store.subscribe(changes.append)

        item_id = await store.insert(Item(text="Apple", category="Produce"))
        await store.update(item_id, quantity=2)
        await store.delete(item_id)
        unsubscribe()
        await store.insert(Item(text="Pear", category="Produce"))

        assert changes == [
            ItemChange("insert", item_id),
            ItemChange("update", item_id),
            ItemChange("delete", item_id),
        ]

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_writes(self, store):
        def broken(change):
            raise RuntimeError("listener bug")

        store.subscribe(broken)
        item_id = await store.insert(Item(text="Apple", category="Produce"))
        assert await store.get(item_id) is not None


class TestSQLiteItemStore:
    @pytest.mark.asyncio
    async def test_text_update_refreshes_key(self, db, tmp_path):
        item_id = await db.insert(Item(text="Apple", category="Produce"))
        await db.update(item_id, text="  Green Apple ")

        conn = sqlite3.connect(tmp_path / "test.db")
        key = conn.execute(
            "SELECT normalized_key FROM grocery_items WHERE id = ?", (item_id,)
        ).fetchone()[0]
        conn.close()
        assert key == "green apple"

    @pytest.mark.asyncio
    async def test_persists_across_connections(self, tmp_path):
        path = tmp_path / "shared.db"
        writer = SQLiteItemStore(path)
        await writer.insert(Item(text="Bread", category="Pantry"))
        writer.close()

        reader = SQLiteItemStore(path)
        items = await reader.list()
        reader.close()
        assert [i.text for i in items] == ["Bread"]

    @pytest.mark.asyncio
    async def test_sqlite_error_wrapped(self, tmp_path):
        path = tmp_path / "broken.db"
        store = SQLiteItemStore(path)
        await store.list()
        conn = sqlite3.connect(path)
        conn.execute("DROP TABLE grocery_items")
        conn.commit()
        conn.close()

        with pytest.raises(StoreError, match="SQLite error"):
            await store.list()
        store.close()
