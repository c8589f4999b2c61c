"""SQLite-backed grocery item store."""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from pathlib import Path

from ..models import Item
from ..normalizer import normalize_item_text
from .base import ItemStore, StoreError, check_fields
from .schema import ensure_schema


def _row_to_item(row: sqlite3.Row) -> Item:
    return Item(
        id=row["id"],
        text=row["text"],
        category=row["category"],
        quantity=row["quantity"],
        completed=bool(row["completed"]),
        created_at=row["created_at"],
    )


class SQLiteItemStore(ItemStore):
    """Manages the grocery_items table.

    Blocking sqlite3 calls run in a worker thread via ``asyncio.to_thread``;
    a lock serializes them on the shared connection. Any sqlite3 failure is
    raised as StoreError.
    """

    def __init__(self, db_path: str | Path = "~/.config/navicart/grocery.db") -> None:
        super().__init__()
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    async def _run(self, fn, *args):
        def call():
            with self._lock:
                try:
                    return fn(self._get_conn(), *args)
                except sqlite3.Error as e:
                    raise StoreError(f"SQLite error: {e}") from e

        return await asyncio.to_thread(call)

    @staticmethod
    def _select_all(conn: sqlite3.Connection) -> list[Item]:
        rows = conn.execute(
            "SELECT * FROM grocery_items ORDER BY created_at, id"
        ).fetchall()
        return [_row_to_item(r) for r in rows]

    @staticmethod
    def _insert(conn: sqlite3.Connection, item: Item) -> int:
        cur = conn.execute(
            """INSERT INTO grocery_items
               (text, normalized_key, category, quantity, completed, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                item.text,
                item.normalized_key,
                item.category,
                item.quantity,
                int(item.completed),
                item.created_at,
            ),
        )
        conn.commit()
        return cur.lastrowid

    @staticmethod
    def _update(conn: sqlite3.Connection, item_id: int, fields: dict) -> int:
        columns = dict(fields)
        if "text" in columns:
            columns["normalized_key"] = normalize_item_text(columns["text"])
        if "completed" in columns:
            columns["completed"] = int(bool(columns["completed"]))
        assignments = ", ".join(f"{name} = ?" for name in columns)
        cur = conn.execute(
            f"UPDATE grocery_items SET {assignments} WHERE id = ?",
            (*columns.values(), item_id),
        )
        conn.commit()
        return cur.rowcount

    @staticmethod
    def _delete(conn: sqlite3.Connection, item_id: int) -> int:
        cur = conn.execute("DELETE FROM grocery_items WHERE id = ?", (item_id,))
        conn.commit()
        return cur.rowcount

    async def list(self) -> list[Item]:
        return await self._run(self._select_all)

    async def insert(self, item: Item) -> int:
        item_id = await self._run(self._insert, item)
        self._notify("insert", item_id)
        return item_id

    async def update(self, item_id: int, **fields) -> None:
        check_fields(fields)
        if not fields:
            return
        count = await self._run(self._update, item_id, fields)
        if count == 0:
            raise StoreError(f"Item {item_id} does not exist")
        self._notify("update", item_id)

    async def delete(self, item_id: int) -> None:
        count = await self._run(self._delete, item_id)
        if count:
            self._notify("delete", item_id)
