"""Async Data Access Layer for the COMPLIMENT table.

Provides ComplimentDAL class with async key/value operations compatible with
`utils.database_init.AsyncDatabaseInitializer`.
"""

from __future__ import annotations

from typing import Optional, Sequence

from models.compliment_record import ComplimentRecord
from utils.database_init import AsyncDatabaseInitializer


class ComplimentDAL:
    """Data access layer for COMPLIMENT records.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    _COLUMNS = ("key", "value", "expires_at", "created_at")
    _COLUMN_LIST = ", ".join(_COLUMNS)

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def upsert(self, record: ComplimentRecord) -> None:
        """Insert or replace the row for `record.key` (last write wins)."""
        async with self._db.connection() as conn:
            await conn.execute(
                f"INSERT INTO COMPLIMENT ({self._COLUMN_LIST}) VALUES (?, ?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "expires_at = excluded.expires_at, created_at = excluded.created_at",
                (record.key, record.value, record.expires_at, record.created_at),
            )
            await conn.commit()

    async def get(self, key: str) -> Optional[ComplimentRecord]:
        """Return the row for `key`, or None if not found. Expiry is not checked here."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM COMPLIMENT WHERE key = ?",
                (key,),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def delete(self, key: str) -> bool:
        """Delete the row for `key`. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM COMPLIMENT WHERE key = ?", (key,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    async def delete_expired(self, now: float) -> int:
        """Delete every row whose expiry is at or before `now`; return the count removed."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM COMPLIMENT WHERE expires_at <= ?", (now,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            deleted = await cur.fetchone()
            return int(deleted[0]) if deleted and deleted[0] is not None else 0

    @staticmethod
    def _row_to_record(row: Sequence[object]) -> ComplimentRecord:
        """Convert a DB row tuple into a ComplimentRecord."""
        return ComplimentRecord(
            key=str(row[0]),
            value=str(row[1]),
            expires_at=float(row[2]),
            created_at=float(row[3]),
        )
