"""Local registry of GHL sub-accounts and their API tokens.

Backed by a single SQLite table accessed through aiosqlite. Every call opens
its own connection and closes it afterwards, so concurrent tool calls never
share connection state.

At most one row carries ``is_default = 1``. Changing the default clears every
flag and sets the new one inside one ``BEGIN IMMEDIATE`` transaction, which
serializes concurrent writers on the same database file.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.exceptions import AccountNotFoundError

logger = logging.getLogger(__name__)

ACCOUNT_TYPES = ("agency", "sub_account")

SCHEMA = """
CREATE TABLE IF NOT EXISTS sub_accounts (
  id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  api_key TEXT NOT NULL,
  account_type TEXT DEFAULT 'sub_account',
  is_default INTEGER DEFAULT 0,
  notes TEXT,
  created_at TEXT DEFAULT (datetime('now')),
  updated_at TEXT DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_sub_accounts_name ON sub_accounts(name);
CREATE INDEX IF NOT EXISTS idx_sub_accounts_default ON sub_accounts(is_default);
"""

_UPSERT = """
INSERT INTO sub_accounts (id, name, api_key, account_type, is_default, notes)
VALUES (:id, :name, :api_key, :account_type, :is_default, :notes)
ON CONFLICT(id) DO UPDATE SET
  name = excluded.name,
  api_key = excluded.api_key,
  account_type = excluded.account_type,
  is_default = excluded.is_default,
  notes = excluded.notes,
  updated_at = datetime('now')
"""

_CLEAR_DEFAULTS = "UPDATE sub_accounts SET is_default = 0, updated_at = datetime('now') WHERE is_default = 1"


class AccountRegistry:
    """Async CRUD over the ``sub_accounts`` table."""

    def __init__(self, db_path: str):
        self.db_path = db_path or ":memory:"

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        # isolation_level=None: transactions are opened explicitly with BEGIN IMMEDIATE
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        conn.row_factory = aiosqlite.Row
        try:
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        async with self._connect() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            await conn.execute("COMMIT")

    @staticmethod
    def _normalize_row(row: aiosqlite.Row | None) -> dict[str, Any] | None:
        if row is None:
            return None
        record = dict(row)
        record["is_default"] = bool(record.get("is_default"))
        return record

    async def _fetch_one(self, conn: aiosqlite.Connection, query: str, params: dict[str, Any]) -> dict[str, Any] | None:
        async with conn.execute(query, params) as cursor:
            return self._normalize_row(await cursor.fetchone())

    async def _fetch_all(self, query: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        async with self._connect() as conn:
            async with conn.execute(query, params or {}) as cursor:
                rows = await cursor.fetchall()
        return [self._normalize_row(row) for row in rows]

    async def ensure_schema(self) -> None:
        """Create the table and its indexes if they do not exist yet."""
        async with self._connect() as conn:
            await conn.executescript(SCHEMA)

    async def get(self, location_id: str) -> dict[str, Any] | None:
        async with self._connect() as conn:
            return await self._fetch_one(conn, "SELECT * FROM sub_accounts WHERE id = :id", {"id": location_id})

    async def get_default(self) -> dict[str, Any] | None:
        async with self._connect() as conn:
            return await self._fetch_one(
                conn, "SELECT * FROM sub_accounts WHERE is_default = 1 ORDER BY updated_at DESC LIMIT 1", {}
            )

    async def list_all(self) -> list[dict[str, Any]]:
        """All registered accounts, default first, then by name."""
        return await self._fetch_all("SELECT * FROM sub_accounts ORDER BY is_default DESC, name COLLATE NOCASE")

    async def find_by_name(self, query: str) -> list[dict[str, Any]]:
        """Case-insensitive partial match on the account name; ``%`` and ``_`` match literally."""
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return await self._fetch_all(
            "SELECT * FROM sub_accounts WHERE name LIKE :pattern ESCAPE '\\' ORDER BY name COLLATE NOCASE",
            {"pattern": f"%{escaped}%"},
        )

    async def upsert(
        self,
        location_id: str,
        name: str,
        api_key: str,
        account_type: str = "sub_account",
        is_default: bool = False,
        notes: str | None = None,
    ) -> dict[str, Any]:
        """Insert or overwrite the account keyed by ``location_id``.

        ``created_at`` survives an overwrite; ``updated_at`` is refreshed.
        With ``is_default`` every other account loses its default flag.
        """
        if account_type not in ACCOUNT_TYPES:
            raise ValueError(f"account_type must be one of {', '.join(ACCOUNT_TYPES)}")
        params = {
            "id": location_id,
            "name": name,
            "api_key": api_key,
            "account_type": account_type,
            "is_default": 1 if is_default else 0,
            "notes": notes,
        }
        async with self._transaction() as conn:
            if is_default:
                await conn.execute(_CLEAR_DEFAULTS)
            await conn.execute(_UPSERT, params)
            record = await self._fetch_one(conn, "SELECT * FROM sub_accounts WHERE id = :id", {"id": location_id})
        logger.info("Registered account %s (%s), default=%s", location_id, name, bool(is_default))
        return record

    async def set_default(self, location_id: str) -> dict[str, Any]:
        """Make ``location_id`` the only default account.

        Raises:
            AccountNotFoundError: If no account is registered under ``location_id``.
        """
        async with self._transaction() as conn:
            record = await self._fetch_one(conn, "SELECT * FROM sub_accounts WHERE id = :id", {"id": location_id})
            if record is None:
                raise AccountNotFoundError(f"No registered account found for location '{location_id}'")
            await conn.execute(_CLEAR_DEFAULTS)
            await conn.execute(
                "UPDATE sub_accounts SET is_default = 1, updated_at = datetime('now') WHERE id = :id",
                {"id": location_id},
            )
            record = await self._fetch_one(conn, "SELECT * FROM sub_accounts WHERE id = :id", {"id": location_id})
        logger.info("Default account set to %s", location_id)
        return record

    async def rotate_api_key(self, location_id: str, api_key: str) -> dict[str, Any]:
        """Replace the stored token of an account.

        Raises:
            AccountNotFoundError: If no account is registered under ``location_id``.
        """
        async with self._transaction() as conn:
            cursor = await conn.execute(
                "UPDATE sub_accounts SET api_key = :api_key, updated_at = datetime('now') WHERE id = :id",
                {"id": location_id, "api_key": api_key},
            )
            if cursor.rowcount == 0:
                raise AccountNotFoundError(f"No registered account found for location '{location_id}'")
            record = await self._fetch_one(conn, "SELECT * FROM sub_accounts WHERE id = :id", {"id": location_id})
        logger.info("Rotated API token for account %s", location_id)
        return record

    async def delete(self, location_id: str) -> bool:
        """Forget an account locally. Returns False when nothing was registered."""
        async with self._transaction() as conn:
            cursor = await conn.execute("DELETE FROM sub_accounts WHERE id = :id", {"id": location_id})
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Removed account %s", location_id)
        return deleted


__all__ = ["ACCOUNT_TYPES", "AccountRegistry", "SCHEMA"]
