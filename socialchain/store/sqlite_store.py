"""SQLite-based account store implementation."""

import sqlite3
import time
from pathlib import Path

import aiosqlite

from socialchain.exceptions import StoreError
from socialchain.models.account import AccountState
from socialchain.models.address import Address
from socialchain.store.base import AccountStore


class SQLiteAccountStore(AccountStore):
    """SQLite-based local account store using aiosqlite."""

    def __init__(self, db_path: str = ".socialchain.db"):
        """
        Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._db: aiosqlite.Connection | None = None

    async def _ensure_db(self) -> aiosqlite.Connection:
        """Ensure database connection and schema exist."""
        if self._db is None:
            self._db = await aiosqlite.connect(self.db_path)
            await self._db.execute("""
                CREATE TABLE IF NOT EXISTS accounts (
                    address TEXT PRIMARY KEY,
                    owner TEXT NOT NULL,
                    lamports INTEGER NOT NULL,
                    data BLOB NOT NULL,
                    updated_at REAL NOT NULL
                )
            """)
            await self._db.commit()
        return self._db

    async def get(self, address: Address) -> AccountState | None:
        """Retrieve stored account, None if never written."""
        db = await self._ensure_db()

        async with db.execute(
            "SELECT owner, lamports, data FROM accounts WHERE address = ?",
            (str(address),),
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return None

        owner, lamports, data = row
        return AccountState(address=address, owner=owner, lamports=lamports, data=bytes(data))

    async def put_many(self, states: list[AccountState]) -> None:
        """Store accounts in a single transaction."""
        db = await self._ensure_db()
        now = time.time()

        try:
            await db.executemany(
                """
                INSERT OR REPLACE INTO accounts (address, owner, lamports, data, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (str(s.address), str(s.owner), s.lamports, s.data, now)
                    for s in states
                ],
            )
            await db.commit()
        except sqlite3.Error as e:
            await db.rollback()
            raise StoreError(f"Failed to write {len(states)} accounts: {e}") from e

    async def delete(self, address: Address) -> None:
        """Remove one account."""
        db = await self._ensure_db()
        await db.execute("DELETE FROM accounts WHERE address = ?", (str(address),))
        await db.commit()

    async def clear(self) -> None:
        """Remove all accounts."""
        db = await self._ensure_db()
        await db.execute("DELETE FROM accounts")
        await db.commit()

    async def count(self) -> int:
        """
        Count stored accounts.

        Returns:
            Number of accounts in the store
        """
        db = await self._ensure_db()
        async with db.execute("SELECT COUNT(*) FROM accounts") as cursor:
            row = await cursor.fetchone()
        return row[0]

    async def close(self) -> None:
        """Close database connection."""
        if self._db is not None:
            await self._db.close()
            self._db = None
