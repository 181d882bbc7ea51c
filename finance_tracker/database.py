from enum import StrEnum

import aiosqlite
import structlog

from finance_tracker.exceptions import DatabaseUnavailableError
from finance_tracker.transactions.models import Category, PaymentType

logger = structlog.get_logger()


def _sql_in(values: type[StrEnum]) -> str:
    return ", ".join(f"'{member.value}'" for member in values)


DDL_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        username TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        email TEXT,
        password_hash TEXT NOT NULL,
        profile_picture TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS transactions (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        description TEXT NOT NULL,
        amount REAL NOT NULL CHECK (amount >= 0),
        category TEXT NOT NULL CHECK (category IN ({_sql_in(Category)})),
        payment_type TEXT NOT NULL CHECK (payment_type IN ({_sql_in(PaymentType)})),
        date TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_transactions_user_id ON transactions (user_id)",
]


class Database:
    def __init__(self, path: str) -> None:
        self._path = path
        self._db: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        self._db = await aiosqlite.connect(self._path)
        self._db.row_factory = aiosqlite.Row
        await self._db.execute("PRAGMA journal_mode=WAL")
        await self._db.execute("PRAGMA foreign_keys=ON")

        for ddl in DDL_STATEMENTS:
            await self._db.execute(ddl)
        await self._db.commit()

        logger.info("database_initialized", path=self._path)

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None
            logger.info("database_closed")

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._db is None:
            raise DatabaseUnavailableError("Database not initialized. Call connect() first.")
        return self._db

    async def check_health(self) -> None:
        cursor = await self.connection.execute("SELECT 1")
        await cursor.close()
