from datetime import UTC, datetime

import aiosqlite

_COLUMNS = """
    id, user_id, description, amount, category, payment_type,
    date, created_at, updated_at
"""

_UPDATABLE_FIELDS = ("description", "amount", "category", "payment_type", "date")


class TransactionRepository:
    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def get_by_id(self, transaction_id: str) -> dict | None:
        cursor = await self._db.execute(
            f"SELECT {_COLUMNS} FROM transactions WHERE id = ?",
            (transaction_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def list_by_owner(self, user_id: str, newest_first: bool = False) -> list[dict]:
        order_by = "date DESC, created_at DESC" if newest_first else "rowid ASC"
        cursor = await self._db.execute(
            f"""
            SELECT {_COLUMNS}
            FROM transactions
            WHERE user_id = ?
            ORDER BY {order_by}
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def insert(self, transaction_id: str, user_id: str, fields: dict) -> dict:
        now = datetime.now(UTC).isoformat()
        await self._db.execute(
            """
            INSERT INTO transactions (
                id, user_id, description, amount, category, payment_type,
                date, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transaction_id,
                user_id,
                fields["description"],
                fields["amount"],
                fields["category"],
                fields["payment_type"],
                fields["date"],
                now,
                now,
            ),
        )
        await self._db.commit()

        row = await self.get_by_id(transaction_id)
        if row is None:
            raise RuntimeError(f"Transaction '{transaction_id}' vanished after insert")
        return row

    async def update_by_id(self, transaction_id: str, fields: dict) -> dict | None:
        assignments = {key: value for key, value in fields.items() if key in _UPDATABLE_FIELDS}
        assignments["updated_at"] = datetime.now(UTC).isoformat()

        set_clause = ", ".join(f"{column} = ?" for column in assignments)
        cursor = await self._db.execute(
            f"UPDATE transactions SET {set_clause} WHERE id = ?",
            [*assignments.values(), transaction_id],
        )
        await self._db.commit()

        if cursor.rowcount == 0:
            return None
        return await self.get_by_id(transaction_id)

    async def delete_by_id(self, transaction_id: str) -> dict | None:
        existing = await self.get_by_id(transaction_id)
        if existing is None:
            return None

        await self._db.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
        await self._db.commit()
        return existing
