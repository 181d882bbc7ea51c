import aiosqlite


class UserRepository:
    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def get_by_id(self, user_id: str) -> dict | None:
        cursor = await self._db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def get_by_username(self, username: str) -> dict | None:
        cursor = await self._db.execute("SELECT * FROM users WHERE username = ?", (username,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def insert(self, user: dict) -> None:
        await self._db.execute(
            """
            INSERT INTO users (
                id, username, name, email, password_hash, profile_picture, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user["id"],
                user["username"],
                user["name"],
                user["email"],
                user["password_hash"],
                user["profile_picture"],
                user["created_at"],
            ),
        )
        await self._db.commit()
