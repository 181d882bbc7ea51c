from datetime import UTC, datetime
from urllib.parse import quote
from uuid import uuid4

import bcrypt
import structlog

from finance_tracker.config import Settings
from finance_tracker.exceptions import ConflictError, UnauthorizedError
from finance_tracker.users.repository import UserRepository
from finance_tracker.users.schemas import (
    BCRYPT_MAX_PASSWORD_BYTES,
    LoginRequest,
    SignUpRequest,
    UserResponse,
)

logger = structlog.get_logger()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    encoded = password.encode("utf-8")
    # Sign-up never stores a longer password, so it cannot match.
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))


class UserService:
    def __init__(self, repo: UserRepository, settings: Settings) -> None:
        self._repo = repo
        self._settings = settings

    async def sign_up(self, data: SignUpRequest) -> UserResponse:
        existing = await self._repo.get_by_username(data.username)
        if existing:
            raise ConflictError("User already exists")

        user = {
            "id": str(uuid4()),
            "username": data.username,
            "name": data.name,
            "email": data.email,
            "password_hash": hash_password(data.password),
            "profile_picture": self._settings.avatar_url_template.format(
                username=quote(data.username)
            ),
            "created_at": datetime.now(UTC).isoformat(),
        }
        await self._repo.insert(user)

        logger.info("user_signed_up", user_id=user["id"])
        return self._to_response(user)

    async def authenticate(self, data: LoginRequest) -> UserResponse:
        user = await self._repo.get_by_username(data.username)
        if user is None or not verify_password(data.password, user["password_hash"]):
            logger.info("login_failed", username=data.username)
            raise UnauthorizedError("Invalid credentials")

        logger.info("user_logged_in", user_id=user["id"])
        return self._to_response(user)

    async def get_by_id(self, user_id: str) -> UserResponse | None:
        user = await self._repo.get_by_id(user_id)
        if user is None:
            return None
        return self._to_response(user)

    def _to_response(self, user: dict) -> UserResponse:
        return UserResponse(
            id=user["id"],
            username=user["username"],
            name=user["name"],
            email=user["email"],
            profile_picture=user["profile_picture"],
            created_at=user["created_at"],
        )
