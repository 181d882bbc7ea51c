from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
import structlog
from fastapi import Response

from finance_tracker.config import Settings
from finance_tracker.exceptions import UnauthorizedError

logger = structlog.get_logger()

_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Authenticated:
    user_id: str


@dataclass(frozen=True)
class Anonymous:
    pass


AuthContext = Authenticated | Anonymous


def require_user(auth: AuthContext) -> str:
    """Return the caller's user id, or raise ``UnauthorizedError`` for anonymous callers."""
    match auth:
        case Authenticated(user_id=user_id):
            return user_id
        case _:
            raise UnauthorizedError()


def issue_session_token(user_id: str, settings: Settings) -> str:
    expire = datetime.now(UTC) + timedelta(seconds=settings.session_max_age_seconds)
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.session_secret, algorithm=_ALGORITHM)


def read_session_token(token: str | None, settings: Settings) -> str | None:
    """Decode a session token into a user id; ``None`` when missing or invalid."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("session_expired")
        return None
    except jwt.InvalidTokenError:
        logger.warning("session_invalid")
        return None
    return payload.get("sub")


def set_session_cookie(response: Response, user_id: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=issue_session_token(user_id, settings),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
