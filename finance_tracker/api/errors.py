from collections.abc import Iterator
from contextlib import contextmanager

import pydantic
import structlog

from finance_tracker.exceptions import AppError, UnauthorizedError, ValidationError

logger = structlog.get_logger()


@contextmanager
def store_errors(message: str, event: str) -> Iterator[None]:
    """Log a failure once and re-raise it as ``AppError(message)``, hiding the cause."""
    try:
        yield
    except UnauthorizedError:
        raise
    except Exception as exc:
        logger.error(event, error=str(exc), error_type=type(exc).__name__)
        raise AppError(message) from exc


@contextmanager
def user_errors(event: str) -> Iterator[None]:
    """Pass application errors through; anything else becomes a generic failure."""
    try:
        yield
    except AppError:
        raise
    except pydantic.ValidationError as exc:
        logger.info(event, error=str(exc), error_type="ValidationError")
        raise ValidationError("Invalid user details") from exc
    except Exception as exc:
        logger.error(event, error=str(exc), error_type=type(exc).__name__)
        raise AppError("Internal server error") from exc
