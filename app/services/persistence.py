"""Insert helpers and integrity-error classification for the service and API layers."""

from typing import Any, Callable, Dict, Optional, Tuple, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ConflictError
from app.core.logging import get_logger

logger = get_logger(__name__)


UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_unique_violation(exc: IntegrityError, field: Optional[str] = None) -> bool:
    """True when ``exc`` is a duplicate-key error, on a constraint/index covering ``field`` if given."""
    message = str(getattr(exc, "orig", exc)).lower()
    unique = _sqlstate(exc) == UNIQUE_VIOLATION or "duplicate" in message or "unique" in message
    return unique and (field is None or field.lower() in message)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    message = str(getattr(exc, "orig", exc)).lower()
    return _sqlstate(exc) == FOREIGN_KEY_VIOLATION or "foreign key" in message


def classify_integrity_error(exc: IntegrityError) -> Tuple[int, str, str]:
    """HTTP status, error code and message for an integrity error that reached the API."""
    if is_foreign_key_violation(exc):
        return 400, "INVALID_REFERENCE", "Invalid reference"
    if is_unique_violation(exc):
        return 409, "DUPLICATE", "Resource conflicts with existing data"
    return 400, "INTEGRITY_ERROR", "Data violates a database constraint"


async def add_unique(db: AsyncSession, instance: Any, *, fields: tuple, entity: str) -> Any:
    """
    Add and flush ``instance`` inside a SAVEPOINT.

    A duplicate on one of ``fields`` raises ``ConflictError``; any other
    integrity error propagates unchanged.
    """
    try:
        async with db.begin_nested():
            db.add(instance)
            await db.flush()
    except IntegrityError as exc:
        for field in fields:
            if is_unique_violation(exc, field):
                raise ConflictError(f"{entity} with this {field} already exists", field=field) from exc
        raise
    return instance


async def add_with_generated_number(
    db: AsyncSession,
    model: Type,
    draft: Dict[str, Any],
    *,
    field: str,
    regenerate: Callable[[], str],
    auto_generated: bool = True,
    attempts: Optional[int] = None,
) -> Any:
    """
    Insert ``model(**draft)``, regenerating ``draft[field]`` after a collision.

    Only auto-generated numbers are retried, at most ``attempts`` times
    (NUMBER_GENERATION_ATTEMPTS by default). A caller-supplied number that
    collides, or exhausting the attempts, raises ``ConflictError``.
    """
    attempts = attempts or settings.NUMBER_GENERATION_ATTEMPTS
    if not auto_generated:
        attempts = 1
    entity = model.__name__

    for attempt in range(1, attempts + 1):
        instance = model(**draft)
        try:
            async with db.begin_nested():
                db.add(instance)
                await db.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc, field):
                raise
            logger.warning(
                f"{entity} {field} collision",
                extra={"entity": entity, "field": field, "value": draft[field], "attempt": attempt},
            )
            if attempt < attempts:
                draft[field] = regenerate()
            continue
        return instance

    raise ConflictError(f"{entity} {field} '{draft[field]}' already exists", field=field)
