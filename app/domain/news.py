"""News publishing rules: slugs, publish stamping and visibility gating."""

import math
import re
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from app.core.exceptions import DomainValidationError
from app.domain.changes import changed_fields, merged_value
from app.models.enums import NewsStatus
from app.utils.time import get_utc_now

WORDS_PER_MINUTE = 200

_DISALLOWED = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(title: str) -> str:
    """
    Lowercase, drop everything but ``[a-z0-9 -]``, turn whitespace into
    hyphens, collapse hyphen runs and trim hyphens at both ends.

    >>> slugify("Hello, World!! 2024")
    'hello-world-2024'
    """
    slug = _DISALLOWED.sub("", title.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def _slug_from_title(title: str) -> str:
    slug = slugify(title)
    if not slug:
        raise DomainValidationError(
            "Title must contain letters or digits to derive a slug; provide a slug explicitly",
            field="slug",
        )
    return slug


def prepare_news_for_create(draft: Dict[str, Any], *, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Derive the slug and publish timestamp of a new article draft in place."""
    now = now or get_utc_now()
    if not draft.get("slug") and draft.get("title"):
        draft["slug"] = _slug_from_title(draft["title"])

    status = NewsStatus(draft.get("status") or NewsStatus.DRAFT)
    draft["status"] = status
    if status == NewsStatus.PUBLISHED and not draft.get("published_at"):
        draft["published_at"] = now
    return draft


def prepare_news_for_update(
    existing: Mapping[str, Any],
    changes: Mapping[str, Any],
    changed: Optional[Iterable[str]] = None,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Turn a partial change set into the field values to write.

    A slug that is already set is never regenerated; it is derived from the
    title only when the title or slug changed and the slug ends up empty. ``published_at`` is stamped
    only the first time the article becomes published.
    """
    now = now or get_utc_now()
    changed = set(changed) if changed is not None else changed_fields(existing, changes)
    update: Dict[str, Any] = {
        field: merged_value(existing, changes, field)
        for field in changed
        if field in changes
    }

    slug = update.get("slug", existing.get("slug"))
    title = update.get("title", existing.get("title"))
    if changed.intersection(("title", "slug")) and not slug and title:
        update["slug"] = _slug_from_title(title)

    if "status" in changed:
        status = NewsStatus(changes["status"])
        update["status"] = status
        published_at = update.get("published_at", existing.get("published_at"))
        if status == NewsStatus.PUBLISHED and not published_at:
            update["published_at"] = now

    return update


def is_expired(expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    if expires_at is None:
        return False
    now = now or get_utc_now()
    return now > expires_at


def is_effectively_published(
    status: Any,
    published_at: Optional[datetime],
    expires_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> bool:
    """Published, publish time reached, and not expired."""
    now = now or get_utc_now()
    if status != NewsStatus.PUBLISHED or published_at is None:
        return False
    if published_at > now:
        return False
    return expires_at is None or expires_at > now


def reading_time(content: Optional[str]) -> int:
    """Estimated reading time in whole minutes."""
    words = len((content or "").split())
    return math.ceil(max(words, 1) / WORDS_PER_MINUTE)
