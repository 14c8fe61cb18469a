"""Changed-field detection for update drafts."""

from typing import Any, Mapping, Set


def merged_value(existing: Mapping[str, Any], changes: Mapping[str, Any], field: str) -> Any:
    """Value a field will hold after applying ``changes``.

    Dict-valued fields are partial updates: keys in the change overlay the
    stored dict instead of replacing it.
    """
    new = changes[field]
    old = existing.get(field)
    if isinstance(new, Mapping) and isinstance(old, Mapping):
        return {**old, **new}
    return new


def changed_fields(existing: Mapping[str, Any], changes: Mapping[str, Any]) -> Set[str]:
    """Names of fields in ``changes`` whose merged value differs from ``existing``."""
    return {
        field
        for field in changes
        if merged_value(existing, changes, field) != existing.get(field)
    }
