"""Field-level change detection between two record snapshots."""
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect

DEFAULT_EXCLUDED_FIELDS = frozenset({"id", "created_at", "updated_at"})

_MISSING = object()


def _canonical(value: Any) -> str:
    # Key order inside nested objects is irrelevant; value types are not.
    return json.dumps(jsonable_encoder(value), sort_keys=True, default=str)


def detect_changes(
    old: Mapping[str, Any],
    new: Mapping[str, Any],
    excluded: Iterable[str] = DEFAULT_EXCLUDED_FIELDS,
) -> list[dict[str, Any]]:
    """Return ``{field, oldValue, newValue}`` for every field of ``new`` that differs from ``old``.

    Fields are visited in ``new``'s iteration order. A field missing from
    ``old`` is reported with ``oldValue=None``. Values are JSON-encoded so the
    result can be persisted as-is.
    """

    skip = set(excluded)
    changes: list[dict[str, Any]] = []
    for field, new_value in new.items():
        if field in skip:
            continue
        old_value = old.get(field, _MISSING)
        if old_value is not _MISSING and _canonical(old_value) == _canonical(new_value):
            continue
        changes.append(
            {
                "field": field,
                "oldValue": None if old_value is _MISSING else jsonable_encoder(old_value),
                "newValue": jsonable_encoder(new_value),
            }
        )
    return changes


def snapshot_row(instance: Any) -> dict[str, Any]:
    """Materialise the column values of an ORM instance into a detached dict."""

    mapper = inspect(instance).mapper
    return {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}


__all__ = ["DEFAULT_EXCLUDED_FIELDS", "detect_changes", "snapshot_row"]
