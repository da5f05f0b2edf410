"""Failure boundary for secondary side effects."""
from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


def best_effort(
    label: str,
    func: Callable[..., T],
    *args: Any,
    session: Session | None = None,
    **kwargs: Any,
) -> T | None:
    """Run ``func``; on failure log it, discard the session's pending work and return ``None``.

    Only call this after the primary operation has committed: the rollback
    issued on failure must not be able to undo it.
    """

    try:
        return func(*args, **kwargs)
    except Exception:  # noqa: BLE001
        logger.exception("Best-effort operation failed", extra={"operation": label})
        if session is not None:
            session.rollback()
        return None


__all__ = ["best_effort"]
