"""Outbound webhook notifications for noteworthy events."""
from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi.encoders import jsonable_encoder

from app.config import get_settings

logger = logging.getLogger(__name__)


def webhook_enabled() -> bool:
    return bool(get_settings().NOTIFY_WEBHOOK_URL)


def send_notification(
    title: str,
    message: str,
    *,
    category: str = "general",
    fields: dict[str, Any] | None = None,
) -> bool:
    """POST a notification to the configured webhook.

    Returns ``False`` without doing anything when no webhook is configured.
    Transport errors and non-2xx responses raise ``httpx.HTTPError``.
    """

    settings = get_settings()
    url = settings.NOTIFY_WEBHOOK_URL
    if not url:
        return False

    payload = {
        "title": title,
        "message": message,
        "category": category,
        "fields": jsonable_encoder(fields or {}),
    }
    response = httpx.post(url, json=payload, timeout=settings.NOTIFY_WEBHOOK_TIMEOUT_SECONDS)
    response.raise_for_status()
    logger.info("Webhook notification sent", extra={"category": category, "status_code": response.status_code})
    return True


__all__ = ["send_notification", "webhook_enabled"]
