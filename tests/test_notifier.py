import httpx
import pytest
from sqlalchemy import select

from app.config import get_settings
from app.models import ActivityAction, ActivityLog, UserRole
from app.security import Actor
from app.services import notifier
from app.services.observers import DomainEvent, publish


class _Recorder:
    def __init__(self, status_code: int = 200):
        self.calls: list[dict] = []
        self.status_code = status_code

    def __call__(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        return httpx.Response(self.status_code, request=httpx.Request("POST", url))


@pytest.fixture
def webhook(monkeypatch):
    monkeypatch.setattr(get_settings(), "NOTIFY_WEBHOOK_URL", "https://hooks.example.test/station")
    recorder = _Recorder()
    monkeypatch.setattr(notifier.httpx, "post", recorder)
    return recorder


def test_disabled_without_url(monkeypatch):
    monkeypatch.setattr(get_settings(), "NOTIFY_WEBHOOK_URL", None)

    assert notifier.webhook_enabled() is False
    assert notifier.send_notification("t", "m") is False


def test_posts_json_payload(webhook):
    assert notifier.send_notification("Backup", "done", category="admin", fields={"documents": 8}) is True

    [call] = webhook.calls
    assert call["url"] == "https://hooks.example.test/station"
    assert call["json"] == {"title": "Backup", "message": "done", "category": "admin", "fields": {"documents": 8}}
    assert call["timeout"] == get_settings().NOTIFY_WEBHOOK_TIMEOUT_SECONDS


def test_non_2xx_raises(webhook):
    webhook.status_code = 502

    with pytest.raises(httpx.HTTPStatusError):
        notifier.send_notification("Backup", "done")


def test_webhook_failure_does_not_block_activity_log(monkeypatch, db_session):
    monkeypatch.setattr(get_settings(), "NOTIFY_WEBHOOK_URL", "https://hooks.example.test/station")

    def _down(*args, **kwargs):
        raise httpx.ConnectError("unreachable")

    monkeypatch.setattr(notifier.httpx, "post", _down)
    actor = Actor(user_id=1, role=UserRole.admin, name="Admin")

    publish(db_session, DomainEvent(action=ActivityAction.create, entity_type="Inventory", entity_name="Radio", actor=actor))

    entries = db_session.scalars(select(ActivityLog)).all()
    assert [entry.entity_name for entry in entries] == ["Radio"]


def test_publish_notifies_after_logging(webhook, db_session):
    actor = Actor(user_id=3, role=UserRole.officer, name="Officer")

    publish(
        db_session,
        DomainEvent(
            action=ActivityAction.delete,
            entity_type="WithdrawItem",
            entity_name="Tea",
            actor=actor,
            metadata={"quantity": 2},
        ),
    )

    [call] = webhook.calls
    assert call["json"]["title"] == "WithdrawItem delete"
    assert call["json"]["fields"] == {"performedBy": "Officer", "quantity": 2}
    assert db_session.scalar(select(ActivityLog.entity_name)) == "Tea"
