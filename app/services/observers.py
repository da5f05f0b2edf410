"""Fan-out of committed domain events to independent best-effort observers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction
from app.security import Actor
from app.services import notifier
from app.services.activity_log import log_activity
from app.utils.best_effort import best_effort
from app.utils.request_context import RequestContext


@dataclass
class DomainEvent:
    """Something that already happened and was committed by the primary operation."""

    action: ActivityAction
    entity_type: str
    actor: Actor
    entity_id: str | int | None = None
    entity_name: str | None = None
    changes: list[dict[str, Any]] | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    context: RequestContext | None = None
    notify_category: str = "activities"


def _record_activity(db: Session, event: DomainEvent) -> None:
    log_activity(
        db,
        action=event.action,
        entity_type=event.entity_type,
        entity_id=event.entity_id,
        entity_name=event.entity_name,
        performed_by=event.actor.user_id,
        performed_by_name=event.actor.name,
        changes=event.changes,
        metadata=event.metadata,
        context=event.context,
    )


def _notify(db: Session, event: DomainEvent) -> None:
    if not notifier.webhook_enabled():
        return
    notifier.send_notification(
        f"{event.entity_type} {event.action.value}",
        event.entity_name or event.entity_type,
        category=event.notify_category,
        fields={"performedBy": event.actor.name, **event.metadata},
    )


# Each observer runs inside its own failure boundary, in order.
OBSERVERS: list[tuple[str, Callable[[Session, DomainEvent], None]]] = [
    ("activity_log", _record_activity),
    ("webhook", _notify),
]


def publish(db: Session, event: DomainEvent) -> None:
    """Deliver ``event`` to every observer; observer failures never propagate."""

    for label, observer in OBSERVERS:
        best_effort(label, observer, db, event, session=db)


__all__ = ["DomainEvent", "OBSERVERS", "publish"]
