"""Notification repository (append-only apart from the read flag)."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ride_dispatch.notification import Notification as NotificationDomain
from ride_dispatch.notification import payload_adapter

from ..schema import Notification


class NotificationRepository:
    """Repository for notification records."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, notification: NotificationDomain, now: datetime) -> None:
        self.session.add(
            Notification(
                id=notification.notification_id,
                recipient_id=notification.recipient_id,
                title=notification.title,
                body=notification.body,
                type=notification.type.value,
                payload_json=notification.payload.model_dump_json(),
                read=notification.read,
                created_at=notification.created_at or now,
            )
        )

    def list_for_recipient(
        self, recipient_id: str, unread_only: bool = False
    ) -> list[NotificationDomain]:
        """List a user's notifications, newest first."""
        stmt = select(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            stmt = stmt.where(Notification.read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc())
        result = self.session.execute(stmt)
        return [self._to_domain(n) for n in result.scalars().all()]

    def mark_read(self, notification_id: str) -> bool:
        row = self.session.get(Notification, notification_id)
        if row is None:
            return False
        row.read = True
        return True

    def mark_all_read(self, recipient_id: str) -> int:
        stmt = (
            update(Notification)
            .where(Notification.recipient_id == recipient_id, Notification.read.is_(False))
            .values(read=True)
        )
        result = self.session.execute(stmt)
        return result.rowcount or 0

    def _to_domain(self, row: Notification) -> NotificationDomain:
        return NotificationDomain(
            notification_id=row.id,
            recipient_id=row.recipient_id,
            title=row.title,
            body=row.body,
            payload=payload_adapter.validate_json(row.payload_json),
            read=row.read,
            created_at=row.created_at,
        )
