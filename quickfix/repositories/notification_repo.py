"""Notification and announcement repositories."""
from sqlalchemy.orm import Session
from sqlalchemy import desc, or_
from typing import List, Tuple
from uuid import UUID
from datetime import datetime

from quickfix.repositories.base import BaseRepository
from quickfix.models.notification import Notification, Announcement


class NotificationRepository(BaseRepository[Notification]):
    """Repository for per-user notifications."""

    def __init__(self, db: Session):
        super().__init__(Notification, db)

    def list_for_user(self, user_id: UUID, skip: int = 0, limit: int = 20) -> Tuple[List[Notification], int, int]:
        """
        Get a user's notifications, newest first.

        Returns:
            Tuple of (records, total count, unread count)
        """
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        total = query.count()
        unread = query.filter(Notification.read.is_(False)).count()
        records = query.order_by(desc(Notification.created_at)).offset(skip).limit(limit).all()
        return records, total, unread

    def mark_read(self, user_id: UUID, ids: List[UUID] = None) -> int:
        """Mark the given (or all) notifications of a user as read."""
        query = self.db.query(Notification).filter(
            Notification.user_id == user_id, Notification.read.is_(False)
        )
        if ids:
            query = query.filter(Notification.id.in_(ids))
        count = query.update({Notification.read: True}, synchronize_session=False)
        self.db.commit()
        return count

    def delete_for_user(self, user_id: UUID, ids: List[UUID] = None) -> int:
        """Delete the given (or all) notifications of a user."""
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if ids:
            query = query.filter(Notification.id.in_(ids))
        count = query.delete(synchronize_session=False)
        self.db.commit()
        return count

    def delete_for_users(self, user_ids: List[UUID]) -> int:
        """Delete every notification of the given users without committing."""
        if not user_ids:
            return 0
        return (
            self.db.query(Notification)
            .filter(Notification.user_id.in_(user_ids))
            .delete(synchronize_session=False)
        )


class AnnouncementRepository(BaseRepository[Announcement]):
    """Repository for global announcements."""

    def __init__(self, db: Session):
        super().__init__(Announcement, db)

    def get_active(self, now: datetime = None) -> List[Announcement]:
        """Get announcements that are switched on and inside their date window."""
        now = now or datetime.utcnow()
        return (
            self.db.query(Announcement)
            .filter(
                Announcement.is_active.is_(True),
                Announcement.start_date <= now,
                or_(Announcement.end_date.is_(None), Announcement.end_date >= now),
            )
            .order_by(desc(Announcement.created_at))
            .all()
        )
