"""In-app notifications, announcements and email fan-out.

Every method here is best-effort: failures are logged and never raised,
because callers invoke them after their own state change is committed.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quickfix.models.enums import NotificationType
from quickfix.models.notification import Notification, Announcement
from quickfix.repositories.user_repo import UserRepository
from quickfix.services.messaging.email_service import EmailService

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Deliver notifications for one request or job."""

    def __init__(
        self,
        db: Session,
        email_service=EmailService,
        background_tasks: Optional[BackgroundTasks] = None,
    ):
        self.db = db
        self.email_service = email_service
        self.background_tasks = background_tasks

    def notify(
        self,
        user_id: Optional[UUID],
        title: str,
        message: str,
        type: NotificationType = NotificationType.info,
        link: Optional[str] = None,
    ):
        """
        Create a notification for one user, or an announcement when user_id is None.

        Returns:
            The created row, or None when persisting failed
        """
        if user_id is None:
            record = Announcement(title=title, content=message, type=type, link=link)
        else:
            record = Notification(user_id=user_id, title=title, message=message, type=type, link=link)
        try:
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            target = f"user {user_id}" if user_id else "all users"
            logger.error(f"Failed to save notification '{title}' for {target}: {exc}")
            return None
        return record

    def notify_admins(
        self,
        title: str,
        message: str,
        type: NotificationType = NotificationType.system,
        link: Optional[str] = None,
    ) -> int:
        """Notify every active admin. Returns how many notifications were saved."""
        try:
            admins = UserRepository(self.db).get_admins()
        except SQLAlchemyError as exc:
            logger.error(f"Could not load admin users for '{title}': {exc}")
            return 0
        sent = 0
        for admin in admins:
            if self.notify(admin.id, title, message, type=type, link=link) is not None:
                sent += 1
        return sent

    def send_email(self, to: str, subject: str, html: str) -> None:
        """Send an email after the response when running inside a request, inline otherwise."""
        if not to:
            logger.warning(f"No recipient for email '{subject}', skipping.")
            return
        if self.background_tasks is not None:
            self.background_tasks.add_task(self.email_service.send, to, subject, html)
            return
        try:
            self.email_service.send(to, subject, html)
        except Exception as exc:
            logger.error(f"Failed to send email '{subject}' to {to}: {exc}")
