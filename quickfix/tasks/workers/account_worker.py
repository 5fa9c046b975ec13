"""
Account Celery Workers
======================

Email verification housekeeping; both jobs do nothing unless the
enableEmailVerification setting is on.

- Remind unverified users with a fresh verification link
- Delete accounts that stayed unverified too long
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from quickfix.app.config import settings
from quickfix.app.exceptions import StorageError
from quickfix.core.security import generate_verification_token
from quickfix.models.enums import NotificationType
from quickfix.models.subscription import Subscription
from quickfix.models.user import User
from quickfix.repositories.notification_repo import NotificationRepository
from quickfix.repositories.user_repo import UserRepository
from quickfix.services.messaging import templates
from quickfix.services.messaging.dispatcher import NotificationDispatcher
from quickfix.services.settings_service import SettingsService
from quickfix.services.storage.factory import get_storage_service
from quickfix.tasks.celery_app import celery_app
from quickfix.tasks.workers.base import DatabaseTask

logger = logging.getLogger(__name__)

VERIFY_EMAIL_ROUTE = "/verify-email"


def run_send_verification_reminders(
    db: Session,
    dispatcher: Optional[NotificationDispatcher] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Issue a new verification token to every unverified user that is due a reminder.

    Returns:
        Counts of reminded and failed users
    """
    if not SettingsService(db).get("enableEmailVerification", False):
        logger.info("Email verification disabled, skipping verification reminders.")
        return {"skipped": True, "reminded": 0, "failed": 0}

    now = now or datetime.utcnow()
    dispatcher = dispatcher or NotificationDispatcher(db)
    users = UserRepository(db).get_due_verification_reminder(
        created_before=now - timedelta(hours=settings.EMAIL_VERIFICATION_REMINDER_INITIAL_DELAY_HOURS),
        reminded_before=now - timedelta(hours=settings.EMAIL_VERIFICATION_REMINDER_INTERVAL_HOURS),
    )

    reminded = failed = 0
    for user in users:
        raw_token, hashed_token = generate_verification_token()
        user.email_verification_token = hashed_token
        user.email_verification_expires = now + timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS)
        user.last_verification_email_sent = now
        db.commit()

        verification_url = f"{settings.FRONTEND_URL}{VERIFY_EMAIL_ROUTE}/{raw_token}"
        sent = dispatcher.email_service.send(
            user.email,
            "Reminder: verify your QuickFix email",
            templates.email_verification(
                username=user.username,
                verification_url=verification_url,
                expires_hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS,
            ),
        )
        if not sent:
            failed += 1
            logger.error(f"Verification reminder to {user.email} failed.")
            continue

        dispatcher.notify(
            user.id,
            "Verify your email",
            "Please verify your email address to keep your account. Check your inbox for a new link.",
            type=NotificationType.account_verification,
            link=VERIFY_EMAIL_ROUTE,
        )
        reminded += 1

    logger.info(f"Verification reminders: {reminded} sent, {failed} failed.")
    return {"skipped": False, "reminded": reminded, "failed": failed}


def run_cleanup_unverified_accounts(
    db: Session,
    now: Optional[datetime] = None,
    storage=None,
) -> Dict[str, Any]:
    """
    Delete users still unverified after the grace period, with their notifications,
    subscriptions and uploaded payment screenshots.
    """
    if not SettingsService(db).get("enableEmailVerification", False):
        logger.info("Email verification disabled, skipping unverified account cleanup.")
        return {"skipped": True, "deleted": 0}

    now = now or datetime.utcnow()
    users = UserRepository(db)
    stale = users.get_stale_unverified(now - timedelta(hours=settings.UNVERIFIED_ACCOUNT_DELETION_HOURS))
    if not stale:
        return {"skipped": False, "deleted": 0}

    ids = [user.id for user in stale]
    emails = [user.email for user in stale]
    screenshot_keys = [
        key for (key,) in db.query(Subscription.screenshot_key).filter(
            Subscription.user_id.in_(ids),
            Subscription.screenshot_key.isnot(None),
        )
    ]
    try:
        users.clear_subscription_links(ids)
        NotificationRepository(db).delete_for_users(ids)
        db.query(Subscription).filter(Subscription.user_id.in_(ids)).delete(synchronize_session=False)
        db.query(User).filter(User.id.in_(ids)).delete(synchronize_session="fetch")
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Deleted {len(ids)} unverified account(s): {', '.join(emails)}")
    if screenshot_keys:
        _delete_screenshots(storage or get_storage_service(), screenshot_keys)
    return {"skipped": False, "deleted": len(ids)}


def _delete_screenshots(storage, keys) -> None:
    for key in keys:
        try:
            storage.delete_object(key)
        except (StorageError, OSError) as exc:
            logger.error(f"Could not delete screenshot {key} of a removed account: {exc}")


@celery_app.task(bind=True, base=DatabaseTask, name='quickfix.tasks.workers.account_worker.send_verification_reminders')
def send_verification_reminders(self) -> Dict[str, Any]:
    db = self.get_db()
    try:
        return run_send_verification_reminders(db)
    finally:
        db.close()


@celery_app.task(bind=True, base=DatabaseTask, name='quickfix.tasks.workers.account_worker.cleanup_unverified_accounts')
def cleanup_unverified_accounts(self) -> Dict[str, Any]:
    db = self.get_db()
    try:
        return run_cleanup_unverified_accounts(db)
    finally:
        db.close()
