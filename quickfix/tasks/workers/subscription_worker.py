"""
Subscription Celery Workers
===========================

- Expire active subscriptions whose end date has passed
"""
import logging
from typing import Dict, Any

from sqlalchemy.orm import Session

from quickfix.services.messaging.dispatcher import NotificationDispatcher
from quickfix.services.settings_service import SettingsService
from quickfix.services.subscriptions.lifecycle import SubscriptionLifecycleManager
from quickfix.tasks.celery_app import celery_app
from quickfix.tasks.workers.base import DatabaseTask

logger = logging.getLogger(__name__)


def run_expire_subscriptions(db: Session) -> Dict[str, Any]:
    manager = SubscriptionLifecycleManager(db, SettingsService(db), NotificationDispatcher(db))
    expired = manager.expire_due()
    if expired:
        logger.info(f"Expired {expired} subscription(s).")
    return {"expired": expired}


@celery_app.task(bind=True, base=DatabaseTask, name='quickfix.tasks.workers.subscription_worker.expire_subscriptions')
def expire_subscriptions(self) -> Dict[str, Any]:
    db = self.get_db()
    try:
        return run_expire_subscriptions(db)
    finally:
        db.close()
