"""Base task class shared by the scheduled workers."""
import logging

from celery import Task
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from quickfix.db.base import SessionLocal

logger = logging.getLogger(__name__)


class DatabaseTask(Task):
    """Task with its own session factory and failure logging."""

    autoretry_for = (OperationalError,)
    retry_kwargs = {'max_retries': 3}
    retry_backoff = True
    retry_backoff_max = 600
    retry_jitter = True

    def get_db(self) -> Session:
        """Get database session."""
        return SessionLocal()

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(f"Task {self.name} [{task_id}] failed: {exc}\n{einfo}")

    def on_success(self, retval, task_id, args, kwargs):
        logger.info(f"Task {self.name} [{task_id}] completed: {retval}")
