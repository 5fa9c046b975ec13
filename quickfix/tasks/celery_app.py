from celery import Celery
from celery.schedules import crontab

from quickfix.app.config import settings

# Create Celery instance and include explicit task modules
celery_app = Celery(
    'quickfix',
    include=[
        'quickfix.tasks.workers.subscription_worker',
        'quickfix.tasks.workers.account_worker',
    ]
)

celery_app.conf.update(
    broker_url=settings.CELERY_BROKER_URL,
    result_backend=settings.CELERY_RESULT_BACKEND,
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutes hard limit
)

celery_app.conf.beat_schedule = {
    'expire-subscriptions-daily': {
        'task': 'quickfix.tasks.workers.subscription_worker.expire_subscriptions',
        'schedule': crontab(hour=0, minute=30),
    },
    'send-verification-reminders-hourly': {
        'task': 'quickfix.tasks.workers.account_worker.send_verification_reminders',
        'schedule': crontab(minute=0),
    },
    'cleanup-unverified-accounts-daily': {
        'task': 'quickfix.tasks.workers.account_worker.cleanup_unverified_accounts',
        'schedule': crontab(hour=3, minute=0),
    },
}
