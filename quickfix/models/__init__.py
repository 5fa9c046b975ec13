"""Import all models for Alembic."""
from .base import TimestampMixin
from .enums import (
    UserRole,
    SubscriptionPlan,
    SubscriptionStatus,
    PaymentMethod,
    NotificationType,
)
from .user import User
from .subscription import Subscription
from .notification import Notification, Announcement
from .site_setting import SiteSetting

__all__ = [
    "TimestampMixin",
    "UserRole",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "PaymentMethod",
    "NotificationType",
    "User",
    "Subscription",
    "Notification",
    "Announcement",
    "SiteSetting",
]
