"""
Schemas package.

Request/response models for the premium, admin, notification and
settings endpoints.
"""

from .subscription import (
    ManualPaymentRequest,
    SubscriptionStatusUpdate,
    UserPremiumUpdate,
    SubscriptionResponse,
    AdminSubscriptionResponse,
    PaymentSubmissionResponse,
    ScreenshotUploadResponse,
    CancelResponse,
    SubscriptionStatusResponse,
    PremiumFeaturesResponse,
    SubscriptionListResponse,
    SubscriptionDecisionResponse,
)
from .notification import (
    NotificationResponse,
    NotificationListResponse,
    NotificationIdsRequest,
    AnnouncementResponse,
)
from .settings import SiteSettings

__all__ = [
    "ManualPaymentRequest",
    "SubscriptionStatusUpdate",
    "UserPremiumUpdate",
    "SubscriptionResponse",
    "AdminSubscriptionResponse",
    "PaymentSubmissionResponse",
    "ScreenshotUploadResponse",
    "CancelResponse",
    "SubscriptionStatusResponse",
    "PremiumFeaturesResponse",
    "SubscriptionListResponse",
    "SubscriptionDecisionResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "NotificationIdsRequest",
    "AnnouncementResponse",
    "SiteSettings",
]
