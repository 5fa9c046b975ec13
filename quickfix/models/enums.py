"""Enums for database models."""
import enum


class UserRole(str, enum.Enum):
    """User role types."""
    user = "user"
    admin = "admin"


class SubscriptionPlan(str, enum.Enum):
    """Subscription plan types."""
    basic = "basic"
    advanced = "advanced"
    pro = "pro"
    admin_granted = "admin-granted"


class SubscriptionStatus(str, enum.Enum):
    """Subscription status."""
    initiated = "initiated"
    pending_manual_verification = "pending_manual_verification"
    active = "active"
    cancelled = "cancelled"
    expired = "expired"
    failed = "failed"


class PaymentMethod(str, enum.Enum):
    """How the subscription was paid for."""
    upi = "UPI"
    admin = "ADMIN"


class NotificationType(str, enum.Enum):
    """In-app notification categories."""
    success = "success"
    error = "error"
    warning = "warning"
    info = "info"
    system = "system"
    guide_update = "guide_update"
    announcement = "announcement"
    subscription = "subscription"
    account_verification = "account_verification"
