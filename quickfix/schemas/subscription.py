"""Subscription and premium schemas."""
from pydantic import Field
from datetime import datetime
from uuid import UUID
from typing import List, Optional

from quickfix.models.enums import PaymentMethod, SubscriptionPlan, SubscriptionStatus
from quickfix.schemas.base import CamelRequest, CamelResponse


class ManualPaymentRequest(CamelRequest):
    """Manual UPI payment confirmation."""
    transaction_id: str = Field("", max_length=255, description="UTR / transaction reference")
    reference_code: str = Field("", max_length=255, description="Unique reference chosen by the payer")
    selected_plan: str = Field("", description="basic, advanced or pro")


class SubscriptionStatusUpdate(CamelRequest):
    """Admin decision on a subscription."""
    status: SubscriptionStatus
    admin_notes: Optional[str] = Field(None, max_length=2000)


class UserPremiumUpdate(CamelRequest):
    """Admin toggle of a user's premium access."""
    is_premium: bool


class UserSummary(CamelResponse):
    id: UUID
    username: str
    email: str


class UserPremiumResponse(CamelResponse):
    id: UUID
    username: str
    email: str
    is_premium: bool
    subscription_id: Optional[UUID] = None


class SubscriptionResponse(CamelResponse):
    """Subscription as returned to its owner."""
    id: UUID
    user_id: UUID
    plan: SubscriptionPlan
    status: SubscriptionStatus
    payment_method: PaymentMethod
    amount: float
    currency: str
    reference_code: Optional[str] = None
    transaction_id: Optional[str] = None
    screenshot_url: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    last_payment_date: Optional[datetime] = None
    admin_notes: Optional[str] = None
    verified_by: Optional[UUID] = None
    verified_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AdminSubscriptionResponse(SubscriptionResponse):
    """Subscription with its owner, for the review queue."""
    user: Optional[UserSummary] = None


class PaymentSubmissionResponse(CamelResponse):
    success: bool = True
    message: str
    resubmitted: bool
    subscription: SubscriptionResponse


class ScreenshotUploadResponse(CamelResponse):
    success: bool = True
    message: str = "Screenshot uploaded successfully and linked to your subscription."
    screenshot_url: str


class CancelResponse(CamelResponse):
    success: bool = True
    message: str = "Subscription cancelled successfully. Your premium access has ended."


class SubscriptionStatusResponse(CamelResponse):
    """Reconciled premium status of the current user."""
    success: bool = True
    status: str
    is_premium: bool
    message: str
    id: Optional[UUID] = None
    plan: Optional[SubscriptionPlan] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    transaction_id: Optional[str] = None
    reference_code: Optional[str] = None
    screenshot_url: Optional[str] = None
    admin_notes: Optional[str] = None


class PlanResponse(CamelResponse):
    name: str
    display_name: str
    price: float
    currency: str
    benefits: List[str]
    duration: str


class PaymentInfo(CamelResponse):
    method: str = "UPI"
    upi_id: str
    instructions: str


class PremiumFeaturesResponse(CamelResponse):
    success: bool = True
    plans: List[PlanResponse]
    payment_info: PaymentInfo


class SubscriptionListResponse(CamelResponse):
    success: bool = True
    count: int
    page: int
    pages: int
    data: List[AdminSubscriptionResponse]


class SubscriptionDecisionResponse(CamelResponse):
    success: bool = True
    message: str
    data: SubscriptionResponse
