"""Premium subscription endpoints."""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from uuid import UUID

from quickfix.api.deps import get_current_user, get_lifecycle_manager, get_settings_service
from quickfix.app.config import settings
from quickfix.core.rate_limiter import rate_limit
from quickfix.models.user import User
from quickfix.schemas.subscription import (
    CancelResponse,
    ManualPaymentRequest,
    PaymentInfo,
    PaymentSubmissionResponse,
    PlanResponse,
    PremiumFeaturesResponse,
    ScreenshotUploadResponse,
    SubscriptionResponse,
    SubscriptionStatusResponse,
)
from quickfix.services.settings_service import SettingsService
from quickfix.services.subscriptions.lifecycle import SubscriptionLifecycleManager
from quickfix.services.subscriptions.plans import PLAN_CATALOGUE


router = APIRouter()

payment_rate_limit = rate_limit(
    "premium-payment",
    settings.PAYMENT_SUBMIT_RATE_LIMIT,
    settings.RATE_LIMIT_WINDOW_SECS,
)
screenshot_rate_limit = rate_limit(
    "premium-screenshot",
    settings.SCREENSHOT_UPLOAD_RATE_LIMIT,
    settings.RATE_LIMIT_WINDOW_SECS,
)


@router.get('/features', response_model=PremiumFeaturesResponse)
def get_premium_features(settings_service: SettingsService = Depends(get_settings_service)):
    """
    List premium plans with current prices and UPI payment instructions (public).
    """
    site = settings_service.load().model_dump(by_alias=True)
    plans = [
        PlanResponse(
            name=info.plan.value,
            display_name=info.display_name,
            price=site[info.price_setting],
            currency=info.currency,
            benefits=info.benefits,
            duration=info.duration,
        )
        for info in PLAN_CATALOGUE.values()
    ]
    upi_id = site["upiIdForPremium"]
    return PremiumFeaturesResponse(
        plans=plans,
        payment_info=PaymentInfo(
            upi_id=upi_id,
            instructions=(
                f"Please make the payment to {upi_id} and provide the Transaction ID "
                "(UTR/Ref ID) for verification."
            ),
        ),
    )


@router.post(
    '/confirm-manual-payment',
    response_model=PaymentSubmissionResponse,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(payment_rate_limit)],
)
def confirm_manual_payment(
    payload: ManualPaymentRequest,
    current_user: User = Depends(get_current_user),
    manager: SubscriptionLifecycleManager = Depends(get_lifecycle_manager),
):
    """
    Submit a UPI payment for manual verification.

    - **transactionId**: UTR / transaction reference
    - **referenceCode**: unique reference entered with the payment
    - **selectedPlan**: basic, advanced or pro

    Re-submitting while a subscription is still pending updates that
    subscription instead of creating another.
    """
    result = manager.submit_payment(
        current_user.id,
        payload.selected_plan,
        payload.transaction_id,
        payload.reference_code,
    )
    return PaymentSubmissionResponse(
        message=result.message,
        resubmitted=result.resubmitted,
        subscription=SubscriptionResponse.model_validate(result.subscription),
    )


@router.post(
    '/upload-screenshot',
    response_model=ScreenshotUploadResponse,
    dependencies=[Depends(screenshot_rate_limit)],
)
def upload_screenshot(
    subscription_id: UUID = Form(..., alias='subscriptionId'),
    screenshot: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    manager: SubscriptionLifecycleManager = Depends(get_lifecycle_manager),
):
    """
    Attach a payment screenshot (JPEG, PNG, GIF or WEBP, up to 5 MB) to a pending subscription.
    """
    contents = screenshot.file.read()
    subscription = manager.attach_screenshot(
        current_user.id,
        subscription_id,
        contents,
        screenshot.content_type,
        filename=screenshot.filename,
    )
    return ScreenshotUploadResponse(screenshot_url=subscription.screenshot_url)


@router.post('/cancel', response_model=CancelResponse)
def cancel_subscription(
    current_user: User = Depends(get_current_user),
    manager: SubscriptionLifecycleManager = Depends(get_lifecycle_manager),
):
    """Cancel the active subscription. Premium access is removed right away."""
    manager.cancel(current_user.id)
    return CancelResponse()


@router.get('/status', response_model=SubscriptionStatusResponse)
def get_subscription_status(
    current_user: User = Depends(get_current_user),
    manager: SubscriptionLifecycleManager = Depends(get_lifecycle_manager),
):
    """Latest subscription of the current user, with the premium flag reconciled against it."""
    snapshot = manager.sync_status(current_user.id)
    subscription = snapshot.subscription
    if subscription is None:
        return SubscriptionStatusResponse(
            status='none',
            is_premium=snapshot.is_premium,
            message='You do not have an active premium subscription.',
        )
    return SubscriptionStatusResponse(
        status=snapshot.status,
        is_premium=snapshot.is_premium,
        message=f"Your current subscription is {snapshot.status.replace('_', ' ')}.",
        id=subscription.id,
        plan=subscription.plan,
        start_date=subscription.start_date,
        end_date=subscription.end_date,
        amount=subscription.amount,
        currency=subscription.currency,
        transaction_id=subscription.transaction_id,
        reference_code=subscription.reference_code,
        screenshot_url=subscription.screenshot_url,
        admin_notes=subscription.admin_notes,
    )
