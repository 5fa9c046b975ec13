"""Admin endpoints: subscription review queue, premium grants and site settings."""
import math
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from quickfix.api.deps import get_current_admin, get_db, get_lifecycle_manager, get_settings_service
from quickfix.models.enums import SubscriptionPlan, SubscriptionStatus
from quickfix.repositories.subscription_repo import SubscriptionRepository
from quickfix.schemas.settings import SiteSettings
from quickfix.schemas.subscription import (
    AdminSubscriptionResponse,
    SubscriptionDecisionResponse,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionStatusUpdate,
    UserPremiumResponse,
    UserPremiumUpdate,
)
from quickfix.services.settings_service import SettingsService
from quickfix.services.subscriptions.lifecycle import AdminContext, SubscriptionLifecycleManager


router = APIRouter()


@router.get('/subscriptions', response_model=SubscriptionListResponse)
def list_subscriptions(
    status: Optional[SubscriptionStatus] = Query(None, description='Exact status'),
    user_id: Optional[UUID] = Query(None, alias='userId', description='Owner'),
    transaction_id: Optional[str] = Query(None, alias='transactionId', description='Case-insensitive contains'),
    reference_code: Optional[str] = Query(None, alias='referenceCode', description='Case-insensitive contains'),
    plan: Optional[SubscriptionPlan] = Query(None, description='Exact plan'),
    page: int = Query(1, ge=1, alias='pageNumber', description='Page number'),
    size: int = Query(10, ge=1, le=100, alias='pageSize', description='Page size'),
    admin: AdminContext = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    Review queue of subscriptions, newest first.

    - **status**, **userId**, **plan**: exact filters
    - **transactionId**, **referenceCode**: partial, case-insensitive
    - **pageNumber** / **pageSize**: pagination (default 1 / 10)
    """
    repo = SubscriptionRepository(db)
    records, total = repo.search(
        status=status,
        user_id=user_id,
        plan=plan,
        transaction_id=transaction_id,
        reference_code=reference_code,
        skip=(page - 1) * size,
        limit=size,
    )
    return SubscriptionListResponse(
        count=total,
        page=page,
        pages=math.ceil(total / size) if total else 0,
        data=[AdminSubscriptionResponse.model_validate(record) for record in records],
    )


@router.put('/subscriptions/{subscription_id}/status', response_model=SubscriptionDecisionResponse)
def update_subscription_status(
    subscription_id: UUID,
    payload: SubscriptionStatusUpdate,
    admin: AdminContext = Depends(get_current_admin),
    manager: SubscriptionLifecycleManager = Depends(get_lifecycle_manager),
):
    """
    Decide on a subscription: **active**, **failed** or **cancelled**, with optional **adminNotes**.
    """
    subscription = manager.admin_decision(admin, subscription_id, payload.status, payload.admin_notes)
    return SubscriptionDecisionResponse(
        message=(
            f"Subscription for {subscription.user.email} marked as "
            f"{subscription.status.value.upper().replace('_', ' ')}."
        ),
        data=SubscriptionResponse.model_validate(subscription),
    )


@router.put('/users/{user_id}/premium', response_model=UserPremiumResponse)
def update_user_premium(
    user_id: UUID,
    payload: UserPremiumUpdate,
    admin: AdminContext = Depends(get_current_admin),
    manager: SubscriptionLifecycleManager = Depends(get_lifecycle_manager),
):
    """Grant (admin-granted plan, one year) or revoke premium access for a user."""
    user = manager.set_premium(admin, user_id, payload.is_premium)
    return UserPremiumResponse.model_validate(user)


@router.get('/settings')
def get_site_settings(
    admin: AdminContext = Depends(get_current_admin),
    settings_service: SettingsService = Depends(get_settings_service),
) -> Dict[str, Any]:
    """All site settings, stored values over defaults."""
    return settings_service.load().model_dump(by_alias=True)


@router.put('/settings')
def update_site_settings(
    values: Dict[str, Any] = Body(..., description='Setting name to value'),
    admin: AdminContext = Depends(get_current_admin),
    settings_service: SettingsService = Depends(get_settings_service),
) -> Dict[str, Any]:
    """Update any subset of site settings."""
    updated: SiteSettings = settings_service.update(values, updated_by=admin.admin_id)
    return updated.model_dump(by_alias=True)
