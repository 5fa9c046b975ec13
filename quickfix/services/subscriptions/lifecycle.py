"""
Subscription lifecycle: payment submission, evidence, admin decisions,
cancellation, grants, expiry and premium-flag reconciliation.

Each operation writes the subscription and the owning user in one commit.
Notifications and email go out only after that commit and never undo it.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quickfix.app.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DuplicateReferenceError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from quickfix.models.enums import (
    NotificationType,
    PaymentMethod,
    SubscriptionPlan,
    SubscriptionStatus,
    UserRole,
)
from quickfix.models.subscription import Subscription
from quickfix.models.user import User
from quickfix.repositories.subscription_repo import SubscriptionRepository
from quickfix.repositories.user_repo import UserRepository
from quickfix.schemas.settings import DEFAULT_CONTACT_EMAIL
from quickfix.services.messaging import templates
from quickfix.services.messaging.dispatcher import NotificationDispatcher
from quickfix.services.settings_service import SettingsService
from quickfix.services.subscriptions.plans import (
    CURRENCY,
    PLAN_CATALOGUE,
    PURCHASABLE_PLANS,
    plan_label,
)
from quickfix.services.subscriptions.transitions import (
    ADMIN_TARGET_STATUSES,
    add_one_year,
    validate_transition,
)
from quickfix.utils.validators import validate_screenshot

logger = logging.getLogger(__name__)

PREMIUM_ROUTE = "/premium"

SUBMITTED_MESSAGE = (
    "Your payment confirmation has been submitted for manual verification. "
    "We will activate your premium membership shortly!"
)
RESUBMITTED_MESSAGE = (
    "Your payment confirmation has been updated and is awaiting manual verification. "
    "Thank you for your patience!"
)


@dataclass(frozen=True)
class AdminContext:
    """Proof that the caller was authorized as an admin."""
    admin_id: UUID
    username: str

    @classmethod
    def for_user(cls, user: User) -> "AdminContext":
        if user is None or user.role != UserRole.admin or not user.is_active:
            raise AuthorizationError("Admin access required")
        return cls(admin_id=user.id, username=user.username)


@dataclass
class SubmissionResult:
    subscription: Subscription
    resubmitted: bool

    @property
    def message(self) -> str:
        return RESUBMITTED_MESSAGE if self.resubmitted else SUBMITTED_MESSAGE


@dataclass
class StatusSnapshot:
    subscription: Optional[Subscription]
    is_premium: bool

    @property
    def status(self) -> str:
        return self.subscription.status.value if self.subscription else "none"


class SubscriptionLifecycleManager:
    """Owns every status change of a Subscription and the user's premium flag."""

    def __init__(
        self,
        db: Session,
        settings_service: SettingsService,
        dispatcher: NotificationDispatcher,
        storage: Any = None,
    ):
        self.db = db
        self.settings = settings_service
        self.dispatcher = dispatcher
        self.storage = storage
        self.subscriptions = SubscriptionRepository(db)
        self.users = UserRepository(db)

    # ------------------------------------------------------------------
    # Subscriber operations
    # ------------------------------------------------------------------

    def submit_payment(
        self,
        user_id: UUID,
        plan: Union[str, SubscriptionPlan],
        transaction_id: str,
        reference_code: str,
    ) -> SubmissionResult:
        """
        Submit, or re-submit while pending, a manual UPI payment claim.

        Args:
            user_id: Paying user
            plan: basic, advanced or pro
            transaction_id: UTR / transaction reference from the payer
            reference_code: Payer-chosen unique reference

        Returns:
            SubmissionResult; the subscription is pending manual verification

        Raises:
            AuthorizationError: Email verification is required and missing
            ValidationError: Missing fields or unknown plan
            ConfigurationError: Plan price is not a positive number
            ConflictError: User already has an active subscription or the
                reference code is taken
        """
        user = self._get_user(user_id)

        if self.settings.get("enableEmailVerification", False) and not user.email_verified:
            raise AuthorizationError(
                "Your email address must be verified to purchase a premium plan. "
                "Please verify your account via the link sent to your email."
            )

        transaction_id = (transaction_id or "").strip()
        reference_code = (reference_code or "").strip()
        missing = [
            label for label, value in (
                ("Transaction ID", transaction_id),
                ("Reference Code", reference_code),
                ("selected plan", plan),
            ) if not value
        ]
        if missing:
            raise ValidationError(f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required.")

        selected = self._parse_plan(plan)
        price = self._resolve_price(selected)
        currency = PLAN_CATALOGUE[selected].currency
        now = datetime.utcnow()

        existing = self.subscriptions.get_open_for_user(user.id)
        if existing is not None and existing.status == SubscriptionStatus.active:
            raise ConflictError(
                "You already have an active premium subscription. "
                "To change your plan, please cancel the current one first."
            )

        exclude_id = existing.id if existing is not None else None
        if self.subscriptions.reference_code_taken(reference_code, exclude_id=exclude_id):
            raise DuplicateReferenceError(reference_code)

        try:
            if existing is not None:
                subscription = self.subscriptions.update(existing, {
                    "plan": selected,
                    "amount": price,
                    "currency": currency,
                    "transaction_id": transaction_id,
                    "reference_code": reference_code,
                    "last_payment_date": now,
                }, commit=False)
            else:
                subscription = self.subscriptions.create({
                    "user_id": user.id,
                    "plan": selected,
                    "status": SubscriptionStatus.pending_manual_verification,
                    "payment_method": PaymentMethod.upi,
                    "amount": price,
                    "currency": currency,
                    "transaction_id": transaction_id,
                    "reference_code": reference_code,
                    "last_payment_date": now,
                }, commit=False)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self.subscriptions.reference_code_taken(reference_code, exclude_id=exclude_id):
                raise DuplicateReferenceError(reference_code)
            raise
        self.db.refresh(subscription)

        resubmitted = existing is not None
        logger.info(
            f"User {user.username} {'re-submitted' if resubmitted else 'submitted'} UPI payment "
            f"for reference {reference_code}. Txn ID: {transaction_id}. Plan: {selected.value}. "
            f"Subscription {subscription.id}"
        )

        self._announce_payment_to_admins(user, subscription, resubmitted)
        return SubmissionResult(subscription=subscription, resubmitted=resubmitted)

    def attach_screenshot(
        self,
        user_id: UUID,
        subscription_id: UUID,
        contents: bytes,
        content_type: str,
        filename: Optional[str] = None,
    ) -> Subscription:
        """
        Store payment evidence and link it to the user's pending subscription.

        The previous file, if any, is deleted after the new link is committed.
        If the commit fails the new file is deleted and the error re-raised.
        """
        if self.storage is None:
            raise ConfigurationError("Evidence storage is not configured.", setting="STORAGE_BACKEND")

        validate_screenshot(contents, content_type)
        user = self._get_user(user_id)

        subscription = self.subscriptions.get_owned(subscription_id, user.id)
        if subscription is None:
            raise NotFoundError(
                "Subscription not found or you are not authorized to upload screenshot for this subscription."
            )
        if subscription.status not in (
            SubscriptionStatus.initiated,
            SubscriptionStatus.pending_manual_verification,
        ):
            raise ConflictError(
                "Screenshot can only be uploaded for subscriptions that are initiated or pending manual "
                f"verification. Your current subscription status is {subscription.status.value.replace('_', ' ')}."
            )

        stored = self.storage.upload_evidence(contents, filename, content_type)
        previous_key = subscription.screenshot_key

        try:
            subscription.screenshot_url = stored.url
            subscription.screenshot_key = stored.key
            self.db.commit()
        except Exception:
            self.db.rollback()
            self._discard_file(stored.key, reason="failed database save")
            raise
        self.db.refresh(subscription)

        if previous_key and previous_key != stored.key:
            self._discard_file(previous_key, reason="replaced screenshot")

        logger.info(f"User {user.username} uploaded screenshot for subscription {subscription.id}: {stored.url}")

        review_link = f"{self._review_link()}&userId={user.id}"
        self.dispatcher.notify_admins(
            "Payment Screenshot Uploaded",
            f"{user.username} uploaded a payment screenshot for reference "
            f"{subscription.reference_code or subscription.transaction_id or 'N/A'}.",
            type=NotificationType.subscription,
            link=review_link,
        )
        contact = self._admin_contact_email("screenshot upload")
        if contact:
            self.dispatcher.send_email(
                contact,
                "NEW SCREENSHOT: Payment Screenshot Uploaded for Ref: "
                f"{subscription.reference_code or subscription.transaction_id}",
                templates.admin_screenshot_uploaded(
                    username=user.username,
                    user_email=user.email,
                    transaction_id=subscription.transaction_id,
                    reference_code=subscription.reference_code,
                    screenshot_url=stored.url,
                    review_link=review_link,
                ),
            )
        return subscription

    def cancel(self, user_id: UUID) -> Subscription:
        """Cancel the user's active subscription. Premium access ends immediately."""
        user = self._get_user(user_id)
        subscription = self.subscriptions.get_active_for_user(user.id)
        if subscription is None:
            raise NotFoundError("No active subscription found to cancel.")

        validate_transition(subscription.status, SubscriptionStatus.cancelled)
        try:
            subscription.status = SubscriptionStatus.cancelled
            user.is_premium = False
            if user.subscription_id == subscription.id:
                user.subscription_id = None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User {user.username} cancelled their premium subscription (Sub ID: {subscription.id}).")

        self.dispatcher.notify(
            user.id,
            "Subscription Cancelled",
            "Your QuickFix Premium subscription has been cancelled.",
            type=NotificationType.subscription,
            link=PREMIUM_ROUTE,
        )
        return subscription

    def sync_status(self, user_id: UUID) -> StatusSnapshot:
        """
        Report the latest subscription and correct the premium flag to match it.

        The most recently created subscription decides, whatever its status.
        """
        user = self._get_user(user_id)
        latest = self.subscriptions.get_latest_for_user(user.id)
        if latest is None:
            return StatusSnapshot(subscription=None, is_premium=user.is_premium)

        should_be_premium = latest.status == SubscriptionStatus.active
        if user.is_premium != should_be_premium:
            user.is_premium = should_be_premium
            self.db.commit()
            logger.info(
                f"Corrected isPremium to {should_be_premium} for user {user.id} "
                f"(latest subscription {latest.id} is {latest.status.value})"
            )
        return StatusSnapshot(subscription=latest, is_premium=user.is_premium)

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------

    def admin_decision(
        self,
        admin: AdminContext,
        subscription_id: UUID,
        target_status: Union[str, SubscriptionStatus],
        admin_notes: Optional[str] = None,
    ) -> Subscription:
        """
        Activate, fail or cancel a subscription on an admin's decision.

        Args:
            admin: Capability from the admin dependency
            subscription_id: Subscription to decide on
            target_status: active, failed or cancelled
            admin_notes: Optional notes, kept on the record

        Raises:
            AuthorizationError: No admin context
            ValidationError: Target status admins may not set
            NotFoundError: Subscription or its user is missing
            IllegalTransitionError: Not an allowed edge from the current status
        """
        self._require_admin(admin)
        target = self._parse_admin_target(target_status)

        subscription = self.subscriptions.get(subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription not found.")
        user = self.users.get(subscription.user_id)
        if user is None:
            raise NotFoundError("Associated user not found for this subscription.")

        validate_transition(subscription.status, target)

        now = datetime.utcnow()
        try:
            if target == SubscriptionStatus.active:
                effective_start = subscription.last_payment_date or now
                if subscription.start_date is None:
                    subscription.start_date = effective_start
                if subscription.end_date is None:
                    subscription.end_date = add_one_year(effective_start)
                user.is_premium = True
                user.subscription_id = subscription.id
            elif user.is_premium or user.subscription_id is not None:
                user.is_premium = False
                user.subscription_id = None

            subscription.status = target
            if admin_notes:
                subscription.admin_notes = admin_notes
            subscription.verified_by = admin.admin_id
            subscription.verified_at = now
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(subscription)

        logger.info(
            f"Admin {admin.username} updated subscription {subscription.id} for {user.email} "
            f"to status: {target.value}."
        )
        self._announce_decision(user, subscription, target, admin_notes)
        return subscription

    def set_premium(self, admin: AdminContext, user_id: UUID, is_premium: bool) -> User:
        """Grant or revoke premium access directly; a no-op when the flag already matches."""
        self._require_admin(admin)
        user = self._get_user(user_id)
        if user.is_premium == is_premium:
            return user
        if is_premium:
            self._grant_premium(admin, user)
        else:
            self._revoke_premium(admin, user)
        return user

    # ------------------------------------------------------------------
    # System operations
    # ------------------------------------------------------------------

    def expire_due(self, now: Optional[datetime] = None) -> int:
        """Move active subscriptions past their end date to expired. Returns the count."""
        now = now or datetime.utcnow()
        due = self.subscriptions.get_expired_active(now)
        if not due:
            return 0

        affected = []
        try:
            for subscription in due:
                validate_transition(subscription.status, SubscriptionStatus.expired)
                subscription.status = SubscriptionStatus.expired
                user = subscription.user
                if user is not None and user.subscription_id in (subscription.id, None):
                    user.is_premium = False
                    user.subscription_id = None
                affected.append((subscription, user))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for subscription, user in affected:
            logger.info(f"Subscription {subscription.id} expired (end date {subscription.end_date}).")
            if user is not None:
                self.dispatcher.notify(
                    user.id,
                    "Subscription Expired",
                    f"Your QuickFix Premium subscription ({plan_label(subscription.plan)}) has expired. "
                    "Renew any time from the premium page.",
                    type=NotificationType.subscription,
                    link=PREMIUM_ROUTE,
                )
        return len(affected)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_user(self, user_id: UUID) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    @staticmethod
    def _require_admin(admin: AdminContext) -> None:
        if not isinstance(admin, AdminContext):
            raise AuthorizationError("Admin access required")

    @staticmethod
    def _parse_plan(plan: Union[str, SubscriptionPlan]) -> SubscriptionPlan:
        try:
            selected = SubscriptionPlan(plan)
        except ValueError:
            raise ValidationError("Invalid premium plan selected.")
        if selected not in PURCHASABLE_PLANS:
            raise ValidationError("Invalid premium plan selected.")
        return selected

    @staticmethod
    def _parse_admin_target(target_status: Union[str, SubscriptionStatus]) -> SubscriptionStatus:
        try:
            target = SubscriptionStatus(target_status)
        except ValueError:
            raise ValidationError("Invalid subscription status provided.")
        if target not in ADMIN_TARGET_STATUSES:
            allowed = ", ".join(sorted(s.value for s in ADMIN_TARGET_STATUSES))
            raise ValidationError(f"Admins can only set a subscription to: {allowed}.")
        return target

    def _resolve_price(self, plan: SubscriptionPlan) -> float:
        info = PLAN_CATALOGUE[plan]
        raw = self.settings.get(info.price_setting, info.default_price)
        try:
            price = float(raw)
        except (TypeError, ValueError):
            price = math.nan
        if isinstance(raw, bool) or not math.isfinite(price) or price <= 0:
            logger.error(f"Plan price setting '{info.price_setting}' is invalid: {raw!r}")
            raise ConfigurationError(
                "Premium plan price not configured correctly. Please contact support.",
                setting=info.price_setting,
            )
        return price

    def _admin_contact_email(self, purpose: str) -> Optional[str]:
        contact = self.settings.get("contactEmail", DEFAULT_CONTACT_EMAIL)
        if not contact or contact == DEFAULT_CONTACT_EMAIL:
            logger.warning(f"Admin contact email not set, skipping {purpose} notification email.")
            return None
        return contact

    def _review_link(self) -> str:
        return (
            f"{self.settings.admin_panel_url()}/admin-dashboard/manage-subscriptions"
            f"?status={SubscriptionStatus.pending_manual_verification.value}"
        )

    def _discard_file(self, key: str, reason: str) -> None:
        try:
            self.storage.delete_object(key)
        except (StorageError, OSError) as exc:
            logger.error(f"Could not delete stored file {key} ({reason}): {exc}")

    def _announce_payment_to_admins(self, user: User, subscription: Subscription, resubmitted: bool) -> None:
        review_link = self._review_link()
        label = plan_label(subscription.plan)
        self.dispatcher.notify_admins(
            "Payment Re-submitted" if resubmitted else "New Payment Awaiting Review",
            f"{user.username} {'re-submitted' if resubmitted else 'submitted'} a {label} plan payment "
            f"(Ref: {subscription.reference_code}, Txn: {subscription.transaction_id}).",
            type=NotificationType.subscription,
            link=review_link,
        )
        contact = self._admin_contact_email("manual payment review")
        if contact:
            prefix = "UPI Payment Re-submitted" if resubmitted else "New UPI Payment for Review"
            self.dispatcher.send_email(
                contact,
                f"ACTION REQUIRED: {prefix} - Ref: {subscription.reference_code} (Plan: {label})",
                templates.admin_manual_payment_review(
                    username=user.username,
                    user_email=user.email,
                    plan=label,
                    amount=subscription.amount,
                    currency=subscription.currency,
                    transaction_id=subscription.transaction_id,
                    reference_code=subscription.reference_code,
                    review_link=review_link,
                ),
            )

    def _announce_decision(
        self,
        user: User,
        subscription: Subscription,
        target: SubscriptionStatus,
        admin_notes: Optional[str],
    ) -> None:
        label = plan_label(subscription.plan)
        contact = self.settings.get("contactEmail", DEFAULT_CONTACT_EMAIL)

        if target == SubscriptionStatus.active:
            subject = "QuickFix Premium Activated!"
            message = (
                f"Congratulations! Your QuickFix Premium subscription ({label}) is now active. "
                "Enjoy all the premium benefits!"
            )
            notification_type = NotificationType.success
            html = templates.subscription_confirmation(
                username=user.username,
                plan=label,
                amount=subscription.amount,
                currency=subscription.currency,
                start_date=subscription.start_date,
                end_date=subscription.end_date,
                contact_email=contact,
            )
        elif target == SubscriptionStatus.failed:
            subject = "QuickFix Premium Payment Verification Failed"
            message = (
                f"Your premium subscription payment for {label} could not be verified. "
                f"Reason: {admin_notes or 'No specific reason provided by admin.'} "
                "Please check details and try again or contact support."
            )
            notification_type = NotificationType.error
            html = templates.payment_verification_failed(
                username=user.username,
                plan=label,
                transaction_id=subscription.transaction_id,
                reference_code=subscription.reference_code,
                rejection_reason=admin_notes,
                contact_email=contact,
            )
        else:
            subject = "QuickFix Premium Subscription Cancelled"
            message = f"Your QuickFix Premium subscription ({label}) has been cancelled."
            notification_type = NotificationType.subscription
            html = templates.subscription_cancelled(username=user.username, plan=label, contact_email=contact)

        self.dispatcher.notify(user.id, subject, message, type=notification_type, link=PREMIUM_ROUTE)
        self.dispatcher.send_email(user.email, subject, html)

    def _grant_premium(self, admin: AdminContext, user: User) -> None:
        now = datetime.utcnow()
        try:
            subscription = self.subscriptions.create({
                "user_id": user.id,
                "plan": SubscriptionPlan.admin_granted,
                "status": SubscriptionStatus.active,
                "payment_method": PaymentMethod.admin,
                "amount": 0,
                "currency": CURRENCY,
                "start_date": now,
                "end_date": add_one_year(now),
                "admin_notes": f"Granted by admin {admin.username}.",
                "verified_by": admin.admin_id,
                "verified_at": now,
            }, commit=False)
            user.is_premium = True
            user.subscription_id = subscription.id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(subscription)
        logger.info(f"Admin {admin.username} granted premium to {user.email} (Subscription ID: {subscription.id}).")

        contact = self.settings.get("contactEmail", DEFAULT_CONTACT_EMAIL)
        self.dispatcher.notify(
            user.id,
            "Premium Access Granted",
            "An administrator has granted you QuickFix Premium access. Enjoy all the premium benefits!",
            type=NotificationType.success,
            link=PREMIUM_ROUTE,
        )
        self.dispatcher.send_email(
            user.email,
            "QuickFix Premium Activated!",
            templates.subscription_confirmation(
                username=user.username,
                plan=plan_label(subscription.plan),
                amount=0,
                currency=subscription.currency,
                start_date=subscription.start_date,
                end_date=subscription.end_date,
                contact_email=contact,
            ),
        )

    def _revoke_premium(self, admin: AdminContext, user: User) -> None:
        now = datetime.utcnow()
        active = self.subscriptions.get_active_for_user(user.id)
        try:
            if active is not None:
                validate_transition(active.status, SubscriptionStatus.cancelled)
                active.status = SubscriptionStatus.cancelled
                active.admin_notes = f"Premium access revoked by admin {admin.username}."
                active.verified_by = admin.admin_id
                active.verified_at = now
            user.is_premium = False
            user.subscription_id = None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Admin {admin.username} revoked premium from {user.email}.")

        contact = self.settings.get("contactEmail", DEFAULT_CONTACT_EMAIL)
        plan = plan_label(active.plan) if active is not None else "PREMIUM"
        self.dispatcher.notify(
            user.id,
            "Premium Access Revoked",
            "Your QuickFix Premium access has been revoked by an administrator.",
            type=NotificationType.warning,
            link=PREMIUM_ROUTE,
        )
        self.dispatcher.send_email(
            user.email,
            "QuickFix Premium Subscription Cancelled",
            templates.subscription_cancelled(username=user.username, plan=plan, contact_email=contact),
        )
