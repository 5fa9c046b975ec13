import pytest
from sqlalchemy.exc import IntegrityError

from quickfix.app.config import settings
from quickfix.app.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DuplicateReferenceError,
    ValidationError,
)
from quickfix.models import Notification, Subscription
from quickfix.models.enums import PaymentMethod, SubscriptionPlan, SubscriptionStatus


def _subscriptions_of(db_session, user):
    return db_session.query(Subscription).filter(Subscription.user_id == user.id).all()


def test_submit_creates_pending_subscription_at_configured_price(manager, db_session, user):
    """A first submission creates one pending subscription priced from settings."""
    result = manager.submit_payment(user.id, "basic", "UTR123456", "REF-RAVI-1")

    subscription = result.subscription
    assert result.resubmitted is False
    assert "submitted for manual verification" in result.message
    assert subscription.status == SubscriptionStatus.pending_manual_verification
    assert subscription.plan == SubscriptionPlan.basic
    assert subscription.amount == 499
    assert subscription.currency == "INR"
    assert subscription.payment_method == PaymentMethod.upi
    assert subscription.transaction_id == "UTR123456"
    assert subscription.reference_code == "REF-RAVI-1"
    assert subscription.last_payment_date is not None
    assert len(_subscriptions_of(db_session, user)) == 1

    db_session.refresh(user)
    assert user.is_premium is False


def test_submit_strips_whitespace(manager, user):
    result = manager.submit_payment(user.id, "pro", "  UTR9  ", " REF9 ")
    assert result.subscription.transaction_id == "UTR9"
    assert result.subscription.reference_code == "REF9"
    assert result.subscription.amount == 1999


def test_resubmission_updates_pending_subscription_in_place(manager, db_session, user):
    first = manager.submit_payment(user.id, "basic", "UTR1", "REF1").subscription
    second = manager.submit_payment(user.id, "advanced", "UTR2", "REF2")

    assert second.resubmitted is True
    assert "updated" in second.message
    assert second.subscription.id == first.id
    assert second.subscription.plan == SubscriptionPlan.advanced
    assert second.subscription.amount == 999
    assert second.subscription.transaction_id == "UTR2"
    assert second.subscription.reference_code == "REF2"
    assert len(_subscriptions_of(db_session, user)) == 1


def test_resubmission_may_keep_its_own_reference_code(manager, user):
    first = manager.submit_payment(user.id, "basic", "UTR1", "REF1").subscription
    again = manager.submit_payment(user.id, "basic", "UTR1-fixed", "REF1").subscription

    assert again.id == first.id
    assert again.transaction_id == "UTR1-fixed"


def test_failed_subscription_does_not_block_a_new_one(manager, make_subscription, db_session, user):
    failed = make_subscription(user, status=SubscriptionStatus.failed)

    result = manager.submit_payment(user.id, "pro", "UTR5", "REF5")

    assert result.resubmitted is False
    assert result.subscription.id != failed.id
    assert len(_subscriptions_of(db_session, user)) == 2


def test_active_subscription_blocks_new_submission(manager, make_subscription, db_session, user):
    make_subscription(user, status=SubscriptionStatus.active)

    with pytest.raises(ConflictError) as exc_info:
        manager.submit_payment(user.id, "pro", "UTR7", "REF7")

    assert "already have an active" in exc_info.value.message
    assert len(_subscriptions_of(db_session, user)) == 1


def test_reference_code_used_by_another_user_is_rejected(manager, make_user, make_subscription, db_session, user):
    other = make_user()
    make_subscription(other, reference_code="SHARED-REF")

    with pytest.raises(DuplicateReferenceError) as exc_info:
        manager.submit_payment(user.id, "basic", "UTR8", "SHARED-REF")

    assert exc_info.value.status_code == 400
    assert isinstance(exc_info.value, ConflictError)
    assert _subscriptions_of(db_session, user) == []


def test_unique_constraint_race_maps_to_duplicate_reference(manager, make_user, make_subscription, db_session, user, mocker):
    """If the pre-check misses a concurrent insert, the database constraint still decides."""
    other = make_user()
    make_subscription(other, reference_code="RACED")
    mocker.patch.object(manager.subscriptions, "reference_code_taken", side_effect=[False, True])

    with pytest.raises(DuplicateReferenceError):
        manager.submit_payment(user.id, "basic", "UTR9", "RACED")

    # session is usable after the rollback
    assert _subscriptions_of(db_session, user) == []


def test_other_integrity_errors_are_not_reported_as_duplicates(manager, db_session, user, mocker):
    mocker.patch.object(
        db_session, "commit", side_effect=IntegrityError("INSERT INTO subscriptions", {}, Exception("NOT NULL"))
    )

    with pytest.raises(IntegrityError):
        manager.submit_payment(user.id, "basic", "UTR9", "FRESH-REF")

    assert _subscriptions_of(db_session, user) == []


@pytest.mark.parametrize("plan", ["gold", "admin-granted", "BASIC"])
def test_unknown_plan_is_rejected(manager, user, plan):
    with pytest.raises(ValidationError, match="Invalid premium plan"):
        manager.submit_payment(user.id, plan, "UTR1", "REF1")


def test_missing_fields_are_listed(manager, user):
    with pytest.raises(ValidationError) as exc_info:
        manager.submit_payment(user.id, "basic", "", "   ")

    assert exc_info.value.message == "Transaction ID, Reference Code are required."


def test_missing_plan(manager, user):
    with pytest.raises(ValidationError, match="selected plan is required"):
        manager.submit_payment(user.id, "", "UTR1", "REF1")


def test_price_setting_as_numeric_string(manager, set_setting, user):
    set_setting("basicPlanPrice", "799")
    result = manager.submit_payment(user.id, "basic", "UTR1", "REF1")
    assert result.subscription.amount == 799


@pytest.mark.parametrize("bad_price", [0, -5, "abc", None, True, "nan"])
def test_invalid_price_setting_is_a_configuration_error(manager, set_setting, db_session, user, bad_price):
    set_setting("basicPlanPrice", bad_price)

    with pytest.raises(ConfigurationError) as exc_info:
        manager.submit_payment(user.id, "basic", "UTR1", "REF1")

    assert exc_info.value.status_code == 500
    assert exc_info.value.details == {"setting": "basicPlanPrice"}
    assert _subscriptions_of(db_session, user) == []


def test_unverified_email_blocks_purchase_when_required(manager, set_setting, user):
    set_setting("enableEmailVerification", True)

    with pytest.raises(AuthorizationError) as exc_info:
        manager.submit_payment(user.id, "basic", "UTR1", "REF1")

    assert exc_info.value.status_code == 403


def test_verified_email_may_purchase_when_required(manager, set_setting, db_session, user):
    set_setting("enableEmailVerification", True)
    user.email_verified = True
    db_session.commit()

    result = manager.submit_payment(user.id, "basic", "UTR1", "REF1")
    assert result.subscription.status == SubscriptionStatus.pending_manual_verification


def test_admins_are_notified_with_review_link(manager, db_session, admin_user, user, fake_email):
    manager.submit_payment(user.id, "basic", "UTR1", "REF1")

    notes = db_session.query(Notification).filter(Notification.user_id == admin_user.id).all()
    assert len(notes) == 1
    assert notes[0].title == "New Payment Awaiting Review"
    assert "REF1" in notes[0].message
    assert notes[0].link == (
        f"{settings.FRONTEND_URL}/admin/admin-dashboard/manage-subscriptions"
        "?status=pending_manual_verification"
    )
    # contact email still at its default, so no admin email
    assert fake_email.sent == []


def test_admin_contact_email_receives_review_request(manager, set_setting, admin_user, user, fake_email):
    set_setting("contactEmail", "payments@quickfix.test")
    set_setting("adminPanelUrl", "https://panel.quickfix.test")

    manager.submit_payment(user.id, "pro", "UTR1", "REF1")
    manager.submit_payment(user.id, "pro", "UTR2", "REF2")

    mails = fake_email.to("payments@quickfix.test")
    assert len(mails) == 2
    assert mails[0]["subject"].startswith("ACTION REQUIRED: New UPI Payment for Review - Ref: REF1")
    assert mails[1]["subject"].startswith("ACTION REQUIRED: UPI Payment Re-submitted - Ref: REF2")
    assert "https://panel.quickfix.test/admin-dashboard/manage-subscriptions" in mails[0]["html"]


def test_email_failure_does_not_undo_submission(manager, set_setting, db_session, user, fake_email):
    set_setting("contactEmail", "payments@quickfix.test")
    fake_email.error = RuntimeError("smtp down")

    result = manager.submit_payment(user.id, "basic", "UTR1", "REF1")

    assert result.subscription.id is not None
    assert len(_subscriptions_of(db_session, user)) == 1
