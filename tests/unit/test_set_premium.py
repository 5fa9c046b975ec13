from uuid import uuid4

import pytest

from quickfix.app.exceptions import AuthorizationError, NotFoundError
from quickfix.models import Notification, Subscription
from quickfix.models.enums import PaymentMethod, SubscriptionPlan, SubscriptionStatus
from quickfix.services.subscriptions.transitions import add_one_year


def test_grant_creates_admin_granted_subscription(manager, admin, db_session, user, fake_email):
    result = manager.set_premium(admin, user.id, True)

    assert result.is_premium is True
    subscription = db_session.query(Subscription).filter(Subscription.user_id == user.id).one()
    assert subscription.plan == SubscriptionPlan.admin_granted
    assert subscription.status == SubscriptionStatus.active
    assert subscription.payment_method == PaymentMethod.admin
    assert subscription.amount == 0
    assert subscription.reference_code is None
    assert subscription.end_date == add_one_year(subscription.start_date)
    assert subscription.verified_by == admin.admin_id
    assert admin.username in subscription.admin_notes
    assert result.subscription_id == subscription.id

    note = db_session.query(Notification).filter(Notification.user_id == user.id).one()
    assert note.title == "Premium Access Granted"
    assert fake_email.to(user.email)[0]["subject"] == "QuickFix Premium Activated!"


def test_revoke_cancels_active_subscription(manager, admin, db_session, user, fake_email):
    manager.set_premium(admin, user.id, True)

    result = manager.set_premium(admin, user.id, False)

    assert result.is_premium is False
    assert result.subscription_id is None
    subscription = db_session.query(Subscription).filter(Subscription.user_id == user.id).one()
    assert subscription.status == SubscriptionStatus.cancelled
    assert "revoked" in subscription.admin_notes
    assert fake_email.to(user.email)[-1]["subject"] == "QuickFix Premium Subscription Cancelled"


def test_revoke_without_subscription_only_clears_flag(manager, admin, db_session, user):
    user.is_premium = True
    db_session.commit()

    result = manager.set_premium(admin, user.id, False)

    assert result.is_premium is False
    assert db_session.query(Subscription).count() == 0


def test_unchanged_flag_is_a_no_op(manager, admin, db_session, user, fake_email):
    manager.set_premium(admin, user.id, False)

    assert db_session.query(Subscription).count() == 0
    assert db_session.query(Notification).count() == 0
    assert fake_email.sent == []


def test_set_premium_requires_admin(manager, user):
    with pytest.raises(AuthorizationError):
        manager.set_premium(None, user.id, True)


def test_set_premium_unknown_user(manager, admin):
    with pytest.raises(NotFoundError):
        manager.set_premium(admin, uuid4(), True)
