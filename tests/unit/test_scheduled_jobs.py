from datetime import datetime, timedelta

import pytest

from quickfix.app.exceptions import StorageError
from quickfix.models import Notification, Subscription, User
from quickfix.models.enums import NotificationType, SubscriptionStatus, UserRole
from quickfix.core.security import hash_token
from quickfix.tasks.workers.account_worker import (
    run_cleanup_unverified_accounts,
    run_send_verification_reminders,
)
from quickfix.tasks.workers.subscription_worker import run_expire_subscriptions

NOW = datetime(2026, 3, 1, 12, 0)
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


# ---------------------------------------------------------------------
# Expiry
# ---------------------------------------------------------------------

def test_expire_due_moves_lapsed_subscriptions(manager, make_subscription, db_session, user, make_user):
    lapsed = make_subscription(user, status=SubscriptionStatus.active, end_date=NOW - timedelta(minutes=1))
    user.is_premium = True
    user.subscription_id = lapsed.id
    other = make_user()
    current = make_subscription(other, status=SubscriptionStatus.active, end_date=NOW + timedelta(days=10))
    db_session.commit()

    assert manager.expire_due(NOW) == 1

    db_session.refresh(lapsed)
    db_session.refresh(current)
    db_session.refresh(user)
    assert lapsed.status == SubscriptionStatus.expired
    assert current.status == SubscriptionStatus.active
    assert user.is_premium is False
    assert user.subscription_id is None
    note = db_session.query(Notification).filter(Notification.user_id == user.id).one()
    assert note.title == "Subscription Expired"


def test_expire_keeps_flag_linked_to_another_subscription(manager, make_subscription, db_session, user):
    old = make_subscription(user, status=SubscriptionStatus.active, end_date=NOW - timedelta(days=1))
    newer = make_subscription(user, status=SubscriptionStatus.active, end_date=NOW + timedelta(days=200))
    user.is_premium = True
    user.subscription_id = newer.id
    db_session.commit()

    manager.expire_due(NOW)

    db_session.refresh(old)
    db_session.refresh(user)
    assert old.status == SubscriptionStatus.expired
    assert user.is_premium is True
    assert user.subscription_id == newer.id


def test_expire_job_with_nothing_due(db_session, make_subscription, user):
    make_subscription(user, status=SubscriptionStatus.active, end_date=datetime.utcnow() + timedelta(days=5))

    assert run_expire_subscriptions(db_session) == {"expired": 0}


def test_expire_job_reports_count(db_session, make_subscription, user):
    make_subscription(user, status=SubscriptionStatus.active, end_date=datetime.utcnow() - timedelta(hours=1))

    assert run_expire_subscriptions(db_session) == {"expired": 1}


# ---------------------------------------------------------------------
# Verification reminders
# ---------------------------------------------------------------------

def test_reminders_skipped_when_verification_disabled(db_session, dispatcher, make_user, fake_email):
    make_user(created_at=NOW - timedelta(days=3))

    result = run_send_verification_reminders(db_session, dispatcher=dispatcher, now=NOW)

    assert result["skipped"] is True
    assert fake_email.sent == []


def test_reminders_sent_to_due_users_only(db_session, dispatcher, set_setting, make_user, fake_email):
    set_setting("enableEmailVerification", True)
    due = make_user(created_at=NOW - timedelta(hours=30))
    make_user(created_at=NOW - timedelta(hours=2))
    make_user(created_at=NOW - timedelta(hours=30), last_verification_email_sent=NOW - timedelta(hours=5))
    make_user(created_at=NOW - timedelta(hours=30), email_verified=True)

    result = run_send_verification_reminders(db_session, dispatcher=dispatcher, now=NOW)

    assert result == {"skipped": False, "reminded": 1, "failed": 0}
    assert [mail["to"] for mail in fake_email.sent] == [due.email]

    db_session.refresh(due)
    assert due.last_verification_email_sent == NOW
    assert due.email_verification_expires == NOW + timedelta(hours=24)
    # only the digest is stored; the raw token is in the link
    link_token = fake_email.sent[0]["html"].split("/verify-email/")[1].split('"')[0]
    assert due.email_verification_token == hash_token(link_token)

    note = db_session.query(Notification).filter(Notification.user_id == due.id).one()
    assert note.type == NotificationType.account_verification


def test_failed_reminder_is_counted(db_session, dispatcher, set_setting, make_user, fake_email):
    set_setting("enableEmailVerification", True)
    make_user(created_at=NOW - timedelta(hours=30))
    fake_email.succeed = False

    result = run_send_verification_reminders(db_session, dispatcher=dispatcher, now=NOW)

    assert result["failed"] == 1
    assert result["reminded"] == 0
    assert db_session.query(Notification).count() == 0


# ---------------------------------------------------------------------
# Unverified account cleanup
# ---------------------------------------------------------------------

def test_cleanup_skipped_when_verification_disabled(db_session, make_user):
    make_user(created_at=NOW - timedelta(days=10))

    assert run_cleanup_unverified_accounts(db_session, now=NOW) == {"skipped": True, "deleted": 0}
    assert db_session.query(User).count() == 1


def test_cleanup_deletes_stale_accounts_with_their_records(db_session, set_setting, make_user, make_subscription):
    set_setting("enableEmailVerification", True)
    stale = make_user(created_at=NOW - timedelta(hours=72))
    subscription = make_subscription(stale)
    stale.subscription_id = subscription.id
    db_session.add(Notification(user_id=stale.id, title="Verify", message="Please verify"))
    db_session.commit()
    stale_id = stale.id

    verified = make_user(created_at=NOW - timedelta(hours=72), email_verified=True)
    recent = make_user(created_at=NOW - timedelta(hours=10))
    staff = make_user(role=UserRole.admin, created_at=NOW - timedelta(hours=72))

    result = run_cleanup_unverified_accounts(db_session, now=NOW)

    assert result == {"skipped": False, "deleted": 1}
    remaining = {u.id for u in db_session.query(User).all()}
    assert remaining == {verified.id, recent.id, staff.id}
    assert db_session.query(Subscription).filter(Subscription.user_id == stale_id).count() == 0
    assert db_session.query(Notification).filter(Notification.user_id == stale_id).count() == 0


@pytest.mark.parametrize("hours_since_reminder, deleted", [(10, 0), (60, 1)])
def test_cleanup_waits_after_last_reminder(db_session, set_setting, make_user, hours_since_reminder, deleted):
    set_setting("enableEmailVerification", True)
    make_user(
        created_at=NOW - timedelta(hours=100),
        last_verification_email_sent=NOW - timedelta(hours=hours_since_reminder),
    )

    assert run_cleanup_unverified_accounts(db_session, now=NOW)["deleted"] == deleted


def test_cleanup_removes_uploaded_screenshots(db_session, set_setting, make_user, make_subscription, storage):
    set_setting("enableEmailVerification", True)
    stale = make_user(created_at=NOW - timedelta(hours=72))
    orphan = storage.upload_evidence(PNG, "proof.png", "image/png")
    make_subscription(stale, screenshot_key=orphan.key, screenshot_url=orphan.url)
    verified = make_user(created_at=NOW - timedelta(hours=72), email_verified=True)
    kept = storage.upload_evidence(PNG, "proof.png", "image/png")
    make_subscription(verified, screenshot_key=kept.key, screenshot_url=kept.url)

    result = run_cleanup_unverified_accounts(db_session, now=NOW, storage=storage)

    assert result == {"skipped": False, "deleted": 1}
    assert not (storage.base_dir / orphan.key).exists()
    assert (storage.base_dir / kept.key).exists()


def test_cleanup_logs_screenshots_it_cannot_delete(db_session, set_setting, make_user, make_subscription,
                                                  storage, mocker, caplog):
    set_setting("enableEmailVerification", True)
    for name in ("first.png", "second.png"):
        stored = storage.upload_evidence(PNG, name, "image/png")
        make_subscription(
            make_user(created_at=NOW - timedelta(hours=72)),
            screenshot_key=stored.key,
            screenshot_url=stored.url,
        )
    delete = mocker.patch.object(storage, "delete_object", side_effect=[StorageError("disk busy"), None])

    result = run_cleanup_unverified_accounts(db_session, now=NOW, storage=storage)

    assert result == {"skipped": False, "deleted": 2}
    assert delete.call_count == 2
    assert "Could not delete screenshot" in caplog.text
    assert db_session.query(Subscription).count() == 0
