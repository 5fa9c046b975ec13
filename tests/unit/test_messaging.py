from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError

from quickfix.models import Announcement, Notification
from quickfix.models.enums import NotificationType, UserRole
from quickfix.services.messaging import templates
from quickfix.services.messaging.dispatcher import NotificationDispatcher
from quickfix.services.messaging.email_service import EmailService


def test_notify_user_creates_notification(dispatcher, db_session, user):
    record = dispatcher.notify(user.id, "Hello", "Welcome aboard", type=NotificationType.success, link="/premium")

    assert isinstance(record, Notification)
    stored = db_session.query(Notification).one()
    assert stored.user_id == user.id
    assert stored.read is False
    assert stored.type == NotificationType.success


def test_notify_without_user_creates_announcement(dispatcher, db_session):
    record = dispatcher.notify(None, "Maintenance", "Down at midnight", type=NotificationType.announcement)

    assert isinstance(record, Announcement)
    assert db_session.query(Announcement).one().content == "Down at midnight"
    assert db_session.query(Notification).count() == 0


def test_notify_failure_is_swallowed(dispatcher, db_session, user, mocker, caplog):
    mocker.patch.object(db_session, "commit", side_effect=SQLAlchemyError("locked"))

    assert dispatcher.notify(user.id, "Hello", "Welcome") is None
    assert "Failed to save notification 'Hello'" in caplog.text


def test_notify_admins_reaches_active_admins_only(dispatcher, db_session, make_user, user):
    first = make_user(role=UserRole.admin)
    second = make_user(role=UserRole.admin)
    make_user(role=UserRole.admin, is_active=False)

    assert dispatcher.notify_admins("Review", "Payment waiting") == 2

    recipients = {n.user_id for n in db_session.query(Notification).all()}
    assert recipients == {first.id, second.id}


def test_send_email_inline(dispatcher, fake_email):
    dispatcher.send_email("ravi@example.com", "Hi", "<p>Hi</p>")
    assert fake_email.sent == [{"to": "ravi@example.com", "subject": "Hi", "html": "<p>Hi</p>"}]


def test_send_email_deferred_to_background(db_session, fake_email):
    background = BackgroundTasks()
    dispatcher = NotificationDispatcher(db_session, email_service=fake_email, background_tasks=background)

    dispatcher.send_email("ravi@example.com", "Hi", "<p>Hi</p>")

    assert fake_email.sent == []
    assert len(background.tasks) == 1


def test_send_email_without_recipient(dispatcher, fake_email):
    dispatcher.send_email("", "Hi", "<p>Hi</p>")
    assert fake_email.sent == []


def test_email_service_retries_then_succeeds(mocker):
    send = mocker.patch.object(
        EmailService, "_send_email_blocking", side_effect=[RuntimeError("timeout"), {"id": "email_1"}]
    )
    sleep = mocker.patch("quickfix.services.messaging.email_service.sleep")

    assert EmailService.send("ravi@example.com", "Hi", "<p>Hi</p>") is True
    assert send.call_count == 2
    sleep.assert_called_once_with(1)


def test_email_service_gives_up(mocker):
    send = mocker.patch.object(EmailService, "_send_email_blocking", side_effect=RuntimeError("401"))
    mocker.patch("quickfix.services.messaging.email_service.sleep")

    assert EmailService.send("ravi@example.com", "Hi", "<p>Hi</p>", max_retries=3) is False
    assert send.call_count == 3


def test_templates_escape_user_input():
    html = templates.payment_verification_failed(
        username="<script>alert(1)</script>",
        plan="BASIC",
        transaction_id="UTR1",
        reference_code="REF1",
        rejection_reason="Amount & date don't match",
        contact_email="support@quickfix.com",
    )

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Amount &amp; date" in html
