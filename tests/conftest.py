"""
Shared test configuration
"""
import itertools
import os
import tempfile

# Settings are read once at import; point them somewhere harmless first
os.environ.setdefault("LOCAL_UPLOAD_DIR", tempfile.mkdtemp(prefix="quickfix-uploads-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.pop("REDIS_URL", None)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quickfix.db.base import Base
from quickfix.models import Subscription, User
from quickfix.models.enums import PaymentMethod, SubscriptionPlan, SubscriptionStatus, UserRole
from quickfix.repositories.settings_repo import SiteSettingRepository
from quickfix.services.messaging.dispatcher import NotificationDispatcher
from quickfix.services.settings_service import SettingsService
from quickfix.services.storage.local import LocalStorageService
from quickfix.services.subscriptions.lifecycle import AdminContext, SubscriptionLifecycleManager


class FakeEmailService:
    """Records outgoing mail instead of calling Resend."""

    def __init__(self):
        self.sent = []
        self.succeed = True
        self.error = None

    def send(self, to, subject, html, max_retries=None):
        if self.error is not None:
            raise self.error
        self.sent.append({"to": to, "subject": subject, "html": html})
        return self.succeed

    def to(self, address):
        return [mail for mail in self.sent if mail["to"] == address]


@pytest.fixture
def engine():
    """In-memory database shared across threads (TestClient runs sync endpoints in a pool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create test database session."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def fake_email():
    return FakeEmailService()


@pytest.fixture
def storage(tmp_path):
    return LocalStorageService(str(tmp_path / "uploads"), "http://testserver")


@pytest.fixture
def settings_service(db_session):
    return SettingsService(db_session)


@pytest.fixture
def dispatcher(db_session, fake_email):
    return NotificationDispatcher(db_session, email_service=fake_email)


@pytest.fixture
def manager(db_session, settings_service, dispatcher, storage):
    return SubscriptionLifecycleManager(db_session, settings_service, dispatcher, storage)


@pytest.fixture
def set_setting(db_session):
    """Store a site setting directly."""
    def _set(name, value):
        SiteSettingRepository(db_session).upsert(name, value)
        db_session.commit()
    return _set


_sequence = itertools.count(1)


@pytest.fixture
def make_user(db_session):
    def _make(role=UserRole.user, **kwargs):
        n = next(_sequence)
        kwargs.setdefault("username", f"user{n}")
        kwargs.setdefault("email", f"user{n}@example.com")
        user = User(role=role, **kwargs)
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def user(make_user):
    return make_user(username="ravi", email="ravi@example.com")


@pytest.fixture
def admin_user(make_user):
    return make_user(role=UserRole.admin, username="admin", email="admin@example.com", email_verified=True)


@pytest.fixture
def admin(admin_user):
    return AdminContext.for_user(admin_user)


@pytest.fixture
def make_subscription(db_session):
    def _make(user, status=SubscriptionStatus.pending_manual_verification, **kwargs):
        n = next(_sequence)
        kwargs.setdefault("plan", SubscriptionPlan.basic)
        kwargs.setdefault("amount", 499)
        kwargs.setdefault("currency", "INR")
        kwargs.setdefault("payment_method", PaymentMethod.upi)
        kwargs.setdefault("reference_code", f"REF{n:04d}")
        kwargs.setdefault("transaction_id", f"TXN{n:04d}")
        subscription = Subscription(user_id=user.id, status=status, **kwargs)
        db_session.add(subscription)
        db_session.commit()
        return subscription
    return _make
