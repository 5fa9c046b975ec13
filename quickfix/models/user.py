"""User model."""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid

from quickfix.db.base import Base
from .base import TimestampMixin, enum_values
from .enums import UserRole


class User(Base, TimestampMixin):
    """Site account. Only the fields the premium flow reads or writes live here."""

    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(
        SQLEnum(UserRole, name='user_role', values_callable=enum_values),
        default=UserRole.user,
        nullable=False,
        index=True,
    )
    is_active = Column(Boolean, default=True, nullable=False)

    # Premium access
    is_premium = Column(Boolean, default=False, nullable=False)
    subscription_id = Column(
        Uuid,
        ForeignKey('subscriptions.id', ondelete='SET NULL', use_alter=True, name='fk_users_subscription_id'),
        nullable=True,
    )

    # Email verification
    email_verified = Column(Boolean, default=False, nullable=False)
    email_verification_token = Column(String(64), nullable=True, index=True)  # sha256 hex
    email_verification_expires = Column(DateTime, nullable=True)
    last_verification_email_sent = Column(DateTime, nullable=True)

    # Relationships
    subscriptions = relationship(
        'Subscription',
        back_populates='user',
        foreign_keys='Subscription.user_id',
        passive_deletes=True,
    )
    notifications = relationship('Notification', back_populates='user', passive_deletes=True)

    def __repr__(self) -> str:
        return f'<User(id={self.id}, email={self.email}, role={self.role})>'
