"""Subscription model."""
from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid

from quickfix.db.base import Base
from .base import TimestampMixin, enum_values
from .enums import SubscriptionPlan, SubscriptionStatus, PaymentMethod


class Subscription(Base, TimestampMixin):
    """Premium subscription record; a user accumulates these over time."""

    __tablename__ = 'subscriptions'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    # Subscription details
    plan = Column(
        SQLEnum(SubscriptionPlan, name='subscription_plan', values_callable=enum_values),
        nullable=False,
    )
    status = Column(
        SQLEnum(SubscriptionStatus, name='subscription_status', values_callable=enum_values),
        default=SubscriptionStatus.pending_manual_verification,
        nullable=False,
        index=True,
    )
    payment_method = Column(
        SQLEnum(PaymentMethod, name='payment_method', values_callable=enum_values),
        default=PaymentMethod.upi,
        nullable=False,
    )

    # Payment claim
    amount = Column(Float, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default='INR')
    reference_code = Column(String(255), unique=True, nullable=True, index=True)
    transaction_id = Column(String(255), nullable=True, index=True)
    last_payment_date = Column(DateTime, nullable=True)

    # Evidence
    screenshot_url = Column(String(512), nullable=True)
    screenshot_key = Column(String(512), nullable=True)

    # Dates
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)

    # Admin audit
    admin_notes = Column(Text, nullable=True)
    verified_by = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    verified_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship('User', back_populates='subscriptions', foreign_keys=[user_id])

    def __repr__(self) -> str:
        return f'<Subscription(id={self.id}, user_id={self.user_id}, plan={self.plan}, status={self.status})>'
