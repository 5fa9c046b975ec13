"""Subscription repository extending base repository."""
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc
from typing import Optional, List, Tuple
from uuid import UUID
from datetime import datetime

from quickfix.repositories.base import BaseRepository
from quickfix.models.subscription import Subscription
from quickfix.models.enums import SubscriptionStatus, SubscriptionPlan


# Statuses that block opening another subscription for the same user.
OPEN_STATUSES = (SubscriptionStatus.active, SubscriptionStatus.pending_manual_verification)


class SubscriptionRepository(BaseRepository[Subscription]):
    """Repository for subscription database operations."""

    def __init__(self, db: Session):
        super().__init__(Subscription, db)

    def get_open_for_user(self, user_id: UUID) -> Optional[Subscription]:
        """
        Get the user's active or pending subscription.

        Args:
            user_id: Owning user UUID

        Returns:
            Subscription instance or None; an active one wins over a pending one
        """
        records = (
            self.db.query(Subscription)
            .filter(Subscription.user_id == user_id, Subscription.status.in_(OPEN_STATUSES))
            .order_by(desc(Subscription.created_at))
            .all()
        )
        for record in records:
            if record.status == SubscriptionStatus.active:
                return record
        return records[0] if records else None

    def get_active_for_user(self, user_id: UUID) -> Optional[Subscription]:
        """Get the user's active subscription, if any."""
        return (
            self.db.query(Subscription)
            .filter(Subscription.user_id == user_id, Subscription.status == SubscriptionStatus.active)
            .order_by(desc(Subscription.created_at))
            .first()
        )

    def get_latest_for_user(self, user_id: UUID) -> Optional[Subscription]:
        """Get the user's most recently created subscription regardless of status."""
        return (
            self.db.query(Subscription)
            .filter(Subscription.user_id == user_id)
            .order_by(desc(Subscription.created_at))
            .first()
        )

    def get_owned(self, subscription_id: UUID, user_id: UUID) -> Optional[Subscription]:
        """Get a subscription only if it belongs to the given user."""
        return (
            self.db.query(Subscription)
            .filter(Subscription.id == subscription_id, Subscription.user_id == user_id)
            .first()
        )

    def reference_code_taken(self, reference_code: str, exclude_id: Optional[UUID] = None) -> bool:
        """Check whether another subscription already uses this reference code."""
        query = self.db.query(Subscription.id).filter(Subscription.reference_code == reference_code)
        if exclude_id is not None:
            query = query.filter(Subscription.id != exclude_id)
        return query.first() is not None

    def get_expired_active(self, now: Optional[datetime] = None) -> List[Subscription]:
        """Get active subscriptions whose end date has passed."""
        now = now or datetime.utcnow()
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.status == SubscriptionStatus.active,
                Subscription.end_date.isnot(None),
                Subscription.end_date < now,
            )
            .all()
        )

    def search(
        self,
        status: Optional[SubscriptionStatus] = None,
        user_id: Optional[UUID] = None,
        plan: Optional[SubscriptionPlan] = None,
        transaction_id: Optional[str] = None,
        reference_code: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Subscription], int]:
        """
        Admin listing with filters, newest first.

        Args:
            status: Exact status match
            user_id: Exact owner match
            plan: Exact plan match
            transaction_id: Case-insensitive substring match
            reference_code: Case-insensitive substring match
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (list of records with owners loaded, total count)
        """
        query = self.db.query(Subscription)

        if status:
            query = query.filter(Subscription.status == status)
        if user_id:
            query = query.filter(Subscription.user_id == user_id)
        if plan:
            query = query.filter(Subscription.plan == plan)
        if transaction_id:
            query = query.filter(Subscription.transaction_id.ilike(f'%{transaction_id}%'))
        if reference_code:
            query = query.filter(Subscription.reference_code.ilike(f'%{reference_code}%'))

        total = query.count()

        records = (
            query.options(joinedload(Subscription.user))
            .order_by(desc(Subscription.created_at))
            .offset(skip)
            .limit(limit)
            .all()
        )

        return records, total
