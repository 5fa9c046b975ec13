"""User repository extending base repository."""
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from datetime import datetime

from quickfix.repositories.base import BaseRepository
from quickfix.models.user import User
from quickfix.models.enums import UserRole


class UserRepository(BaseRepository[User]):
    """Repository for user database operations."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_admins(self) -> List[User]:
        """Get all active admin accounts."""
        return (
            self.db.query(User)
            .filter(User.role == UserRole.admin, User.is_active.is_(True))
            .all()
        )

    def get_due_verification_reminder(self, created_before: datetime, reminded_before: datetime) -> List[User]:
        """
        Get unverified users that should receive another verification email.

        Args:
            created_before: Only accounts older than this
            reminded_before: Only accounts last reminded before this (or never)

        Returns:
            List of users
        """
        return (
            self.db.query(User)
            .filter(
                User.email_verified.is_(False),
                User.created_at <= created_before,
                (User.last_verification_email_sent.is_(None))
                | (User.last_verification_email_sent <= reminded_before),
            )
            .all()
        )

    def get_stale_unverified(self, cutoff: datetime) -> List[User]:
        """Get unverified non-admin users created and last reminded before the cutoff."""
        return (
            self.db.query(User)
            .filter(
                User.email_verified.is_(False),
                User.role != UserRole.admin,
                User.created_at <= cutoff,
                (User.last_verification_email_sent.is_(None))
                | (User.last_verification_email_sent <= cutoff),
            )
            .all()
        )

    def clear_subscription_links(self, user_ids: List[UUID]) -> None:
        """Drop subscription back-references so rows can be deleted in any order."""
        if not user_ids:
            return
        self.db.query(User).filter(User.id.in_(user_ids)).update(
            {User.subscription_id: None}, synchronize_session=False
        )
