"""In-app notification and global announcement models."""
from datetime import datetime
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid

from quickfix.db.base import Base
from .base import TimestampMixin, enum_values
from .enums import NotificationType


class Notification(Base):
    """Message addressed to a single user."""

    __tablename__ = 'notifications'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(
        SQLEnum(NotificationType, name='notification_type', values_callable=enum_values),
        default=NotificationType.info,
        nullable=False,
    )
    read = Column(Boolean, default=False, nullable=False, index=True)
    link = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = relationship('User', back_populates='notifications')

    def __repr__(self) -> str:
        return f'<Notification(id={self.id}, user_id={self.user_id}, type={self.type})>'


class Announcement(Base, TimestampMixin):
    """Site-wide message, created when a notification has no target user."""

    __tablename__ = 'announcements'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(
        SQLEnum(NotificationType, name='notification_type', values_callable=enum_values),
        default=NotificationType.info,
        nullable=False,
    )
    link = Column(String(512), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    start_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    end_date = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f'<Announcement(id={self.id}, title={self.title})>'
