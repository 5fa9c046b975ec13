"""Notification and announcement schemas."""
from pydantic import Field
from datetime import datetime
from uuid import UUID
from typing import List, Optional

from quickfix.models.enums import NotificationType
from quickfix.schemas.base import CamelRequest, CamelResponse


class NotificationResponse(CamelResponse):
    id: UUID
    title: str
    message: str
    type: NotificationType
    read: bool
    link: Optional[str] = None
    created_at: datetime


class NotificationListResponse(CamelResponse):
    success: bool = True
    count: int
    unread_count: int
    data: List[NotificationResponse]


class NotificationIdsRequest(CamelRequest):
    """Empty or missing ids means every notification of the caller."""
    ids: Optional[List[UUID]] = Field(None)


class NotificationBulkResponse(CamelResponse):
    success: bool = True
    affected: int


class AnnouncementResponse(CamelResponse):
    id: UUID
    title: str
    content: str
    type: NotificationType
    link: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    created_at: datetime
