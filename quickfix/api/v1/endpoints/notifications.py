"""Notification endpoints for the current user."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quickfix.api.deps import get_current_user, get_db
from quickfix.models.user import User
from quickfix.repositories.notification_repo import NotificationRepository
from quickfix.schemas.notification import (
    NotificationBulkResponse,
    NotificationIdsRequest,
    NotificationListResponse,
    NotificationResponse,
)


router = APIRouter()


@router.get('', response_model=NotificationListResponse)
def list_notifications(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    records, total, unread = NotificationRepository(db).list_for_user(
        current_user.id, skip=(page - 1) * size, limit=size
    )
    return NotificationListResponse(
        count=total,
        unread_count=unread,
        data=[NotificationResponse.model_validate(r) for r in records],
    )


@router.put('/read', response_model=NotificationBulkResponse)
def mark_notifications_read(
    payload: Optional[NotificationIdsRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark the listed notifications (or all of them) as read."""
    affected = NotificationRepository(db).mark_read(current_user.id, payload.ids if payload else None)
    return NotificationBulkResponse(affected=affected)


@router.delete('', response_model=NotificationBulkResponse)
def delete_notifications(
    payload: Optional[NotificationIdsRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete the listed notifications (or all of them)."""
    affected = NotificationRepository(db).delete_for_user(current_user.id, payload.ids if payload else None)
    return NotificationBulkResponse(affected=affected)
