"""Dependencies for API endpoints."""
from typing import Optional
from uuid import UUID

from fastapi import BackgroundTasks, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from quickfix.db.base import get_db
from quickfix.models.user import User
from quickfix.models.enums import UserRole
from quickfix.core.security import decode_token
from quickfix.services.messaging.dispatcher import NotificationDispatcher
from quickfix.services.messaging.email_service import EmailService
from quickfix.services.settings_service import SettingsService
from quickfix.services.storage.factory import get_storage_service
from quickfix.services.subscriptions.lifecycle import AdminContext, SubscriptionLifecycleManager

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from JWT token."""
    token = credentials.credentials

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    if payload.get("type") != "access":
        raise credentials_exception

    subject: Optional[str] = payload.get("sub")
    if subject is None:
        raise credentials_exception
    try:
        user_id = UUID(subject)
    except ValueError:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> AdminContext:
    """Verify user is an admin and hand out the admin capability."""
    if current_user.role != UserRole.admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return AdminContext.for_user(current_user)


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_email_service():
    return EmailService


def get_dispatcher(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    email_service=Depends(get_email_service),
) -> NotificationDispatcher:
    return NotificationDispatcher(db, email_service=email_service, background_tasks=background_tasks)


def get_storage():
    return get_storage_service()


def get_lifecycle_manager(
    db: Session = Depends(get_db),
    settings_service: SettingsService = Depends(get_settings_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    storage=Depends(get_storage),
) -> SubscriptionLifecycleManager:
    return SubscriptionLifecycleManager(db, settings_service, dispatcher, storage)
