"""
Messaging package initializer.

Provides email and in-app notification services used by the application.
"""

from .email_service import EmailService
from .dispatcher import NotificationDispatcher

__all__ = [
    "EmailService",
    "NotificationDispatcher",
]
