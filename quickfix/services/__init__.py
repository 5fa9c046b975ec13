"""
Services package initializer.

Re-exports important service classes so callers can import from
`quickfix.services` instead of deep module paths.
"""

from .messaging import EmailService, NotificationDispatcher

__all__ = [
    "EmailService",
    "NotificationDispatcher",
]
