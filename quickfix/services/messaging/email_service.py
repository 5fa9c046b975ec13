# services/messaging/email_service.py
import logging
from time import sleep

import resend  # blocking SDK

from quickfix.app.config import settings

logger = logging.getLogger(__name__)

# configure SDK (global)
resend.api_key = settings.RESEND_API_KEY
if not settings.RESEND_API_KEY:
    logger.warning("RESEND_API_KEY not set, emails will fail until you set it.")


class EmailService:
    """Send transactional email through Resend."""

    @staticmethod
    def _send_email_blocking(to: str, subject: str, html: str) -> dict:
        """Blocking call to the resend SDK. Returns SDK response dict or raises."""
        return resend.Emails.send({
            "from": settings.RESEND_FROM_EMAIL,
            "to": to,
            "subject": subject,
            "html": html,
        })

    @classmethod
    def send(cls, to: str, subject: str, html: str, max_retries: int = None) -> bool:
        """Send one email. Returns True on success, False on permanent failure; never raises."""
        max_retries = max_retries or settings.EMAIL_MAX_RETRIES
        logger.info(f"[EMAIL] Sending '{subject}' to {to}")

        attempt = 0
        backoff_seconds = 1
        while attempt < max_retries:
            attempt += 1
            try:
                resp = cls._send_email_blocking(to, subject, html)
                logger.info(f"[EMAIL] Sent '{subject}' to {to} (attempt {attempt}) resp: {resp}")
                return True
            except Exception as exc:
                # the SDK raises for network/auth issues
                logger.warning(f"[EMAIL] Error sending '{subject}' to {to} (attempt {attempt}): {exc}")
                if attempt < max_retries:
                    sleep(backoff_seconds)
                    backoff_seconds *= 2
        logger.error(f"[EMAIL] Failed to send '{subject}' to {to} after {attempt} attempts.")
        return False
