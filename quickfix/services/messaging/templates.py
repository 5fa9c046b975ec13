"""HTML bodies for transactional email."""
from datetime import datetime
from html import escape
from typing import Optional


def _layout(heading: str, body: str) -> str:
    year = datetime.utcnow().year
    return (
        "<div style=\"font-family: Arial, sans-serif; max-width: 600px; margin: auto;\">"
        f"<h2>{escape(heading)}</h2>"
        f"{body}"
        f"<p style=\"color: #888; font-size: 12px;\">&copy; {year} QuickFix</p>"
        "</div>"
    )


def _button(url: str, label: str) -> str:
    return (
        f"<p><a href=\"{escape(url, quote=True)}\" "
        "style=\"background: #4f46e5; color: #fff; padding: 10px 16px; text-decoration: none;\">"
        f"{escape(label)}</a></p>"
    )


def admin_manual_payment_review(
    username: str,
    user_email: str,
    plan: str,
    amount: float,
    currency: str,
    transaction_id: str,
    reference_code: str,
    review_link: str,
) -> str:
    body = (
        f"<p><strong>{escape(username)}</strong> ({escape(user_email)}) submitted a UPI payment "
        "that needs manual verification.</p>"
        "<ul>"
        f"<li>Plan: {escape(plan)}</li>"
        f"<li>Amount: {amount:g} {escape(currency)}</li>"
        f"<li>Transaction ID: {escape(transaction_id)}</li>"
        f"<li>Reference code: {escape(reference_code)}</li>"
        "</ul>"
        + _button(review_link, "Review pending payments")
    )
    return _layout("Payment awaiting review", body)


def admin_screenshot_uploaded(
    username: str,
    user_email: str,
    transaction_id: Optional[str],
    reference_code: Optional[str],
    screenshot_url: str,
    review_link: str,
) -> str:
    body = (
        f"<p><strong>{escape(username)}</strong> ({escape(user_email)}) uploaded a payment screenshot.</p>"
        "<ul>"
        f"<li>Transaction ID: {escape(transaction_id or 'N/A')}</li>"
        f"<li>Reference code: {escape(reference_code or 'N/A')}</li>"
        "</ul>"
        f"<p><a href=\"{escape(screenshot_url, quote=True)}\">View screenshot</a></p>"
        + _button(review_link, "Review this user's payment")
    )
    return _layout("Payment screenshot uploaded", body)


def subscription_confirmation(
    username: str,
    plan: str,
    amount: float,
    currency: str,
    start_date: datetime,
    end_date: datetime,
    contact_email: str,
) -> str:
    body = (
        f"<p>Hi {escape(username)},</p>"
        f"<p>Your QuickFix Premium subscription (<strong>{escape(plan)}</strong>) is now active.</p>"
        "<ul>"
        f"<li>Amount: {amount:g} {escape(currency)}</li>"
        f"<li>Valid from: {start_date:%a %b %d %Y}</li>"
        f"<li>Valid until: {end_date:%a %b %d %Y}</li>"
        "</ul>"
        f"<p>Questions? Write to {escape(contact_email)}.</p>"
    )
    return _layout("QuickFix Premium Activated!", body)


def payment_verification_failed(
    username: str,
    plan: str,
    transaction_id: Optional[str],
    reference_code: Optional[str],
    rejection_reason: Optional[str],
    contact_email: str,
) -> str:
    body = (
        f"<p>Hi {escape(username)},</p>"
        f"<p>We could not verify your payment for the <strong>{escape(plan)}</strong> plan.</p>"
        "<ul>"
        f"<li>Transaction ID: {escape(transaction_id or 'N/A')}</li>"
        f"<li>Reference code: {escape(reference_code or 'N/A')}</li>"
        f"<li>Reason: {escape(rejection_reason or 'No specific reason provided by admin.')}</li>"
        "</ul>"
        f"<p>Please check your details and try again, or contact {escape(contact_email)}.</p>"
    )
    return _layout("Payment verification failed", body)


def subscription_cancelled(username: str, plan: str, contact_email: str) -> str:
    body = (
        f"<p>Hi {escape(username)},</p>"
        f"<p>Your QuickFix Premium subscription (<strong>{escape(plan)}</strong>) has been cancelled.</p>"
        f"<p>If this is unexpected, contact {escape(contact_email)}.</p>"
    )
    return _layout("Subscription cancelled", body)


def email_verification(username: str, verification_url: str, expires_hours: int) -> str:
    body = (
        f"<p>Hi {escape(username)},</p>"
        "<p>Please confirm your email address to keep your QuickFix account.</p>"
        + _button(verification_url, "Verify email")
        + f"<p>This link expires in {expires_hours} hours.</p>"
    )
    return _layout("Verify your email", body)
