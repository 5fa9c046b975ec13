# quickfix/utils/validators.py

from quickfix.app.config import settings
from quickfix.app.exceptions import ValidationError

# ---------------------------------------------------------------------
# Configuration (tweakable)
# ---------------------------------------------------------------------

ALLOWED_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
}

MAX_FILE_SIZE_BYTES = settings.SCREENSHOT_MAX_BYTES   # 5 MB by default


class ImageValidationError(ValidationError):
    """Raised when image validation fails."""


def validate_screenshot(
    contents: bytes,
    content_type: str,
    *,
    max_bytes: int = MAX_FILE_SIZE_BYTES
) -> None:
    """
    Validate an uploaded payment screenshot.

    Args:
        contents: Raw image bytes
        content_type: MIME type reported by the client
        max_bytes: Upper size limit

    Raises:
        ImageValidationError
    """
    if content_type not in ALLOWED_MIME_TYPES:
        raise ImageValidationError(
            "Only image files (JPEG, PNG, GIF, WEBP) are allowed for payment screenshots."
        )

    if not contents:
        raise ImageValidationError("No screenshot file uploaded.")

    if len(contents) > max_bytes:
        raise ImageValidationError(
            f"Screenshot is too large ({len(contents)} bytes). Maximum size is {max_bytes // (1024 * 1024)} MB."
        )
