"""Shared pieces of the evidence storage backends."""
import secrets
from dataclasses import dataclass
from typing import Optional

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


@dataclass(frozen=True)
class StoredFile:
    """Where an uploaded file ended up."""
    key: str
    url: str


def generate_evidence_name(filename: Optional[str], content_type: str) -> str:
    """screenshot-<random hex>.<ext>, extension taken from the MIME type first."""
    ext = EXTENSIONS.get(content_type)
    if ext is None:
        ext = filename.rsplit('.', 1)[-1].lower() if filename and '.' in filename else 'bin'
    return f"screenshot-{secrets.token_hex(8)}.{ext}"
