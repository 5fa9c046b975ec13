"""Local disk storage for evidence uploads, served under /uploads."""
import logging
from pathlib import Path
from typing import Optional

from quickfix.app.exceptions import StorageError
from quickfix.services.storage.base import StoredFile, generate_evidence_name

logger = logging.getLogger(__name__)


class LocalStorageService:
    """Same interface as S3Service, backed by a directory."""

    def __init__(self, base_dir: str, base_url: str, prefix: str = "screenshots"):
        self.base_dir = Path(base_dir)
        self.base_url = base_url.rstrip('/')
        self.prefix = prefix

    def _path(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if self.base_dir.resolve() not in path.parents:
            raise StorageError(f"Refusing to touch a path outside the upload directory: {key}")
        return path

    def upload_evidence(self, file_data: bytes, filename: Optional[str], content_type: str) -> StoredFile:
        key = f"{self.prefix}/{generate_evidence_name(filename, content_type)}"
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(file_data)
        except OSError as e:
            logger.error(f"Error writing upload {key}: {e}")
            raise StorageError(f"Failed to store file: {e}")
        logger.info(f"Stored {len(file_data)} bytes at: {path}")
        return StoredFile(key=key, url=f"{self.base_url}/uploads/{key}")

    def delete_object(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Error deleting upload {key}: {e}")
            raise StorageError(f"Failed to delete file: {e}")
        logger.info(f"Deleted upload: {path}")
