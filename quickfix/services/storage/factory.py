"""Pick the evidence storage backend from configuration."""
from functools import lru_cache

from quickfix.app.config import settings
from quickfix.app.exceptions import ConfigurationError


@lru_cache()
def get_storage_service():
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "s3":
        from quickfix.services.storage.s3 import S3Service
        return S3Service()
    if backend == "local":
        from quickfix.services.storage.local import LocalStorageService
        return LocalStorageService(settings.LOCAL_UPLOAD_DIR, settings.PUBLIC_BASE_URL)
    raise ConfigurationError(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}'", setting="STORAGE_BACKEND")
