"""S3 storage service for payment evidence uploads."""
import boto3
from botocore.client import Config
from botocore.exceptions import ClientError, BotoCoreError
from typing import Optional
import logging

from quickfix.app.config import settings
from quickfix.app.exceptions import StorageError
from quickfix.services.storage.base import StoredFile, generate_evidence_name

logger = logging.getLogger(__name__)


class S3ServiceError(StorageError):
    """Custom exception for S3 service errors."""
    pass


class S3Service:
    """Service for S3 operations with comprehensive error handling."""

    def __init__(self, prefix: str = "screenshots"):
        """Initialize S3 client with configuration."""
        if not settings.S3_BUCKET_NAME:
            raise S3ServiceError("S3_BUCKET_NAME must be set when STORAGE_BACKEND is 's3'")
        try:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.S3_REGION,
                endpoint_url=settings.S3_ENDPOINT_URL,
                config=Config(
                    signature_version='s3v4',
                    s3={'addressing_style': 'virtual'}
                )
            )
            self.bucket_name = settings.S3_BUCKET_NAME
            self.prefix = prefix
            logger.info(f"S3 Service initialized for bucket: {self.bucket_name}")
        except (BotoCoreError, ValueError) as e:
            logger.error(f"Failed to initialize S3 client: {e}")
            raise S3ServiceError(f"S3 initialization failed: {str(e)}")

    def generate_s3_key(self, filename: Optional[str], content_type: str) -> str:
        """
        Generate unique S3 key for an evidence file.

        Args:
            filename: Original filename (used only as an extension fallback)
            content_type: MIME type

        Returns:
            S3 key path: {prefix}/screenshot-{hex}.{ext}
        """
        return f"{self.prefix}/{generate_evidence_name(filename, content_type)}"

    def object_url(self, s3_key: str) -> str:
        """Public URL of an object."""
        if settings.S3_ENDPOINT_URL:
            return f"{settings.S3_ENDPOINT_URL.rstrip('/')}/{self.bucket_name}/{s3_key}"
        return f"https://{self.bucket_name}.s3.{settings.S3_REGION}.amazonaws.com/{s3_key}"

    def upload_evidence(self, file_data: bytes, filename: Optional[str], content_type: str) -> StoredFile:
        """
        Upload evidence bytes under a fresh key.

        Args:
            file_data: File content as bytes
            filename: Original filename
            content_type: MIME type

        Returns:
            StoredFile with key and public URL

        Raises:
            S3ServiceError: If upload fails
        """
        s3_key = self.generate_s3_key(filename, content_type)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=file_data,
                ContentType=content_type,
            )
            logger.info(f"Uploaded {len(file_data)} bytes to: {s3_key}")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading file: {e}")
            raise S3ServiceError(f"Failed to upload file: {str(e)}")
        return StoredFile(key=s3_key, url=self.object_url(s3_key))

    def delete_object(self, s3_key: str) -> None:
        """
        Delete object from S3.

        Args:
            s3_key: S3 object key

        Raises:
            S3ServiceError: If deletion fails
        """
        try:
            self.s3_client.delete_object(
                Bucket=self.bucket_name,
                Key=s3_key
            )
            logger.info(f"Deleted S3 object: {s3_key}")

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error deleting object: {e}")
            raise S3ServiceError(f"Failed to delete object: {str(e)}")
