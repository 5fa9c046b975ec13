"""Application configuration using Pydantic Settings (ENV ONLY)."""
from functools import lru_cache
from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings (read from environment variables / .env)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = Field("QuickFix", env="APP_NAME")
    ENVIRONMENT: str = Field("development", env="ENVIRONMENT")
    DEBUG: bool = Field(False, env="DEBUG")
    API_PREFIX: str = Field("/api", env="API_PREFIX")
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")
    FRONTEND_URL: str = Field("http://localhost:3000", env="FRONTEND_URL")
    CORS_ORIGINS: str = Field("*", env="CORS_ORIGINS")

    # Database
    DB_USER: str = Field("quickfix", env="DB_USER")
    DB_PASSWORD: str = Field("quickfix", env="DB_PASSWORD")
    DB_HOST: str = Field("localhost", env="DB_HOST")
    DB_PORT: int = Field(5432, env="DB_PORT")
    DB_NAME: str = Field("quickfix", env="DB_NAME")
    DB_POOL_SIZE: int = Field(5, env="DB_POOL_SIZE")
    DB_MAX_OVERFLOW: int = Field(10, env="DB_MAX_OVERFLOW")

    @computed_field
    @property
    def DATABASE_URL(self) -> str:
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    # Redis / Celery
    REDIS_HOST: str = Field("127.0.0.1", env="REDIS_HOST")
    REDIS_PORT: int = Field(6379, env="REDIS_PORT")
    # Rate limiting is skipped when unset
    REDIS_URL: Optional[str] = Field(None, env="REDIS_URL")

    CELERY_BROKER_DB: int = Field(1, env="CELERY_BROKER_DB")
    CELERY_RESULT_DB: int = Field(2, env="CELERY_RESULT_DB")

    @computed_field
    @property
    def CELERY_BROKER_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.CELERY_BROKER_DB}"

    @computed_field
    @property
    def CELERY_RESULT_BACKEND(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.CELERY_RESULT_DB}"

    # Evidence storage
    STORAGE_BACKEND: str = Field("local", env="STORAGE_BACKEND")  # "local" or "s3"
    LOCAL_UPLOAD_DIR: str = Field("public/uploads", env="LOCAL_UPLOAD_DIR")
    PUBLIC_BASE_URL: str = Field("http://localhost:8000", env="PUBLIC_BASE_URL")
    SCREENSHOT_MAX_BYTES: int = Field(5 * 1024 * 1024, env="SCREENSHOT_MAX_BYTES")

    # AWS / S3
    AWS_ACCESS_KEY_ID: Optional[str] = Field(None, env="AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: Optional[str] = Field(None, env="AWS_SECRET_ACCESS_KEY")
    S3_BUCKET_NAME: Optional[str] = Field(None, env="S3_BUCKET_NAME")
    S3_REGION: str = Field("ap-south-1", env="S3_REGION")
    S3_ENDPOINT_URL: Optional[str] = Field(None, env="S3_ENDPOINT_URL")

    # JWT
    JWT_ALGORITHM: str = Field("HS256", env="JWT_ALGORITHM")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24, env="ACCESS_TOKEN_EXPIRE_MINUTES")
    JWT_SECRET_KEY: str = Field("change-me", env="JWT_SECRET_KEY")

    #RESEND
    RESEND_API_KEY: Optional[str] = Field(None, env="RESEND_API_KEY")
    RESEND_FROM_EMAIL: str = Field("onboarding@resend.dev", env="RESEND_FROM_EMAIL")
    EMAIL_MAX_RETRIES: int = Field(3, env="EMAIL_MAX_RETRIES")

    # Rate limiting
    PAYMENT_SUBMIT_RATE_LIMIT: int = Field(10, env="PAYMENT_SUBMIT_RATE_LIMIT")
    SCREENSHOT_UPLOAD_RATE_LIMIT: int = Field(20, env="SCREENSHOT_UPLOAD_RATE_LIMIT")
    RATE_LIMIT_WINDOW_SECS: int = Field(3600, env="RATE_LIMIT_WINDOW_SECS")

    # Scheduled account jobs
    EMAIL_VERIFICATION_EXPIRE_HOURS: int = Field(24, env="EMAIL_VERIFICATION_EXPIRE_HOURS")
    EMAIL_VERIFICATION_REMINDER_INITIAL_DELAY_HOURS: int = Field(
        24, env="EMAIL_VERIFICATION_REMINDER_INITIAL_DELAY_HOURS"
    )
    EMAIL_VERIFICATION_REMINDER_INTERVAL_HOURS: int = Field(
        12, env="EMAIL_VERIFICATION_REMINDER_INTERVAL_HOURS"
    )
    UNVERIFIED_ACCOUNT_DELETION_HOURS: int = Field(48, env="UNVERIFIED_ACCOUNT_DELETION_HOURS")


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
