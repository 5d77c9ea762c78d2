"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "hirehub"

    # AI collaborator: 'deepseek' or 'mock'
    ai_provider: str = "deepseek"

    # DeepSeek AI (OpenAI-compatible)
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    deepseek_model: str = "deepseek-chat"
    ai_timeout_seconds: float = 30.0
    ai_max_retries: int = 1

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Email (Resend HTTP API)
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = "no-reply@hirehub.local"
    email_from_name: str = "HireHub"
    email_timeout_seconds: float = 10.0
    app_url: str = "http://localhost:3000"

    # File storage (S3-compatible bucket, local directory otherwise)
    s3_bucket: Optional[str] = None
    s3_endpoint: Optional[str] = None
    s3_region: Optional[str] = None
    s3_access_key: Optional[str] = None
    s3_secret_key: Optional[str] = None
    upload_dir: str = "uploads"
    max_upload_mb: int = 10

    # App
    debug: bool = True
    log_level: str = "INFO"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def email_sender(self) -> str:
        return f"{self.email_from_name} <{self.email_from}>"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
