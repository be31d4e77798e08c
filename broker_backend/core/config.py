from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from functools import lru_cache

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables or a .env file.

    Empty variables are ignored, so fields with several accepted names take the
    first one that is set to a non-empty value.
    """
    # EmailJS Configuration
    EMAILJS_SERVICE_ID: str = "service_4ltybjl"
    EMAILJS_TEMPLATE_ID: str = "template_k0tx9hp"
    EMAILJS_PUBLIC_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("EMAILJS_PUBLIC_KEY", "EMAILJS_USER_ID"),
    )
    EMAILJS_API_URL: str = "https://api.emailjs.com/api/v1.0/email/send"
    ADMIN_TO: str = ""
    SITE_BASE_URL: str = "https://ansiao.pt"
    # MAIL_NOTIFICATIONS_ENABLED is the legacy name
    EMAIL_NOTIFICATIONS_ENABLED: bool = Field(
        default=False,
        validation_alias=AliasChoices("EMAIL_NOTIFICATIONS_ENABLED", "MAIL_NOTIFICATIONS_ENABLED"),
    )

    # OpenAI Configuration
    OPENAI_API_KEY: Optional[SecretStr] = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Firebase Configuration
    # Full service account JSON, used by the maintenance scripts
    FIREBASE_SERVICE_ACCOUNT_JSON: Optional[SecretStr] = None
    GOOGLE_CLOUD_PROJECT: Optional[str] = None
    # For local development, path to service account key json file
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None

    # Document event receiver
    TRIGGER_SHARED_SECRET: Optional[SecretStr] = None
    CHAT_NOTIFICATION_TRIGGER_ENABLED: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_RICH: bool = True

    @field_validator("EMAIL_NOTIFICATIONS_ENABLED", "CHAT_NOTIFICATION_TRIGGER_ENABLED", mode="before")
    @classmethod
    def lenient_flag(cls, value):
        # Unrecognised values read as False
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "on")
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the Settings object.
    """
    return Settings()
