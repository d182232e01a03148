# useraccounts/config.py
# Process-wide settings, loaded once from the environment at startup

import logging
from typing import List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5MB


class ConfigurationError(Exception):
    """Raised when the environment does not describe a usable configuration."""


class Settings(BaseSettings):
    """Immutable application settings shared by every component."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True, env_ignore_empty=True)

    mongo_uri: str = Field(min_length=1, validation_alias="MONGO_URI")
    database_name: str = Field(default="user_accounts", validation_alias="MONGO_DB_NAME")
    jwt_secret: str = Field(min_length=1, validation_alias="JWT_SECRET")
    jwt_algorithm: str = "HS256"
    token_expire_days: int = Field(default=7, gt=0, validation_alias="TOKEN_EXPIRE_DAYS")
    otp_expiry_minutes: int = Field(ge=1, validation_alias="OTP_EXPIRY")
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, validation_alias="BCRYPT_ROUNDS")
    port: int = Field(default=3000, gt=0, lt=65536, validation_alias="PORT")
    environment: str = Field(default="production", validation_alias="ENVIRONMENT")
    upload_dir: str = Field(default="uploads", validation_alias="UPLOAD_DIR")
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    allowed_origins: str = Field(default="*", validation_alias="ALLOWED_ORIGINS")

    # Email
    smtp_host: Optional[str] = Field(default=None, validation_alias="SMTP_HOST")
    smtp_port: int = Field(default=587, validation_alias="SMTP_PORT")
    smtp_user: Optional[str] = Field(default=None, validation_alias="SMTP_USER")
    smtp_pass: Optional[str] = Field(default=None, validation_alias="SMTP_PASS")
    email_sender: Optional[str] = Field(default=None, validation_alias="EMAIL_SENDER")

    # SMS gateway
    sms_api_url: Optional[str] = Field(default=None, validation_alias="SMS_API_URL")
    sms_api_key: Optional[str] = Field(default=None, validation_alias="SMS_API_KEY")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def origins(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Build Settings from environment variables, failing fast on bad values."""
    try:
        settings = Settings()
    except ValidationError as e:
        missing = [str(error["loc"][0]) for error in e.errors() if error["type"] == "missing"]
        invalid = [
            f"{error['loc'][0]}: {error['msg']}" for error in e.errors() if error["type"] != "missing"
        ]
        if missing:
            logger.error(f"Missing required environment variables: {missing}")
            raise ConfigurationError(f"Missing required environment variables: {missing}") from e
        logger.error(f"Invalid environment configuration: {invalid}")
        raise ConfigurationError(f"Invalid environment configuration: {invalid}") from e

    logger.info(
        f"Settings loaded (environment={settings.environment}, "
        f"otp_expiry_minutes={settings.otp_expiry_minutes})"
    )
    return settings
