"""Application Settings using Pydantic.

Environment-based configuration with validation.
All keys should be passed via environment variables or the .env file.

Environment Variables:
    APP_KEY: Current encryption key (v4.local.<keyId>.<base64Key>)
    APP_PREVIOUS_KEYS: Comma separated list of retired id-carrying keys
    ENV_ENCRYPTION_KEY: Bare key used by env:encrypt / env:decrypt
    ENVIRONMENT: development | staging | production

Example .env file:
    APP_KEY=v4.local.1BpDqLq9xEJ9hRkXYzUj8b.KX3b...
    APP_PREVIOUS_KEYS=v4.local.1BpDnWzc2C6vJqFkmtSPSB.q0Pz...
    ENVIRONMENT=production
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Core ====================
    app_name: str = "rotating-encrypter"
    environment: Literal["development", "staging", "production"] = "development"

    # ==================== Keys ====================
    app_key: str = Field(
        default="",
        description="Current id-carrying key (v4.local.<keyId>.<base64Key>)",
        repr=False,
    )
    app_previous_keys: str = Field(
        default="",
        description="Comma separated retired keys, oldest first",
        repr=False,
    )
    env_encryption_key: str = Field(
        default="",
        description="Bare key for encrypted environment files",
        repr=False,
    )

    # ==================== Cookies ====================
    cookie_never_encrypt: str = Field(
        default="XDEBUG_SESSION",
        description="Comma separated cookie names left in plain text",
    )

    # ==================== Logging ====================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    # ==================== Validators ====================

    @field_validator("app_key", "env_encryption_key", mode="before")
    @classmethod
    def strip_key(cls, v):
        """Drop surrounding whitespace and quotes copied from .env files."""
        if isinstance(v, str):
            return v.strip().strip("'\"")
        return v

    @property
    def previous_keys(self) -> list[str]:
        """Retired keys as a list, empty entries removed."""
        return _split_csv(self.app_previous_keys)

    @property
    def never_encrypt_cookies(self) -> list[str]:
        """Cookie names that the cookie middleware passes through."""
        return _split_csv(self.cookie_never_encrypt)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings instance.
    """
    return Settings()
