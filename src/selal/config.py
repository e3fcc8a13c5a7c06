"""
Selal - Configuration and settings.

Settings are read from the environment (and an optional .env file).
Pricing constants are NOT settings: they live in registration.pricing so the
quote stays a pure function of the fleet and the billing cycle.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class SelalSettings(BaseSettings):
    """Application settings. Every field has a development default."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    selal_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    default_locale: Literal["en", "ar"] = "en"
    currency: str = "EGP"

    # OTP verification is mocked in this build
    otp_mocked: bool = True
    otp_code_length: int = 6
    otp_resend_cooldown_seconds: int = 60

    # Payment receipts
    receipt_max_bytes: int = 10 * 1024 * 1024  # 10MB

    # Box requests
    box_unit_price: float = 50.0

    # In-memory wizard sessions
    session_ttl_minutes: int = 30

    @property
    def is_development(self) -> bool:
        return self.selal_env == "development"

    @property
    def is_production(self) -> bool:
        return self.selal_env == "production"


@lru_cache
def get_settings() -> SelalSettings:
    """Get cached settings instance."""
    return SelalSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: SelalSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
