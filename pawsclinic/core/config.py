# pawsclinic/core/config.py

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class DestinationMode(str, Enum):
    SMS = "sms"
    WHATSAPP = "whatsapp"


class Settings(BaseSettings):
    # Read env from .env; ignore unknown keys so extra lines don't crash startup
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Twilio ---
    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_FROM_NUMBER: str | None = None
    TWILIO_MESSAGING_SERVICE_SID: str | None = None
    CLINIC_SMS_TO: str | None = None

    # --- WhatsApp channel (Twilio) ---
    WHATSAPP_ENABLED: bool = False
    WHATSAPP_FROM: str | None = None

    # --- Security ---
    ADMIN_SECRET: str | None = None
    RATE_LIMIT_PER_MINUTE: int = 12  # per client IP on /api/, 0 disables

    # --- Storage ---
    DATABASE_PATH: Path = Path("data/appointments.db")

    # --- Front end ---
    PAGES_URL: str = "https://www.jongwings.com/PawsClinic/"

    # --- Monitoring & Logging ---
    APP_ENV: str = "production"
    LOG_LEVEL: str = "INFO"
    LOG_REQUESTS: bool = False
    MAX_LOG_LENGTH: int = 200

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    @property
    def destination_mode(self) -> DestinationMode:
        return DestinationMode.WHATSAPP if self.WHATSAPP_ENABLED else DestinationMode.SMS

    @property
    def has_twilio_credentials(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN)

    # Monitoring helpers
    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
