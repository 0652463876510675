from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


class Settings:
    """Application settings loaded from environment variables.

    Keep all vendor credentials and endpoints centralized here.
    """

    app_env: str = os.getenv("APP_ENV", "development")

    # Brevo transactional email
    brevo_api_key: Optional[str] = os.getenv("BREVO_API_KEY")
    brevo_sender_email: Optional[str] = os.getenv("BREVO_SENDER_EMAIL")
    brevo_sender_name: Optional[str] = os.getenv("BREVO_SENDER_NAME")
    brevo_api_url: str = os.getenv(
        "BREVO_API_URL", "https://api.brevo.com/v3/smtp/email"
    )

    # Azure Translator
    translator_api_key: Optional[str] = os.getenv("TRANSLATOR_API_KEY")
    translator_region: Optional[str] = os.getenv("TRANSLATOR_REGION")
    translator_endpoint: Optional[str] = os.getenv("TRANSLATOR_ENDPOINT")

    # OpenWeather
    openweather_api_key: Optional[str] = os.getenv("OPENWEATHER_API_KEY")
    openweather_api_url: str = os.getenv(
        "OPENWEATHER_API_URL", "https://api.openweathermap.org/data/2.5/weather"
    )

    # Nominatim reverse geocoding
    nominatim_api_url: str = os.getenv(
        "NOMINATIM_API_URL", "https://nominatim.openstreetmap.org/reverse"
    )
    geocoder_user_agent: str = os.getenv("GEOCODER_USER_AGENT", "sync-gateway/1.0")

    # Client side
    sync_api_url: str = os.getenv("SYNC_API_URL", "http://127.0.0.1:8000")
    history_path: str = os.getenv("SYNC_HISTORY_PATH", "sync_history.json")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
