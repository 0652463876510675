from __future__ import annotations

from typing import NamedTuple, Optional

from config.settings import Settings, get_settings
from history.storage import JsonFileStorage, KeyValueStorage
from pages.client import GatewayClient, GatewayError
from pages.email import EmailPage
from pages.location import LocationFix, LocationPage, zoom_for_accuracy
from pages.translate import TranslatePage
from pages.weather import WeatherPage


class Pages(NamedTuple):
    email: EmailPage
    translate: TranslatePage
    weather: WeatherPage
    location: LocationPage


def build_pages(
    settings: Optional[Settings] = None,
    gateway: Optional[GatewayClient] = None,
    storage: Optional[KeyValueStorage] = None,
) -> Pages:
    """All service pages sharing one gateway client and one history backend."""
    settings = settings or get_settings()
    gateway = gateway or GatewayClient(settings.sync_api_url)
    storage = storage or JsonFileStorage(settings.history_path)
    return Pages(
        email=EmailPage(gateway, storage),
        translate=TranslatePage(gateway, storage),
        weather=WeatherPage(gateway, storage),
        location=LocationPage(gateway),
    )


__all__ = [
    "EmailPage",
    "GatewayClient",
    "GatewayError",
    "LocationFix",
    "LocationPage",
    "Pages",
    "TranslatePage",
    "WeatherPage",
    "build_pages",
    "zoom_for_accuracy",
]
