from __future__ import annotations

import json
from typing import Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from config.settings import Settings, get_settings
from vendors.http import get_http_client


class FakeVendor:
    """Stands in for every third-party API; records what the gateway sent."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.responder: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def reply(self, status_code: int = 200, payload=None) -> None:
        self.responder = lambda request: httpx.Response(status_code, json=payload)

    def fail(self, exc: Exception) -> None:
        def _raise(request):
            raise exc

        self.responder = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        assert self.responder is not None, "no vendor response configured"
        return self.responder(request)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings() -> Settings:
    s = Settings()
    s.brevo_api_key = "brevo-secret"
    s.brevo_sender_email = "noreply@sync.test"
    s.brevo_sender_name = "Sync"
    s.translator_api_key = "azure-secret"
    s.translator_region = "westeurope"
    s.translator_endpoint = "https://translator.test"
    s.openweather_api_key = "owm-secret"
    return s


@pytest.fixture
def vendor() -> FakeVendor:
    return FakeVendor()


@pytest.fixture
def api(settings, vendor):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = lambda: httpx.Client(
        transport=httpx.MockTransport(vendor)
    )
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


OPENWEATHER_LONDON = {
    "coord": {"lon": -0.1257, "lat": 51.5085},
    "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
    "main": {
        "temp": 14.56,
        "feels_like": 13.5,
        "temp_min": 12.49,
        "temp_max": 15.51,
        "pressure": 1012,
        "humidity": 82,
    },
    "visibility": 10000,
    "wind": {"speed": 4.63, "deg": 240},
    "clouds": {"all": 75},
    "sys": {"country": "GB", "sunrise": 1697610000, "sunset": 1697647000},
    "timezone": 3600,
    "name": "London",
    "cod": 200,
}
