from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from config.settings import Settings
from vendors.errors import ConfigurationError, InvalidRequest, VendorUnavailable
from vendors.http import best_effort_json


logger = logging.getLogger(__name__)

CITY_NOT_FOUND = "City not found. Please check the spelling and try again."
FETCH_FAILED = "Failed to fetch weather data"


class Coordinates(BaseModel):
    lat: float
    lon: float


class Place(BaseModel):
    name: str
    country: Optional[str] = None
    coordinates: Coordinates


class Conditions(BaseModel):
    main: str
    description: str
    icon: str


class Temperature(BaseModel):
    current: int
    feels_like: int
    min: int
    max: int


class Wind(BaseModel):
    speed: float
    deg: Optional[float] = None


class WeatherReport(BaseModel):
    """Flattened OpenWeather "current weather" payload.

    Temperatures are whole degrees Celsius; visibility stays in meters.
    """

    location: Place
    weather: Conditions
    temperature: Temperature
    humidity: int
    pressure: int
    wind: Wind
    clouds: int
    visibility: Optional[int] = None
    sunrise: int
    sunset: int
    timezone: int


def _round(value: float) -> int:
    # Halves round up, not to even.
    return math.floor(value + 0.5)


def simplify_weather(data: Dict[str, Any]) -> WeatherReport:
    main = data["main"]
    sys = data.get("sys") or {}
    condition = data["weather"][0]
    return WeatherReport(
        location=Place(
            name=data["name"],
            country=sys.get("country"),
            coordinates=Coordinates(lat=data["coord"]["lat"], lon=data["coord"]["lon"]),
        ),
        weather=Conditions(
            main=condition["main"],
            description=condition["description"],
            icon=condition["icon"],
        ),
        temperature=Temperature(
            current=_round(main["temp"]),
            feels_like=_round(main["feels_like"]),
            min=_round(main["temp_min"]),
            max=_round(main["temp_max"]),
        ),
        humidity=main["humidity"],
        pressure=main["pressure"],
        wind=Wind(speed=data["wind"]["speed"], deg=data["wind"].get("deg")),
        clouds=data["clouds"]["all"],
        visibility=data.get("visibility"),
        sunrise=sys["sunrise"],
        sunset=sys["sunset"],
        timezone=data["timezone"],
    )


def build_query(
    city: Optional[str], lat: Optional[float], lon: Optional[float]
) -> Dict[str, Any]:
    """City takes precedence; coordinates need both halves."""
    if city:
        return {"q": city}
    if lat is not None and lon is not None:
        return {"lat": lat, "lon": lon}
    raise InvalidRequest("Please provide either city name or coordinates")


def fetch_weather(
    client: httpx.Client,
    settings: Settings,
    city: Optional[str] = None,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
) -> Dict[str, Any]:
    """Current weather for a city or coordinate pair.

    Vendor-side failures (unknown city, bad key, ...) are returned as
    ``{"error": ...}`` instead of raised, so the route can answer them with
    HTTP 200 and clients branch on the body.
    """
    if not settings.openweather_api_key:
        raise ConfigurationError("Weather service not configured")

    params = build_query(city, lat, lon)
    params.update({"appid": settings.openweather_api_key, "units": "metric"})

    try:
        response = client.get(settings.openweather_api_url, params=params)
    except httpx.HTTPError as exc:
        logger.exception("OpenWeather call failed: %s", exc)
        raise VendorUnavailable(FETCH_FAILED) from exc

    if response.is_error:
        body = best_effort_json(response)
        message = body.get("message") if isinstance(body, dict) else None
        if not message:
            message = CITY_NOT_FOUND if response.status_code == 404 else FETCH_FAILED
        logger.warning(
            "OpenWeather reported failure: status=%s message=%s",
            response.status_code,
            message,
        )
        return {"error": message}

    try:
        return simplify_weather(response.json()).model_dump(exclude_none=True)
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        logger.exception("OpenWeather call failed: %s", exc)
        raise VendorUnavailable(FETCH_FAILED) from exc
