from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from config.settings import Settings
from vendors.errors import VendorResponseError, VendorUnavailable


logger = logging.getLogger(__name__)


def reverse_geocode(
    client: httpx.Client, settings: Settings, lat: float, lon: float
) -> Dict[str, Optional[str]]:
    # Nominatim's usage policy requires an identifying User-Agent.
    headers = {"User-Agent": settings.geocoder_user_agent}
    params = {"format": "json", "lat": lat, "lon": lon}

    try:
        response = client.get(settings.nominatim_api_url, params=params, headers=headers)
    except httpx.HTTPError as exc:
        logger.exception("Nominatim call failed: %s", exc)
        raise VendorUnavailable("Failed to fetch address") from exc

    if response.is_error:
        logger.warning("Nominatim rejected lookup: status=%s", response.status_code)
        raise VendorResponseError("Failed to fetch address", status_code=502)

    try:
        data = response.json()
    except ValueError as exc:
        logger.exception("Nominatim call failed: %s", exc)
        raise VendorUnavailable("Failed to fetch address") from exc

    return {"address": data.get("display_name") if isinstance(data, dict) else None}
