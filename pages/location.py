from __future__ import annotations

import logging
import time
from typing import Optional

from pydantic import BaseModel

from pages.client import GatewayClient, GatewayError


logger = logging.getLogger(__name__)


def zoom_for_accuracy(accuracy: float) -> int:
    """Map zoom level for a fix; tighter accuracy zooms closer."""
    if accuracy < 10:
        return 19
    if accuracy < 50:
        return 18
    if accuracy < 100:
        return 17
    if accuracy < 500:
        return 16
    return 15


class LocationFix(BaseModel):
    """Input contract of the map view: a point and its accuracy radius in meters."""

    latitude: float
    longitude: float
    accuracy: float
    timestamp: int
    address: Optional[str] = None

    @property
    def zoom(self) -> int:
        return zoom_for_accuracy(self.accuracy)


class LocationPage:
    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway
        self.loading = False
        self.location: Optional[LocationFix] = None

    def locate(
        self,
        latitude: float,
        longitude: float,
        accuracy: float,
        timestamp: Optional[int] = None,
    ) -> Optional[LocationFix]:
        if self.loading:
            return None
        fix = LocationFix(
            latitude=latitude,
            longitude=longitude,
            accuracy=accuracy,
            timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
        )

        self.loading = True
        try:
            fix.address = self.gateway.reverse_geocode(latitude, longitude).get("address")
        except GatewayError as e:
            # address is optional; the fix is still usable without it
            logger.warning("Failed to fetch address: %s", e.message)
        finally:
            self.loading = False

        self.location = fix
        return fix
