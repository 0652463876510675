from __future__ import annotations

import logging
from typing import Optional

from history.models import WeatherEntry
from pages.base import ServicePage, new_entry_id
from pages.client import GatewayError
from vendors.weather import WeatherReport


logger = logging.getLogger(__name__)


class WeatherPage(ServicePage[WeatherEntry]):
    namespace = "weather"
    entry_model = WeatherEntry

    def search(self, city: str) -> Optional[WeatherEntry]:
        if self._busy():
            return None
        city = (city or "").strip()
        if not city:
            raise ValueError("Please enter a city name")

        session_id = self.store.ensure_active_session(city)
        self.loading = True
        try:
            # The gateway answers vendor failures with 200 and an error body.
            data = self.gateway.weather(city=city)
            error = data.get("error")
        except GatewayError as e:
            data, error = {}, e.message
        finally:
            self.loading = False

        if error:
            logger.warning("Weather lookup for %s failed: %s", city, error)
            entry = WeatherEntry(id=new_entry_id(), city=city, error=error)
        else:
            entry = WeatherEntry(id=new_entry_id(), city=city, weather=WeatherReport.model_validate(data))
        return self.store.append_entry(session_id, entry)
