"""
HTTP client for the gateway's /api routes, used by the service pages.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx


logger = logging.getLogger(__name__)


class GatewayError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class GatewayClient:
    def __init__(self, base_url: str = "http://127.0.0.1:8000", client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Accept": "application/json"},
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise GatewayError(f"Request to {path} failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            raise GatewayError(
                message or f"HTTP {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
                details=data.get("details") if isinstance(data, dict) else None,
            )
        return data

    def send_email(self, to: str, subject: str, message: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/send-email", json={"to": to, "subject": subject, "message": message}
        )

    def translate(self, text: str, target_language: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/translate", json={"text": text, "targetLanguage": target_language}
        )

    def weather(
        self, city: Optional[str] = None, lat: Optional[float] = None, lon: Optional[float] = None
    ) -> Dict[str, Any]:
        """Report or ``{"error": ...}``; vendor failures do not raise."""
        params: Dict[str, Any] = {"city": city} if city else {"lat": lat, "lon": lon}
        params = {k: v for k, v in params.items() if v is not None}
        return self._request("GET", "/api/weather", params=params)

    def reverse_geocode(self, lat: float, lon: float) -> Dict[str, Any]:
        return self._request("GET", "/api/reverse-geocode", params={"lat": lat, "lon": lon})

    def close(self) -> None:
        self._client.close()
