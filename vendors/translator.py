from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from config.settings import Settings
from vendors.errors import ConfigurationError, VendorResponseError, VendorUnavailable
from vendors.http import best_effort_json


logger = logging.getLogger(__name__)

API_VERSION = "3.0"


def _simplify_translation(data: Any) -> Dict[str, str]:
    # Azure answers with one result per input document; we always send one.
    result = data[0]
    translation = result["translations"][0]
    detected = result.get("detectedLanguage") or {}
    return {
        "translatedText": translation["text"],
        "detectedLanguage": detected.get("language") or "unknown",
        "targetLanguage": translation["to"],
    }


def translate_text(
    client: httpx.Client, settings: Settings, text: str, target_language: str
) -> Dict[str, str]:
    if not (
        settings.translator_api_key
        and settings.translator_region
        and settings.translator_endpoint
    ):
        raise ConfigurationError("Translation service not configured")

    url = f"{settings.translator_endpoint.rstrip('/')}/translate"
    params = {"api-version": API_VERSION, "to": target_language}
    headers = {
        "Ocp-Apim-Subscription-Key": settings.translator_api_key,
        "Ocp-Apim-Subscription-Region": settings.translator_region,
        "Content-Type": "application/json",
    }

    try:
        response = client.post(url, params=params, json=[{"text": text}], headers=headers)
    except httpx.HTTPError as exc:
        logger.exception("Azure Translator call failed: %s", exc)
        raise VendorUnavailable("Translation failed") from exc

    if response.is_error:
        logger.warning("Azure Translator rejected request: status=%s", response.status_code)
        raise VendorResponseError(
            f"Translation failed: {response.status_code}",
            status_code=500,
            details=best_effort_json(response),
        )

    try:
        return _simplify_translation(response.json())
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        logger.exception("Azure Translator call failed: %s", exc)
        raise VendorUnavailable("Translation failed") from exc
