from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from app.schemas import SendEmailRequest, TranslateRequest
from config.settings import Settings, get_settings
from vendors.email import send_email
from vendors.errors import InvalidRequest, VendorError, VendorUnavailable
from vendors.geocoding import reverse_geocode
from vendors.http import get_http_client
from vendors.translator import translate_text
from vendors.weather import fetch_weather


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("sync")

app = FastAPI(title="Sync Cloud Services Gateway", version="1.0.0")

# CORS: allow local frontend during development
settings = get_settings()
if settings.app_env.lower() in {"dev", "development", "local"}:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(VendorError)
async def vendor_error_handler(request: Request, exc: VendorError) -> JSONResponse:
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse({"error": "Invalid request"}, status_code=400)


@app.post("/api/send-email")
def send_email_route(
    req: SendEmailRequest,
    settings: Settings = Depends(get_settings),
    client: httpx.Client = Depends(get_http_client),
) -> Dict[str, Any]:
    if not req.is_complete():
        raise InvalidRequest("Missing required fields: to, subject, message")

    try:
        logger.info("Sending email: subject_len=%s message_len=%s", len(req.subject), len(req.message))
        result = send_email(client, settings, req.to, req.subject, req.message)
        logger.info("Email accepted by vendor: message_id=%s", result.get("messageId"))
        return result
    except VendorError:
        raise
    except Exception as e:
        logger.exception("Email sending failed: %s", e)
        raise VendorUnavailable("Failed to send email") from e


@app.post("/api/translate")
def translate_route(
    req: TranslateRequest,
    settings: Settings = Depends(get_settings),
    client: httpx.Client = Depends(get_http_client),
) -> Dict[str, Any]:
    if not req.is_complete():
        raise InvalidRequest("Missing text or targetLanguage")

    try:
        logger.info("Translating: text_len=%s target=%s", len(req.text), req.targetLanguage)
        return translate_text(client, settings, req.text, req.targetLanguage)
    except VendorError:
        raise
    except Exception as e:
        logger.exception("Translation failed: %s", e)
        raise VendorUnavailable("Translation failed") from e


@app.get("/api/weather")
def weather_route(
    city: Optional[str] = None,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    settings: Settings = Depends(get_settings),
    client: httpx.Client = Depends(get_http_client),
) -> Dict[str, Any]:
    # Vendor failures come back as {"error": ...} with status 200.
    try:
        logger.info("Weather lookup: city=%s coords=%s", city, (lat, lon) if lat is not None else None)
        return fetch_weather(client, settings, city=city, lat=lat, lon=lon)
    except VendorError:
        raise
    except Exception as e:
        logger.exception("Weather lookup failed: %s", e)
        raise VendorUnavailable("Failed to fetch weather data") from e


@app.get("/api/reverse-geocode")
def reverse_geocode_route(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    settings: Settings = Depends(get_settings),
    client: httpx.Client = Depends(get_http_client),
) -> Dict[str, Any]:
    if lat is None or lon is None:
        raise InvalidRequest("Please provide lat and lon")

    try:
        return reverse_geocode(client, settings, lat, lon)
    except VendorError:
        raise
    except Exception as e:
        logger.exception("Reverse geocoding failed: %s", e)
        raise VendorUnavailable("Failed to fetch address") from e


@app.get("/health")
def health():
    return {"status": "ok"}
