"""
Conversation history shapes shared by every service page.

A Session is generic over its entry type; each service page stores exactly
one entry variant (email sends, translations, weather searches).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vendors.weather import WeatherReport


DEFAULT_TITLE = "New Chat"
TITLE_LIMIT = 30


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def derive_title(text: str, limit: int = TITLE_LIMIT) -> str:
    # Truncation counts the raw text; only a blank seed falls back.
    text = text or ""
    if not text.strip():
        return DEFAULT_TITLE
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class Entry(BaseModel):
    def primary_text(self) -> str:
        """Text a session title is derived from.

        Every entry variant must override this.
        """
        raise NotImplementedError


class EmailEntry(Entry):
    id: str
    recipient: str
    subject: str
    message: str
    timestamp: str = Field(default_factory=utc_now_iso)
    status: Literal["sent", "failed"]

    def primary_text(self) -> str:
        return self.subject


class TranslationEntry(Entry):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(default_factory=utc_now_iso)
    source_text: str
    translated_text: str
    target_language: str
    detected_language: str = "unknown"
    edited: Optional[bool] = None
    edited_at: Optional[str] = Field(default=None, alias="editedAt")

    def primary_text(self) -> str:
        return self.source_text


class WeatherEntry(Entry):
    id: str
    city: str
    timestamp: str = Field(default_factory=utc_now_iso)
    weather: Optional[WeatherReport] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _weather_xor_error(self) -> "WeatherEntry":
        if (self.weather is None) == (self.error is None):
            raise ValueError("exactly one of 'weather' or 'error' must be set")
        return self

    def primary_text(self) -> str:
        return self.city


EntryT = TypeVar("EntryT", bound=Entry)


class Session(BaseModel, Generic[EntryT]):
    id: str
    title: str = DEFAULT_TITLE
    timestamp: str = Field(default_factory=utc_now_iso)
    entries: List[EntryT] = Field(default_factory=list)
