from history.models import (
    DEFAULT_TITLE,
    EmailEntry,
    Entry,
    Session,
    TranslationEntry,
    WeatherEntry,
    derive_title,
)
from history.storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from history.store import EntryNotFound, SessionNotFound, SessionStore, storage_keys

__all__ = [
    "DEFAULT_TITLE",
    "EmailEntry",
    "Entry",
    "EntryNotFound",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "Session",
    "SessionNotFound",
    "SessionStore",
    "TranslationEntry",
    "WeatherEntry",
    "derive_title",
    "storage_keys",
]
