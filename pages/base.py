from __future__ import annotations

import logging
import time
from typing import ClassVar, Generic, Type

from history.models import EntryT
from history.storage import KeyValueStorage
from history.store import EntryNotFound, SessionStore
from pages.client import GatewayClient


logger = logging.getLogger(__name__)


def new_entry_id() -> str:
    return str(int(time.time() * 1000))


class ServicePage(Generic[EntryT]):
    """Non-rendering half of a chat-style service page.

    ``loading`` is advisory: a submit while a request is outstanding is
    dropped, but nothing stops a caller from flipping it back.
    """

    namespace: ClassVar[str]
    entry_model: ClassVar[Type]

    def __init__(self, gateway: GatewayClient, storage: KeyValueStorage) -> None:
        self.gateway = gateway
        self.store: SessionStore[EntryT] = SessionStore(storage, self.namespace, self.entry_model)
        self.store.load()
        self.loading = False

    def _busy(self) -> bool:
        if self.loading:
            logger.info("Ignoring %s submit while a request is in flight", self.namespace)
        return self.loading

    def _entry_at(self, session_id: str, index: int) -> EntryT:
        session = self.store.get_session(session_id)
        if session is None or not 0 <= index < len(session.entries):
            raise EntryNotFound(f"No entry {index} in {self.namespace} session {session_id!r}")
        return session.entries[index]
