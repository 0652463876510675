"""
Session store: the ordered list of chat-like sessions for one service page,
the active-session pointer, and their mirror in a key-value backend.

Persistence rules:
- after every mutation the full session list is rewritten, but only while
  the list is non-empty, so an empty in-memory list never clobbers saved
  history;
- the active id is written whenever it is set;
- ``clear_all`` is the only operation that removes the keys.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Generic, List, Mapping, Optional, Sequence, Type, Union

from pydantic import TypeAdapter, ValidationError

from history.models import DEFAULT_TITLE, EntryT, Session, derive_title, utc_now_iso
from history.storage import KeyValueStorage


logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    pass


class EntryNotFound(LookupError):
    pass


def storage_keys(namespace: str) -> tuple[str, str]:
    """(sessions list key, active session id key) for a service namespace."""
    return f"sync_{namespace}_sessions", f"sync_active_{namespace}_session"


class SessionStore(Generic[EntryT]):
    def __init__(
        self,
        storage: KeyValueStorage,
        namespace: str,
        entry_model: Type[EntryT],
    ) -> None:
        self._storage = storage
        self.namespace = namespace
        self.entry_model = entry_model
        self.sessions_key, self.active_key = storage_keys(namespace)
        self._session_model = Session[entry_model]
        self._adapter = TypeAdapter(List[self._session_model])
        self._sessions: List[Session[EntryT]] = []
        self._active_id: Optional[str] = None

    @property
    def sessions(self) -> Sequence[Session[EntryT]]:
        return tuple(self._sessions)

    @property
    def active_session_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_session(self) -> Optional[Session[EntryT]]:
        return self.get_session(self._active_id) if self._active_id else None

    def get_session(self, session_id: str) -> Optional[Session[EntryT]]:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    def _require(self, session_id: str) -> Session[EntryT]:
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFound(f"No {self.namespace} session with id {session_id!r}")
        return session

    def load(self) -> None:
        """Replace in-memory state with what the backend holds.

        Corrupt payloads are logged and treated as no history.
        """
        self._sessions = []
        self._active_id = None

        raw = self._storage.get_item(self.sessions_key)
        saved_active = self._storage.get_item(self.active_key)
        if not raw:
            return

        try:
            sessions = self._adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("Failed to parse %s sessions: %s", self.namespace, e)
            return

        self._sessions = list(sessions)
        if saved_active and self.get_session(saved_active) is not None:
            self._active_id = saved_active
        logger.info(
            "Loaded %s %s sessions (active=%s)",
            len(self._sessions),
            self.namespace,
            self._active_id,
        )

    def _persist(self) -> None:
        if self._sessions:
            payload = self._adapter.dump_json(self._sessions, by_alias=True, exclude_none=True)
            self._storage.set_item(self.sessions_key, payload.decode("utf-8"))
        if self._active_id:
            self._storage.set_item(self.active_key, self._active_id)

    def _new_id(self) -> str:
        candidate = int(time.time() * 1000)
        taken = {s.id for s in self._sessions}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _add_session(self, title: str) -> Session[EntryT]:
        session = self._session_model(
            id=self._new_id(),
            title=title,
            timestamp=utc_now_iso(),
            entries=[],
        )
        # most recent first
        self._sessions.insert(0, session)
        self._active_id = session.id
        self._persist()
        return session

    def create_session(self) -> Session[EntryT]:
        return self._add_session(DEFAULT_TITLE)

    def ensure_active_session(self, fallback_title_seed: str) -> str:
        """Active session id, creating a session when none is active.

        A pointer to a session that no longer exists counts as none.
        """
        if self._active_id and self.get_session(self._active_id) is not None:
            return self._active_id
        return self._add_session(derive_title(fallback_title_seed)).id

    def append_entry(self, session_id: str, entry: Union[EntryT, Mapping[str, Any]]) -> EntryT:
        session = self._require(session_id)
        if not isinstance(entry, self.entry_model):
            entry = self.entry_model.model_validate(entry)

        session.entries.append(entry)
        if len(session.entries) == 1 and session.title == DEFAULT_TITLE:
            session.title = derive_title(entry.primary_text())
        self._persist()
        return entry

    def update_entry(self, session_id: str, index: int, patch: Mapping[str, Any]) -> EntryT:
        """Replace the entry at ``index`` with a merged, re-validated copy."""
        session = self.get_session(session_id)
        if session is None or not 0 <= index < len(session.entries):
            raise EntryNotFound(f"No entry {index} in {self.namespace} session {session_id!r}")

        current = session.entries[index]
        merged = {**current.model_dump(), **patch}
        updated = type(current).model_validate(merged)
        session.entries[index] = updated
        self._persist()
        return updated

    def rename_session(self, session_id: str, title: str) -> None:
        self._require(session_id).title = title.strip() or DEFAULT_TITLE
        self._persist()

    def delete_session(self, session_id: str) -> None:
        self._sessions = [s for s in self._sessions if s.id != session_id]
        if self._active_id == session_id:
            self._active_id = None
        self._persist()

    def set_active(self, session_id: str) -> None:
        self._active_id = session_id
        self._persist()

    def clear_all(self) -> None:
        self._sessions = []
        self._active_id = None
        self._storage.remove_item(self.sessions_key)
        self._storage.remove_item(self.active_key)
