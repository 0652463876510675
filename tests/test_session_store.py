import json

import pytest

from history import (
    DEFAULT_TITLE,
    EmailEntry,
    EntryNotFound,
    MemoryStorage,
    SessionNotFound,
    SessionStore,
    TranslationEntry,
    WeatherEntry,
    derive_title,
    storage_keys,
)


def email(subject="Quarterly report", status="sent", **kw):
    return EmailEntry(
        id=kw.pop("id", "1"),
        recipient=kw.pop("recipient", "ada@example.com"),
        subject=subject,
        message=kw.pop("message", "See attached."),
        status=status,
        **kw,
    )


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    s = SessionStore(storage, "email", EmailEntry)
    s.load()
    return s


def reload(storage, namespace="email", model=EmailEntry):
    fresh = SessionStore(storage, namespace, model)
    fresh.load()
    return fresh


class TestTitles:
    def test_exactly_thirty_chars_is_kept(self):
        text = "x" * 30
        assert derive_title(text) == text

    def test_thirty_one_chars_is_truncated(self):
        text = "abcdefghij" * 3 + "k"
        assert derive_title(text) == "abcdefghij" * 3 + "..."

    def test_blank_falls_back_to_default(self):
        assert derive_title("   ") == DEFAULT_TITLE

    def test_trailing_space_counts_toward_length(self):
        assert derive_title("x" * 30 + " ") == "x" * 30 + "..."

    def test_leading_spaces_are_kept(self, store):
        session = store.create_session()
        store.append_entry(session.id, email(subject="  Hi"))
        assert store.get_session(session.id).title == "  Hi"


class TestCreate:
    def test_new_session_is_prepended_and_active(self, store):
        first = store.create_session()
        second = store.create_session()

        assert [s.id for s in store.sessions] == [second.id, first.id]
        assert store.active_session_id == second.id
        assert second.title == "New Chat"
        assert second.entries == []

    def test_ids_are_unique_within_the_same_millisecond(self, store, monkeypatch):
        monkeypatch.setattr("history.store.time.time", lambda: 1700000000.0)
        ids = {store.create_session().id for _ in range(3)}
        assert ids == {"1700000000000", "1700000000001", "1700000000002"}

    def test_persists_list_and_active_id(self, store, storage):
        session = store.create_session()
        sessions_key, active_key = storage_keys("email")
        saved = json.loads(storage.get_item(sessions_key))
        assert [s["id"] for s in saved] == [session.id]
        assert storage.get_item(active_key) == session.id


class TestEnsureActive:
    def test_is_idempotent_while_active(self, store):
        first = store.ensure_active_session("Hello")
        second = store.ensure_active_session("Something else")
        assert first == second
        assert len(store.sessions) == 1

    def test_creates_session_titled_from_seed(self, store):
        session_id = store.ensure_active_session("A subject line that is far too long to fit")
        session = store.get_session(session_id)
        assert session.title == "A subject line that is far too..."
        assert store.active_session_id == session_id

    def test_stale_pointer_gets_a_fresh_session(self, store):
        store.set_active("stale")
        session_id = store.ensure_active_session("Hello")
        assert session_id != "stale"
        assert store.get_session(session_id).title == "Hello"
        assert store.active_session_id == session_id


class TestAppend:
    def test_first_entry_sets_default_title(self, store):
        session = store.create_session()
        store.append_entry(session.id, email(subject="Lunch on Friday?"))
        assert store.get_session(session.id).title == "Lunch on Friday?"

    def test_later_entries_keep_title(self, store):
        session = store.create_session()
        store.append_entry(session.id, email(subject="First"))
        store.append_entry(session.id, email(subject="Second", id="2"))
        assert store.get_session(session.id).title == "First"
        assert [e.subject for e in store.get_session(session.id).entries] == ["First", "Second"]

    def test_seeded_title_is_not_overwritten(self, store):
        session_id = store.ensure_active_session("Seed title")
        store.append_entry(session_id, email(subject="Different"))
        assert store.get_session(session_id).title == "Seed title"

    def test_accepts_plain_mappings(self, store):
        session = store.create_session()
        entry = store.append_entry(
            session.id,
            {"id": "9", "recipient": "a@b.c", "subject": "s", "message": "m", "status": "failed"},
        )
        assert isinstance(entry, EmailEntry)
        assert entry.status == "failed"

    def test_unknown_session(self, store):
        with pytest.raises(SessionNotFound):
            store.append_entry("nope", email())


class TestRoundTrip:
    def test_reload_matches_memory(self, store, storage):
        a = store.create_session()
        store.append_entry(a.id, email(subject="One"))
        b = store.create_session()
        store.append_entry(b.id, email(subject="Two", status="failed"))
        store.append_entry(b.id, email(subject="Three", id="3"))
        store.delete_session(a.id)

        fresh = reload(storage)

        assert [s.model_dump() for s in fresh.sessions] == [s.model_dump() for s in store.sessions]
        assert fresh.active_session_id == b.id

    def test_stale_active_id_is_not_restored(self, storage):
        sessions_key, active_key = storage_keys("email")
        storage.set_item(sessions_key, json.dumps([{"id": "1", "title": "t", "timestamp": "x", "entries": []}]))
        storage.set_item(active_key, "404")
        assert reload(storage).active_session_id is None

    def test_corrupt_payload_leaves_store_empty(self, storage, caplog):
        sessions_key, _ = storage_keys("email")
        storage.set_item(sessions_key, "{not json")
        fresh = reload(storage)
        assert fresh.sessions == ()
        assert fresh.active_session_id is None
        assert "Failed to parse email sessions" in caplog.text

    def test_wrong_shape_leaves_store_empty(self, storage):
        sessions_key, _ = storage_keys("email")
        storage.set_item(sessions_key, json.dumps([{"title": "no id"}]))
        assert reload(storage).sessions == ()

    def test_namespaces_do_not_collide(self, storage):
        emails = SessionStore(storage, "email", EmailEntry)
        weather = SessionStore(storage, "weather", WeatherEntry)
        emails.create_session()
        weather.load()
        assert weather.sessions == ()
        assert set(storage.keys()) == {"sync_email_sessions", "sync_active_email_session"}


class TestDelete:
    def test_deleting_active_clears_pointer(self, store):
        other = store.create_session()
        active = store.create_session()
        store.delete_session(active.id)
        assert store.active_session_id is None
        assert [s.id for s in store.sessions] == [other.id]

    def test_deleting_inactive_keeps_pointer(self, store):
        other = store.create_session()
        active = store.create_session()
        store.delete_session(other.id)
        assert store.active_session_id == active.id

    def test_empty_list_is_not_written(self, store, storage):
        session = store.create_session()
        store.append_entry(session.id, email())
        sessions_key, _ = storage_keys("email")
        before = storage.get_item(sessions_key)

        store.delete_session(session.id)

        assert store.sessions == ()
        assert storage.get_item(sessions_key) == before


class TestClearAll:
    def test_clear_then_load_is_empty(self, store, storage):
        store.append_entry(store.create_session().id, email())
        store.clear_all()
        assert storage.keys() == []

        store.load()
        assert store.sessions == ()
        assert store.active_session_id is None


class TestSetActive:
    def test_stale_id_is_accepted(self, store):
        store.create_session()
        store.set_active("does-not-exist")
        assert store.active_session_id == "does-not-exist"
        assert store.active_session is None


class TestUpdateEntry:
    @pytest.fixture
    def translations(self, storage):
        s = SessionStore(storage, "translate", TranslationEntry)
        session = s.create_session()
        for text, out in [("Hello", "Bonjour"), ("Thanks", "Merci")]:
            s.append_entry(
                session.id,
                TranslationEntry(
                    source_text=text,
                    translated_text=out,
                    target_language="fr",
                    detected_language="en",
                ),
            )
        return s, session.id

    def test_merges_patch(self, translations):
        s, session_id = translations
        updated = s.update_entry(session_id, 1, {"translated_text": "Danke", "target_language": "de"})
        assert updated.source_text == "Thanks"
        assert updated.translated_text == "Danke"
        assert s.get_session(session_id).entries[0].translated_text == "Bonjour"

    def test_out_of_range_is_an_error_and_no_op(self, translations):
        s, session_id = translations
        before = [e.model_dump() for e in s.get_session(session_id).entries]
        with pytest.raises(EntryNotFound):
            s.update_entry(session_id, 2, {"translated_text": "x"})
        with pytest.raises(EntryNotFound):
            s.update_entry(session_id, -1, {"translated_text": "x"})
        assert [e.model_dump() for e in s.get_session(session_id).entries] == before

    def test_edited_at_is_persisted_under_its_wire_name(self, translations, storage):
        s, session_id = translations
        s.update_entry(session_id, 0, {"edited": True, "edited_at": "2026-01-01T00:00:00.000Z"})
        saved = json.loads(storage.get_item("sync_translate_sessions"))
        entry = saved[0]["entries"][0]
        assert entry["edited"] is True
        assert entry["editedAt"] == "2026-01-01T00:00:00.000Z"
        assert "edited" not in saved[0]["entries"][1]


class TestRename:
    def test_explicit_title(self, store):
        session = store.create_session()
        store.rename_session(session.id, "Invoices")
        store.append_entry(session.id, email(subject="March"))
        assert store.get_session(session.id).title == "Invoices"


def test_weather_entry_requires_exactly_one_outcome():
    with pytest.raises(ValueError):
        WeatherEntry(id="1", city="Paris")
    assert WeatherEntry(id="1", city="Paris", error="city not found").weather is None
