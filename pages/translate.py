from __future__ import annotations

import logging
from typing import Optional

from history.models import TranslationEntry, utc_now_iso
from pages.base import ServicePage


logger = logging.getLogger(__name__)


class TranslatePage(ServicePage[TranslationEntry]):
    namespace = "translate"
    entry_model = TranslationEntry

    def translate(self, text: str, target_language: str) -> Optional[TranslationEntry]:
        if self._busy():
            return None
        text = (text or "").strip()
        if not text or not target_language:
            raise ValueError("Please enter text and a target language")

        session_id = self.store.ensure_active_session(text)
        self.loading = True
        try:
            result = self.gateway.translate(text, target_language)
        finally:
            self.loading = False

        entry = TranslationEntry(
            source_text=text,
            translated_text=result["translatedText"],
            target_language=result["targetLanguage"],
            detected_language=result.get("detectedLanguage") or "unknown",
        )
        return self.store.append_entry(session_id, entry)

    def retranslate(
        self, index: int, target_language: str, session_id: Optional[str] = None
    ) -> Optional[TranslationEntry]:
        """Translate an existing entry's source text into another language, in place."""
        if self._busy():
            return None
        session_id = session_id or self.store.active_session_id
        entry = self._entry_at(session_id, index)

        self.loading = True
        try:
            result = self.gateway.translate(entry.source_text, target_language)
        finally:
            self.loading = False

        return self.store.update_entry(
            session_id,
            index,
            {
                "translated_text": result["translatedText"],
                "target_language": result["targetLanguage"],
            },
        )

    def edit(self, index: int, new_text: str, session_id: Optional[str] = None) -> Optional[TranslationEntry]:
        """Replace an entry's source text and re-derive its translation."""
        if self._busy():
            return None
        new_text = (new_text or "").strip()
        if not new_text:
            raise ValueError("Edited text cannot be empty")
        session_id = session_id or self.store.active_session_id
        entry = self._entry_at(session_id, index)

        self.loading = True
        try:
            result = self.gateway.translate(new_text, entry.target_language)
        finally:
            self.loading = False

        logger.info("Edited translation %s in session %s", index, session_id)
        return self.store.update_entry(
            session_id,
            index,
            {
                "source_text": new_text,
                "translated_text": result["translatedText"],
                "detected_language": result.get("detectedLanguage") or entry.detected_language,
                "edited": True,
                "edited_at": utc_now_iso(),
            },
        )
