from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class SendEmailRequest(BaseModel):
    # Optional so that missing fields produce our own 400 instead of a 422.
    to: Optional[str] = Field(default=None, description="Recipient address")
    subject: Optional[str] = None
    message: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.to and self.subject and self.message)


class TranslateRequest(BaseModel):
    text: Optional[str] = None
    targetLanguage: Optional[str] = Field(default=None, description="e.g. 'fr', 'de'")

    def is_complete(self) -> bool:
        return bool(self.text and self.targetLanguage)
