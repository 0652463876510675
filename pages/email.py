from __future__ import annotations

import logging
from typing import Optional

from history.models import EmailEntry
from pages.base import ServicePage, new_entry_id
from pages.client import GatewayError


logger = logging.getLogger(__name__)


class EmailPage(ServicePage[EmailEntry]):
    namespace = "email"
    entry_model = EmailEntry

    def send(self, recipient: str, subject: str, message: str) -> Optional[EmailEntry]:
        """Send through the gateway and record the attempt, failed or not."""
        if self._busy():
            return None
        if not (recipient and subject and message):
            raise ValueError("All fields are required")

        session_id = self.store.ensure_active_session(subject)
        self.loading = True
        status = "sent"
        try:
            result = self.gateway.send_email(recipient, subject, message)
            logger.info("Email sent to %s (message_id=%s)", recipient, result.get("messageId"))
        except GatewayError as e:
            logger.warning("Failed to send email to %s: %s", recipient, e.message)
            status = "failed"
        finally:
            self.loading = False

        entry = EmailEntry(
            id=new_entry_id(),
            recipient=recipient,
            subject=subject,
            message=message,
            status=status,
        )
        return self.store.append_entry(session_id, entry)
