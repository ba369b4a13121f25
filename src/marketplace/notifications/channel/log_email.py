"""Email adapter that writes messages to the application log instead of sending them."""

from uuid import uuid4

import structlog

from marketplace.notifications.channel.email_port import EmailPort

logger = structlog.get_logger(__name__)


class LogEmailAdapter(EmailPort):
    def send(self, to: str, subject: str, body: str, sender: str | None = None) -> dict:
        message_id = f"email-{uuid4().hex[:12]}"
        logger.info("email_logged", message_id=message_id, to=to, sender=sender, subject=subject, body=body)
        return {"message_id": message_id, "status": "sent"}
