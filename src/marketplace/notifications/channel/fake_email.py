"""Fake email adapter — records sent emails for test assertions."""

from uuid import uuid4

from marketplace.notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_fail = False

    def configure(self, should_fail: bool = False):
        self.should_fail = should_fail

    def send(self, to: str, subject: str, body: str, sender: str | None = None) -> dict:
        if self.should_fail:
            raise ConnectionError("Email transport unavailable")

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "to": to,
                "sender": sender,
                "subject": subject,
                "body": body,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent_emails.clear()
        self.should_fail = False
