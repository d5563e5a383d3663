from dataclasses import dataclass

from .recipient_number import RecipientNumber


@dataclass(frozen=True)
class MessageEnvelope:
    """Immutable value object for one outbound message."""

    recipient: RecipientNumber
    body: str
    attachment_url: str | None = None

    def __post_init__(self) -> None:
        if not self.body or len(self.body.strip()) == 0:
            raise ValueError("Message body cannot be empty")
        if self.attachment_url is not None and not self.attachment_url.strip():
            raise ValueError("Attachment URL cannot be blank")

    def body_with_attachment(self) -> str:
        """Message text with the attachment URL appended, for gateways without a media field."""
        if not self.attachment_url:
            return self.body
        return f"{self.body}\n\nMedia: {self.attachment_url}"
