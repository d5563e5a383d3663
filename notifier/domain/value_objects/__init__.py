from .message_envelope import MessageEnvelope
from .recipient_number import RecipientFormat, RecipientNumber

__all__ = [
    "MessageEnvelope",
    "RecipientFormat",
    "RecipientNumber",
]
