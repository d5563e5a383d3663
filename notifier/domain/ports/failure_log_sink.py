"""
Outbound port for failed-message logging.

When every gateway configuration fails, the engine hands a structured
record to this sink so an operator can follow up manually. Where the
record ends up (console, file, database) is the adapter's concern.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class FailedMessageRecord:
    """Structured record of a message that could not be delivered."""

    recipient: str
    message_text: str
    error_reason: str
    fallback_url: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    status: str = "failed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "recipient": self.recipient,
            "message_text": self.message_text,
            "error_reason": self.error_reason,
            "fallback_url": self.fallback_url,
            "status": self.status,
        }


class FailureLogSink(ABC):
    """Receives records of messages the engine could not deliver."""

    @abstractmethod
    async def record(self, entry: FailedMessageRecord) -> None:
        """Persist or emit the failure record."""
        ...
