"""
Failure log sink that emits records through structlog.

Records go to the regular JSON log stream, where an operator can pick
them up for manual follow-up via the fallback link.
"""

import structlog

from ...domain.ports import FailedMessageRecord, FailureLogSink

logger = structlog.get_logger()


class StructlogFailureLogSink(FailureLogSink):
    """FailureLogSink that writes each record as a structured warning event."""

    def __init__(self, event: str = "Failed message logged for manual processing") -> None:
        self._event = event

    async def record(self, entry: FailedMessageRecord) -> None:
        logger.warning(self._event, **entry.to_dict())
