"""
Delivery result types.

A DeliveryOutcome is the terminal value of one send call. It carries the
ordered attempt trace, one DeliveryAttemptResult per gateway configuration
that was actually tried.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import ExhaustedCatalogError

AUTH_REJECTION_CODES = frozenset({401, 403})


@dataclass(frozen=True)
class DeliveryAttemptResult:
    """Result of a single gateway configuration attempt."""

    configuration_name: str
    http_status: int | None
    raw_body: Any
    classified_success: bool
    error_message: str | None = None

    @property
    def auth_rejected(self) -> bool:
        """True when the gateway answered with an authentication error."""
        if self.http_status in AUTH_REJECTION_CODES:
            return True
        if isinstance(self.raw_body, Mapping):
            status = self.raw_body.get("status")
            if isinstance(status, bool) or not isinstance(status, (int, str)):
                return False
            return status in AUTH_REJECTION_CODES or status in {"401", "403"}
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "configuration": self.configuration_name,
            "http_status": self.http_status,
            "success": self.classified_success,
            "error": self.error_message,
            "body": self.raw_body,
        }


@dataclass(frozen=True)
class DeliveryOutcome:
    """Aggregate result of trying the gateway configuration catalog."""

    success: bool
    attempt_trace: tuple[DeliveryAttemptResult, ...] = field(default_factory=tuple)
    used_configuration: str | None = None
    fallback_url: str | None = None
    aborted: bool = False

    @property
    def attempts(self) -> int:
        return len(self.attempt_trace)

    @property
    def auth_failure_suspected(self) -> bool:
        return any(a.auth_rejected for a in self.attempt_trace)

    @property
    def error_reason(self) -> str | None:
        """Human readable failure summary, None for successful outcomes."""
        if self.success:
            return None

        if self.aborted:
            reason = f"Delivery aborted after {self.attempts} gateway attempt(s)"
        else:
            reason = f"All {self.attempts} gateway configuration(s) failed"

        if self.auth_failure_suspected:
            reason += "; gateway rejected the credential, verify the API secret and account status"
        else:
            last_error = next(
                (a.error_message for a in reversed(self.attempt_trace) if a.error_message),
                None,
            )
            if last_error:
                reason += f"; last error: {last_error}"
        return reason

    def raise_for_failure(self) -> "DeliveryOutcome":
        """Raise ExhaustedCatalogError if delivery failed, otherwise return self."""
        if not self.success:
            raise ExhaustedCatalogError(self.error_reason or "Delivery failed", self.fallback_url)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "used_configuration": self.used_configuration,
            "fallback_url": self.fallback_url,
            "aborted": self.aborted,
            "error_reason": self.error_reason,
            "attempts": [a.to_dict() for a in self.attempt_trace],
        }
