"""
Read-only gateway diagnostics.

Probes which credential parameter name the gateway accepts and reads the
account's credit balance. Only GET endpoints are called here, so running
a probe never dispatches a message.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from ..domain import ConfigurationError, DeliveryAttemptResult, TransientGatewayError
from ..infrastructure.logging import Timer
from .http import client_scope, parse_body

logger = structlog.get_logger()


@dataclass(frozen=True)
class CredentialProbe:
    """One guess at a credential-checking endpoint."""

    parameter_name: str
    path: str

    @property
    def name(self) -> str:
        return f"{self.parameter_name} {self.path}"


DEFAULT_PROBES: tuple[CredentialProbe, ...] = (
    CredentialProbe("secret", "/get/credits"),
    CredentialProbe("apikey", "/balance.php"),
    CredentialProbe("secret", "/v2/balance"),
    CredentialProbe("api_key", "/balance"),
    CredentialProbe("key", "/status"),
)


@dataclass(frozen=True)
class CredentialProbeResult:
    """Outcome of a credential probe run."""

    parameter_name: str | None
    response: Any
    trace: tuple[DeliveryAttemptResult, ...]

    @property
    def authenticated(self) -> bool:
        return self.parameter_name is not None


def probe_accepted(http_status: int, body: Any) -> bool:
    """A probe response counts when it is a non-empty 200 without an auth/error status."""
    if http_status != 200 or not body:
        return False
    if isinstance(body, Mapping):
        status = body.get("status")
        if status in (401, "401", "error"):
            return False
    return True


class GatewayDiagnostics:
    """Checks gateway credentials without sending anything."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        probes: tuple[CredentialProbe, ...] = DEFAULT_PROBES,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._probes = probes
        self._http_client = http_client

    async def probe_credentials(self, credential: str) -> CredentialProbeResult:
        """
        Try each probe endpoint in order until one accepts the credential.

        Args:
            credential: Gateway API secret

        Returns:
            CredentialProbeResult naming the accepted parameter, or with
            parameter_name None when every probe was rejected

        Raises:
            ConfigurationError: If the credential is blank
        """
        if not credential or not credential.strip():
            raise ConfigurationError("Gateway credential is required for probing")

        trace: list[DeliveryAttemptResult] = []
        async with client_scope(self._http_client, self._timeout) as client:
            for probe in self._probes:
                url = f"{self._base_url}{probe.path}"
                try:
                    with Timer() as t:
                        response = await client.get(
                            url,
                            params={probe.parameter_name: credential},
                            timeout=self._timeout,
                        )
                except (httpx.HTTPError, httpx.InvalidURL) as e:
                    logger.warning("Credential probe failed", probe=probe.name, error=str(e))
                    trace.append(
                        DeliveryAttemptResult(
                            configuration_name=probe.name,
                            http_status=None,
                            raw_body=None,
                            classified_success=False,
                            error_message=f"{type(e).__name__}: {e}",
                        )
                    )
                    continue

                body = parse_body(response)
                accepted = probe_accepted(response.status_code, body)
                logger.info(
                    "Credential probe",
                    probe=probe.name,
                    http_status=response.status_code,
                    accepted=accepted,
                    duration_ms=t.duration_ms,
                )
                trace.append(
                    DeliveryAttemptResult(
                        configuration_name=probe.name,
                        http_status=response.status_code,
                        raw_body=body,
                        classified_success=accepted,
                    )
                )
                if accepted:
                    return CredentialProbeResult(
                        parameter_name=probe.parameter_name,
                        response=body,
                        trace=tuple(trace),
                    )

        logger.error("Could not authenticate with any credential format", probes=len(trace))
        return CredentialProbeResult(parameter_name=None, response=None, trace=tuple(trace))

    async def check_credits(self, credential: str) -> Any:
        """
        Return the gateway's balance/credits response.

        Raises:
            ConfigurationError: If the credential is blank
            TransientGatewayError: If no probe endpoint accepted the credential
        """
        result = await self.probe_credentials(credential)
        if not result.authenticated:
            raise TransientGatewayError("credit check", "no endpoint accepted the credential")
        return result.response
