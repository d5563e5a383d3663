"""
Working-configuration discovery.

Finds the credential parameter name the gateway accepts, then sends a
test message through only the catalog entries that use that parameter.
Unlike the read-only credential probe this DOES dispatch a message to
the test number when an entry works.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from ...domain import DeliveryOutcome
from ...domain.value_objects import MessageEnvelope, RecipientNumber
from ...gateway.catalog import GatewayCatalog
from ...gateway.diagnostics import CredentialProbeResult, GatewayDiagnostics
from .delivery_engine import DeliveryEngine

logger = structlog.get_logger()

DISCOVERY_MESSAGE = "API Discovery Test"


@dataclass(frozen=True)
class DiscoveryResult:
    """Credential probe result plus the test send through the narrowed catalog."""

    credentials: CredentialProbeResult
    candidates: tuple[str, ...] = ()
    outcome: DeliveryOutcome | None = None

    @property
    def parameter_name(self) -> str | None:
        return self.credentials.parameter_name

    @property
    def working_configuration(self) -> str | None:
        return self.outcome.used_configuration if self.outcome else None

    @property
    def success(self) -> bool:
        return self.working_configuration is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "parameter_name": self.parameter_name,
            "working_configuration": self.working_configuration,
            "candidates": list(self.candidates),
            "credential_attempts": [a.to_dict() for a in self.credentials.trace],
            "delivery": self.outcome.to_dict() if self.outcome else None,
        }


class GatewayDiscovery:
    """Narrows the catalog to the accepted credential parameter and test-sends."""

    def __init__(
        self,
        diagnostics: GatewayDiagnostics,
        catalog: GatewayCatalog,
        engine_factory: Callable[[GatewayCatalog], DeliveryEngine],
    ) -> None:
        self._diagnostics = diagnostics
        self._catalog = catalog
        self._engine_factory = engine_factory

    async def discover(
        self,
        credential: str,
        test_number: RecipientNumber,
        message: str = DISCOVERY_MESSAGE,
    ) -> DiscoveryResult:
        """
        Find a working gateway configuration.

        Args:
            credential: Gateway API secret
            test_number: Recipient of the test message
            message: Test message text

        Returns:
            DiscoveryResult; `working_configuration` is None when the
            credential was rejected or no narrowed entry succeeded

        Raises:
            ConfigurationError: If the credential is blank
        """
        probe = await self._diagnostics.probe_credentials(credential)
        if not probe.authenticated:
            logger.error(
                "Credential check failed, skipping send test",
                hint="check the API key, account balance and WhatsApp API access",
            )
            return DiscoveryResult(credentials=probe)

        narrowed = self._catalog.for_credential_key(probe.parameter_name)
        candidates = tuple(narrowed.names)
        if not candidates:
            logger.warning("No send configuration uses the accepted parameter", parameter=probe.parameter_name)
            return DiscoveryResult(credentials=probe)

        logger.info("Testing send configurations", parameter=probe.parameter_name, candidates=len(candidates))
        engine = self._engine_factory(narrowed)
        outcome = await engine.send(MessageEnvelope(recipient=test_number, body=message), credential)

        if outcome.success:
            logger.info("Found working configuration", configuration=outcome.used_configuration)
        else:
            logger.error("No working send configuration found", attempts=outcome.attempts)
        return DiscoveryResult(credentials=probe, candidates=candidates, outcome=outcome)
