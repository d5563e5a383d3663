"""
Delivery engine for the messaging gateway.

The gateway's request contract is unknown, so the engine walks the
configuration catalog in order and stops at the first response the
classifier accepts. Attempts are strictly sequential: a later
configuration is only tried once the previous one is known to have
failed.

Known limitation: this is not idempotent. If more than one catalog entry
is actually valid, every valid entry tried before the classifier
recognises a success may have delivered its own copy of the message.
"""

import asyncio

import httpx
import structlog

from ...domain import (
    ConfigurationError,
    DeliveryAttemptResult,
    DeliveryOutcome,
    TransientGatewayError,
)
from ...domain.ports import FailedMessageRecord, FailureLogSink
from ...domain.value_objects import MessageEnvelope
from ...gateway.catalog import GatewayCatalog, GatewayConfiguration
from ...gateway.classifier import ResponseClassifier
from ...gateway.fallback import FallbackLinkGenerator
from ...gateway.http import client_scope, parse_body
from ...infrastructure.logging import Timer, sanitize_for_logging

logger = structlog.get_logger()

DEFAULT_ATTEMPT_TIMEOUT = 30.0


class DeliveryAborted(Exception):
    """The caller's cancellation token fired during an attempt."""


class DeliveryEngine:
    """
    Sends a message by probing gateway configurations in catalog order.

    The engine holds no per-call state; one instance can serve
    concurrent send() calls.
    """

    def __init__(
        self,
        catalog: GatewayCatalog,
        *,
        classifier: ResponseClassifier | None = None,
        fallback: FallbackLinkGenerator | None = None,
        failure_sink: FailureLogSink | None = None,
        attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT,
        fallback_enabled: bool = True,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if len(catalog) == 0:
            raise ValueError("Gateway catalog must contain at least one configuration")
        self._catalog = catalog
        self._classifier = classifier or ResponseClassifier()
        self._fallback = fallback or FallbackLinkGenerator()
        self._failure_sink = failure_sink
        self._attempt_timeout = attempt_timeout
        self._fallback_enabled = fallback_enabled
        self._http_client = http_client

    @property
    def catalog(self) -> GatewayCatalog:
        return self._catalog

    @property
    def worst_case_latency(self) -> float:
        """Upper bound in seconds for a send() that exhausts the catalog."""
        return self._attempt_timeout * len(self._catalog)

    async def send(
        self,
        envelope: MessageEnvelope,
        credential: str,
        *,
        deadline: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> DeliveryOutcome:
        """
        Deliver a message through the first configuration that works.

        Args:
            envelope: Recipient, text and optional attachment
            credential: Gateway API secret
            deadline: Overall budget in seconds; remaining configurations are
                skipped once it runs out
            cancel: Event that aborts the remaining loop when set

        Returns:
            DeliveryOutcome with the ordered attempt trace. Callers must
            check `success`; exhausting the catalog does not raise.

        Raises:
            ConfigurationError: If the credential is blank (before any call)
        """
        if not credential or not credential.strip():
            raise ConfigurationError("Gateway credential is not configured")

        loop = asyncio.get_running_loop()
        expires_at = loop.time() + deadline if deadline is not None else None
        trace: list[DeliveryAttemptResult] = []
        aborted = False

        logger.info(
            "Sending message",
            recipient=sanitize_for_logging(envelope.recipient.digits_only, visible_chars=6),
            body_length=len(envelope.body),
            has_attachment=bool(envelope.attachment_url),
            configurations=len(self._catalog),
        )

        async with client_scope(self._http_client, self._attempt_timeout) as client:
            for configuration in self._catalog:
                remaining = None if expires_at is None else expires_at - loop.time()
                if (cancel is not None and cancel.is_set()) or (remaining is not None and remaining <= 0):
                    aborted = True
                    logger.warning(
                        "Delivery aborted before attempt",
                        configuration=configuration.name,
                        attempts=len(trace),
                    )
                    break

                timeout = self._attempt_timeout if remaining is None else min(self._attempt_timeout, remaining)
                try:
                    attempt = await self._attempt(client, configuration, envelope, credential, timeout, cancel)
                except DeliveryAborted:
                    trace.append(
                        DeliveryAttemptResult(
                            configuration_name=configuration.name,
                            http_status=None,
                            raw_body=None,
                            classified_success=False,
                            error_message="Aborted by caller",
                        )
                    )
                    aborted = True
                    logger.warning("Delivery aborted during attempt", configuration=configuration.name)
                    break

                trace.append(attempt)
                if attempt.classified_success:
                    logger.info(
                        "Message delivered",
                        configuration=configuration.name,
                        attempts=len(trace),
                    )
                    return DeliveryOutcome(
                        success=True,
                        attempt_trace=tuple(trace),
                        used_configuration=configuration.name,
                    )

        return await self._fail(envelope, trace, aborted)

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        configuration: GatewayConfiguration,
        envelope: MessageEnvelope,
        credential: str,
        timeout: float,
        cancel: asyncio.Event | None,
    ) -> DeliveryAttemptResult:
        """Issue one request and classify it. Network errors become trace entries."""
        request_kwargs = configuration.request_kwargs(envelope, credential)

        try:
            with Timer() as t:
                response = await self._request(client, configuration, request_kwargs, timeout, cancel)
        except TransientGatewayError as e:
            logger.warning(
                "Gateway attempt failed",
                configuration=configuration.name,
                url=configuration.endpoint_url,
                error=e.reason,
                duration_ms=t.duration_ms,
            )
            return DeliveryAttemptResult(
                configuration_name=configuration.name,
                http_status=None,
                raw_body=None,
                classified_success=False,
                error_message=e.reason,
            )

        body = parse_body(response)
        rule = self._classifier.match(response.status_code, body)
        success = rule.verdict if rule else False
        rule_name = rule.name if rule else "no_rule_matched"

        logger.info(
            "Gateway attempt",
            configuration=configuration.name,
            url=configuration.endpoint_url,
            http_status=response.status_code,
            classified_success=success,
            rule=rule_name,
            duration_ms=t.duration_ms,
        )

        return DeliveryAttemptResult(
            configuration_name=configuration.name,
            http_status=response.status_code,
            raw_body=body,
            classified_success=success,
            error_message=None if success else f"HTTP {response.status_code}, rejected by {rule_name}",
        )

    async def _request(
        self,
        client: httpx.AsyncClient,
        configuration: GatewayConfiguration,
        request_kwargs: dict,
        timeout: float,
        cancel: asyncio.Event | None,
    ) -> httpx.Response:
        """Run the HTTP call, bounded by `timeout` and interruptible by `cancel`."""
        request = asyncio.ensure_future(client.request(**request_kwargs, timeout=timeout))
        waiters: set[asyncio.Future] = {request}
        cancel_waiter = None
        if cancel is not None:
            cancel_waiter = asyncio.ensure_future(cancel.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()
            if not request.done():
                request.cancel()
                await asyncio.gather(request, return_exceptions=True)

        if request in done and not request.cancelled():
            try:
                return request.result()
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise TransientGatewayError(configuration.name, f"{type(e).__name__}: {e}") from e

        if cancel is not None and cancel.is_set():
            raise DeliveryAborted(configuration.name)
        raise TransientGatewayError(configuration.name, f"No response within {timeout:.1f}s")

    async def _fail(
        self,
        envelope: MessageEnvelope,
        trace: list[DeliveryAttemptResult],
        aborted: bool,
    ) -> DeliveryOutcome:
        fallback_url = None
        if self._fallback_enabled:
            fallback_url = self._fallback.build_fallback_link(envelope.recipient, envelope.body)

        outcome = DeliveryOutcome(
            success=False,
            attempt_trace=tuple(trace),
            fallback_url=fallback_url,
            aborted=aborted,
        )

        logger.error(
            "All gateway attempts failed",
            attempts=outcome.attempts,
            aborted=aborted,
            auth_failure_suspected=outcome.auth_failure_suspected,
            attempt_errors=[a.error_message for a in trace],
        )
        if outcome.auth_failure_suspected:
            logger.warning(
                "Gateway rejected the credential",
                hint="Check the API secret, account balance and that WhatsApp access is enabled",
            )

        if self._failure_sink is not None:
            record = FailedMessageRecord(
                recipient=envelope.recipient.with_plus,
                message_text=envelope.body,
                error_reason=outcome.error_reason or "Delivery failed",
                fallback_url=fallback_url,
            )
            try:
                await self._failure_sink.record(record)
            except Exception:
                logger.exception("Failure log sink raised", recipient=record.recipient)

        return outcome
