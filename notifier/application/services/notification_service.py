"""
Application service for transactional notifications.

Entry point for the HTTP routing layer: composes the message for a
business event, sends it to the customer and, once that succeeds, sends
the matching alert to the store admin. An admin alert failure never
fails the business operation, and a customer delivery failure is
reported with a manual follow-up link rather than raised.
"""

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from ...domain import ConfigurationError, DeliveryOutcome
from ...domain.entities import CartItem
from ...domain.value_objects import MessageEnvelope
from ...gateway.phone import PhoneNormalizer
from ...infrastructure.logging import set_correlation_id
from .delivery_engine import DeliveryEngine
from .notification_composer import CustomerInfo, NotificationComposer

logger = structlog.get_logger()


class NotificationKind(str, Enum):
    PRODUCT_INQUIRY = "product_inquiry"
    CART_SUMMARY = "cart_summary"
    ADMIN_ALERT = "admin_alert"
    RAW_MESSAGE = "raw_message"


@dataclass(frozen=True)
class ProductInquiryPayload:
    product_id: str
    customer: CustomerInfo = field(default_factory=CustomerInfo)


@dataclass(frozen=True)
class CartSummaryPayload:
    items: Sequence[CartItem]
    customer: CustomerInfo = field(default_factory=CustomerInfo)


@dataclass(frozen=True)
class AdminAlertPayload:
    title: str
    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RawMessagePayload:
    text: str
    attachment_url: str | None = None


@dataclass(frozen=True)
class NotificationReport:
    """What happened to one notification and its admin follow-up."""

    kind: NotificationKind
    message_text: str
    outcome: DeliveryOutcome
    admin_outcome: DeliveryOutcome | None = None

    @property
    def success(self) -> bool:
        return self.outcome.success

    @property
    def fallback_url(self) -> str | None:
        return self.outcome.fallback_url

    @property
    def manual_follow_up(self) -> str | None:
        """Instructions for sending the message by hand, if delivery failed."""
        if self.outcome.success or not self.outcome.fallback_url:
            return None
        return f"Automatic delivery failed. Open {self.outcome.fallback_url} to send the message manually."

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "success": self.success,
            "message_text": self.message_text,
            "manual_follow_up": self.manual_follow_up,
            "delivery": self.outcome.to_dict(),
            "admin_delivery": self.admin_outcome.to_dict() if self.admin_outcome else None,
        }


class NotificationService:
    """
    Composes and dispatches notifications through the DeliveryEngine.

    Customer and admin messages are sent one after the other, never in
    parallel.
    """

    def __init__(
        self,
        engine: DeliveryEngine,
        composer: NotificationComposer,
        *,
        credential: str,
        admin_number: str = "",
        normalizer: PhoneNormalizer | None = None,
    ) -> None:
        self._engine = engine
        self._composer = composer
        self._credential = credential
        self._admin_number = admin_number
        self._normalizer = normalizer or PhoneNormalizer()

    async def send_notification(
        self,
        kind: NotificationKind,
        recipient_raw: str,
        payload: ProductInquiryPayload | CartSummaryPayload | AdminAlertPayload | RawMessagePayload,
        *,
        deadline: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> NotificationReport:
        """
        Compose and send one notification.

        Args:
            kind: Which template to render
            recipient_raw: Recipient phone number as entered (ignored for
                admin alerts when an admin number is configured and this is blank)
            payload: Business data matching `kind`
            deadline: Overall budget in seconds for each send
            cancel: Event that aborts in-progress delivery

        Returns:
            NotificationReport; check `success` and `manual_follow_up`

        Raises:
            ConfigurationError: Credential or admin recipient missing
            ComposerDataError: The inquired product does not exist
            ValueError: Payload does not match `kind` or is empty
        """
        kind = NotificationKind(kind)
        set_correlation_id()
        logger.info("Notification requested", kind=kind.value)
        send_opts = {"deadline": deadline, "cancel": cancel}

        match kind:
            case NotificationKind.PRODUCT_INQUIRY:
                payload = _expect(payload, ProductInquiryPayload, kind)
                customer = _with_phone(payload.customer, recipient_raw)
                inquiry = await self._composer.product_inquiry(payload.product_id, customer)
                outcome = await self._send(recipient_raw, inquiry.text, **send_opts)
                admin_outcome = None
                if outcome.success:
                    alert = self._composer.product_inquiry_alert(inquiry.product, customer)
                    admin_outcome = await self._notify_admin(alert, **send_opts)
                return NotificationReport(kind, inquiry.text, outcome, admin_outcome)

            case NotificationKind.CART_SUMMARY:
                payload = _expect(payload, CartSummaryPayload, kind)
                if not payload.items:
                    raise ValueError("Cart items are required for a cart summary")
                customer = _with_phone(payload.customer, recipient_raw)
                summary = await self._composer.cart_summary(payload.items)
                outcome = await self._send(recipient_raw, summary.text, **send_opts)
                admin_outcome = None
                if outcome.success:
                    alert = self._composer.cart_summary_alert(summary, customer)
                    admin_outcome = await self._notify_admin(alert, **send_opts)
                return NotificationReport(kind, summary.text, outcome, admin_outcome)

            case NotificationKind.ADMIN_ALERT:
                payload = _expect(payload, AdminAlertPayload, kind)
                recipient = recipient_raw or self._admin_number
                if not recipient:
                    raise ConfigurationError("No admin recipient configured")
                text = self._composer.admin_alert(payload.title, payload.fields)
                outcome = await self._send(recipient, text, **send_opts)
                return NotificationReport(kind, text, outcome)

            case NotificationKind.RAW_MESSAGE:
                payload = _expect(payload, RawMessagePayload, kind)
                outcome = await self._send(
                    recipient_raw,
                    payload.text,
                    attachment_url=payload.attachment_url,
                    **send_opts,
                )
                return NotificationReport(kind, payload.text, outcome)

            case _:
                raise ValueError(f"Unsupported notification kind: {kind}")

    async def _send(
        self,
        recipient_raw: str,
        text: str,
        *,
        attachment_url: str | None = None,
        deadline: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> DeliveryOutcome:
        if not recipient_raw or not recipient_raw.strip():
            raise ValueError("Recipient phone number is required")
        envelope = MessageEnvelope(
            recipient=self._normalizer.normalize(recipient_raw),
            body=text,
            attachment_url=attachment_url,
        )
        return await self._engine.send(envelope, self._credential, deadline=deadline, cancel=cancel)

    async def _notify_admin(
        self,
        text: str,
        *,
        deadline: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> DeliveryOutcome | None:
        """Best-effort admin alert; a failed outcome is logged, not raised."""
        if not self._admin_number:
            logger.info("No admin number configured, skipping admin alert")
            return None

        outcome = await self._send(self._admin_number, text, deadline=deadline, cancel=cancel)
        if not outcome.success:
            logger.warning(
                "Failed to send admin notification",
                error_reason=outcome.error_reason,
                fallback_url=outcome.fallback_url,
            )
        return outcome


def _expect(payload: Any, expected: type, kind: NotificationKind):
    if not isinstance(payload, expected):
        raise ValueError(f"{kind.value} requires {expected.__name__}, got {type(payload).__name__}")
    return payload


def _with_phone(customer: CustomerInfo, phone: str) -> CustomerInfo:
    if customer.phone:
        return customer
    return CustomerInfo(phone=phone, name=customer.name, email=customer.email, user_id=customer.user_id)
