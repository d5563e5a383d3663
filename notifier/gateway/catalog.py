"""
Gateway configuration catalog.

Each GatewayConfiguration is one guess at the request shape the messaging
gateway expects: endpoint, HTTP method, body encoding, credential parameter
name and recipient number format. The catalog is an ordered, read-only
sequence; the delivery engine tries entries in order and the first one
whose response classifies as success wins.

None of these entries is known to be correct. Several of them may be
valid at once, in which case every one tried before the winner may also
have delivered the message.
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..domain.value_objects import MessageEnvelope, RecipientFormat

ParameterBuilder = Callable[[MessageEnvelope, str], dict[str, str]]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class BodyEncoding(str, Enum):
    FORM = "form"
    JSON = "json"


@dataclass(frozen=True)
class GatewayConfiguration:
    """One candidate request shape for the gateway."""

    name: str
    endpoint_url: str
    parameter_builder: ParameterBuilder
    http_method: HttpMethod = HttpMethod.POST
    body_encoding: BodyEncoding = BodyEncoding.FORM
    recipient_format: RecipientFormat = RecipientFormat.WITH_COUNTRY_CODE
    credential_key: str | None = None

    def build_params(self, envelope: MessageEnvelope, credential: str) -> dict[str, str]:
        return self.parameter_builder(envelope, credential)

    def request_kwargs(self, envelope: MessageEnvelope, credential: str) -> dict[str, Any]:
        """Keyword arguments for `httpx.AsyncClient.request`."""
        params = self.build_params(envelope, credential)
        kwargs: dict[str, Any] = {
            "method": self.http_method.value,
            "url": self.endpoint_url,
        }
        if self.http_method is HttpMethod.GET:
            kwargs["params"] = params
        elif self.body_encoding is BodyEncoding.JSON:
            kwargs["json"] = params
        else:
            kwargs["data"] = params
        return kwargs


def field_map_builder(
    *,
    credential_key: str,
    recipient_key: str,
    message_key: str,
    recipient_format: RecipientFormat = RecipientFormat.WITH_COUNTRY_CODE,
    attachment_key: str | None = None,
    extras: Mapping[str, str] | None = None,
) -> ParameterBuilder:
    """
    Build a parameter builder that maps envelope fields onto named parameters.

    Blank extras are dropped. Without an `attachment_key` the attachment URL
    is appended to the message text instead.
    """
    fixed = {k: v for k, v in (extras or {}).items() if v}

    def build(envelope: MessageEnvelope, credential: str) -> dict[str, str]:
        params = {credential_key: credential}
        params[recipient_key] = envelope.recipient.formatted(recipient_format)
        if attachment_key:
            params[message_key] = envelope.body
            if envelope.attachment_url:
                params[attachment_key] = envelope.attachment_url
        else:
            params[message_key] = envelope.body_with_attachment()
        params.update(fixed)
        return params

    return build


@dataclass(frozen=True)
class GatewayCatalog:
    """Ordered, read-only collection of gateway configurations."""

    entries: tuple[GatewayConfiguration, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.name in seen:
                raise ValueError(f"Duplicate gateway configuration name: {entry.name}")
            seen.add(entry.name)

    def __iter__(self) -> Iterator[GatewayConfiguration]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def get(self, name: str) -> GatewayConfiguration | None:
        return next((entry for entry in self.entries if entry.name == name), None)

    def for_credential_key(self, credential_key: str) -> "GatewayCatalog":
        """Entries that send the credential under `credential_key`, in catalog order."""
        return GatewayCatalog(entries=tuple(e for e in self.entries if e.credential_key == credential_key))


def _entry(
    name: str,
    url: str,
    *,
    credential_key: str,
    recipient_key: str,
    message_key: str,
    encoding: BodyEncoding = BodyEncoding.FORM,
    recipient_format: RecipientFormat = RecipientFormat.WITH_COUNTRY_CODE,
    attachment_key: str | None = None,
    extras: Mapping[str, str] | None = None,
) -> GatewayConfiguration:
    return GatewayConfiguration(
        name=name,
        endpoint_url=url,
        body_encoding=encoding,
        recipient_format=recipient_format,
        credential_key=credential_key,
        parameter_builder=field_map_builder(
            credential_key=credential_key,
            recipient_key=recipient_key,
            message_key=message_key,
            recipient_format=recipient_format,
            attachment_key=attachment_key,
            extras=extras,
        ),
    )


def build_default_catalog(base_url: str, sender: str = "", device_id: str = "") -> GatewayCatalog:
    """
    The built-in list of request shapes, most likely first.

    Args:
        base_url: Gateway API root, e.g. https://smsquicker.com/api
        sender: Sender name/number for the SMS-style endpoints
        device_id: Linked WhatsApp device for the WhatsApp-specific endpoints
    """
    base = base_url.rstrip("/")
    send_php = f"{base}/send.php"
    whatsapp_php = f"{base}/sendWhatsApp.php"
    v2_send = f"{base}/v2/send"

    return GatewayCatalog(
        entries=(
            _entry(
                "Standard SMSQuicker (apikey)",
                send_php,
                credential_key="apikey",
                recipient_key="numbers",
                message_key="message",
                extras={"sender": sender},
            ),
            _entry(
                "Standard SMSQuicker (api_key)",
                send_php,
                credential_key="api_key",
                recipient_key="numbers",
                message_key="message",
                extras={"sender": sender},
            ),
            _entry(
                "WhatsApp Specific (apikey)",
                whatsapp_php,
                credential_key="apikey",
                recipient_key="mobile",
                message_key="msg",
                extras={"device_id": device_id},
            ),
            _entry(
                "WhatsApp Specific (api_key)",
                whatsapp_php,
                credential_key="api_key",
                recipient_key="mobile",
                message_key="msg",
                extras={"device_id": device_id},
            ),
            _entry(
                "API v2 Format (secret)",
                v2_send,
                credential_key="secret",
                recipient_key="number",
                message_key="message",
                encoding=BodyEncoding.JSON,
                attachment_key="media_url",
                extras={"type": "whatsapp"},
            ),
            _entry(
                "API v2 Format (apikey)",
                v2_send,
                credential_key="apikey",
                recipient_key="number",
                message_key="message",
                encoding=BodyEncoding.JSON,
                attachment_key="media_url",
                extras={"type": "whatsapp"},
            ),
            _entry(
                "Alternative Endpoint",
                f"{base}/send",
                credential_key="apikey",
                recipient_key="number",
                message_key="message",
                extras={"type": "whatsapp"},
            ),
        )
    )
