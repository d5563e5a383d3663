import pytest

from notifier.domain.value_objects import MessageEnvelope, RecipientFormat
from notifier.gateway import (
    BodyEncoding,
    GatewayCatalog,
    GatewayConfiguration,
    HttpMethod,
    build_default_catalog,
    field_map_builder,
    normalize,
)


@pytest.fixture
def envelope() -> MessageEnvelope:
    return MessageEnvelope(recipient=normalize("9876543210"), body="Hello!")


class TestDefaultCatalog:
    def test_order_and_names(self):
        catalog = build_default_catalog("https://gw.test/api/", sender="Shop")

        assert catalog.names == [
            "Standard SMSQuicker (apikey)",
            "Standard SMSQuicker (api_key)",
            "WhatsApp Specific (apikey)",
            "WhatsApp Specific (api_key)",
            "API v2 Format (secret)",
            "API v2 Format (apikey)",
            "Alternative Endpoint",
        ]
        assert len(catalog) == 7

    def test_endpoints_built_from_base_url(self):
        catalog = build_default_catalog("https://gw.test/api/")

        assert [c.endpoint_url for c in catalog][:3] == [
            "https://gw.test/api/send.php",
            "https://gw.test/api/send.php",
            "https://gw.test/api/sendWhatsApp.php",
        ]
        assert catalog.get("Alternative Endpoint").endpoint_url == "https://gw.test/api/send"

    def test_standard_params(self, envelope):
        config = build_default_catalog("https://gw.test/api", sender="Shop").get("Standard SMSQuicker (apikey)")

        assert config.build_params(envelope, "s3cret") == {
            "apikey": "s3cret",
            "numbers": "919876543210",
            "message": "Hello!",
            "sender": "Shop",
        }

    def test_blank_extras_dropped(self, envelope):
        config = build_default_catalog("https://gw.test/api").get("WhatsApp Specific (api_key)")

        assert config.build_params(envelope, "k") == {
            "api_key": "k",
            "mobile": "919876543210",
            "msg": "Hello!",
        }

    def test_v2_entries_use_json(self, envelope):
        config = build_default_catalog("https://gw.test/api").get("API v2 Format (secret)")
        kwargs = config.request_kwargs(envelope, "k")

        assert config.body_encoding is BodyEncoding.JSON
        assert kwargs["method"] == "POST"
        assert kwargs["json"] == {
            "secret": "k",
            "number": "919876543210",
            "message": "Hello!",
            "type": "whatsapp",
        }

    def test_form_entries_use_data(self, envelope):
        config = build_default_catalog("https://gw.test/api").get("Alternative Endpoint")
        kwargs = config.request_kwargs(envelope, "k")

        assert "data" in kwargs
        assert "json" not in kwargs


class TestAttachments:
    def test_attachment_param_when_declared(self):
        envelope = MessageEnvelope(
            recipient=normalize("9876543210"),
            body="See photo",
            attachment_url="https://cdn.test/p.jpg",
        )
        config = build_default_catalog("https://gw.test/api").get("API v2 Format (apikey)")

        params = config.build_params(envelope, "k")

        assert params["message"] == "See photo"
        assert params["media_url"] == "https://cdn.test/p.jpg"

    def test_attachment_appended_to_text_otherwise(self):
        envelope = MessageEnvelope(
            recipient=normalize("9876543210"),
            body="See photo",
            attachment_url="https://cdn.test/p.jpg",
        )
        config = build_default_catalog("https://gw.test/api").get("Standard SMSQuicker (apikey)")

        params = config.build_params(envelope, "k")

        assert params["message"] == "See photo\n\nMedia: https://cdn.test/p.jpg"


class TestGatewayCatalog:
    def test_duplicate_names_rejected(self):
        builder = field_map_builder(credential_key="k", recipient_key="to", message_key="text")
        entry = GatewayConfiguration(name="dup", endpoint_url="https://gw.test/a", parameter_builder=builder)

        with pytest.raises(ValueError, match="Duplicate"):
            GatewayCatalog(entries=(entry, entry))

    def test_get_unknown_returns_none(self):
        assert build_default_catalog("https://gw.test").get("nope") is None

    def test_for_credential_key_keeps_order(self, envelope):
        catalog = build_default_catalog("https://gw.test")

        narrowed = catalog.for_credential_key("api_key")

        assert narrowed.names == ["Standard SMSQuicker (api_key)", "WhatsApp Specific (api_key)"]
        for entry in narrowed:
            assert "api_key" in entry.build_params(envelope, "k")
        assert len(catalog.for_credential_key("key")) == 0
        assert len(catalog) == 7

    def test_recipient_format_applied(self, envelope):
        builder = field_map_builder(
            credential_key="token",
            recipient_key="to",
            message_key="text",
            recipient_format=RecipientFormat.WITH_PLUS,
        )
        config = GatewayConfiguration(
            name="plus",
            endpoint_url="https://gw.test/plus",
            parameter_builder=builder,
            http_method=HttpMethod.GET,
            recipient_format=RecipientFormat.WITH_PLUS,
        )

        kwargs = config.request_kwargs(envelope, "t")

        assert kwargs["method"] == "GET"
        assert kwargs["params"]["to"] == "+919876543210"
