import pytest

from notifier.domain import DeliveryAttemptResult, DeliveryOutcome
from notifier.domain.value_objects import MessageEnvelope
from notifier.gateway import FallbackLinkGenerator, normalize


class TestMessageEnvelope:
    def test_create_valid_envelope(self):
        envelope = MessageEnvelope(recipient=normalize("9876543210"), body="Hello!")

        assert envelope.body == "Hello!"
        assert envelope.attachment_url is None
        assert envelope.body_with_attachment() == "Hello!"

    def test_empty_body_raises_error(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            MessageEnvelope(recipient=normalize("9876543210"), body="")

    def test_whitespace_only_body_raises_error(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            MessageEnvelope(recipient=normalize("9876543210"), body="   ")

    def test_blank_attachment_raises_error(self):
        with pytest.raises(ValueError, match="Attachment"):
            MessageEnvelope(recipient=normalize("9876543210"), body="Hi", attachment_url=" ")

    def test_envelope_is_immutable(self):
        envelope = MessageEnvelope(recipient=normalize("9876543210"), body="Original")

        with pytest.raises(AttributeError):
            envelope.body = "Modified"


class TestFallbackLinkGenerator:
    def test_link_uses_digits_and_encodes_text(self):
        link = FallbackLinkGenerator().build_fallback_link(
            normalize("+91 98765-43210"),
            "Hi there!\nTotal: ₹10/-",
        )

        assert link == "https://wa.me/919876543210?text=Hi%20there%21%0ATotal%3A%20%E2%82%B910%2F-"

    def test_custom_base_url(self):
        link = FallbackLinkGenerator("https://chat.test/").build_fallback_link(normalize("9876543210"), "x")

        assert link == "https://chat.test/919876543210?text=x"


class TestDeliveryOutcome:
    def test_auth_failure_from_body_status(self):
        outcome = DeliveryOutcome(
            success=False,
            attempt_trace=(
                DeliveryAttemptResult("a", 200, {"status": "401"}, False),
                DeliveryAttemptResult("b", None, None, False, "ConnectError: refused"),
            ),
        )

        assert outcome.auth_failure_suspected is True
        assert outcome.attempts == 2

    def test_error_reason_mentions_last_error(self):
        outcome = DeliveryOutcome(
            success=False,
            attempt_trace=(DeliveryAttemptResult("a", None, None, False, "ConnectError: refused"),),
        )

        assert outcome.error_reason == "All 1 gateway configuration(s) failed; last error: ConnectError: refused"

    def test_success_has_no_error_reason(self):
        outcome = DeliveryOutcome(
            success=True,
            attempt_trace=(DeliveryAttemptResult("a", 200, {"id": 1}, True),),
            used_configuration="a",
        )

        assert outcome.error_reason is None
        assert outcome.raise_for_failure() is outcome

    def test_outcome_is_immutable(self):
        outcome = DeliveryOutcome(success=False)

        with pytest.raises(AttributeError):
            outcome.success = True
