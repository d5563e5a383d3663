import pytest

from notifier.gateway import ClassificationRule, ResponseClassifier, classify


class TestResponseClassifier:
    def test_explicit_success_flag(self):
        assert classify(200, {"success": True}) is True

    def test_status_gate_dominates(self):
        assert classify(401, {"success": True}) is False
        assert classify(500, {"message_id": "abc"}) is False

    def test_rejection_status_in_body(self):
        assert classify(200, {"status": 401}) is False
        assert classify(200, {"status": 403, "message": "Forbidden"}) is False

    @pytest.mark.parametrize("body", [None, "", "   ", {}, []])
    def test_empty_body(self, body):
        assert classify(200, body) is False

    @pytest.mark.parametrize("status", ["success", "sent"])
    def test_status_words(self, status):
        assert classify(200, {"status": status}) is True

    @pytest.mark.parametrize("field", ["message_id", "messageId", "id"])
    def test_message_identifier(self, field):
        assert classify(200, {field: "wamid.123"}) is True

    def test_falsy_identifier_ignored(self):
        assert classify(200, {"id": 0, "status": 400}) is False

    @pytest.mark.parametrize("status", [200, "200"])
    def test_status_200_in_body(self, status):
        assert classify(200, {"status": status}) is True

    def test_success_flag_must_be_boolean_true(self):
        assert classify(200, {"success": "true"}) is False
        assert classify(200, {"success": 1}) is False

    def test_keyword_match_case_insensitive(self):
        assert classify(200, {"message": "Message Queued"}) is True
        assert classify(200, {"message": "DELIVERED to handset"}) is True

    def test_keyword_miss(self):
        assert classify(200, {"message": "Invalid Parameters!"}) is False

    def test_keyword_beats_rejection_status(self):
        # Rule order: keyword inference runs before the explicit error-code check
        assert classify(200, {"status": 401, "message": "accepted"}) is True

    def test_plain_text_body_denied(self):
        assert classify(200, "OK sent") is False

    def test_boolean_status_is_not_numeric(self):
        assert classify(200, {"status": True}) is False

    def test_explain_names_deciding_rule(self):
        classifier = ResponseClassifier()

        assert classifier.explain(404, {"success": True}) == "http_status_not_200"
        assert classifier.explain(200, {"messageId": "x"}) == "message_identifier"
        assert classifier.explain(200, {"status": 400}) == "rejection_status"
        assert classifier.explain(200, {"foo": "bar"}) == "default_deny"

    def test_custom_rules(self):
        classifier = ResponseClassifier(
            rules=(ClassificationRule("always", True, lambda status, body: True),)
        )

        assert classifier.classify(500, None) is True

    def test_empty_rule_list_rejected(self):
        with pytest.raises(ValueError):
            ResponseClassifier(rules=())
