"""
Heuristic success classification for gateway responses.

The gateway has no documented response contract, so success is decided
by an ordered list of rules over the parsed body. The first rule that
matches decides the verdict. Explicit flags come before inferred keyword
matches, and explicit error codes come before the default deny.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

SUCCESS_STATUS_WORDS = frozenset({"success", "sent"})
MESSAGE_ID_FIELDS = ("message_id", "messageId", "id")
SUCCESS_KEYWORDS = ("sent", "queued", "delivered", "accepted", "success")
REJECTION_STATUSES = frozenset({400, 401, 403})


@dataclass(frozen=True)
class ClassificationRule:
    """A named predicate with the verdict it yields when it matches."""

    name: str
    verdict: bool
    matches: Callable[[int, Any], bool]


def _status_of(body: Any) -> Any:
    if isinstance(body, Mapping):
        return body.get("status")
    return None


def _is_number(value: Any, *targets: int) -> bool:
    # bool is an int subclass; True must not read as status 1
    return isinstance(value, int) and not isinstance(value, bool) and value in targets


def _non_200_status(http_status: int, body: Any) -> bool:
    return http_status != 200


def _empty_body(http_status: int, body: Any) -> bool:
    if body is None:
        return True
    if isinstance(body, (str, bytes)):
        return not body.strip()
    if isinstance(body, (Mapping, list, tuple)):
        return len(body) == 0
    return False


def _explicit_success_flag(http_status: int, body: Any) -> bool:
    if not isinstance(body, Mapping):
        return False
    if body.get("success") is True:
        return True
    status = body.get("status")
    return isinstance(status, str) and status in SUCCESS_STATUS_WORDS


def _message_identifier(http_status: int, body: Any) -> bool:
    if not isinstance(body, Mapping):
        return False
    return any(body.get(key) for key in MESSAGE_ID_FIELDS)


def _status_200(http_status: int, body: Any) -> bool:
    status = _status_of(body)
    return _is_number(status, 200) or status == "200"


def _success_keyword(http_status: int, body: Any) -> bool:
    if not isinstance(body, Mapping):
        return False
    message = body.get("message")
    if not isinstance(message, str):
        return False
    lowered = message.lower()
    return any(keyword in lowered for keyword in SUCCESS_KEYWORDS)


def _rejection_status(http_status: int, body: Any) -> bool:
    status = _status_of(body)
    if _is_number(status, *REJECTION_STATUSES):
        return True
    return isinstance(status, str) and status in {str(code) for code in REJECTION_STATUSES}


def _default(http_status: int, body: Any) -> bool:
    return True


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("http_status_not_200", False, _non_200_status),
    ClassificationRule("empty_body", False, _empty_body),
    ClassificationRule("explicit_success_flag", True, _explicit_success_flag),
    ClassificationRule("message_identifier", True, _message_identifier),
    ClassificationRule("status_200", True, _status_200),
    ClassificationRule("success_keyword", True, _success_keyword),
    ClassificationRule("rejection_status", False, _rejection_status),
    ClassificationRule("default_deny", False, _default),
)


class ResponseClassifier:
    """Decides whether a raw gateway response means the message was accepted."""

    def __init__(self, rules: tuple[ClassificationRule, ...] = DEFAULT_RULES) -> None:
        if not rules:
            raise ValueError("At least one classification rule is required")
        self._rules = rules

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def match(self, http_status: int, body: Any) -> ClassificationRule | None:
        """Return the first rule matching the response."""
        for rule in self._rules:
            if rule.matches(http_status, body):
                return rule
        return None

    def classify(self, http_status: int, body: Any) -> bool:
        rule = self.match(http_status, body)
        return rule.verdict if rule else False

    def explain(self, http_status: int, body: Any) -> str:
        """Name of the rule that decided the verdict (for diagnostics)."""
        rule = self.match(http_status, body)
        return rule.name if rule else "no_rule_matched"


_default_classifier = ResponseClassifier()


def classify(http_status: int, body: Any) -> bool:
    """Classify with the default rule list."""
    return _default_classifier.classify(http_status, body)
