from urllib.parse import quote

from ..domain.value_objects import RecipientNumber

DEFAULT_FALLBACK_BASE_URL = "https://wa.me"


class FallbackLinkGenerator:
    """Builds click-to-chat links for manually sending a message that failed."""

    def __init__(self, base_url: str = DEFAULT_FALLBACK_BASE_URL) -> None:
        self._base_url = base_url.rstrip("/")

    def build_fallback_link(self, recipient: RecipientNumber, body: str) -> str:
        # safe="" so "/", "&" and "?" in the body are escaped too
        return f"{self._base_url}/{recipient.digits_only}?text={quote(body, safe='')}"
