import re

from ..domain.value_objects import RecipientNumber

DEFAULT_COUNTRY_CODE = "91"
NATIONAL_NUMBER_LENGTH = 10

_NON_DIGITS = re.compile(r"\D")


class PhoneNormalizer:
    """
    Canonicalizes recipient numbers for the gateway.

    Strips every non-digit character and prefixes the default country code
    to bare 10-digit national numbers. Numbers are not validated beyond
    that; the gateway rejects anything malformed.
    """

    def __init__(self, default_country_code: str = DEFAULT_COUNTRY_CODE) -> None:
        self._country_code = _NON_DIGITS.sub("", default_country_code)

    def normalize(self, raw: str) -> RecipientNumber:
        digits = _NON_DIGITS.sub("", raw or "")
        if len(digits) == NATIONAL_NUMBER_LENGTH and not digits.startswith(self._country_code):
            digits = f"{self._country_code}{digits}"
        return RecipientNumber(with_country_code=digits, raw=raw)


_default_normalizer = PhoneNormalizer()


def normalize(raw: str) -> RecipientNumber:
    """Normalize with the default country code."""
    return _default_normalizer.normalize(raw)
