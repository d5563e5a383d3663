from dataclasses import dataclass, field
from enum import Enum


class RecipientFormat(str, Enum):
    """Which normalized representation a gateway configuration expects."""

    WITH_COUNTRY_CODE = "with_country_code"
    WITH_PLUS = "with_plus"
    DIGITS_ONLY = "digits_only"


@dataclass(frozen=True)
class RecipientNumber:
    """
    Normalized recipient phone number.

    `with_country_code` and `digits_only` hold the same canonical digit
    string; re-normalizing either of them yields an equal value. The raw
    input is kept for logging only and does not take part in equality.
    """

    with_country_code: str
    raw: str = field(default="", compare=False)

    @property
    def digits_only(self) -> str:
        return self.with_country_code

    @property
    def with_plus(self) -> str:
        return f"+{self.with_country_code}"

    def formatted(self, fmt: RecipientFormat) -> str:
        """Return the representation named by `fmt`."""
        match fmt:
            case RecipientFormat.WITH_PLUS:
                return self.with_plus
            case RecipientFormat.DIGITS_ONLY:
                return self.digits_only
            case _:
                return self.with_country_code

    def __str__(self) -> str:
        return self.with_plus
