"""
Identifiers for market quotes.
"""

from dataclasses import dataclass

DEFAULT_SCHEME = "CALIBRATION"


@dataclass(frozen=True)
class QuoteKey:
    """Identifier of a single market quote, e.g. QuoteKey("IRS5Y")."""

    value: str
    scheme: str = DEFAULT_SCHEME

    def __post_init__(self):
        if not self.value:
            raise ValueError("Quote key value must not be empty")

    @classmethod
    def of(cls, value: str, scheme: str = DEFAULT_SCHEME) -> "QuoteKey":
        return cls(value, scheme)

    def __str__(self) -> str:
        return f"{self.scheme}~{self.value}"
