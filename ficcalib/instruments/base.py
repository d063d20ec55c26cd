"""
Common base for calibration trades.
"""

from enum import Enum
from typing import ClassVar, Tuple


class TradeKind(Enum):
    """Closed set of trade kinds a calibration measure can be registered for."""

    TERM_DEPOSIT = "TERM_DEPOSIT"
    IBOR_FIXING_DEPOSIT = "IBOR_FIXING_DEPOSIT"
    FRA = "FRA"
    SWAP = "SWAP"


class Trade:
    """A priceable trade produced by a curve node.

    Subclasses are frozen dataclasses exposing ``currency`` and ``end_date``
    and tagging themselves with ``kind``; measures are looked up by that tag.
    """

    kind: ClassVar[TradeKind]

    @property
    def index_names(self) -> Tuple[str, ...]:
        """Names of the indices forecast when pricing the trade."""
        index = getattr(self, "index", None)
        return () if index is None else (index.name,)
