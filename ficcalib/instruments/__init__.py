"""
Calibration instruments: trades, the conventions that build them and the
templates used by curve nodes.
"""

from .base import Trade, TradeKind
from .deposit import (
    EUR_DEPOSIT_T2,
    USD_DEPOSIT_T2,
    IborFixingDepositTemplate,
    IborFixingDepositTrade,
    TermDepositConvention,
    TermDepositTemplate,
    TermDepositTrade,
)
from .fra import FraTemplate, FraTrade
from .rates import IborRateComputation, OvernightCompoundedRateComputation
from .swap import (
    EUR_FIXED_1Y_ESTR_OIS,
    EUR_FIXED_1Y_EURIBOR_3M,
    EUR_FIXED_1Y_EURIBOR_6M,
    USD_FIXED_1Y_FED_FUND_OIS,
    USD_FIXED_6M_LIBOR_3M,
    FixedIborSwapConvention,
    FixedIborSwapTemplate,
    FixedLegConvention,
    FixedOvernightSwapConvention,
    FixedOvernightSwapTemplate,
    FloatingPeriod,
    SwapTrade,
)

__all__ = [
    # Base
    "Trade",
    "TradeKind",
    # Deposits
    "TermDepositConvention",
    "TermDepositTemplate",
    "TermDepositTrade",
    "IborFixingDepositTemplate",
    "IborFixingDepositTrade",
    "USD_DEPOSIT_T2",
    "EUR_DEPOSIT_T2",
    # FRA
    "FraTemplate",
    "FraTrade",
    # Swaps
    "FixedLegConvention",
    "FixedIborSwapConvention",
    "FixedOvernightSwapConvention",
    "FixedIborSwapTemplate",
    "FixedOvernightSwapTemplate",
    "FloatingPeriod",
    "SwapTrade",
    "USD_FIXED_6M_LIBOR_3M",
    "EUR_FIXED_1Y_EURIBOR_3M",
    "EUR_FIXED_1Y_EURIBOR_6M",
    "USD_FIXED_1Y_FED_FUND_OIS",
    "EUR_FIXED_1Y_ESTR_OIS",
    # Rate observations
    "IborRateComputation",
    "OvernightCompoundedRateComputation",
]
