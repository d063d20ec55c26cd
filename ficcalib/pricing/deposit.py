"""
Discounting pricers for term deposits and Ibor fixing deposits.
"""
from ficcalib.instruments.deposit import IborFixingDepositTrade, TermDepositTrade

from .base import TradePricer
from .provider import ImmutableRatesProvider
from .sensitivity import PointSensitivities


class DiscountingTermDepositPricer(TradePricer):
    """Term deposit priced off the discount curve of its currency."""

    def present_value(self, trade: TermDepositTrade, provider: ImmutableRatesProvider) -> float:
        dfs = provider.discount_factors(trade.currency)
        notional = trade.buy_sell.normalize(trade.notional)
        pv = notional * (1.0 + trade.year_fraction * trade.rate) * dfs.discount_factor(trade.end_date)
        if trade.start_date >= provider.valuation_date:
            pv -= notional * dfs.discount_factor(trade.start_date)
        return pv

    def present_value_sensitivity(
        self, trade: TermDepositTrade, provider: ImmutableRatesProvider
    ) -> PointSensitivities:
        dfs = provider.discount_factors(trade.currency)
        notional = trade.buy_sell.normalize(trade.notional)
        points = PointSensitivities.of(
            dfs.curve_name, trade.end_date, notional * (1.0 + trade.year_fraction * trade.rate)
        )
        if trade.start_date >= provider.valuation_date:
            points = points.combined_with(
                PointSensitivities.of(dfs.curve_name, trade.start_date, -notional)
            )
        return points

    def par_rate(self, trade: TermDepositTrade, provider: ImmutableRatesProvider) -> float:
        dfs = provider.discount_factors(trade.currency)
        df_start = dfs.discount_factor(trade.start_date)
        df_end = dfs.discount_factor(trade.end_date)
        return (df_start / df_end - 1.0) / trade.year_fraction

    def par_spread(self, trade: TermDepositTrade, provider: ImmutableRatesProvider) -> float:
        return self.par_rate(trade, provider) - trade.rate

    def par_spread_sensitivity(
        self, trade: TermDepositTrade, provider: ImmutableRatesProvider
    ) -> PointSensitivities:
        dfs = provider.discount_factors(trade.currency)
        df_start = dfs.discount_factor(trade.start_date)
        df_end = dfs.discount_factor(trade.end_date)
        yf = trade.year_fraction
        return PointSensitivities.of(
            dfs.curve_name, trade.start_date, 1.0 / (df_end * yf)
        ).combined_with(
            PointSensitivities.of(dfs.curve_name, trade.end_date, -df_start / (df_end * df_end * yf))
        )


class DiscountingIborFixingDepositPricer(TradePricer):
    """Ibor fixing deposit: fixed rate against the index forward, paid at the end."""

    def present_value(self, trade: IborFixingDepositTrade, provider: ImmutableRatesProvider) -> float:
        dfs = provider.discount_factors(trade.currency)
        notional = trade.buy_sell.normalize(trade.notional)
        forward = trade.rate_computation.rate(provider)
        return (
            notional * trade.year_fraction * (trade.fixed_rate - forward)
            * dfs.discount_factor(trade.end_date)
        )

    def present_value_sensitivity(
        self, trade: IborFixingDepositTrade, provider: ImmutableRatesProvider
    ) -> PointSensitivities:
        dfs = provider.discount_factors(trade.currency)
        notional = trade.buy_sell.normalize(trade.notional)
        forward = trade.rate_computation.rate(provider)
        df_end = dfs.discount_factor(trade.end_date)
        discounting = PointSensitivities.of(
            dfs.curve_name,
            trade.end_date,
            notional * trade.year_fraction * (trade.fixed_rate - forward),
        )
        forwarding = trade.rate_computation.rate_sensitivity(provider).multiplied_by(
            -notional * trade.year_fraction * df_end
        )
        return discounting.combined_with(forwarding)

    def par_rate(self, trade: IborFixingDepositTrade, provider: ImmutableRatesProvider) -> float:
        return trade.rate_computation.rate(provider)

    def par_spread(self, trade: IborFixingDepositTrade, provider: ImmutableRatesProvider) -> float:
        return self.par_rate(trade, provider) - trade.fixed_rate

    def par_spread_sensitivity(
        self, trade: IborFixingDepositTrade, provider: ImmutableRatesProvider
    ) -> PointSensitivities:
        return trade.rate_computation.rate_sensitivity(provider)
