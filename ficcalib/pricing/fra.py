"""
Discounting pricer for FRAs with ISDA settlement.

The settlement amount paid at the start of the period is
notional * yf * (F - K) / (1 + yf * F).
"""
from ficcalib.instruments.fra import FraTrade

from .base import TradePricer
from .provider import ImmutableRatesProvider
from .sensitivity import PointSensitivities


class DiscountingFraPricer(TradePricer):

    def present_value(self, trade: FraTrade, provider: ImmutableRatesProvider) -> float:
        if trade.payment_date < provider.valuation_date:
            return 0.0
        dfs = provider.discount_factors(trade.currency)
        return self._settlement_amount(trade, provider) * dfs.discount_factor(trade.payment_date)

    def present_value_sensitivity(self, trade: FraTrade, provider: ImmutableRatesProvider) -> PointSensitivities:
        if trade.payment_date < provider.valuation_date:
            return PointSensitivities.empty()
        dfs = provider.discount_factors(trade.currency)
        notional = trade.buy_sell.normalize(trade.notional)
        yf = trade.year_fraction
        forward = trade.rate_computation.rate(provider)
        df_payment = dfs.discount_factor(trade.payment_date)
        discounting = PointSensitivities.of(
            dfs.curve_name, trade.payment_date, self._settlement_amount(trade, provider)
        )
        # d/dF of (F - K) / (1 + yf F)
        amount_derivative = (
            notional * yf * (1.0 + yf * trade.fixed_rate) / (1.0 + yf * forward) ** 2
        )
        forwarding = trade.rate_computation.rate_sensitivity(provider).multiplied_by(
            amount_derivative * df_payment
        )
        return discounting.combined_with(forwarding)

    def par_rate(self, trade: FraTrade, provider: ImmutableRatesProvider) -> float:
        return trade.rate_computation.rate(provider)

    def par_spread(self, trade: FraTrade, provider: ImmutableRatesProvider) -> float:
        return self.par_rate(trade, provider) - trade.fixed_rate

    def par_spread_sensitivity(self, trade: FraTrade, provider: ImmutableRatesProvider) -> PointSensitivities:
        return trade.rate_computation.rate_sensitivity(provider)

    def _settlement_amount(self, trade: FraTrade, provider: ImmutableRatesProvider) -> float:
        notional = trade.buy_sell.normalize(trade.notional)
        yf = trade.year_fraction
        forward = trade.rate_computation.rate(provider)
        return notional * yf * (forward - trade.fixed_rate) / (1.0 + yf * forward)
