"""Discounting pricer for fixed-float swaps.

Both legs are discounted on the curve of the swap currency. Floating coupons
are projected through each period's rate observation, so Ibor and overnight
legs share the same code path.
"""
from typing import Tuple

from ficcalib.instruments.swap import SwapTrade

from .base import TradePricer
from .provider import ImmutableRatesProvider
from .sensitivity import PointSensitivities


class DiscountingSwapPricer(TradePricer):
    """Pricer for ``SwapTrade``; BUY pays fixed."""

    def present_value(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> float:
        """Present value of the swap.

        Args:
            trade: Swap to price
            provider: Curves for forwarding and discounting

        Returns:
            Floating leg PV minus fixed leg PV for a BUY (payer) swap, in the
            swap currency
        """
        notional = trade.buy_sell.normalize(trade.notional)
        annuity = self._annuity(trade, provider)
        floating = self._floating_value(trade, provider)
        return notional * (floating - trade.fixed_rate * annuity)

    def present_value_sensitivity(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> PointSensitivities:
        notional = trade.buy_sell.normalize(trade.notional)
        annuity_points = self._annuity_sensitivity(trade, provider)
        floating_points = self._floating_value_sensitivity(trade, provider)
        return floating_points.combined_with(
            annuity_points.multiplied_by(-trade.fixed_rate)
        ).multiplied_by(notional)

    def annuity(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> float:
        """PV of the fixed leg per unit of fixed rate, for the full notional."""
        return abs(trade.notional) * self._annuity(trade, provider)

    def par_rate(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> float:
        annuity = self._annuity(trade, provider)
        if annuity == 0.0:
            raise ValueError("Swap has no fixed payments after the valuation date")
        return self._floating_value(trade, provider) / annuity

    def par_spread(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> float:
        return self.par_rate(trade, provider) - trade.fixed_rate

    def par_spread_sensitivity(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> PointSensitivities:
        annuity = self._annuity(trade, provider)
        floating = self._floating_value(trade, provider)
        # quotient rule on floating / annuity
        return self._floating_value_sensitivity(trade, provider).multiplied_by(
            1.0 / annuity
        ).combined_with(
            self._annuity_sensitivity(trade, provider).multiplied_by(-floating / annuity ** 2)
        )

    # ------------------------------------------------------------------
    # Leg values per unit notional
    # ------------------------------------------------------------------
    def _live_fixed_periods(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> Tuple:
        return tuple(p for p in trade.fixed_periods if p.payment_date >= provider.valuation_date)

    def _live_floating_periods(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> Tuple:
        return tuple(p for p in trade.floating_periods if p.payment_date >= provider.valuation_date)

    def _annuity(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> float:
        dfs = provider.discount_factors(trade.currency)
        return sum(
            p.year_fraction * dfs.discount_factor(p.payment_date)
            for p in self._live_fixed_periods(trade, provider)
        )

    def _annuity_sensitivity(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> PointSensitivities:
        dfs = provider.discount_factors(trade.currency)
        points = PointSensitivities.empty()
        for p in self._live_fixed_periods(trade, provider):
            points = points.combined_with(
                PointSensitivities.of(dfs.curve_name, p.payment_date, p.year_fraction)
            )
        return points

    def _floating_value(self, trade: SwapTrade, provider: ImmutableRatesProvider) -> float:
        dfs = provider.discount_factors(trade.currency)
        return sum(
            p.year_fraction * (p.rate_computation.rate(provider) + p.spread)
            * dfs.discount_factor(p.payment_date)
            for p in self._live_floating_periods(trade, provider)
        )

    def _floating_value_sensitivity(
        self, trade: SwapTrade, provider: ImmutableRatesProvider
    ) -> PointSensitivities:
        dfs = provider.discount_factors(trade.currency)
        points = PointSensitivities.empty()
        for p in self._live_floating_periods(trade, provider):
            rate = p.rate_computation.rate(provider) + p.spread
            df = dfs.discount_factor(p.payment_date)
            points = points.combined_with(
                PointSensitivities.of(dfs.curve_name, p.payment_date, p.year_fraction * rate)
            ).combined_with(
                p.rate_computation.rate_sensitivity(provider).multiplied_by(p.year_fraction * df)
            )
        return points
