"""
Default market snapshot provider.

Builds a MarketSnapshot for a symbol from the price feed's rolling tick
history. The orchestrator accepts any callable with the same signature, so a
presentation layer can supply its own analysis instead.
"""

from typing import Callable, Optional, Union

import structlog

from ..config.defaults import AnalysisParams
from ..data.models import MarketClass, MarketSnapshot, VolatilityLevel
from ..feed.price_feed import PriceFeed
from .indicators import calculate_rsi, classify_volatility, simple_moving_average

logger = structlog.get_logger(__name__)

SnapshotProvider = Callable[[Union[MarketClass, str], str, str], MarketSnapshot]


class FeedSnapshotProvider:
    """Derives oscillator and volatility class from recent feed ticks."""

    def __init__(self, feed: PriceFeed, params: Optional[AnalysisParams] = None):
        self.feed = feed
        self.params = params or AnalysisParams()

    def __call__(self, market_class: Union[MarketClass, str], symbol: str,
                 timeframe: str) -> MarketSnapshot:
        # Price, change and timestamp all come from this one read
        history = self.feed.history(symbol)
        instrument = self.feed.instruments.get(symbol)

        prices = [history[0].previous_price] + [tick.price for tick in history] if history else []
        oscillator = calculate_rsi(prices, self.params.rsi_period)
        if oscillator is None:
            oscillator = self.params.neutral_oscillator

        if symbol in self.feed.instruments:
            volatility = classify_volatility(
                [tick.change_percent for tick in history],
                instrument.volatility,
                self.params.low_volatility_ratio,
                self.params.high_volatility_ratio,
            )
        else:
            volatility = VolatilityLevel.MEDIUM

        if history:
            last_tick = history[-1]
            snapshot = MarketSnapshot(
                symbol=symbol,
                current_price=last_tick.price,
                oscillator=round(oscillator, 2),
                volatility=volatility,
                last_update=last_tick.timestamp,
                price_change=last_tick.change,
                price_change_percent=last_tick.change_percent,
                reference_price=simple_moving_average(prices[1:], self.params.reference_window),
            )
        else:
            snapshot = MarketSnapshot(
                symbol=symbol,
                current_price=self.feed.current_price(symbol),
                oscillator=round(oscillator, 2),
                volatility=volatility,
                last_update=self.feed.clock(),
            )

        logger.debug(
            "Built market snapshot",
            symbol=symbol,
            timeframe=timeframe,
            history_size=len(history),
            oscillator=snapshot.oscillator,
            volatility=volatility.value,
            reference_price=snapshot.reference_price
        )
        return snapshot
