"""
Strategy selection policy.

Maps (market class, timeframe, snapshot volatility) to entry bands, a risk
level and a baseline confidence. Tighter bands and higher confidence go to
calm markets on long timeframes; wider bands and lower confidence go to
volatile markets on short timeframes.
"""

from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from enum import Enum
from typing import Optional, Union

from ..config.defaults import TimeframeParams
from ..data.instruments import InstrumentRegistry
from ..data.models import MarketClass, MarketSnapshot, RiskLevel, Strategy, VolatilityLevel
from ..data.validators import validate_snapshot


class Horizon(str, Enum):
    """Holding-duration bucket of a timeframe."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


# Entry band half-width, percent of the band anchor price
BAND_PCT = {
    (VolatilityLevel.LOW, Horizon.SHORT): 0.20,
    (VolatilityLevel.LOW, Horizon.MEDIUM): 0.15,
    (VolatilityLevel.LOW, Horizon.LONG): 0.10,
    (VolatilityLevel.MEDIUM, Horizon.SHORT): 0.40,
    (VolatilityLevel.MEDIUM, Horizon.MEDIUM): 0.30,
    (VolatilityLevel.MEDIUM, Horizon.LONG): 0.20,
    (VolatilityLevel.HIGH, Horizon.SHORT): 0.80,
    (VolatilityLevel.HIGH, Horizon.MEDIUM): 0.60,
    (VolatilityLevel.HIGH, Horizon.LONG): 0.40,
}

BASELINE_CONFIDENCE = {
    (VolatilityLevel.LOW, Horizon.SHORT): 72,
    (VolatilityLevel.LOW, Horizon.MEDIUM): 80,
    (VolatilityLevel.LOW, Horizon.LONG): 86,
    (VolatilityLevel.MEDIUM, Horizon.SHORT): 60,
    (VolatilityLevel.MEDIUM, Horizon.MEDIUM): 68,
    (VolatilityLevel.MEDIUM, Horizon.LONG): 75,
    (VolatilityLevel.HIGH, Horizon.SHORT): 45,
    (VolatilityLevel.HIGH, Horizon.MEDIUM): 52,
    (VolatilityLevel.HIGH, Horizon.LONG): 58,
}

STRATEGY_NAMES = {
    (VolatilityLevel.LOW, Horizon.SHORT): ("range-scalper", "Range Scalper"),
    (VolatilityLevel.LOW, Horizon.MEDIUM): ("mean-reversion", "Mean Reversion"),
    (VolatilityLevel.LOW, Horizon.LONG): ("trend-accumulation", "Trend Accumulation"),
    (VolatilityLevel.MEDIUM, Horizon.SHORT): ("momentum-scalper", "Momentum Scalper"),
    (VolatilityLevel.MEDIUM, Horizon.MEDIUM): ("swing-momentum", "Swing Momentum"),
    (VolatilityLevel.MEDIUM, Horizon.LONG): ("position-trend", "Position Trend"),
    (VolatilityLevel.HIGH, Horizon.SHORT): ("volatility-breakout", "Volatility Breakout"),
    (VolatilityLevel.HIGH, Horizon.MEDIUM): ("breakout-pullback", "Breakout Pullback"),
    (VolatilityLevel.HIGH, Horizon.LONG): ("volatility-swing", "Volatility Swing"),
}

MARKET_BAND_MULTIPLIER = {
    MarketClass.CURRENCY: 0.5,
    MarketClass.CRYPTO: 2.0,
    MarketClass.STOCK: 1.0,
    MarketClass.INDEX: 0.8,
    MarketClass.COMMODITY: 1.2,
}

_RISK_BY_VOLATILITY = {
    VolatilityLevel.LOW: RiskLevel.LOW,
    VolatilityLevel.MEDIUM: RiskLevel.MEDIUM,
    VolatilityLevel.HIGH: RiskLevel.HIGH,
}

_RISK_ORDER = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH]


def _to_tick(price: float, tick_size: float, rounding: str) -> float:
    tick = Decimal(str(tick_size))
    steps = max((Decimal(repr(price)) / tick).to_integral_value(rounding=rounding), Decimal(1))
    return float(steps * tick)


class StrategyCatalog:
    """Selects a strategy definition for current conditions."""

    def __init__(self, instruments: Optional[InstrumentRegistry] = None,
                 timeframes: Optional[TimeframeParams] = None):
        self.instruments = instruments or InstrumentRegistry()
        self.timeframes = timeframes or TimeframeParams()

    def horizon_for(self, timeframe: str) -> Horizon:
        """Bucket a timeframe by its characteristic holding duration."""
        duration = self.timeframes.duration_for(timeframe)
        if duration < self.timeframes.short_horizon_max:
            return Horizon.SHORT
        if duration < self.timeframes.medium_horizon_max:
            return Horizon.MEDIUM
        return Horizon.LONG

    def risk_for(self, volatility: VolatilityLevel, horizon: Horizon) -> RiskLevel:
        """Risk follows volatility, one step higher on short horizons."""
        risk = _RISK_BY_VOLATILITY[volatility]
        if horizon == Horizon.SHORT:
            index = min(_RISK_ORDER.index(risk) + 1, len(_RISK_ORDER) - 1)
            risk = _RISK_ORDER[index]
        return risk

    def select(self, market_class: Union[MarketClass, str, None], symbol: str,
               timeframe: str, snapshot: MarketSnapshot) -> Strategy:
        """
        Select the strategy for a market, symbol and timeframe.

        Args:
            market_class: Market of the symbol; unknown values use a neutral band width
            symbol: Instrument symbol; unknown symbols use the fallback tick size
            timeframe: Timeframe key; unknown keys use the default duration
            snapshot: Current market snapshot

        Returns:
            Strategy with bands placed around the snapshot reference price

        Raises:
            MalformedDataError: If the snapshot is out of domain
        """
        validate_snapshot(snapshot)

        horizon = self.horizon_for(timeframe)
        key = (snapshot.volatility, horizon)
        multiplier = MARKET_BAND_MULTIPLIER.get(MarketClass.coerce(market_class), 1.0)
        band_fraction = BAND_PCT[key] * multiplier / 100.0

        tick_size = self.instruments.get(symbol).tick_size
        anchor = snapshot.reference_price or snapshot.current_price
        strategy_id, name = STRATEGY_NAMES[key]

        return Strategy(
            strategy_id=f"{strategy_id}-{timeframe}",
            name=name,
            timeframe=timeframe,
            risk_level=self.risk_for(snapshot.volatility, horizon),
            buy_below=_to_tick(anchor * (1.0 - band_fraction), tick_size, ROUND_FLOOR),
            sell_above=_to_tick(anchor * (1.0 + band_fraction), tick_size, ROUND_CEILING),
            baseline_confidence=BASELINE_CONFIDENCE[key],
        )
