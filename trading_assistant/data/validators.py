"""
Contract checks for data handed to the strategy catalog and signal processor.

Each check raises an InvalidInputError subclass instead of letting a
nonsensical value flow into a recommendation.
"""

import math
from datetime import datetime
from typing import Any, Optional

from ..errors import MalformedDataError, TemporalDataError
from .models import MarketSnapshot, PriceTick, Strategy, VolatilityLevel


def _require_finite(value: Any, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedDataError(
            f"{field} must be a finite number, got {value!r}",
            field=field,
            value=value
        )


def _require_positive(value: Any, field: str) -> None:
    _require_finite(value, field)
    if value <= 0:
        raise MalformedDataError(
            f"{field} must be strictly positive, got {value!r}",
            field=field,
            value=value
        )


def _require_timestamp(value: Any, field: str) -> None:
    if not isinstance(value, datetime):
        raise MalformedDataError(
            f"{field} must be a datetime, got {type(value).__name__}",
            field=field,
            value=value
        )
    if value.tzinfo is None or value.utcoffset() is None:
        raise MalformedDataError(
            f"{field} must be timezone-aware, got {value.isoformat()}",
            field=field,
            value=value
        )


def validate_snapshot(snapshot: MarketSnapshot) -> None:
    """
    Validate a market snapshot.

    Raises:
        MalformedDataError: If price, oscillator, volatility or timestamp is out of domain
    """
    _require_positive(snapshot.current_price, "current_price")
    _require_finite(snapshot.oscillator, "oscillator")
    if not 0.0 <= snapshot.oscillator <= 100.0:
        raise MalformedDataError(
            f"oscillator must be within [0, 100], got {snapshot.oscillator!r}",
            field="oscillator",
            value=snapshot.oscillator
        )
    if not isinstance(snapshot.volatility, VolatilityLevel):
        raise MalformedDataError(
            f"volatility must be a VolatilityLevel, got {snapshot.volatility!r}",
            field="volatility",
            value=snapshot.volatility
        )
    _require_finite(snapshot.price_change_percent, "price_change_percent")
    if snapshot.reference_price is not None:
        _require_positive(snapshot.reference_price, "reference_price")
    _require_timestamp(snapshot.last_update, "last_update")


def validate_strategy(strategy: Strategy) -> None:
    """
    Validate a strategy definition.

    Raises:
        MalformedDataError: If bands or baseline confidence are out of domain
    """
    _require_positive(strategy.buy_below, "buy_below")
    _require_positive(strategy.sell_above, "sell_above")
    if strategy.buy_below > strategy.sell_above:
        raise MalformedDataError(
            "buy_below must not exceed sell_above",
            field="buy_below",
            value=strategy.buy_below,
            context={"sell_above": strategy.sell_above}
        )
    _require_finite(strategy.baseline_confidence, "baseline_confidence")
    if not 0.0 <= strategy.baseline_confidence <= 100.0:
        raise MalformedDataError(
            f"baseline_confidence must be within [0, 100], got {strategy.baseline_confidence!r}",
            field="baseline_confidence",
            value=strategy.baseline_confidence
        )


def validate_tick(tick: PriceTick, symbol: Optional[str] = None,
                  previous_timestamp: Optional[datetime] = None) -> None:
    """
    Validate a price tick, optionally against its expected symbol and predecessor.

    Raises:
        MalformedDataError: If the price is not positive or the symbol does not match
        TemporalDataError: If the tick is older than previous_timestamp
    """
    if symbol is not None and tick.symbol != symbol:
        raise MalformedDataError(
            f"tick is for {tick.symbol}, expected {symbol}",
            field="symbol",
            value=tick.symbol
        )
    _require_positive(tick.price, "price")
    _require_finite(tick.change_percent, "change_percent")
    _require_timestamp(tick.timestamp, "timestamp")

    if previous_timestamp is not None and tick.timestamp < previous_timestamp:
        raise TemporalDataError(
            f"tick for {tick.symbol} at {tick.timestamp.isoformat()} precedes "
            f"{previous_timestamp.isoformat()}",
            timestamp=tick.timestamp,
            previous_timestamp=previous_timestamp,
            context={"symbol": tick.symbol}
        )
