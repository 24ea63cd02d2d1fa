"""Pytest configuration and shared fixtures."""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from trading_assistant.data.models import (
    Instrument,
    MarketClass,
    MarketSnapshot,
    RiskLevel,
    Strategy,
    VolatilityLevel,
)
from trading_assistant.feed.sources import TickSource


class SteppingClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime):
        self.current = start
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            self.current = self.current + timedelta(seconds=1)
            return self.current


class FixedStepSource(TickSource):
    """Moves every price by a fixed fraction per tick."""

    def __init__(self, fraction: float = 0.001):
        self.fraction = fraction

    def next_price(self, instrument: Instrument, current_price: float) -> float:
        return current_price * (1.0 + self.fraction)


@pytest.fixture
def base_time() -> datetime:
    """Reference timestamp for snapshots and ticks."""
    return datetime(2024, 1, 2, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(base_time: datetime) -> SteppingClock:
    """Deterministic clock strictly increasing across calls."""
    return SteppingClock(base_time)


@pytest.fixture
def rising_source() -> FixedStepSource:
    """Tick source whose prices only go up."""
    return FixedStepSource(0.001)


@pytest.fixture
def falling_source() -> FixedStepSource:
    """Tick source whose prices only go down."""
    return FixedStepSource(-0.001)


@pytest.fixture
def eurusd() -> Instrument:
    """EURUSD reference data."""
    return Instrument("EURUSD", MarketClass.CURRENCY, 1.08500, 0.0001, 0.00001)


@pytest.fixture
def sample_snapshot(base_time: datetime) -> MarketSnapshot:
    """Oversold, calm AAPL snapshot with a healthy upward move."""
    return MarketSnapshot(
        symbol="AAPL",
        current_price=195.0,
        oscillator=25.0,
        volatility=VolatilityLevel.LOW,
        last_update=base_time,
        price_change=0.39,
        price_change_percent=0.2,
    )


@pytest.fixture
def sample_strategy() -> Strategy:
    """Strategy whose buy band sits above the sample snapshot price."""
    return Strategy(
        strategy_id="mean-reversion-1h",
        name="Mean Reversion",
        timeframe="1h",
        risk_level=RiskLevel.MEDIUM,
        buy_below=195.5,
        sell_above=197.0,
        baseline_confidence=80,
    )
