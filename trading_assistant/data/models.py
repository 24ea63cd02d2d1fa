"""
Canonical data models for the simulated feed and signal scoring.

This module defines immutable data structures for instruments, ticks,
snapshots, strategies and the recommendations derived from them.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, Union


class MarketClass(str, Enum):
    """Broad market an instrument trades in."""
    CURRENCY = "currency"
    CRYPTO = "crypto"
    STOCK = "stock"
    INDEX = "index"
    COMMODITY = "commodity"

    @classmethod
    def coerce(cls, value: Union["MarketClass", str, None]) -> Optional["MarketClass"]:
        """Convert a raw value to a market class, None when unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


class VolatilityLevel(str, Enum):
    """Volatility classification of a snapshot."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RiskLevel(str, Enum):
    """Risk level of a strategy."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SignalAction(str, Enum):
    """Recommended trading action."""
    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    WAIT = "WAIT"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"


class ConfidenceTier(str, Enum):
    """Human-facing grade of a confidence score."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


@dataclass(frozen=True)
class Instrument:
    """Immutable reference data for a simulated instrument."""
    symbol: str
    market_class: Optional[MarketClass]
    base_price: float        # Strictly positive seed price
    volatility: float        # Fractional move coefficient per tick
    tick_size: float         # Price quantization step


@dataclass(frozen=True)
class PriceTick:
    """One simulated price update."""
    symbol: str
    price: float             # Multiple of the instrument tick size
    timestamp: datetime      # UTC wall-clock time of the step
    change: float            # price - previous price
    change_percent: float    # change / previous price * 100

    @property
    def previous_price(self) -> float:
        """Price before this tick."""
        return self.price - self.change


@dataclass(frozen=True)
class PriceQuote:
    """Point-in-time quote for a symbol, outside the subscription flow."""
    symbol: str
    price: float
    timestamp: datetime
    source: str = "simulated"


@dataclass(frozen=True)
class MarketSnapshot:
    """Technical view of an instrument at a point in time."""
    symbol: str
    current_price: float
    oscillator: float                    # RSI-like, [0, 100]
    volatility: VolatilityLevel
    last_update: datetime
    price_change: float = 0.0
    price_change_percent: float = 0.0
    reference_price: Optional[float] = None  # Band anchor; current_price when None

    def with_tick(self, tick: PriceTick) -> "MarketSnapshot":
        """Create a snapshot reflecting the price carried by a tick; the band anchor is kept."""
        return replace(
            self,
            current_price=tick.price,
            price_change=tick.change,
            price_change_percent=tick.change_percent,
            last_update=tick.timestamp,
        )


@dataclass(frozen=True)
class Strategy:
    """Entry policy for a market, symbol and timeframe."""
    strategy_id: str
    name: str
    timeframe: str
    risk_level: RiskLevel
    buy_below: float
    sell_above: float
    baseline_confidence: float           # [0, 100]


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-factor contributions to the composite confidence."""
    momentum_zone: int = 0
    volatility: int = 0
    magnitude: int = 0
    strategy: int = 0

    @property
    def total(self) -> int:
        """Unclamped sum of the factor scores."""
        return self.momentum_zone + self.volatility + self.magnitude + self.strategy


@dataclass(frozen=True)
class ProcessedSignal:
    """Graded recommendation produced by one recomputation."""
    symbol: str
    action: SignalAction
    confidence: int
    tier: ConfidenceTier
    reason_code: str
    rationale: str
    eta_minutes: int
    eta_text: str
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    def to_dict(self) -> dict[str, Any]:
        """Flatten for rendering and logging."""
        return {
            "symbol": self.symbol,
            "action": self.action.value,
            "confidence": self.confidence,
            "tier": self.tier.value,
            "reason_code": self.reason_code,
            "rationale": self.rationale,
            "eta_minutes": self.eta_minutes,
            "eta_text": self.eta_text,
            "breakdown": {
                "momentum_zone": self.breakdown.momentum_zone,
                "volatility": self.breakdown.volatility,
                "magnitude": self.breakdown.magnitude,
                "strategy": self.breakdown.strategy,
            },
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one recomputation produced, as published to listeners."""
    snapshot: MarketSnapshot
    strategy: Strategy
    signal: ProcessedSignal
    trigger: str
    timestamp: datetime


TickCallback = Callable[[PriceTick], None]


@dataclass(frozen=True)
class Subscription:
    """Handle for one registration in the feed's subscriber registry."""
    symbol: str
    subscription_id: int
    callback: TickCallback = field(compare=False)
