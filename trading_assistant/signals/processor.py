"""
Composite signal scoring.

Combines a market snapshot, the selected strategy and the latest tick into a
bounded confidence score, a discrete action and a rationale. Processing is a
pure function of its inputs: no state is kept between calls and nothing is
logged or written here.
"""

import math
from typing import Optional

from ..config.defaults import EtaParams, ScoringParams, TimeframeParams
from ..data.models import (
    ConfidenceTier,
    MarketSnapshot,
    PriceTick,
    ProcessedSignal,
    RiskLevel,
    ScoreBreakdown,
    SignalAction,
    Strategy,
    VolatilityLevel,
)
from ..data.validators import validate_snapshot, validate_strategy, validate_tick
from ..errors import MalformedDataError
from ..utils.time import format_duration_minutes


class SignalProcessor:
    """Grades a strategy against the current snapshot and tick."""

    def __init__(self, scoring: Optional[ScoringParams] = None,
                 timeframes: Optional[TimeframeParams] = None,
                 eta: Optional[EtaParams] = None):
        self.scoring = scoring or ScoringParams()
        self.timeframes = timeframes or TimeframeParams()
        self.eta = eta or EtaParams()

    def process(self, symbol: str, snapshot: MarketSnapshot, strategy: Strategy,
                latest_tick: Optional[PriceTick] = None) -> ProcessedSignal:
        """
        Score a strategy and derive the recommended action.

        Price and percent change come from latest_tick when given, otherwise
        from the snapshot.

        Args:
            symbol: Instrument being scored
            snapshot: Market snapshot for symbol
            strategy: Strategy selected for symbol
            latest_tick: Most recent tick for symbol, if any

        Returns:
            Fresh ProcessedSignal

        Raises:
            MalformedDataError: If an input is out of domain or for another symbol
            TemporalDataError: If the tick is older than the snapshot
        """
        if snapshot.symbol != symbol:
            raise MalformedDataError(
                f"snapshot is for {snapshot.symbol}, expected {symbol}",
                field="symbol",
                value=snapshot.symbol
            )
        validate_snapshot(snapshot)
        validate_strategy(strategy)

        if latest_tick is not None:
            validate_tick(latest_tick, symbol=symbol, previous_timestamp=snapshot.last_update)
            price = latest_tick.price
            change_pct = latest_tick.change_percent
        else:
            price = snapshot.current_price
            change_pct = snapshot.price_change_percent

        breakdown = ScoreBreakdown(
            momentum_zone=self.momentum_zone_score(snapshot.oscillator),
            volatility=self.volatility_score(snapshot.volatility, change_pct),
            magnitude=self.magnitude_score(change_pct),
            strategy=self.strategy_score(strategy.baseline_confidence),
        )
        confidence = max(0, min(100, breakdown.total))

        action, reason_code, rationale = self.derive_action(
            price, snapshot.oscillator, change_pct, strategy
        )
        eta_minutes = self.estimate_minutes(strategy, snapshot.volatility)

        return ProcessedSignal(
            symbol=symbol,
            action=action,
            confidence=confidence,
            tier=self.confidence_tier(confidence),
            reason_code=reason_code,
            rationale=rationale,
            eta_minutes=eta_minutes,
            eta_text=format_duration_minutes(eta_minutes),
            breakdown=breakdown,
        )

    # Sub-scores

    def momentum_zone_score(self, oscillator: float) -> int:
        """Extreme oscillator readings score highest."""
        cfg = self.scoring
        if oscillator < cfg.oversold_level or oscillator > cfg.overbought_level:
            score = cfg.extreme_zone_score
        else:
            score = cfg.neutral_zone_score
        return min(score, cfg.momentum_zone_max)

    def volatility_score(self, volatility: VolatilityLevel, change_pct: float) -> int:
        """Reward moves whose size is consistent with the volatility class."""
        cfg = self.scoring
        move = abs(change_pct)
        if volatility == VolatilityLevel.LOW and move < cfg.low_vol_max_move_pct:
            score = cfg.low_vol_score
        elif volatility == VolatilityLevel.MEDIUM and move < cfg.medium_vol_max_move_pct:
            score = cfg.medium_vol_score
        elif volatility == VolatilityLevel.HIGH and move > cfg.high_vol_min_move_pct:
            score = cfg.high_vol_score
        else:
            score = 0
        return min(score, cfg.volatility_max)

    def magnitude_score(self, change_pct: float) -> int:
        """Healthy trends score high; oversized moves are likely noise."""
        cfg = self.scoring
        move = abs(change_pct)
        if cfg.healthy_move_min_pct < move < cfg.healthy_move_max_pct:
            score = cfg.healthy_move_score
        elif move > cfg.healthy_move_max_pct:
            score = cfg.noisy_move_score
        else:
            score = 0
        return min(score, cfg.magnitude_max)

    def strategy_score(self, baseline_confidence: float) -> int:
        cfg = self.scoring
        if baseline_confidence > cfg.strong_strategy_level:
            score = cfg.strong_strategy_score
        elif baseline_confidence > cfg.fair_strategy_level:
            score = cfg.fair_strategy_score
        else:
            score = 0
        return min(score, cfg.strategy_max)

    # Grading

    @staticmethod
    def confidence_tier(confidence: float) -> ConfidenceTier:
        if confidence > 75:
            return ConfidenceTier.VERY_HIGH
        if confidence > 60:
            return ConfidenceTier.HIGH
        if confidence > 45:
            return ConfidenceTier.MEDIUM
        return ConfidenceTier.LOW

    def derive_action(self, price: float, oscillator: float, change_pct: float,
                      strategy: Strategy) -> tuple[SignalAction, str, str]:
        """
        Derive the action from entry bands, oscillator and momentum direction.

        Returns:
            (action, reason_code, rationale); first matching rule wins
        """
        cfg = self.scoring
        zone = self._zone_label(oscillator)

        if price <= strategy.buy_below and oscillator < cfg.strong_buy_oscillator:
            return (
                SignalAction.STRONG_BUY,
                "entry_band_buy",
                f"Price {price:g} reached the buy entry band ({strategy.buy_below:g}) "
                f"with RSI {oscillator:.1f} {zone}",
            )
        if price >= strategy.sell_above and oscillator > cfg.strong_sell_oscillator:
            return (
                SignalAction.STRONG_SELL,
                "entry_band_sell",
                f"Price {price:g} reached the sell entry band ({strategy.sell_above:g}) "
                f"with RSI {oscillator:.1f} {zone}",
            )
        if change_pct > 0 and oscillator < cfg.neutral_oscillator:
            return (
                SignalAction.BUY,
                "momentum_up",
                f"Upward momentum ({change_pct:+.2f}%) with RSI {oscillator:.1f} {zone}",
            )
        if change_pct < 0 and oscillator > cfg.neutral_oscillator:
            return (
                SignalAction.SELL,
                "momentum_down",
                f"Downward momentum ({change_pct:+.2f}%) with RSI {oscillator:.1f} {zone}",
            )
        return (
            SignalAction.WAIT,
            "mixed_signals",
            f"Mixed signals: momentum {change_pct:+.2f}% against RSI {oscillator:.1f} {zone}",
        )

    def _zone_label(self, oscillator: float) -> str:
        if oscillator < self.scoring.oversold_level:
            return "oversold"
        if oscillator > self.scoring.overbought_level:
            return "overbought"
        return "neutral"

    def estimate_minutes(self, strategy: Strategy, volatility: VolatilityLevel) -> int:
        """Timeframe duration scaled by volatility and risk, in whole minutes."""
        eta = self.eta
        volatility_mult = {
            VolatilityLevel.HIGH: eta.high_volatility_mult,
            VolatilityLevel.MEDIUM: eta.medium_volatility_mult,
            VolatilityLevel.LOW: eta.low_volatility_mult,
        }[volatility]
        risk_mult = eta.high_risk_mult if strategy.risk_level == RiskLevel.HIGH else eta.default_risk_mult

        minutes = self.timeframes.duration_for(strategy.timeframe) * volatility_mult * risk_mult
        # Round half up
        return int(math.floor(minutes + 0.5 + 1e-9))
