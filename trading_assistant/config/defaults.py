"""Default configuration parameters for the simulated feed and signal scoring."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FeedParams:
    """Price feed simulation parameters."""
    cadence_seconds: float = 1.0                     # One tick per instrument per cadence
    history_size: int = 50                           # Rolling ticks kept per symbol

    # Fallback instrument for symbols outside the universe
    default_base_price: float = 100.0
    default_volatility: float = 0.001
    default_tick_size: float = 0.01

    # Random walk blend
    trend_weight: float = 0.3
    noise_weight: float = 0.7


@dataclass(frozen=True)
class OrchestratorParams:
    """Recompute orchestration parameters."""
    live_interval_seconds: float = 1.5
    stop_join_timeout_seconds: float = 5.0
    refresh_snapshot_on_timer: bool = True           # Rebuild snapshot each live cycle
    auto_start_feed: bool = False                    # Start the feed when a symbol is selected


@dataclass(frozen=True)
class ScoringParams:
    """Composite confidence scoring parameters."""
    # Momentum zone (oscillator)
    oversold_level: float = 30.0
    overbought_level: float = 70.0
    extreme_zone_score: int = 30
    neutral_zone_score: int = 20
    momentum_zone_max: int = 30

    # Volatility consistency
    low_vol_max_move_pct: float = 0.5
    medium_vol_max_move_pct: float = 1.0
    high_vol_min_move_pct: float = 1.0
    low_vol_score: int = 25
    medium_vol_score: int = 20
    high_vol_score: int = 15
    volatility_max: int = 25

    # Momentum magnitude
    healthy_move_min_pct: float = 0.1
    healthy_move_max_pct: float = 2.0
    healthy_move_score: int = 25
    noisy_move_score: int = 10
    magnitude_max: int = 25

    # Strategy baseline confidence
    strong_strategy_level: float = 70.0
    fair_strategy_level: float = 50.0
    strong_strategy_score: int = 20
    fair_strategy_score: int = 15
    strategy_max: int = 20

    # Direction gates
    strong_buy_oscillator: float = 40.0
    strong_sell_oscillator: float = 60.0
    neutral_oscillator: float = 50.0


@dataclass(frozen=True)
class TimeframeParams:
    """Characteristic holding duration per timeframe, in minutes."""
    durations: dict = field(default_factory=lambda: {
        "1m": 1,
        "5m": 5,
        "15m": 15,
        "30m": 30,
        "1h": 60,
        "4h": 240,
        "1d": 1440,
    })
    default_duration: int = 15
    short_horizon_max: int = 15                      # Below this: short horizon
    medium_horizon_max: int = 240                    # Below this: medium horizon

    def duration_for(self, timeframe: str) -> int:
        """Base duration for timeframe, falling back to the default."""
        return self.durations.get(timeframe, self.default_duration)


@dataclass(frozen=True)
class EtaParams:
    """Time-to-resolution multipliers."""
    high_volatility_mult: float = 0.7
    medium_volatility_mult: float = 1.0
    low_volatility_mult: float = 1.5
    high_risk_mult: float = 0.8
    default_risk_mult: float = 1.0


@dataclass(frozen=True)
class AnalysisParams:
    """Snapshot indicator parameters."""
    rsi_period: int = 14
    neutral_oscillator: float = 50.0                 # Used until enough history exists
    reference_window: int = 20                       # Ticks in the moving average anchoring entry bands
    low_volatility_ratio: float = 0.15               # Mean move / coefficient below: Low
    high_volatility_ratio: float = 0.30              # Mean move / coefficient above: High


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    feed: FeedParams
    orchestrator: OrchestratorParams
    scoring: ScoringParams
    timeframes: TimeframeParams
    eta: EtaParams
    analysis: AnalysisParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        feed=FeedParams(),
        orchestrator=OrchestratorParams(),
        scoring=ScoringParams(),
        timeframes=TimeframeParams(),
        eta=EtaParams(),
        analysis=AnalysisParams(),
    )
