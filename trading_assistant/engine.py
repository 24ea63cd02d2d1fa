"""
Main trading assistant coordinator.

Builds the configured instrument universe, price feed, strategy catalog,
signal processor and recompute orchestrator, and exposes the feed and
recompute controls a presentation layer calls into.
"""

from typing import Any, Callable, Optional, Union

import structlog

from .analysis.snapshot import FeedSnapshotProvider, SnapshotProvider
from .config.loader import ConfigLoader
from .data.models import (
    AnalysisResult,
    MarketClass,
    MarketSnapshot,
    PriceQuote,
    PriceTick,
    Strategy,
    Subscription,
    TickCallback,
)
from .feed.price_feed import PriceFeed
from .feed.sources import TickSource
from .orchestration.orchestrator import RecomputeOrchestrator
from .signals.processor import SignalProcessor
from .strategy.catalog import StrategyCatalog

logger = structlog.get_logger(__name__)


class TradingAssistantEngine:
    """
    Owns one feed and one orchestrator wired from configuration.

    Pipeline:
    PriceFeed ticks → RecomputeOrchestrator → StrategyCatalog → SignalProcessor → listeners
    """

    def __init__(
        self,
        config_dir: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None,
        seed: Optional[int] = None,
        source: Optional[TickSource] = None,
        snapshot_provider: Optional[SnapshotProvider] = None,
        clock: Optional[Callable] = None,
    ) -> None:
        """Initialize the trading assistant engine."""
        self.logger = logger

        self.config_loader = ConfigLoader.create(config_dir)
        self.config = self.config_loader.build_config(overrides)
        self.instruments = self.config_loader.build_instruments(self.config.feed)

        self.feed = PriceFeed(
            instruments=self.instruments,
            params=self.config.feed,
            source=source,
            clock=clock,
            seed=seed,
        )
        self.catalog = StrategyCatalog(self.instruments, self.config.timeframes)
        self.processor = SignalProcessor(
            scoring=self.config.scoring,
            timeframes=self.config.timeframes,
            eta=self.config.eta,
        )
        self.orchestrator = RecomputeOrchestrator(
            feed=self.feed,
            catalog=self.catalog,
            processor=self.processor,
            snapshot_provider=snapshot_provider or FeedSnapshotProvider(self.feed, self.config.analysis),
            params=self.config.orchestrator,
        )

        self.logger.info(
            "Trading assistant engine initialized",
            instruments=len(self.instruments),
            cadence_seconds=self.config.feed.cadence_seconds,
            live_interval_seconds=self.config.orchestrator.live_interval_seconds
        )

    # Feed control

    def start(self) -> None:
        self.feed.start()

    def stop(self) -> None:
        self.feed.stop()

    def subscribe(self, symbol: str, callback: TickCallback) -> Subscription:
        return self.feed.subscribe(symbol, callback)

    def unsubscribe(self, symbol: str, callback: Union[TickCallback, Subscription]) -> bool:
        return self.feed.unsubscribe(symbol, callback)

    def current_price(self, symbol: str) -> float:
        return self.feed.current_price(symbol)

    def quote(self, symbol: str) -> PriceQuote:
        return self.feed.quote(symbol)

    # Recomputation control

    def symbols_for(self, market_class: Union[MarketClass, str]) -> list[str]:
        """Symbols a market selector should offer for a market class."""
        coerced = MarketClass.coerce(market_class)
        if coerced is None:
            return []
        return self.instruments.symbols_for(coerced)

    def analyze(
        self,
        market_class: Union[MarketClass, str],
        symbol: str,
        timeframe: str,
        snapshot: Optional[MarketSnapshot] = None,
    ) -> AnalysisResult:
        return self.orchestrator.analyze(market_class, symbol, timeframe, snapshot)

    def refresh(self) -> AnalysisResult:
        return self.orchestrator.refresh()

    def set_live_mode(self, enabled: bool) -> None:
        self.orchestrator.set_live_mode(enabled)

    def on_strategy_changed(self, strategy: Strategy) -> Optional[AnalysisResult]:
        return self.orchestrator.on_strategy_changed(strategy)

    def on_price_tick(self, tick: PriceTick) -> Optional[AnalysisResult]:
        return self.orchestrator.on_price_tick(tick)

    def add_listener(self, listener: Callable[[AnalysisResult], None]) -> None:
        self.orchestrator.add_listener(listener)

    def shutdown(self) -> None:
        """Stop live recomputation and the feed."""
        self.orchestrator.close()
        self.feed.stop()
        self.logger.info("Trading assistant engine shut down")

    def get_runtime_stats(self) -> dict[str, Any]:
        """Get runtime statistics."""
        market_class, symbol, timeframe = self.orchestrator.selection
        signal = self.orchestrator.latest_signal
        return {
            'feed_running': self.feed.is_running,
            'instruments': len(self.instruments),
            'orchestrator_state': self.orchestrator.state.value,
            'market_class': market_class.value if isinstance(market_class, MarketClass) else market_class,
            'symbol': symbol,
            'timeframe': timeframe,
            'subscribers': self.feed.subscriber_count(symbol) if symbol else 0,
            'last_action': signal.action.value if signal else None,
            'last_confidence': signal.confidence if signal else None,
        }
