"""
Recompute orchestration for the active market selection.

Decides when strategy selection and signal scoring run again: on a live
timer and on fresh ticks while Live, and only on explicit requests
(analyze, refresh, strategy change) while Idle. Every recomputation reads
its inputs under one lock so the snapshot, tick and strategy it scores
always belong together.
"""

import threading
from enum import Enum
from typing import Callable, Optional, Union

from ..analysis.snapshot import FeedSnapshotProvider, SnapshotProvider
from ..config.defaults import OrchestratorParams
from ..data.models import (
    AnalysisResult,
    MarketClass,
    MarketSnapshot,
    PriceTick,
    ProcessedSignal,
    Strategy,
    Subscription,
)
from ..data.validators import validate_snapshot, validate_strategy, validate_tick
from ..errors import MalformedDataError, StateTransitionError
from ..feed.price_feed import PriceFeed
from ..logging.config import get_state_logger, log_signal_decision, log_state_transition
from ..signals.processor import SignalProcessor
from ..strategy.catalog import StrategyCatalog
from ..utils.scheduler import PeriodicTimer
from ..utils.time import utc_now

state_logger = get_state_logger(__name__)

ResultListener = Callable[[AnalysisResult], None]


class OrchestratorState(str, Enum):
    """Recompute modes."""
    IDLE = "idle"
    LIVE = "live"


class RecomputeOrchestrator:
    """
    Owns the active selection and republishes recommendations for it.

    Listeners receive every published AnalysisResult. Selecting a new market,
    symbol or timeframe always returns to Idle and discards the previous
    snapshot, strategy and signal.
    """

    def __init__(
        self,
        feed: PriceFeed,
        catalog: Optional[StrategyCatalog] = None,
        processor: Optional[SignalProcessor] = None,
        snapshot_provider: Optional[SnapshotProvider] = None,
        params: Optional[OrchestratorParams] = None,
    ) -> None:
        self.logger = state_logger
        self.feed = feed
        self.catalog = catalog or StrategyCatalog(feed.instruments)
        self.processor = processor or SignalProcessor()
        self.snapshot_provider = snapshot_provider or FeedSnapshotProvider(feed)
        self.params = params or OrchestratorParams()

        self._lock = threading.RLock()
        self._state = OrchestratorState.IDLE

        self._market_class: Union[MarketClass, str, None] = None
        self._symbol: Optional[str] = None
        self._timeframe: Optional[str] = None

        self._snapshot: Optional[MarketSnapshot] = None
        self._latest_tick: Optional[PriceTick] = None
        self._strategy: Optional[Strategy] = None
        self._pinned_strategy: Optional[Strategy] = None
        self._result: Optional[AnalysisResult] = None

        self._subscription: Optional[Subscription] = None
        self._listeners: list[ResultListener] = []

        self._timer = PeriodicTimer(
            self.params.live_interval_seconds,
            self._on_timer,
            name="LiveRecompute",
            join_timeout=self.params.stop_join_timeout_seconds,
        )

    # Read-only view

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def is_live(self) -> bool:
        return self._state == OrchestratorState.LIVE

    @property
    def selection(self) -> tuple[Union[MarketClass, str, None], Optional[str], Optional[str]]:
        with self._lock:
            return self._market_class, self._symbol, self._timeframe

    @property
    def snapshot(self) -> Optional[MarketSnapshot]:
        return self._snapshot

    @property
    def strategy(self) -> Optional[Strategy]:
        return self._strategy

    @property
    def latest_result(self) -> Optional[AnalysisResult]:
        return self._result

    @property
    def latest_signal(self) -> Optional[ProcessedSignal]:
        result = self._result
        return result.signal if result else None

    # Listeners

    def add_listener(self, listener: ResultListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ResultListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # Selection

    def select_market(self, market_class: Union[MarketClass, str]) -> None:
        """Select a market; clears the symbol."""
        with self._lock:
            was_live = self._reset("market_selected")
            self._market_class = MarketClass.coerce(market_class) or market_class
            self._move_subscription(None)
        if was_live:
            self._timer.stop()

    def select_symbol(self, symbol: str) -> None:
        """Select a symbol and follow its ticks."""
        with self._lock:
            was_live = self._reset("symbol_selected")
            self._move_subscription(symbol)
        if was_live:
            self._timer.stop()

        if self.params.auto_start_feed:
            self.feed.start()

    def select_timeframe(self, timeframe: str) -> None:
        with self._lock:
            was_live = self._reset("timeframe_selected")
            self._timeframe = timeframe
        if was_live:
            self._timer.stop()

    # Recomputation control

    def analyze(
        self,
        market_class: Union[MarketClass, str],
        symbol: str,
        timeframe: str,
        snapshot: Optional[MarketSnapshot] = None,
    ) -> AnalysisResult:
        """
        Run strategy selection and scoring for a selection.

        A selection that differs from the current one is applied first, which
        returns the orchestrator to Idle.

        Args:
            market_class: Market to analyze
            symbol: Symbol to analyze
            timeframe: Timeframe to analyze
            snapshot: Snapshot to score; built by the snapshot provider when omitted

        Returns:
            The published AnalysisResult

        Raises:
            MalformedDataError: If a given snapshot is out of domain or for another
                symbol; the current selection is left untouched
        """
        if snapshot is not None:
            self._check_snapshot(snapshot, symbol)

        coerced = MarketClass.coerce(market_class) or market_class
        if (coerced, symbol, timeframe) != self.selection:
            self.select_market(coerced)
            self.select_symbol(symbol)
            self.select_timeframe(timeframe)

        with self._lock:
            if snapshot is None:
                snapshot = self.snapshot_provider(coerced, symbol, timeframe)
            self._set_snapshot(snapshot)
            return self._recompute("manual")

    def refresh(self) -> AnalysisResult:
        """Re-run the analysis for the current selection with a fresh snapshot."""
        with self._lock:
            self._require_selection("refresh")
            self._set_snapshot(
                self.snapshot_provider(self._market_class, self._symbol, self._timeframe)
            )
            return self._recompute("refresh")

    def set_live_mode(self, enabled: bool) -> None:
        """
        Enter or leave Live mode.

        Entering requires a complete selection and an analyzed snapshot.
        Once leaving returns, no further result is published.

        Raises:
            StateTransitionError: If Live is requested without a selection or snapshot
        """
        if enabled:
            with self._lock:
                if self._state == OrchestratorState.LIVE:
                    return
                self._require_selection("start_live")
                if self._snapshot is None:
                    raise StateTransitionError(
                        "Analyze the selection before starting live mode",
                        current_state=self._state.value,
                        attempted_transition="start_live"
                    )
                self._transition(OrchestratorState.LIVE, "start_live")
            self._timer.start()
        else:
            with self._lock:
                if self._state == OrchestratorState.IDLE:
                    return
                self._transition(OrchestratorState.IDLE, "stop_live")
            self._timer.stop()

    def on_strategy_changed(self, strategy: Strategy) -> Optional[AnalysisResult]:
        """
        Pin a strategy chosen outside the catalog and recompute with it.

        Returns:
            The published result, or None when nothing has been analyzed yet
        """
        validate_strategy(strategy)
        with self._lock:
            self._pinned_strategy = strategy
            self.logger.info(
                "Strategy pinned",
                symbol=self._symbol,
                strategy_id=strategy.strategy_id
            )
            if self._snapshot is None or not self._has_selection():
                return None
            return self._recompute("strategy_changed")

    def on_price_tick(self, tick: PriceTick) -> Optional[AnalysisResult]:
        """
        Fold a feed tick into the current snapshot.

        Ticks for other symbols are ignored. While Live the tick also triggers
        a recomputation.

        Raises:
            TemporalDataError: If the tick is older than the last one seen
        """
        with self._lock:
            if tick.symbol != self._symbol:
                return None

            previous = self._latest_tick.timestamp if self._latest_tick else None
            validate_tick(tick, symbol=self._symbol, previous_timestamp=previous)
            self._latest_tick = tick

            if self._snapshot is not None:
                self._snapshot = self._snapshot.with_tick(tick)

            if self._state == OrchestratorState.LIVE and self._snapshot is not None:
                return self._recompute("tick")
            return None

    def close(self) -> None:
        """Leave Live mode and detach from the feed."""
        self.set_live_mode(False)
        with self._lock:
            self._move_subscription(None)

    # Internals

    def _on_timer(self) -> None:
        with self._lock:
            if self._state != OrchestratorState.LIVE:
                return
            if self.params.refresh_snapshot_on_timer:
                self._set_snapshot(
                    self.snapshot_provider(self._market_class, self._symbol, self._timeframe)
                )
            self._recompute("timer")

    def _recompute(self, trigger: str) -> AnalysisResult:
        """Select, score and publish; caller holds the lock."""
        snapshot = self._snapshot
        strategy = self._pinned_strategy or self.catalog.select(
            self._market_class, self._symbol, self._timeframe, snapshot
        )
        signal = self.processor.process(self._symbol, snapshot, strategy, self._latest_tick)

        result = AnalysisResult(
            snapshot=snapshot,
            strategy=strategy,
            signal=signal,
            trigger=trigger,
            timestamp=utc_now(),
        )
        self._strategy = strategy
        self._result = result

        log_signal_decision(
            self.logger,
            symbol=signal.symbol,
            action=signal.action.value,
            confidence=signal.confidence,
            reason_code=signal.reason_code,
            trigger=trigger,
            context={
                "strategy_id": strategy.strategy_id,
                "price": snapshot.current_price,
                "oscillator": snapshot.oscillator,
                "volatility": snapshot.volatility.value,
                "tier": signal.tier.value,
            }
        )

        self._publish(result)
        return result

    def _publish(self, result: AnalysisResult) -> None:
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception as e:
                self.logger.error(
                    "Result listener failed",
                    symbol=result.signal.symbol,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True
                )

    def _check_snapshot(self, snapshot: MarketSnapshot, symbol: Optional[str]) -> None:
        if snapshot.symbol != symbol:
            raise MalformedDataError(
                f"snapshot is for {snapshot.symbol}, expected {symbol}",
                field="symbol",
                value=snapshot.symbol
            )
        validate_snapshot(snapshot)

    def _set_snapshot(self, snapshot: MarketSnapshot) -> None:
        self._check_snapshot(snapshot, self._symbol)
        self._snapshot = snapshot
        # A tick older than the snapshot is already reflected in it
        if self._latest_tick is not None and self._latest_tick.timestamp < snapshot.last_update:
            self._latest_tick = None

    def _reset(self, trigger: str) -> bool:
        """Return to Idle and drop derived state; True if the timer must stop."""
        was_live = self._state == OrchestratorState.LIVE
        if was_live:
            self._transition(OrchestratorState.IDLE, trigger)
        self._snapshot = None
        self._strategy = None
        self._pinned_strategy = None
        self._result = None
        return was_live

    def _move_subscription(self, symbol: Optional[str]) -> None:
        if self._subscription is not None:
            self.feed.unsubscribe(self._subscription.symbol, self._subscription)
            self._subscription = None

        self._symbol = symbol
        self._latest_tick = None
        if symbol is not None:
            self._subscription = self.feed.subscribe(symbol, self.on_price_tick)
            self._latest_tick = self.feed.last_tick(symbol)

    def _has_selection(self) -> bool:
        return None not in (self._market_class, self._symbol, self._timeframe)

    def _require_selection(self, attempted: str) -> None:
        if not self._has_selection():
            raise StateTransitionError(
                "Select market, symbol and timeframe first",
                current_state=self._state.value,
                attempted_transition=attempted,
                context={
                    "market_class": str(self._market_class) if self._market_class else None,
                    "symbol": self._symbol,
                    "timeframe": self._timeframe,
                }
            )

    def _transition(self, to_state: OrchestratorState, trigger: str) -> None:
        from_state = self._state
        self._state = to_state
        log_state_transition(
            self.logger,
            symbol=self._symbol,
            from_state=from_state.value,
            to_state=to_state.value,
            trigger=trigger,
            context={"timeframe": self._timeframe}
        )
