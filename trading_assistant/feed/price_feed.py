"""
Simulated real-time price feed.

Owns the last known price and a rolling tick history per symbol, advances
every instrument of the universe once per cadence step and fans each tick
out to the subscribers of its symbol in registration order.
"""

import itertools
import threading
from collections import deque
from datetime import datetime
from typing import Callable, Iterable, Optional, Union

from ..config.defaults import FeedParams
from ..data.instruments import InstrumentRegistry
from ..data.models import Instrument, PriceQuote, PriceTick, Subscription, TickCallback
from ..errors import MalformedDataError
from ..logging.config import get_feed_logger
from ..utils.scheduler import PeriodicTimer
from ..utils.time import utc_now
from .sources import RandomWalkTickSource, TickSource, quantize_price

logger = get_feed_logger(__name__)


class PriceFeed:
    """
    Price tick simulator with a per-symbol subscriber registry.

    The feed is an explicitly constructed object: whoever creates it owns its
    start/stop lifecycle and hands it to the components that subscribe.
    """

    def __init__(
        self,
        instruments: Union[InstrumentRegistry, Iterable[Instrument], None] = None,
        params: Optional[FeedParams] = None,
        source: Optional[TickSource] = None,
        clock: Optional[Callable[[], datetime]] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.logger = logger
        self.params = params or FeedParams()

        if isinstance(instruments, InstrumentRegistry):
            self.instruments = instruments
        else:
            self.instruments = InstrumentRegistry(instruments, self.params)

        for instrument in self.instruments:
            if instrument.base_price <= 0 or instrument.tick_size <= 0:
                raise MalformedDataError(
                    f"Instrument {instrument.symbol} needs a positive base price and tick size",
                    field="base_price",
                    value=instrument.base_price,
                    context={"tick_size": instrument.tick_size}
                )

        if source is None:
            source = RandomWalkTickSource(
                seed=seed,
                trend_weight=self.params.trend_weight,
                noise_weight=self.params.noise_weight,
            )
        self.source = source
        self.clock = clock or utc_now

        # Guards prices, history and the registry; never held during delivery
        self._lock = threading.RLock()
        # Serializes simulation steps so per-symbol delivery stays ordered
        self._step_lock = threading.Lock()

        self._prices: dict[str, float] = {}
        self._last_ticks: dict[str, PriceTick] = {}
        self._history: dict[str, deque] = {}
        self._subscribers: dict[str, dict[int, Subscription]] = {}
        self._ids = itertools.count(1)

        self._timer = PeriodicTimer(
            self.params.cadence_seconds,
            self._scheduled_step,
            name="PriceFeed",
        )

    # Lifecycle

    @property
    def is_running(self) -> bool:
        return self._timer.is_running

    @property
    def is_connected(self) -> bool:
        """Whether prices are live (ticking) rather than static."""
        return self.is_running

    def start(self) -> None:
        """Begin ticking the whole universe; no effect if already running."""
        if self._timer.start():
            self.logger.info(
                "Price feed started",
                instruments=len(self.instruments),
                cadence_seconds=self.params.cadence_seconds
            )

    def stop(self) -> None:
        """Halt ticking; no callback fires after this returns."""
        if self._timer.stop():
            self.logger.info("Price feed stopped")

    # Subscriptions

    def subscribe(self, symbol: str, callback: TickCallback) -> Subscription:
        """
        Register callback for every future tick of symbol.

        Returns:
            Handle that unsubscribes exactly this registration
        """
        with self._lock:
            subscription = Subscription(symbol, next(self._ids), callback)
            self._subscribers.setdefault(symbol, {})[subscription.subscription_id] = subscription

        self.logger.debug(
            "Subscriber added",
            symbol=symbol,
            subscription_id=subscription.subscription_id
        )
        return subscription

    def unsubscribe(self, symbol: str, callback: Union[TickCallback, Subscription]) -> bool:
        """
        Remove one registration for symbol.

        Args:
            symbol: Subscribed symbol
            callback: Subscription handle, or the callback (earliest registration wins)

        Returns:
            True if a registration was removed
        """
        with self._lock:
            registrations = self._subscribers.get(symbol)
            if not registrations:
                return False

            if isinstance(callback, Subscription):
                removed = registrations.pop(callback.subscription_id, None) is not None
            else:
                match = next(
                    (sub_id for sub_id, sub in registrations.items() if sub.callback == callback),
                    None
                )
                removed = match is not None
                if removed:
                    del registrations[match]

            if not registrations:
                del self._subscribers[symbol]

        if removed:
            self.logger.debug("Subscriber removed", symbol=symbol)
        return removed

    def subscriber_count(self, symbol: str) -> int:
        with self._lock:
            return len(self._subscribers.get(symbol, {}))

    # Prices

    def current_price(self, symbol: str) -> float:
        """Last known price, or the instrument base price before the first tick."""
        with self._lock:
            price = self._prices.get(symbol)
        if price is None:
            return self.instruments.get(symbol).base_price
        return price

    def last_tick(self, symbol: str) -> Optional[PriceTick]:
        with self._lock:
            return self._last_ticks.get(symbol)

    def history(self, symbol: str) -> list[PriceTick]:
        """Recent ticks for symbol, oldest first."""
        with self._lock:
            return list(self._history.get(symbol, ()))

    def quote(self, symbol: str) -> PriceQuote:
        """Point-in-time quote without subscribing."""
        return PriceQuote(
            symbol=symbol,
            price=self.current_price(symbol),
            timestamp=self.clock(),
        )

    # Simulation

    def step(self) -> list[PriceTick]:
        """
        Run one simulation step synchronously.

        Returns:
            The ticks generated, one per instrument, in universe order
        """
        return self._step(scheduled=False)

    def _scheduled_step(self) -> None:
        self._step(scheduled=True)

    def _step(self, scheduled: bool) -> list[PriceTick]:
        ticks = []
        with self._step_lock:
            for instrument in self.instruments:
                if scheduled and self._timer.stop_requested:
                    break
                tick = self._advance(instrument)
                ticks.append(tick)
                self._deliver(tick, scheduled)
        return ticks

    def _advance(self, instrument: Instrument) -> PriceTick:
        """Generate the next tick for instrument and record it."""
        with self._lock:
            previous = self._prices.get(instrument.symbol, instrument.base_price)
            if previous <= 0:
                raise MalformedDataError(
                    f"Previous price for {instrument.symbol} must be positive",
                    field="previous_price",
                    value=previous
                )

            raw = self.source.next_price(instrument, previous)
            price = quantize_price(raw, instrument.tick_size)
            change = price - previous

            tick = PriceTick(
                symbol=instrument.symbol,
                price=price,
                timestamp=self.clock(),
                change=change,
                change_percent=change / previous * 100.0,
            )

            self._prices[instrument.symbol] = price
            self._last_ticks[instrument.symbol] = tick
            history = self._history.get(instrument.symbol)
            if history is None:
                history = deque(maxlen=self.params.history_size)
                self._history[instrument.symbol] = history
            history.append(tick)

            return tick

    def _deliver(self, tick: PriceTick, scheduled: bool) -> None:
        with self._lock:
            subscribers = list(self._subscribers.get(tick.symbol, {}).values())

        for subscription in subscribers:
            if scheduled and self._timer.stop_requested:
                return
            try:
                subscription.callback(tick)
            except Exception as e:
                self.logger.error(
                    "Subscriber callback failed",
                    symbol=tick.symbol,
                    subscription_id=subscription.subscription_id,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True
                )
