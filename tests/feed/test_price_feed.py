"""Tests for the simulated price feed."""

import threading
import time

import pytest

from trading_assistant.config.defaults import FeedParams
from trading_assistant.data.instruments import DEFAULT_INSTRUMENTS
from trading_assistant.data.models import Instrument, MarketClass, PriceQuote
from trading_assistant.errors import MalformedDataError
from trading_assistant.feed.price_feed import PriceFeed
from trading_assistant.feed.sources import TickSource


def is_tick_multiple(price: float, tick_size: float) -> bool:
    steps = price / tick_size
    return abs(steps - round(steps)) < 1e-6


class CollapsingSource(TickSource):
    """Always proposes a negative price."""

    def next_price(self, instrument, current_price):
        return -current_price


class TestPriceFeedStepping:
    """Test synchronous simulation steps."""

    def test_step_ticks_every_instrument_in_order(self, clock):
        feed = PriceFeed(seed=1, clock=clock)

        ticks = feed.step()

        assert [tick.symbol for tick in ticks] == [i.symbol for i in DEFAULT_INSTRUMENTS]

    def test_eurusd_single_step_stays_within_a_few_ticks(self, eurusd, clock):
        feed = PriceFeed([eurusd], seed=42, clock=clock)

        tick = feed.step()[0]

        assert abs(tick.price - 1.08500) <= 10 * eurusd.tick_size
        assert is_tick_multiple(tick.price, eurusd.tick_size)

    def test_prices_stay_on_tick_grid(self, clock):
        feed = PriceFeed(seed=9, clock=clock)

        for _ in range(25):
            for tick in feed.step():
                tick_size = feed.instruments.get(tick.symbol).tick_size
                assert is_tick_multiple(tick.price, tick_size)
                assert tick.price > 0

    def test_change_arithmetic(self, eurusd, clock):
        feed = PriceFeed([eurusd], seed=3, clock=clock)

        first = feed.step()[0]
        second = feed.step()[0]

        assert first.change == pytest.approx(first.price - 1.08500)
        assert second.change == pytest.approx(second.price - first.price)
        assert second.change_percent == pytest.approx(second.change / first.price * 100.0)
        assert second.previous_price == pytest.approx(first.price)

    def test_same_seed_reproduces_sequence(self, clock):
        first = PriceFeed(seed=7, clock=clock)
        second = PriceFeed(seed=7, clock=clock)

        prices_a = [[t.price for t in first.step()] for _ in range(5)]
        prices_b = [[t.price for t in second.step()] for _ in range(5)]

        assert prices_a == prices_b

    def test_price_never_reaches_zero(self, clock):
        instrument = Instrument("SILVER", MarketClass.COMMODITY, 24.85, 0.0008, 0.01)
        feed = PriceFeed([instrument], source=CollapsingSource(), clock=clock)

        tick = feed.step()[0]

        assert tick.price == 0.01
        assert feed.current_price("SILVER") == 0.01

    def test_timestamps_come_from_clock(self, eurusd, clock, base_time):
        feed = PriceFeed([eurusd], seed=1, clock=clock)

        first = feed.step()[0]
        second = feed.step()[0]

        assert first.timestamp > base_time
        assert second.timestamp > first.timestamp


class TestPriceFeedReads:
    """Test price and history reads."""

    def test_current_price_before_first_tick_is_base_price(self):
        feed = PriceFeed(seed=1)
        assert feed.current_price("BTCUSD") == 43850.00
        assert feed.last_tick("BTCUSD") is None

    def test_unknown_symbol_uses_fallback_price(self):
        feed = PriceFeed(seed=1)
        assert feed.current_price("XYZ") == 100.0

    def test_current_price_follows_last_tick(self, rising_source, clock):
        feed = PriceFeed(source=rising_source, clock=clock)

        ticks = feed.step()

        for tick in ticks:
            assert feed.current_price(tick.symbol) == tick.price
            assert feed.last_tick(tick.symbol) == tick

    def test_history_is_bounded(self, eurusd, clock):
        feed = PriceFeed([eurusd], params=FeedParams(history_size=3), seed=1, clock=clock)

        ticks = [feed.step()[0] for _ in range(5)]

        assert feed.history("EURUSD") == ticks[-3:]

    def test_quote(self, eurusd, clock):
        feed = PriceFeed([eurusd], seed=1, clock=clock)

        quote = feed.quote("EURUSD")

        assert isinstance(quote, PriceQuote)
        assert quote.price == 1.08500
        assert quote.source == "simulated"

    def test_rejects_non_positive_base_price(self):
        with pytest.raises(MalformedDataError) as exc_info:
            PriceFeed([Instrument("BAD", MarketClass.STOCK, 0.0, 0.001, 0.01)])
        assert exc_info.value.field == "base_price"


class TestPriceFeedSubscriptions:
    """Test the subscriber registry and tick fan-out."""

    def test_delivers_in_registration_order(self, eurusd, clock):
        feed = PriceFeed([eurusd], seed=1, clock=clock)
        calls = []
        feed.subscribe("EURUSD", lambda tick: calls.append(("first", tick.price)))
        feed.subscribe("EURUSD", lambda tick: calls.append(("second", tick.price)))

        tick = feed.step()[0]

        assert calls == [("first", tick.price), ("second", tick.price)]

    def test_only_subscribed_symbol_is_delivered(self, clock):
        feed = PriceFeed(seed=1, clock=clock)
        received = []
        feed.subscribe("GOLD", received.append)

        feed.step()

        assert [tick.symbol for tick in received] == ["GOLD"]

    def test_failing_subscriber_does_not_block_others(self, eurusd, clock):
        feed = PriceFeed([eurusd], seed=1, clock=clock)
        received = []

        def broken(tick):
            raise RuntimeError("boom")

        feed.subscribe("EURUSD", broken)
        feed.subscribe("EURUSD", received.append)

        tick = feed.step()[0]

        assert received == [tick]

    def test_unsubscribe_callback_removes_earliest_registration(self, eurusd, clock):
        feed = PriceFeed([eurusd], seed=1, clock=clock)
        received = []
        feed.subscribe("EURUSD", received.append)
        feed.subscribe("EURUSD", received.append)

        assert feed.unsubscribe("EURUSD", received.append) is True
        assert feed.subscriber_count("EURUSD") == 1

        feed.step()
        assert len(received) == 1

    def test_unsubscribe_by_handle(self, eurusd, clock):
        feed = PriceFeed([eurusd], seed=1, clock=clock)
        first, second = [], []
        handle = feed.subscribe("EURUSD", first.append)
        feed.subscribe("EURUSD", second.append)

        assert feed.unsubscribe("EURUSD", handle) is True
        assert feed.unsubscribe("EURUSD", handle) is False

        feed.step()
        assert first == []
        assert len(second) == 1

    def test_unsubscribe_unknown_is_noop(self):
        feed = PriceFeed(seed=1)
        assert feed.unsubscribe("EURUSD", print) is False
        assert feed.subscriber_count("EURUSD") == 0

    def test_subscription_handles_are_unique(self):
        feed = PriceFeed(seed=1)
        callback = lambda tick: None  # noqa: E731

        first = feed.subscribe("EURUSD", callback)
        second = feed.subscribe("EURUSD", callback)

        assert first.subscription_id != second.subscription_id
        assert first != second


class TestPriceFeedLifecycle:
    """Test start/stop behavior of the background timer."""

    @pytest.fixture
    def fast_feed(self, eurusd, clock):
        feed = PriceFeed([eurusd], params=FeedParams(cadence_seconds=0.01), seed=1, clock=clock)
        yield feed
        feed.stop()

    def test_start_is_idempotent(self, fast_feed):
        fast_feed.start()
        thread_count = threading.active_count()
        fast_feed.start()

        assert fast_feed.is_running
        assert fast_feed.is_connected
        assert threading.active_count() == thread_count

    def test_stop_is_idempotent(self, fast_feed):
        fast_feed.start()
        fast_feed.stop()
        fast_feed.stop()

        assert not fast_feed.is_running

    def test_stop_before_start_is_safe(self, fast_feed):
        fast_feed.stop()
        assert not fast_feed.is_running

    def test_running_feed_delivers_ticks(self, fast_feed):
        received = threading.Event()
        fast_feed.subscribe("EURUSD", lambda tick: received.set())

        fast_feed.start()

        assert received.wait(timeout=2.0)

    def test_no_delivery_after_stop_returns(self, fast_feed):
        received = []
        fast_feed.subscribe("EURUSD", received.append)

        fast_feed.start()
        time.sleep(0.05)
        fast_feed.stop()
        delivered = len(received)
        time.sleep(0.05)

        assert len(received) == delivered

    def test_restart_after_stop(self, fast_feed):
        received = threading.Event()
        fast_feed.start()
        fast_feed.stop()
        fast_feed.subscribe("EURUSD", lambda tick: received.set())

        fast_feed.start()

        assert fast_feed.is_running
        assert received.wait(timeout=2.0)
