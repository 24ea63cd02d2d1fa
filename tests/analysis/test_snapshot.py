"""Tests for the feed-backed snapshot provider."""

import pytest

from trading_assistant.analysis.snapshot import FeedSnapshotProvider
from trading_assistant.config.defaults import AnalysisParams, FeedParams
from trading_assistant.data.models import MarketClass, VolatilityLevel
from trading_assistant.data.validators import validate_snapshot
from trading_assistant.feed.price_feed import PriceFeed


class TestFeedSnapshotProvider:
    """Test snapshot derivation from feed history."""

    def test_without_history_is_neutral(self, clock):
        feed = PriceFeed(seed=1, clock=clock)
        provider = FeedSnapshotProvider(feed)

        snapshot = provider(MarketClass.STOCK, "AAPL", "1h")

        assert snapshot.symbol == "AAPL"
        assert snapshot.current_price == 195.89
        assert snapshot.oscillator == 50.0
        assert snapshot.volatility == VolatilityLevel.MEDIUM
        assert snapshot.price_change_percent == 0.0
        validate_snapshot(snapshot)

    def test_rising_prices_are_overbought(self, rising_source, clock):
        feed = PriceFeed(source=rising_source, clock=clock)
        for _ in range(20):
            feed.step()

        snapshot = FeedSnapshotProvider(feed)(MarketClass.STOCK, "AAPL", "1h")

        assert snapshot.oscillator == 100.0
        assert snapshot.current_price == feed.current_price("AAPL")
        assert snapshot.last_update == feed.last_tick("AAPL").timestamp

    def test_falling_prices_are_oversold(self, falling_source, clock):
        feed = PriceFeed(source=falling_source, clock=clock)
        for _ in range(20):
            feed.step()

        snapshot = FeedSnapshotProvider(feed)(MarketClass.CRYPTO, "BTCUSD", "5m")

        assert snapshot.oscillator == 0.0
        assert snapshot.price_change_percent < 0

    def test_large_moves_classify_high(self, rising_source, clock):
        # 0.1% per tick against a 0.08% coefficient
        feed = PriceFeed(source=rising_source, clock=clock)
        for _ in range(5):
            feed.step()

        snapshot = FeedSnapshotProvider(feed)(MarketClass.STOCK, "AAPL", "1h")

        assert snapshot.volatility == VolatilityLevel.HIGH

    def test_rsi_uses_price_before_rolled_window(self, rising_source, clock):
        feed = PriceFeed(source=rising_source, params=FeedParams(history_size=5), clock=clock)
        for _ in range(10):
            feed.step()
        provider = FeedSnapshotProvider(feed, AnalysisParams(rsi_period=5))

        snapshot = provider(MarketClass.STOCK, "AAPL", "1h")

        assert snapshot.oscillator == 100.0

    def test_reference_price_is_moving_average(self, falling_source, clock):
        feed = PriceFeed(source=falling_source, clock=clock)
        for _ in range(30):
            feed.step()
        provider = FeedSnapshotProvider(feed, AnalysisParams(reference_window=20))

        snapshot = provider(MarketClass.STOCK, "AAPL", "1h")

        recent = [tick.price for tick in feed.history("AAPL")[-20:]]
        assert snapshot.reference_price == pytest.approx(sum(recent) / 20)
        assert snapshot.reference_price > snapshot.current_price

    def test_without_history_has_no_reference(self, clock):
        snapshot = FeedSnapshotProvider(PriceFeed(seed=1, clock=clock))(MarketClass.STOCK, "AAPL", "1h")

        assert snapshot.reference_price is None

    def test_fields_come_from_one_history_read(self, rising_source, clock):
        feed = PriceFeed(source=rising_source, clock=clock)
        feed.step()
        read_history = feed.history

        def history_then_step(symbol):
            # A feed step lands right after the provider's read
            ticks = read_history(symbol)
            feed.step()
            return ticks

        feed.history = history_then_step
        snapshot = FeedSnapshotProvider(feed)(MarketClass.STOCK, "AAPL", "1h")
        first_tick = read_history("AAPL")[0]

        assert feed.current_price("AAPL") != first_tick.price
        assert snapshot.current_price == first_tick.price
        assert snapshot.last_update == first_tick.timestamp
        assert snapshot.price_change_percent == first_tick.change_percent

    def test_unknown_symbol_is_medium(self, clock):
        feed = PriceFeed(seed=1, clock=clock)

        snapshot = FeedSnapshotProvider(feed)("stock", "XYZ", "1h")

        assert snapshot.current_price == 100.0
        assert snapshot.volatility == VolatilityLevel.MEDIUM
