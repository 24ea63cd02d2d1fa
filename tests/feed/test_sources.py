"""Tests for tick sources and price quantization."""

import random

import pytest

from trading_assistant.data.models import Instrument, MarketClass
from trading_assistant.feed.sources import RandomWalkTickSource, quantize_price


class ConstantRandom:
    """Stand-in generator returning one value forever."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class TestQuantizePrice:
    """Test quantize_price function."""

    def test_rounds_to_nearest_tick(self):
        assert quantize_price(1.085004, 0.00001) == 1.085
        assert quantize_price(1.085006, 0.00001) == 1.08501
        assert quantize_price(195.894, 0.01) == 195.89
        assert quantize_price(149.8506, 0.001) == 149.851

    def test_result_is_exact_decimal_multiple(self):
        """Quantized prices print without binary noise."""
        price = quantize_price(0.1 + 0.2, 0.01)
        assert price == 0.3
        assert repr(price) == "0.3"

    def test_never_below_one_tick(self):
        assert quantize_price(0.0, 0.01) == 0.01
        assert quantize_price(-5.0, 0.01) == 0.01
        assert quantize_price(0.000001, 0.00001) == 0.00001


class TestRandomWalkTickSource:
    """Test the random walk tick source."""

    @pytest.fixture
    def instrument(self) -> Instrument:
        return Instrument("AAPL", MarketClass.STOCK, 195.89, 0.0008, 0.01)

    def test_same_seed_same_sequence(self, instrument):
        first = RandomWalkTickSource(seed=11)
        second = RandomWalkTickSource(seed=11)

        prices_a = [first.next_price(instrument, 195.89) for _ in range(20)]
        prices_b = [second.next_price(instrument, 195.89) for _ in range(20)]

        assert prices_a == prices_b

    def test_injected_rng_is_used(self, instrument):
        source = RandomWalkTickSource(rng=random.Random(3))
        expected_rng = random.Random(3)
        trend = expected_rng.random() - 0.5
        noise = expected_rng.random() - 0.5

        price = source.next_price(instrument, 100.0)

        assert price == pytest.approx(100.0 + (0.3 * trend + 0.7 * noise) * 0.0008 * 100.0)

    def test_rejects_rng_and_seed_together(self):
        with pytest.raises(ValueError):
            RandomWalkTickSource(rng=random.Random(1), seed=1)

    def test_midpoint_draws_do_not_move_price(self, instrument):
        source = RandomWalkTickSource(rng=ConstantRandom(0.5))
        assert source.next_price(instrument, 195.89) == 195.89

    def test_movement_is_bounded_by_volatility(self, instrument):
        source = RandomWalkTickSource(seed=5)
        bound = 0.5 * (source.trend_weight + source.noise_weight) * instrument.volatility * 195.89

        for _ in range(500):
            assert abs(source.next_price(instrument, 195.89) - 195.89) <= bound + 1e-12

    def test_extreme_draws_move_by_full_weight(self, instrument):
        up = RandomWalkTickSource(rng=ConstantRandom(1.0))
        down = RandomWalkTickSource(rng=ConstantRandom(0.0))

        assert up.next_price(instrument, 100.0) == pytest.approx(100.0 + 0.5 * 0.0008 * 100.0)
        assert down.next_price(instrument, 100.0) == pytest.approx(100.0 - 0.5 * 0.0008 * 100.0)
