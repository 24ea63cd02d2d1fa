"""Tests for oscillator and volatility classification."""

import pytest

from trading_assistant.analysis.indicators import (
    calculate_rsi,
    classify_volatility,
    mean_abs_change_pct,
    simple_moving_average,
)
from trading_assistant.data.models import VolatilityLevel


class TestCalculateRSI:
    """Test Wilder RSI calculation."""

    def test_insufficient_data_returns_none(self):
        assert calculate_rsi([100.0] * 14, period=14) is None
        assert calculate_rsi([], period=14) is None

    def test_non_positive_period_returns_none(self):
        assert calculate_rsi([1.0, 2.0, 3.0], period=0) is None

    def test_only_gains_is_100(self):
        prices = [100.0 + i for i in range(15)]
        assert calculate_rsi(prices) == 100.0

    def test_only_losses_is_0(self):
        prices = [100.0 - i for i in range(15)]
        assert calculate_rsi(prices) == 0.0

    def test_flat_prices_are_neutral(self):
        assert calculate_rsi([100.0] * 20) == 50.0

    def test_balanced_moves_are_neutral(self):
        assert calculate_rsi([1.0, 2.0, 1.0], period=2) == pytest.approx(50.0)

    def test_wilder_smoothing(self):
        # Seed: gains [1, 0], losses [0, 1]; then a gain of 2
        prices = [10.0, 11.0, 10.0, 12.0]
        avg_gain = (0.5 * 1 + 2.0) / 2
        avg_loss = (0.5 * 1 + 0.0) / 2
        expected = 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)

        assert calculate_rsi(prices, period=2) == pytest.approx(expected)

    def test_result_in_range(self):
        prices = [100.0, 101.5, 100.2, 99.8, 102.3, 101.1, 103.0, 102.2,
                  101.9, 104.5, 103.3, 102.8, 105.0, 104.1, 103.7, 106.2]
        rsi = calculate_rsi(prices)
        assert 0.0 <= rsi <= 100.0


class TestSimpleMovingAverage:
    """Test the band anchor average."""

    def test_uses_last_window_prices(self):
        assert simple_moving_average([1.0, 2.0, 3.0, 4.0], 2) == pytest.approx(3.5)

    def test_short_sequence_is_averaged_whole(self):
        assert simple_moving_average([1.0, 2.0, 3.0], 20) == pytest.approx(2.0)

    def test_empty_or_bad_window_returns_none(self):
        assert simple_moving_average([], 5) is None
        assert simple_moving_average([1.0], 0) is None


class TestVolatilityClassification:
    """Test realized volatility classification."""

    def test_mean_abs_change(self):
        assert mean_abs_change_pct([0.1, -0.3]) == pytest.approx(0.2)
        assert mean_abs_change_pct([]) is None

    def test_no_history_is_medium(self):
        assert classify_volatility([], 0.001) == VolatilityLevel.MEDIUM

    def test_zero_coefficient_is_medium(self):
        assert classify_volatility([0.5], 0.0) == VolatilityLevel.MEDIUM

    def test_thresholds(self):
        # Coefficient 0.001 is 0.1% per tick
        assert classify_volatility([0.01, -0.01], 0.001) == VolatilityLevel.LOW
        assert classify_volatility([0.02, -0.02], 0.001) == VolatilityLevel.MEDIUM
        assert classify_volatility([0.05, -0.05], 0.001) == VolatilityLevel.HIGH

    def test_custom_ratios(self):
        changes = [0.02]
        assert classify_volatility(changes, 0.001, low_ratio=0.25, high_ratio=0.5) == VolatilityLevel.LOW
        assert classify_volatility(changes, 0.001, low_ratio=0.05, high_ratio=0.1) == VolatilityLevel.HIGH
