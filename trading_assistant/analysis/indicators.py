"""Oscillator and volatility classification over recent ticks"""

from collections.abc import Sequence
from typing import Optional

from ..data.models import VolatilityLevel


def calculate_rsi(prices: Sequence[float], period: int = 14) -> Optional[float]:
    """
    Calculate a Wilder-smoothed Relative Strength Index

    RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    Args:
        prices: Prices in chronological order
        period: RSI period (default 14)

    Returns:
        RSI in [0, 100], or None if fewer than period + 1 prices
    """
    if period <= 0 or len(prices) < period + 1:
        return None

    changes = [curr - prev for prev, curr in zip(prices, prices[1:])]
    gains = [max(change, 0.0) for change in changes]
    losses = [max(-change, 0.0) for change in changes]

    # Seed with a simple average, then apply Wilder smoothing
    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 50.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def simple_moving_average(prices: Sequence[float], window: int) -> Optional[float]:
    """
    Mean of the last window prices

    Shorter sequences are averaged whole.

    Returns:
        The average, or None for an empty sequence or non-positive window
    """
    if window <= 0 or not prices:
        return None
    recent = prices[-window:]
    return sum(recent) / len(recent)


def mean_abs_change_pct(change_percents: Sequence[float]) -> Optional[float]:
    """Mean absolute percent move, None for an empty sequence"""
    if not change_percents:
        return None
    return sum(abs(pct) for pct in change_percents) / len(change_percents)


def classify_volatility(
    change_percents: Sequence[float],
    volatility_coefficient: float,
    low_ratio: float = 0.15,
    high_ratio: float = 0.30,
) -> VolatilityLevel:
    """
    Classify realized volatility against the instrument's nominal coefficient

    The mean absolute percent move is divided by the coefficient expressed in
    percent. Without history, or with a non-positive coefficient, the result
    is Medium.

    Args:
        change_percents: Recent tick percent changes
        volatility_coefficient: Instrument volatility coefficient (fraction)
        low_ratio: Ratio below which volatility is Low
        high_ratio: Ratio above which volatility is High

    Returns:
        Volatility classification
    """
    mean_move = mean_abs_change_pct(change_percents)
    if mean_move is None or volatility_coefficient <= 0:
        return VolatilityLevel.MEDIUM

    ratio = mean_move / (volatility_coefficient * 100.0)
    if ratio < low_ratio:
        return VolatilityLevel.LOW
    if ratio > high_ratio:
        return VolatilityLevel.HIGH
    return VolatilityLevel.MEDIUM
