"""Tick sources: where the next raw price for an instrument comes from."""

import random
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ..data.models import Instrument


def quantize_price(price: float, tick_size: float) -> float:
    """
    Round a raw price to the nearest multiple of tick_size.

    The result is never below one tick so that a simulated price stays
    strictly positive.

    Args:
        price: Raw price
        tick_size: Quantization step (> 0)

    Returns:
        Nearest float to steps * tick_size, computed in decimal arithmetic
    """
    steps = max(round(price / tick_size), 1)
    return float(Decimal(steps) * Decimal(str(tick_size)))


class TickSource(ABC):
    """Produces the next raw price for an instrument."""

    @abstractmethod
    def next_price(self, instrument: Instrument, current_price: float) -> float:
        """
        Produce the next raw (unquantized) price.

        Args:
            instrument: Reference data for the symbol
            current_price: Last known price, strictly positive

        Returns:
            Raw next price; the feed quantizes it to the tick size
        """
        pass


class RandomWalkTickSource(TickSource):
    """Bounded random walk mixing a trend draw and a noise draw."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None,
                 trend_weight: float = 0.3, noise_weight: float = 0.7):
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self.rng = rng if rng is not None else random.Random(seed)
        self.trend_weight = trend_weight
        self.noise_weight = noise_weight

    def next_price(self, instrument: Instrument, current_price: float) -> float:
        trend = self.rng.random() - 0.5
        noise = self.rng.random() - 0.5
        movement = (
            (self.trend_weight * trend + self.noise_weight * noise)
            * instrument.volatility
            * current_price
        )
        return current_price + movement
