"""
Simulated price feed and pluggable tick sources.
"""
from .price_feed import PriceFeed
from .sources import RandomWalkTickSource, TickSource, quantize_price

__all__ = ["PriceFeed", "RandomWalkTickSource", "TickSource", "quantize_price"]
