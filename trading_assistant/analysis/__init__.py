"""Snapshot indicators and the default feed-backed snapshot provider"""

from .indicators import calculate_rsi, classify_volatility, mean_abs_change_pct
from .snapshot import FeedSnapshotProvider, SnapshotProvider

__all__ = [
    "FeedSnapshotProvider",
    "SnapshotProvider",
    "calculate_rsi",
    "classify_volatility",
    "mean_abs_change_pct",
]
