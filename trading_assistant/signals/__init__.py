"""
Composite confidence scoring and action derivation.
"""
from .processor import SignalProcessor

__all__ = ["SignalProcessor"]
