"""
Trading Assistant - simulated market feed and signal scoring core

Generates a live-looking price feed for a fixed instrument universe, selects a
strategy for the current market conditions and grades it into a trading
recommendation with a bounded confidence score.
"""

__version__ = "0.1.0"
__author__ = "Trading Assistant Team"
