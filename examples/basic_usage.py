#!/usr/bin/env python3
"""
Basic Usage Example - Trading Assistant

This script demonstrates the basic usage of the trading assistant core
with the simulated price feed. It shows how to:
- Initialize the engine
- Analyze a market, symbol and timeframe
- Follow live recommendations while the feed ticks
- Shut everything down cleanly

Run: python examples/basic_usage.py
"""

import time
from typing import Any

from trading_assistant.data.models import AnalysisResult
from trading_assistant.engine import TradingAssistantEngine
from trading_assistant.logging.config import configure_logging


def print_result(result: AnalysisResult) -> None:
    """Print a published recommendation."""
    signal = result.signal
    strategy = result.strategy
    print(f"[{result.trigger:>16}] {signal.symbol} {signal.action.value:<11} "
          f"confidence {signal.confidence:>3} ({signal.tier.value})")
    print(f"    {signal.rationale}")
    print(f"    {strategy.name}: buy below {strategy.buy_below:g}, "
          f"sell above {strategy.sell_above:g}, risk {strategy.risk_level.value}, "
          f"ETA {signal.eta_text}")


def print_stats(stats: dict[str, Any]) -> None:
    print("📊 Runtime stats:")
    for key, value in stats.items():
        print(f"  {key}: {value}")
    print()


def main():
    """Main demo function."""
    configure_logging(level="WARNING")

    print("🚀 Trading Assistant - Basic Usage Demo")
    print("=" * 60)

    print("1. Initializing the engine...")
    engine = TradingAssistantEngine(
        seed=42,
        overrides={"feed": {"cadence_seconds": 0.5}, "orchestrator": {"live_interval_seconds": 1.0}},
    )
    print(f"   Crypto symbols: {', '.join(engine.symbols_for('crypto'))}")
    print()

    print("2. Warming up the feed...")
    for _ in range(20):
        engine.feed.step()
    print(f"   BTCUSD now at {engine.current_price('BTCUSD'):.2f}")
    print()

    print("3. One-off analysis...")
    engine.add_listener(print_result)
    engine.analyze("crypto", "BTCUSD", "15m")
    print()

    print("4. Live mode for a few seconds...")
    engine.set_live_mode(True)
    engine.start()
    try:
        time.sleep(3)
    finally:
        engine.set_live_mode(False)
        engine.stop()
    print()

    print_stats(engine.get_runtime_stats())
    engine.shutdown()
    print("✅ Demo complete")


if __name__ == "__main__":
    main()
