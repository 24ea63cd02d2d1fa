"""Simulated instrument universe and symbol lookup."""

from typing import Iterable, Optional

from ..config.defaults import FeedParams
from .models import Instrument, MarketClass

# symbol -> (market class, base price, volatility coefficient, tick size)
_UNIVERSE = {
    "EURUSD": (MarketClass.CURRENCY, 1.08500, 0.0001, 0.00001),
    "GBPUSD": (MarketClass.CURRENCY, 1.26420, 0.00012, 0.00001),
    "USDJPY": (MarketClass.CURRENCY, 149.850, 0.0001, 0.001),
    "AUDUSD": (MarketClass.CURRENCY, 0.67250, 0.0001, 0.00001),
    "USDCAD": (MarketClass.CURRENCY, 1.34580, 0.0001, 0.00001),
    "BTCUSD": (MarketClass.CRYPTO, 43850.00, 0.002, 0.01),
    "ETHUSD": (MarketClass.CRYPTO, 2680.50, 0.0025, 0.01),
    "AAPL": (MarketClass.STOCK, 195.89, 0.0008, 0.01),
    "GOOGL": (MarketClass.STOCK, 142.56, 0.001, 0.01),
    "NASDAQ100": (MarketClass.INDEX, 16845.30, 0.0006, 0.01),
    "SP500": (MarketClass.INDEX, 4750.89, 0.0005, 0.01),
    "GOLD": (MarketClass.COMMODITY, 2045.50, 0.0004, 0.01),
    "SILVER": (MarketClass.COMMODITY, 24.85, 0.0008, 0.01),
}

DEFAULT_INSTRUMENTS: tuple[Instrument, ...] = tuple(
    Instrument(symbol, market_class, base_price, volatility, tick_size)
    for symbol, (market_class, base_price, volatility, tick_size) in _UNIVERSE.items()
)


def infer_tick_size(symbol: str, default: float = 0.01) -> float:
    """Guess a quantization step from the shape of a symbol."""
    upper = symbol.upper()
    if "JPY" in upper:
        return 0.001
    if "USD" in upper and len(upper) == 6 and not upper.startswith(("BTC", "ETH")):
        return 0.00001
    return default


def fallback_instrument(symbol: str, params: Optional[FeedParams] = None) -> Instrument:
    """Instrument used for symbols outside the universe."""
    params = params or FeedParams()
    return Instrument(
        symbol=symbol,
        market_class=None,
        base_price=params.default_base_price,
        volatility=params.default_volatility,
        tick_size=infer_tick_size(symbol, params.default_tick_size),
    )


class InstrumentRegistry:
    """Lookup over an instrument universe with a total fallback."""

    def __init__(self, instruments: Optional[Iterable[Instrument]] = None,
                 params: Optional[FeedParams] = None):
        self.params = params or FeedParams()
        source = DEFAULT_INSTRUMENTS if instruments is None else instruments
        self._instruments = {instrument.symbol: instrument for instrument in source}

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._instruments

    def __iter__(self):
        return iter(self._instruments.values())

    def __len__(self) -> int:
        return len(self._instruments)

    @property
    def symbols(self) -> list[str]:
        return list(self._instruments)

    def get(self, symbol: str) -> Instrument:
        """Instrument for symbol, or the documented fallback."""
        instrument = self._instruments.get(symbol)
        if instrument is None:
            return fallback_instrument(symbol, self.params)
        return instrument

    def symbols_for(self, market_class: MarketClass) -> list[str]:
        """Symbols belonging to a market class, in universe order."""
        return [
            instrument.symbol for instrument in self._instruments.values()
            if instrument.market_class == market_class
        ]
