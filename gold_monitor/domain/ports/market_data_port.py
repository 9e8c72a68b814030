"""
Port (interface) for exchange market-data providers.
Infrastructure adapters (e.g. OKXMarketDataProvider) must implement this interface.
"""

from abc import ABC, abstractmethod

from gold_monitor.domain.entities.market_data import Candle, PriceSnapshot


class IMarketDataProvider(ABC):
    symbol: str
    exchange: str
    quote_currency: str

    @abstractmethod
    async def get_ticker(self) -> PriceSnapshot: ...

    @abstractmethod
    async def get_candles(self, bar: str, limit: int) -> list[Candle]:
        """Return up to *limit* candles of size *bar*, ascending by time."""
        ...
