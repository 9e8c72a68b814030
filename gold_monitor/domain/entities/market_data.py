"""
Domain entities for exchange market data.
Zero external dependencies: pure Python dataclasses only.

Numeric fields typed Optional[float] use None as the explicit absent marker;
they are never NaN or infinite.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PriceSnapshot:
    price: Optional[float]
    open_24h: Optional[float]
    high_24h: Optional[float]
    low_24h: Optional[float]
    volume_24h: Optional[float]
    change: Optional[float]
    change_percent: Optional[float]
    currency: str
    quote_currency: str
    symbol: str
    exchange: str
    timestamp: int


@dataclass(frozen=True)
class Candle:
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float]


@dataclass(frozen=True)
class HistoryWindow:
    """Resolved caller range/interval: exchange bar code and upstream request size."""

    interval: str
    bar: str
    minutes: int
    range_days: int
    limit: int


@dataclass(frozen=True)
class CandleHistory:
    symbol: str
    exchange: str
    currency: str
    interval: str
    range_days: int
    candles: list[Candle]
