"""
Pydantic request/response models for the HTTP API.
Field names are the camelCase keys the dashboard consumes.
"""

from typing import Any, Optional

from pydantic import BaseModel

from gold_monitor.domain.entities.market_data import Candle, CandleHistory, PriceSnapshot


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class PriceResponse(BaseModel):
    price: Optional[float]
    open24h: Optional[float]
    high24h: Optional[float]
    low24h: Optional[float]
    volume24h: Optional[float]
    change: Optional[float]
    changePercent: Optional[float]
    currency: str
    quoteCurrency: str
    symbol: str
    exchange: str
    timestamp: int

    @classmethod
    def from_entity(cls, snapshot: PriceSnapshot) -> "PriceResponse":
        return cls(
            price=snapshot.price,
            open24h=snapshot.open_24h,
            high24h=snapshot.high_24h,
            low24h=snapshot.low_24h,
            volume24h=snapshot.volume_24h,
            change=snapshot.change,
            changePercent=snapshot.change_percent,
            currency=snapshot.currency,
            quoteCurrency=snapshot.quote_currency,
            symbol=snapshot.symbol,
            exchange=snapshot.exchange,
            timestamp=snapshot.timestamp,
        )


class CandleModel(BaseModel):
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float]

    @classmethod
    def from_entity(cls, candle: Candle) -> "CandleModel":
        return cls(
            time=candle.time,
            open=candle.open,
            high=candle.high,
            low=candle.low,
            close=candle.close,
            volume=candle.volume,
        )


class HistoryMeta(BaseModel):
    currency: str
    symbol: str
    exchange: str
    interval: str
    rangeDays: int


class HistoryResponse(BaseModel):
    meta: HistoryMeta
    candles: list[CandleModel]

    @classmethod
    def from_entity(cls, history: CandleHistory) -> "HistoryResponse":
        return cls(
            meta=HistoryMeta(
                currency=history.currency,
                symbol=history.symbol,
                exchange=history.exchange,
                interval=history.interval,
                rangeDays=history.range_days,
            ),
            candles=[CandleModel.from_entity(c) for c in history.candles],
        )


class ChatRequest(BaseModel):
    """Fields stay untyped here; RelayChatUseCase validates them."""

    messages: Any = None
    priceSnapshot: Any = None
    chartContext: Any = None


class ChatResponse(BaseModel):
    reply: Any
    usage: Any = None
