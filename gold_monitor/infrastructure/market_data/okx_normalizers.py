"""
OKX v5 REST payloads -> domain entities.

Ticker fields arrive as strings ("2345.67", "" when unknown). Anything that
does not parse to a finite number becomes None, so "no data" is never
reported as zero movement.
"""

import time
from typing import Any, Optional

from gold_monitor.domain.entities.market_data import Candle, PriceSnapshot
from gold_monitor.domain.errors import UpstreamShapeError
from gold_monitor.domain.numbers import parse_finite

EXCHANGE = "OKX"
PRICE_CURRENCY = "USD"
QUOTE_CURRENCY = "USDT"
OK_CODE = "0"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _first_ticker(payload: Any) -> dict:
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        raise UpstreamShapeError(f"Unexpected OKX ticker payload: {payload!r:.500}")
    return data[0]


def normalize_ticker(payload: Any, *, symbol: str, now_ms: Optional[int] = None) -> PriceSnapshot:
    """Build a PriceSnapshot from a /market/ticker response.

    Raises:
        UpstreamShapeError: the payload carries no ticker record.
    """
    ticker = _first_ticker(payload)

    last = parse_finite(ticker.get("last"))
    open_24h = parse_finite(ticker.get("open24h"))
    high_24h = parse_finite(ticker.get("high24h"))
    low_24h = parse_finite(ticker.get("low24h"))
    raw_volume = ticker.get("volCcy24h")
    if raw_volume is None:
        raw_volume = ticker.get("vol24h")
    volume_24h = parse_finite(raw_volume)

    change = last - open_24h if last is not None and open_24h is not None else None
    change_percent = (
        change / open_24h * 100 if change is not None and open_24h else None
    )

    ts = parse_finite(ticker.get("ts"))
    timestamp = int(ts) if ts else (now_ms if now_ms is not None else _now_ms())

    return PriceSnapshot(
        price=last,
        open_24h=open_24h,
        high_24h=high_24h,
        low_24h=low_24h,
        volume_24h=volume_24h,
        change=change,
        change_percent=change_percent,
        currency=PRICE_CURRENCY,
        quote_currency=QUOTE_CURRENCY,
        symbol=symbol,
        exchange=EXCHANGE,
        timestamp=timestamp,
    )


def _to_candle(row: Any) -> Optional[Candle]:
    if not isinstance(row, (list, tuple)) or len(row) < 5:
        return None
    ts, open_, high, low, close = (parse_finite(v) for v in row[:5])
    if ts is None or open_ is None or high is None or low is None or close is None:
        return None
    volume = parse_finite(row[5]) if len(row) > 5 else None
    return Candle(time=int(ts), open=open_, high=high, low=low, close=close, volume=volume)


def normalize_candles(payload: Any) -> list[Candle]:
    """Build an ascending candle series from a /market/candles response.

    Rows missing any of time/open/high/low/close are dropped whole; a bad
    volume is kept as None. OKX returns newest first, but no order is assumed.

    Raises:
        UpstreamShapeError: code is not "0" or data is not a list.
    """
    if (
        not isinstance(payload, dict)
        or payload.get("code") != OK_CODE
        or not isinstance(payload.get("data"), list)
    ):
        raise UpstreamShapeError(f"Unexpected OKX candles payload: {payload!r:.500}")

    candles = [c for c in (_to_candle(row) for row in payload["data"]) if c is not None]
    candles.sort(key=lambda c: c.time)
    return candles
