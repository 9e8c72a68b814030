"""
Sanitizer for client-supplied chart context.

The browser sends whatever it has on screen; this is forwarded to a paid
third-party API, so only whitelisted fields survive and the candle list is
capped. Output of sanitize_chart_context() sanitizes to itself.
"""

from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from gold_monitor.domain.entities.chat import ChartContext, ContextCandle
from gold_monitor.domain.numbers import parse_finite

MAX_CONTEXT_CANDLES = 120

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)
_CENT = Decimal("0.01")
# floats at or above 2**53 have no fractional part
_INTEGRAL_FLOAT = float(2**53)
_STRING_META_FIELDS = ("symbol", "exchange", "currency", "interval", "range")


def _epoch_millis(value: Any) -> Optional[int]:
    """Epoch seconds (number or numeric string) or an ISO-8601 string -> epoch ms."""
    seconds = parse_finite(value)
    if seconds is not None:
        try:
            return int(seconds * 1000)
        except OverflowError:
            return None
    if not isinstance(value, str):
        return None
    try:
        moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // _MILLISECOND


def _iso_utc(millis: int) -> Optional[str]:
    try:
        m = _EPOCH + timedelta(milliseconds=millis)
    except (OverflowError, ValueError):
        return None
    return (
        f"{m.year:04d}-{m.month:02d}-{m.day:02d}T"
        f"{m.hour:02d}:{m.minute:02d}:{m.second:02d}.{m.microsecond // 1000:03d}Z"
    )


def _round2(value: Any) -> Optional[float]:
    number = parse_finite(value)
    if number is None or abs(number) >= _INTEGRAL_FLOAT:
        return number
    return float(Decimal(number).quantize(_CENT, rounding=ROUND_HALF_UP))


def _sanitize_candle(entry: Any) -> Optional[ContextCandle]:
    if not isinstance(entry, Mapping):
        return None
    millis = _epoch_millis(entry.get("time"))
    time_iso = _iso_utc(millis) if millis is not None else None
    prices = [_round2(entry.get(key)) for key in ("open", "high", "low", "close")]
    if time_iso is None or any(p is None for p in prices):
        return None
    open_, high, low, close = prices
    return ContextCandle(time=time_iso, open=open_, high=high, low=low, close=close)


def _sanitize_meta(meta: Any, candles_provided: int) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    if isinstance(meta, Mapping):
        for key in _STRING_META_FIELDS:
            if meta.get(key):
                cleaned[key] = str(meta[key])
        point_count = parse_finite(meta.get("pointCount"))
        if point_count is not None:
            cleaned["pointCount"] = int(point_count) if point_count.is_integer() else point_count
    cleaned["candlesProvided"] = candles_provided
    return cleaned


def sanitize_chart_context(raw: Any) -> Optional[ChartContext]:
    """Whitelist and cap a client chart context.

    Returns None when nothing usable remains: raw is not an object, candles
    is not a non-empty list, or every one of the last 120 candles fails
    validation. Individual bad candles are dropped, the rest survive.
    """
    if not isinstance(raw, Mapping):
        return None
    candles = raw.get("candles")
    if not isinstance(candles, list) or not candles:
        return None

    kept = [
        candle
        for candle in (_sanitize_candle(entry) for entry in candles[-MAX_CONTEXT_CANDLES:])
        if candle is not None
    ]
    if not kept:
        return None
    return ChartContext(meta=_sanitize_meta(raw.get("meta"), len(kept)), candles=kept)
