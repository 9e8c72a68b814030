"""
Use-case: retrieve OHLC candle history for a caller-facing range and interval.
Depends only on Domain ports and entities: no infrastructure imports.

Business decisions owned here:
  - INTERVAL_BARS: the granularities callers may ask for. Unknown values are
    rejected (UnsupportedInterval).
  - RANGE_DAYS: convenience lookback presets. Unknown values fall back to
    DEFAULT_RANGE instead of erroring.
  - Upstream request size: ceil(days * 1440 / minutes_per_bar) clamped to
    [MIN_LIMIT, MAX_LIMIT].
"""

import math
from typing import Optional

from gold_monitor.domain.entities.market_data import CandleHistory, HistoryWindow
from gold_monitor.domain.errors import UnsupportedInterval
from gold_monitor.domain.ports.market_data_port import IMarketDataProvider

# interval -> (exchange bar code, minutes per bar)
INTERVAL_BARS: dict[str, tuple[str, int]] = {
    "5m": ("5m", 5),
    "15m": ("15m", 15),
    "30m": ("30m", 30),
    "1h": ("1H", 60),
    "1d": ("1D", 1440),
}

RANGE_DAYS: dict[str, int] = {
    "1d": 1,
    "5d": 5,
    "1mo": 30,
    "3mo": 90,
    "6mo": 180,
}

DEFAULT_RANGE = "5d"
DEFAULT_INTERVAL = "15m"
MIN_LIMIT = 50
MAX_LIMIT = 300
MINUTES_PER_DAY = 1440


def resolve_history_window(range_key: Optional[str], interval: Optional[str]) -> HistoryWindow:
    """Map caller range/interval onto an exchange bar code and candle count.

    Raises:
        UnsupportedInterval: if *interval* is not one of INTERVAL_BARS.
    """
    interval_key = (interval or DEFAULT_INTERVAL).strip().lower()
    if interval_key not in INTERVAL_BARS:
        raise UnsupportedInterval(interval_key)
    bar, minutes = INTERVAL_BARS[interval_key]

    days = RANGE_DAYS.get(range_key or DEFAULT_RANGE, RANGE_DAYS[DEFAULT_RANGE])
    estimated = math.ceil(days * MINUTES_PER_DAY / minutes)
    limit = max(MIN_LIMIT, min(estimated, MAX_LIMIT))
    return HistoryWindow(
        interval=interval_key,
        bar=bar,
        minutes=minutes,
        range_days=days,
        limit=limit,
    )


class GetCandleHistoryUseCase:
    def __init__(self, provider: IMarketDataProvider) -> None:
        self._provider = provider

    async def execute(
        self,
        range_key: Optional[str] = None,
        interval: Optional[str] = None,
    ) -> CandleHistory:
        """Fetch candles for the resolved window.

        Args:
            range_key: One of RANGE_DAYS (e.g. '5d', '1mo'); unknown -> '5d'.
            interval:  One of INTERVAL_BARS (case-insensitive).

        Raises:
            UnsupportedInterval: before any upstream call, for an unknown interval.
            Any UpstreamError propagated from the IMarketDataProvider.
        """
        window = resolve_history_window(range_key, interval)
        candles = await self._provider.get_candles(window.bar, window.limit)
        return CandleHistory(
            symbol=self._provider.symbol,
            exchange=self._provider.exchange,
            currency=self._provider.quote_currency,
            interval=window.bar,
            range_days=window.range_days,
            candles=candles,
        )
