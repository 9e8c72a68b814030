"""
Infrastructure adapter: OKX public market REST API -> IMarketDataProvider.
All OKX-specific details (endpoints, query names, payload shapes) are confined
here and in okx_normalizers; the rest of the codebase depends only on
IMarketDataProvider.
"""

from typing import Optional

import httpx

from gold_monitor.domain.entities.market_data import Candle, PriceSnapshot
from gold_monitor.domain.ports.market_data_port import IMarketDataProvider
from gold_monitor.infrastructure.http.json_fetcher import DEFAULT_TIMEOUT_SECONDS, fetch_json
from gold_monitor.infrastructure.market_data import okx_normalizers

DEFAULT_BASE_URL = "https://www.okx.com"
DEFAULT_INSTRUMENT = "XAUT-USDT"

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; GoldMonitor/1.0)",
    "Accept": "application/json",
}


class OKXMarketDataProvider(IMarketDataProvider):
    """Fetches ticker and candle data for a single OKX instrument."""

    TICKER_PATH = "/api/v5/market/ticker"
    CANDLES_PATH = "/api/v5/market/candles"

    exchange = okx_normalizers.EXCHANGE
    quote_currency = okx_normalizers.QUOTE_CURRENCY

    def __init__(
        self,
        instrument: str = DEFAULT_INSTRUMENT,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        self.symbol = instrument
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def get_ticker(self) -> PriceSnapshot:
        payload = await fetch_json(
            self._base_url + self.TICKER_PATH,
            params={"instId": self.symbol},
            headers=REQUEST_HEADERS,
            timeout=self._timeout,
            transport=self._transport,
        )
        return okx_normalizers.normalize_ticker(payload, symbol=self.symbol)

    async def get_candles(self, bar: str, limit: int) -> list[Candle]:
        payload = await fetch_json(
            self._base_url + self.CANDLES_PATH,
            params={"instId": self.symbol, "bar": bar, "limit": str(limit)},
            headers=REQUEST_HEADERS,
            timeout=self._timeout,
            transport=self._transport,
        )
        return okx_normalizers.normalize_candles(payload)
