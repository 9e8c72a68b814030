"""
Shared fixtures. No test reaches the network: every outbound call goes
through an httpx.MockTransport built here.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from gold_monitor.infrastructure.config.settings import Settings
from gold_monitor.infrastructure.entrypoints.fastapi_app import create_app
from gold_monitor.infrastructure.llm.openai_chat_adapter import OpenAIChatAdapter
from gold_monitor.infrastructure.market_data.okx_adapter import OKXMarketDataProvider

OKX_BASE = "https://okx.test"
LLM_BASE = "https://llm.test/v1"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def last_json(self):
        return json.loads(self.requests[-1].content)


def okx_handler(ticker=None, candles=None, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/market/ticker"):
            return httpx.Response(status, json=ticker)
        if request.url.path.endswith("/market/candles"):
            return httpx.Response(status, json=candles)
        return httpx.Response(404, text="not found")

    return handler


@pytest.fixture
def ticker_payload():
    return {
        "code": "0",
        "msg": "",
        "data": [
            {
                "instId": "XAUT-USDT",
                "last": "2345.67",
                "open24h": "2300.00",
                "high24h": "2350.10",
                "low24h": "2290.55",
                "volCcy24h": "1520340.5",
                "vol24h": "650.2",
                "ts": "1700000000000",
            }
        ],
    }


@pytest.fixture
def candles_payload():
    # OKX returns newest first
    return {
        "code": "0",
        "msg": "",
        "data": [
            ["1700003600000", "2346", "2350", "2340", "2348", "12.5", "29000", "29000", "1"],
            ["1700000000000", "2340", "2347", "2338", "2346", "10.1", "23600", "23600", "1"],
            ["1700001800000", "2346", "2349", "2341", "2345", "", "0", "0", "1"],
            ["bad-ts", "2346", "2349", "2341", "2345", "3", "0", "0", "1"],
        ],
    }


@pytest.fixture
def settings(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<html><body>dashboard</body></html>", encoding="utf-8")
    (public / "robots.txt").write_text("User-agent: *\n", encoding="utf-8")
    return Settings(
        okx_instrument="XAUT-USDT",
        okx_base_url=OKX_BASE,
        openai_api_key="sk-test-key-123456",
        openai_base_url=LLM_BASE,
        public_dir=public,
    )


@pytest.fixture
def build_client(settings):
    """Factory: TestClient over the real app with mocked upstreams."""

    def _build(okx=None, llm=None, app_settings=None):
        app_settings = app_settings or settings
        provider = OKXMarketDataProvider(
            instrument=app_settings.okx_instrument,
            base_url=app_settings.okx_base_url,
            transport=okx or RecordingTransport(okx_handler()),
        )
        model = None
        if llm is not None and app_settings.openai_api_key:
            model = OpenAIChatAdapter(
                api_key=app_settings.openai_api_key,
                base_url=app_settings.openai_base_url,
                model=app_settings.openai_model,
                temperature=app_settings.openai_temperature,
                transport=llm,
            )
        return TestClient(create_app(app_settings, market_provider=provider, llm=model))

    return _build
