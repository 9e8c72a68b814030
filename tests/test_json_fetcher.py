"""
Upstream fetcher error mapping over httpx.MockTransport.
"""
import asyncio

import httpx
import pytest

from gold_monitor.domain.errors import (
    UpstreamConnectionError,
    UpstreamHttpError,
    UpstreamParseError,
    UpstreamTimeout,
)
from gold_monitor.infrastructure.http.json_fetcher import fetch_json, request_json

URL = "https://upstream.test/api/v5/market/ticker"


def _fetch(handler, **kwargs):
    return asyncio.run(fetch_json(URL, transport=httpx.MockTransport(handler), **kwargs))


@pytest.mark.integration
def test_returns_parsed_json_and_sends_params_and_headers():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["accept"] = request.headers.get("accept")
        return httpx.Response(200, json={"code": "0", "data": [1, 2]})

    payload = _fetch(handler, params={"instId": "XAUT-USDT"}, headers={"Accept": "application/json"})
    assert payload == {"code": "0", "data": [1, 2]}
    assert seen == {"params": {"instId": "XAUT-USDT"}, "accept": "application/json"}


@pytest.mark.integration
def test_non_success_status_carries_code_and_body():
    with pytest.raises(UpstreamHttpError) as excinfo:
        _fetch(lambda request: httpx.Response(503, text="maintenance"))
    assert excinfo.value.status == 503
    assert excinfo.value.body == "maintenance"


@pytest.mark.integration
def test_invalid_json_is_parse_error():
    with pytest.raises(UpstreamParseError):
        _fetch(lambda request: httpx.Response(200, text="<html>captcha</html>"))


@pytest.mark.integration
def test_corrupt_compressed_body_is_parse_error():
    with pytest.raises(UpstreamParseError):
        _fetch(lambda request: httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not-gzip-at-all"))


@pytest.mark.integration
def test_transport_failure_is_connection_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamConnectionError):
        _fetch(handler)


@pytest.mark.integration
def test_httpx_timeout_is_upstream_timeout():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(UpstreamTimeout):
        _fetch(handler)


@pytest.mark.integration
def test_timeout_cancels_the_in_flight_request():
    state = {"cancelled": False, "finished": False}

    async def slow_handler(request):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            state["cancelled"] = True
            raise
        state["finished"] = True
        return httpx.Response(200, json={})

    with pytest.raises(UpstreamTimeout):
        _fetch(slow_handler, timeout=0.05)
    assert state == {"cancelled": True, "finished": False}


@pytest.mark.integration
def test_request_json_posts_body():
    captured = {}

    def handler(request):
        captured["method"] = request.method
        captured["body"] = request.content
        return httpx.Response(200, json={"ok": True})

    result = asyncio.run(
        request_json("POST", URL, json_body={"a": 1}, transport=httpx.MockTransport(handler))
    )
    assert result == {"ok": True}
    assert captured["method"] == "POST"
    assert b'"a"' in captured["body"]
