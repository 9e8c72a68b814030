"""
Sanitizing client-supplied chart context before it reaches the LLM provider.
"""
import pytest

from gold_monitor.application.chat.chart_context import (
    MAX_CONTEXT_CANDLES,
    sanitize_chart_context,
)

BASE_TIME = 1700000000  # 2023-11-14T22:13:20Z


def _candles(count, start=BASE_TIME, step=60):
    return [
        {"time": start + i * step, "open": 2300 + i, "high": 2301.456 + i, "low": 2299.111 + i, "close": 2300.5 + i}
        for i in range(count)
    ]


@pytest.mark.unit
@pytest.mark.parametrize("count, expected", [(1, 1), (120, 120), (121, 120), (500, 120)])
def test_output_never_exceeds_cap(count, expected):
    context = sanitize_chart_context({"candles": _candles(count)})
    assert len(context.candles) == expected
    assert context.meta["candlesProvided"] == expected


@pytest.mark.unit
def test_empty_candles_means_no_context():
    assert sanitize_chart_context({"candles": []}) is None


@pytest.mark.unit
def test_most_recent_candles_are_kept():
    context = sanitize_chart_context({"candles": _candles(121)})
    # the first (oldest) entry is the one that falls off
    assert context.candles[0].time == "2023-11-14T22:14:20.000Z"
    assert len(context.candles) == MAX_CONTEXT_CANDLES


@pytest.mark.unit
def test_candle_fields_are_rounded_and_time_is_iso():
    context = sanitize_chart_context(
        {"candles": [{"time": BASE_TIME, "open": "2345.6789", "high": 2350.0012, "low": 2340, "close": 2346.5, "volume": 9}]}
    )
    candle = context.candles[0]
    assert candle.time == "2023-11-14T22:13:20.000Z"
    assert (candle.open, candle.high, candle.low, candle.close) == (2345.68, 2350.0, 2340.0, 2346.5)
    assert "volume" not in context.to_dict()["candles"][0]


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [(2300.125, 2300.13), (-2300.125, -2300.13), (2300.375, 2300.38), (1.005, 1.0), (2345.6749, 2345.67)],
)
def test_exact_halves_round_away_from_zero(raw, expected):
    context = sanitize_chart_context(
        {"candles": [{"time": BASE_TIME, "open": raw, "high": raw, "low": raw, "close": raw}]}
    )
    assert context.candles[0].open == expected
    assert sanitize_chart_context(context.to_dict()) == context


@pytest.mark.unit
def test_fractional_seconds_keep_millisecond_precision():
    context = sanitize_chart_context({"candles": [{"time": "1700000000.25", "open": 1, "high": 1, "low": 1, "close": 1}]})
    assert context.candles[0].time == "2023-11-14T22:13:20.250Z"


@pytest.mark.unit
def test_invalid_candles_dropped_individually():
    candles = _candles(3) + [
        {"time": "not-a-time", "open": 1, "high": 1, "low": 1, "close": 1},
        {"time": BASE_TIME, "open": "x", "high": 1, "low": 1, "close": 1},
        {"time": BASE_TIME, "open": 1, "high": 1, "low": 1},
        {"time": None, "open": 1, "high": 1, "low": 1, "close": 1},
        {"time": 1e300, "open": 1, "high": 1, "low": 1, "close": 1},
        "garbage",
        None,
    ]
    context = sanitize_chart_context({"candles": candles})
    assert len(context.candles) == 3
    assert context.meta["candlesProvided"] == 3


@pytest.mark.unit
def test_all_invalid_means_no_context():
    assert sanitize_chart_context({"candles": [{"time": "x"}, {"open": 1}]}) is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [None, "", "context", 42, [], {"meta": {"symbol": "X"}}, {"candles": "many"}, {"candles": {"0": {}}}],
)
def test_malformed_input_means_no_context(raw):
    assert sanitize_chart_context(raw) is None


@pytest.mark.unit
def test_meta_is_whitelisted_and_coerced():
    context = sanitize_chart_context(
        {
            "meta": {
                "symbol": "XAUT-USDT",
                "exchange": "OKX",
                "currency": "",
                "interval": "15m",
                "range": 5,
                "pointCount": "150",
                "apiKey": "should-not-pass",
                "candlesProvided": 999,
            },
            "candles": _candles(2),
        }
    )
    assert context.meta == {
        "symbol": "XAUT-USDT",
        "exchange": "OKX",
        "interval": "15m",
        "range": "5",
        "pointCount": 150,
        "candlesProvided": 2,
    }


@pytest.mark.unit
def test_missing_meta_still_reports_count():
    context = sanitize_chart_context({"meta": "nope", "candles": _candles(4)})
    assert context.meta == {"candlesProvided": 4}


@pytest.mark.unit
@pytest.mark.parametrize("count", [1, 7, 120, 300])
def test_sanitizing_is_idempotent(count):
    raw = {
        "meta": {"symbol": "XAUT-USDT", "interval": "1h", "pointCount": count},
        "candles": _candles(count, step=3600) + [{"time": "bad", "open": 1, "high": 1, "low": 1, "close": 1}],
    }
    once = sanitize_chart_context(raw)
    twice = sanitize_chart_context(once.to_dict())
    assert twice == once
    assert twice.to_dict() == once.to_dict()
