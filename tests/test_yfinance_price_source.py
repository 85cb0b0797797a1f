from __future__ import annotations

import sys
from datetime import date
from types import SimpleNamespace

import pandas as pd
import pytest

from betascope.data.yfinance_data import YFinancePriceSource
from betascope.domain.errors import DataProviderError


def _install_fake_yfinance(monkeypatch, history: pd.DataFrame, captured: dict) -> None:
    class FakeTicker:
        def __init__(self, ticker: str) -> None:
            captured["ticker"] = ticker

        def history(self, **kwargs: str) -> pd.DataFrame:
            captured["kwargs"] = kwargs
            return history

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))


def test_yfinance_source_normalizes_history(monkeypatch) -> None:
    captured: dict = {}
    history = pd.DataFrame(
        {
            "Open": [10.0, 11.0],
            "High": [11.0, 12.0],
            "Low": [9.0, 10.0],
            "Close": [10.5, 11.5],
            "Volume": [100, 200],
        },
        index=pd.DatetimeIndex(
            pd.to_datetime(["2025-01-02", "2025-01-03"]).tz_localize("America/New_York")
        ),
    )
    _install_fake_yfinance(monkeypatch, history, captured)

    bars = YFinancePriceSource().get_bars("spy")

    assert captured["ticker"] == "SPY"
    assert captured["kwargs"]["period"] == "max"
    assert captured["kwargs"]["auto_adjust"] is False
    assert list(bars.columns) == ["low", "high", "close"]
    assert bars.index.tz is None
    assert [ts.date() for ts in bars.index] == [date(2025, 1, 2), date(2025, 1, 3)]
    assert float(bars["close"].iloc[-1]) == 11.5


def test_yfinance_source_requests_inclusive_end(monkeypatch) -> None:
    captured: dict = {}
    history = pd.DataFrame(
        {"Close": [1.0, 2.0, 3.0]},
        index=pd.to_datetime(["2025-01-02", "2025-01-03", "2025-01-06"]),
    )
    _install_fake_yfinance(monkeypatch, history, captured)

    bars = YFinancePriceSource().get_bars(
        "SPY", start=date(2025, 1, 3), end=date(2025, 1, 6)
    )

    assert captured["kwargs"]["start"] == "2025-01-03"
    assert captured["kwargs"]["end"] == "2025-01-07"
    assert "period" not in captured["kwargs"]
    assert len(bars) == 2
    assert bars["low"].isna().all()


def test_yfinance_source_end_only_requests_full_history(monkeypatch) -> None:
    captured: dict = {}
    history = pd.DataFrame(
        {"Close": [1.0, 2.0, 3.0]},
        index=pd.to_datetime(["2010-01-04", "2015-06-01", "2020-07-01"]),
    )
    _install_fake_yfinance(monkeypatch, history, captured)

    bars = YFinancePriceSource().get_bars("SPY", end=date(2020, 6, 30))

    assert captured["kwargs"]["start"] == "1900-01-01"
    assert captured["kwargs"]["end"] == "2020-07-01"
    assert "period" not in captured["kwargs"]
    assert [ts.date() for ts in bars.index] == [date(2010, 1, 4), date(2015, 6, 1)]


def test_yfinance_source_handles_multiindex_columns(monkeypatch) -> None:
    history = pd.DataFrame(
        [[9.0, 11.0, 10.0], [9.5, 11.5, 11.0]],
        columns=pd.MultiIndex.from_tuples([("Low", "SPY"), ("High", "SPY"), ("Close", "SPY")]),
        index=pd.to_datetime(["2025-01-02", "2025-01-03"]),
    )
    _install_fake_yfinance(monkeypatch, history, {})

    bars = YFinancePriceSource().get_bars("SPY")

    assert list(bars.columns) == ["low", "high", "close"]
    assert float(bars["low"].iloc[0]) == 9.0


def test_yfinance_source_rejects_empty_payload(monkeypatch) -> None:
    _install_fake_yfinance(monkeypatch, pd.DataFrame(), {})

    with pytest.raises(DataProviderError, match="no rows"):
        YFinancePriceSource().get_bars("SPY")


def test_yfinance_source_wraps_request_failures(monkeypatch) -> None:
    class BrokenTicker:
        def __init__(self, _ticker: str) -> None:
            return None

        def history(self, **_kwargs: str) -> pd.DataFrame:
            raise RuntimeError("rate limited")

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=BrokenTicker))

    with pytest.raises(DataProviderError, match="rate limited"):
        YFinancePriceSource().get_bars("SPY")
