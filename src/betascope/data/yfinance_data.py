"""Yahoo Finance price source."""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Any

import pandas as pd

from betascope.domain.errors import DataProviderError

from .base import normalize_bars, slice_date_range

EARLIEST_START = date(1900, 1, 1)


class YFinancePriceSource:
    """Fetch daily bars from Yahoo Finance via yfinance."""

    interval = "1d"

    def get_bars(
        self,
        symbol: str,
        start: date | None = None,
        end: date | None = None,
    ) -> pd.DataFrame:
        try:
            import yfinance as yf
        except ImportError as exc:
            raise DataProviderError(
                "yfinance is required for the yfinance data source. Install it with `pip install yfinance`."
            ) from exc

        ticker = symbol.strip().upper()
        try:
            history = yf.Ticker(ticker).history(
                auto_adjust=False,
                actions=False,
                **self._history_window(start, end),
            )
        except Exception as exc:
            raise DataProviderError(f"yfinance request failed for {ticker}: {exc}") from exc

        frame = self._normalize_history(history, ticker)
        return slice_date_range(frame, start, end)

    def _history_window(self, start: date | None, end: date | None) -> dict[str, Any]:
        window: dict[str, Any] = {"interval": self.interval}
        if start is None and end is None:
            window["period"] = "max"
            return window
        # Without ``start`` yfinance falls back to one month before ``end``.
        window["start"] = (start or EARLIEST_START).isoformat()
        if end is not None:
            # yfinance treats ``end`` as exclusive.
            window["end"] = (end + timedelta(days=1)).isoformat()
        return window

    @staticmethod
    def _normalize_history(history: Any, ticker: str) -> pd.DataFrame:
        if history is None:
            raise DataProviderError(f"yfinance returned no rows for {ticker}")
        frame = pd.DataFrame(history).copy()
        if frame.empty:
            raise DataProviderError(f"yfinance returned no rows for {ticker}")

        renamed: dict[Any, str] = {}
        for field in ("low", "high", "close"):
            column = YFinancePriceSource._pick_column(frame, field)
            if column is not None:
                renamed[column] = field
        if "close" not in renamed.values():
            adj_close = YFinancePriceSource._pick_column(frame, "adj_close")
            if adj_close is not None:
                renamed[adj_close] = "close"
        if "close" not in renamed.values():
            raise DataProviderError(f"yfinance payload missing close column for {ticker}")

        selected = frame[list(renamed)].copy()
        selected.columns = [renamed[column] for column in renamed]
        try:
            return normalize_bars(selected, ticker)
        except ValueError as exc:
            raise DataProviderError(str(exc)) from exc

    @staticmethod
    def _pick_column(frame: pd.DataFrame, field: str) -> Any | None:
        for column in frame.columns:
            key = YFinancePriceSource._column_key(column)
            if key == field or key.startswith(f"{field}_"):
                return column
        return None

    @staticmethod
    def _column_key(value: Any) -> str:
        if isinstance(value, tuple):
            text = "_".join(str(part) for part in value if part is not None)
        else:
            text = str(value)
        return re.sub(r"[^a-zA-Z0-9]+", "_", text).strip("_").lower()
