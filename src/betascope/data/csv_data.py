"""CSV-backed price source."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import pandas as pd

from betascope.domain.errors import DataProviderError

from .base import normalize_bars, slice_date_range


class CsvPriceSource:
    """Load daily bars from local CSV files, optionally backfilling from a fetcher."""

    date_column_candidates = ("date", "datetime", "timestamp")

    def __init__(
        self,
        data_dir: str,
        missing_data_fetcher: Callable[[str], pd.DataFrame] | None = None,
        persist_downloaded_bars: bool = True,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.missing_data_fetcher = missing_data_fetcher
        self.persist_downloaded_bars = persist_downloaded_bars
        self._bars_cache: dict[str, pd.DataFrame] = {}
        self._missing_data_errors: dict[str, str] = {}

    def get_bars(
        self,
        symbol: str,
        start: date | None = None,
        end: date | None = None,
    ) -> pd.DataFrame:
        bars = self._load_bars(symbol)
        return slice_date_range(bars, start, end)

    def _load_bars(self, symbol: str) -> pd.DataFrame:
        cached = self._bars_cache.get(symbol)
        if cached is not None:
            return cached

        path = self._resolve_path(symbol)
        if path is None:
            fallback_bars = self._load_missing_data_with_fallback(symbol)
            if fallback_bars is None:
                raise DataProviderError(f"No CSV found for {symbol} under {self.data_dir}")
            self._bars_cache[symbol] = fallback_bars
            return fallback_bars
        frame = pd.read_csv(path)
        try:
            normalized = self._normalize_csv(frame, symbol)
        except ValueError as exc:
            raise DataProviderError(f"{path}: {exc}") from exc
        self._bars_cache[symbol] = normalized
        return normalized

    def _resolve_path(self, symbol: str) -> Path | None:
        bare_symbol = symbol.strip()
        for candidate in (
            self.data_dir / f"{bare_symbol.upper()}.csv",
            self.data_dir / f"{bare_symbol.lower()}.csv",
            self.data_dir / f"{bare_symbol}.csv",
        ):
            if candidate.exists():
                return candidate
        return None

    def _load_missing_data_with_fallback(self, symbol: str) -> pd.DataFrame | None:
        if self.missing_data_fetcher is None:
            return None

        previous_error = self._missing_data_errors.get(symbol)
        if previous_error is not None:
            raise DataProviderError(previous_error)

        try:
            frame = self.missing_data_fetcher(symbol)
        except Exception as exc:
            message = (
                f"No CSV found for {symbol} under {self.data_dir}; fallback fetch failed: {exc}"
            )
            self._missing_data_errors[symbol] = message
            raise DataProviderError(message) from exc

        if not isinstance(frame, pd.DataFrame):
            message = (
                f"No CSV found for {symbol} under {self.data_dir}; "
                "fallback fetcher returned a non-DataFrame result"
            )
            self._missing_data_errors[symbol] = message
            raise DataProviderError(message)

        try:
            normalized = normalize_bars(frame, symbol)
        except ValueError as exc:
            raise DataProviderError(str(exc)) from exc
        if self.persist_downloaded_bars:
            self._persist_downloaded_bars(symbol, normalized)
        return normalized

    def _persist_downloaded_bars(self, symbol: str, bars: pd.DataFrame) -> None:
        path = self.data_dir / f"{symbol.strip().upper()}.csv"
        path.parent.mkdir(parents=True, exist_ok=True)
        output = bars.rename_axis("date").reset_index()
        output["date"] = output["date"].dt.strftime("%Y-%m-%d")
        output.to_csv(path, index=False)

    def _normalize_csv(self, frame: pd.DataFrame, symbol: str) -> pd.DataFrame:
        lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
        date_column = self._pick_date_column(lower_to_original)
        indexed = frame.set_index(date_column)
        return normalize_bars(indexed, symbol)

    def _pick_date_column(self, lower_to_original: dict[str, str]) -> str:
        for candidate in self.date_column_candidates:
            if candidate in lower_to_original:
                return lower_to_original[candidate]
        candidates = ", ".join(self.date_column_candidates)
        raise ValueError(f"CSV missing date column. Expected one of: {candidates}")
