"""Price source contract and frame helpers shared by providers."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any, Protocol

import pandas as pd

from betascope.domain.models import PriceBar

BAR_COLUMNS = ("low", "high", "close")


class PriceSource(Protocol):
    """Interface for daily bar retrieval."""

    def get_bars(
        self,
        symbol: str,
        start: date | None = None,
        end: date | None = None,
    ) -> pd.DataFrame:
        """Return low/high/close bars with a datetime index, ``end`` inclusive."""


def normalize_date_index(values: Iterable[Any]) -> pd.DatetimeIndex:
    """Parse timestamps into a tz-naive, midnight-normalized index."""
    index = pd.DatetimeIndex(pd.to_datetime(values))
    if index.tz is not None:
        index = index.tz_localize(None)
    return index.normalize()


def normalize_bars(frame: pd.DataFrame, symbol: str) -> pd.DataFrame:
    """Keep numeric low/high/close columns, sorted and de-duplicated by date."""
    lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
    if "close" not in lower_to_original:
        raise ValueError(f"{symbol}: bars missing required column 'close'")

    normalized = pd.DataFrame(index=normalize_date_index(frame.index))
    for name in BAR_COLUMNS:
        source = lower_to_original.get(name)
        if source is None:
            normalized[name] = float("nan")
        else:
            normalized[name] = pd.to_numeric(frame[source], errors="coerce").to_numpy()
    normalized = normalized.dropna(subset=["close"])
    normalized = normalized.sort_index()
    normalized = normalized[~normalized.index.duplicated(keep="last")]
    if normalized.empty:
        raise ValueError(f"{symbol}: data has no valid close rows")
    return normalized


def slice_date_range(
    frame: pd.DataFrame,
    start: date | None = None,
    end: date | None = None,
) -> pd.DataFrame:
    """Select rows between ``start`` and ``end``, both inclusive."""
    mask = pd.Series(True, index=frame.index)
    if start is not None:
        mask &= frame.index >= pd.Timestamp(start)
    if end is not None:
        mask &= frame.index <= pd.Timestamp(end)
    return frame.loc[mask.to_numpy()].copy()


def bars_from_frame(frame: pd.DataFrame) -> tuple[PriceBar, ...]:
    """Convert a normalized bar frame into immutable price bars."""
    bars: list[PriceBar] = []
    for timestamp, row in zip(frame.index, frame.itertuples(index=False)):
        bars.append(
            PriceBar(
                date=pd.Timestamp(timestamp).date(),
                low=float(getattr(row, "low", float("nan"))),
                high=float(getattr(row, "high", float("nan"))),
                close=float(row.close),
            )
        )
    return tuple(bars)
