"""Discrete-return transformation for a single price channel."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import date

from betascope.domain.models import PriceBar, ReturnSeries

PRICE_FIELDS = ("low", "high", "close")


def compute_returns(
    dates: Sequence[date],
    prices: Sequence[float],
    channel: str,
) -> ReturnSeries:
    """Return ``(p_i - p_{i-1}) / p_{i-1}`` for every bar after the first.

    A zero previous price yields NaN instead of raising; non-finite values
    are left for the aligner to drop. Fewer than two prices give an empty
    series.
    """
    if len(dates) != len(prices):
        raise ValueError(f"{channel}: {len(dates)} dates but {len(prices)} prices")
    if len(prices) < 2:
        return ReturnSeries(channel=channel)

    values: list[float] = []
    for previous, current in zip(prices, prices[1:]):
        previous = float(previous)
        if previous == 0.0:
            values.append(math.nan)
            continue
        values.append((float(current) - previous) / previous)
    return ReturnSeries(channel=channel, dates=tuple(dates[1:]), values=tuple(values))


def returns_from_bars(
    bars: Sequence[PriceBar],
    field: str,
    channel: str | None = None,
) -> ReturnSeries:
    """Apply :func:`compute_returns` to one field of a bar sequence."""
    if field not in PRICE_FIELDS:
        raise ValueError(f"Unknown price field '{field}'. Expected one of: {', '.join(PRICE_FIELDS)}")
    return compute_returns(
        [bar.date for bar in bars],
        [getattr(bar, field) for bar in bars],
        channel or field,
    )
