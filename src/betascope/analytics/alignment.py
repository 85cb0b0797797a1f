"""Date alignment of independently sourced return series."""

from __future__ import annotations

import logging
import math

from betascope.domain.errors import InsufficientDataError
from betascope.domain.models import AlignedDataset, ReturnSeries

MIN_ALIGNED_ROWS = 3

logger = logging.getLogger(__name__)


def align_series(*series: ReturnSeries, min_rows: int = MIN_ALIGNED_ROWS) -> AlignedDataset:
    """Join return series on common dates and drop non-finite rows.

    Step one keeps only dates present in every series; step two drops any
    row holding NaN or an infinity. Raises ``InsufficientDataError`` when
    fewer than ``min_rows`` rows survive.
    """
    if len(series) < 2:
        raise ValueError("align_series needs at least two return series")
    columns = tuple(item.channel for item in series)
    if len(set(columns)) != len(columns):
        raise ValueError(f"Duplicate channel names: {', '.join(columns)}")
    minimum = max(MIN_ALIGNED_ROWS, min_rows)

    lookups = [dict(zip(item.dates, item.values)) for item in series]
    common = set(series[0].dates)
    for item in series[1:]:
        common &= set(item.dates)
    joined_dates = sorted(common)

    dates = []
    rows = []
    for day in joined_dates:
        row = tuple(float(lookup[day]) for lookup in lookups)
        if not all(math.isfinite(value) for value in row):
            continue
        dates.append(day)
        rows.append(row)

    dropped = len(joined_dates) - len(rows)
    if dropped:
        logger.debug("dropped %d non-finite rows after joining %d dates", dropped, len(joined_dates))
    if len(rows) < minimum:
        raise InsufficientDataError(len(rows), minimum)
    return AlignedDataset(columns=columns, dates=tuple(dates), rows=tuple(rows))
