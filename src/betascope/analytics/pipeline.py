"""Asset-versus-index beta pipeline: returns, alignment, regressions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from betascope.domain.errors import BetaScopeError, RegressionError
from betascope.domain.models import AlignedDataset, BetaReport, PriceBar, RegressionResult

from .alignment import MIN_ALIGNED_ROWS, align_series
from .regression import DEFAULT_CONFIDENCE_LEVEL, fit_regression
from .returns import returns_from_bars

DEPENDENT_CHANNELS = ("low", "high", "close")
INDEX_COLUMN = "index_close"

logger = logging.getLogger(__name__)


def asset_column(channel: str) -> str:
    return f"asset_{channel}"


def build_dataset(
    asset_bars: Sequence[PriceBar],
    index_bars: Sequence[PriceBar],
    min_rows: int = MIN_ALIGNED_ROWS,
) -> AlignedDataset:
    """Turn both bar sequences into returns and align them by date."""
    series = [
        returns_from_bars(asset_bars, channel, asset_column(channel))
        for channel in DEPENDENT_CHANNELS
    ]
    series.append(returns_from_bars(index_bars, "close", INDEX_COLUMN))
    return align_series(*series, min_rows=min_rows)


def _regress_channel(
    dataset: AlignedDataset,
    channel: str,
    confidence_level: float,
) -> RegressionResult | BetaScopeError:
    try:
        return fit_regression(
            dataset,
            dependent=asset_column(channel),
            independent=INDEX_COLUMN,
            confidence_level=confidence_level,
            channel=channel,
        )
    except RegressionError as exc:
        # Reported once by the caller from BetaReport.failures.
        logger.debug("regression skipped: %s", exc)
        return exc


def estimate_betas(
    asset_bars: Sequence[PriceBar],
    index_bars: Sequence[PriceBar],
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    min_rows: int = MIN_ALIGNED_ROWS,
    max_workers: int = 1,
) -> BetaReport:
    """Estimate low/high/close betas of an asset against index close.

    ``InsufficientDataError`` from alignment propagates before any
    regression runs. Per-channel regression errors land in
    ``BetaReport.failures`` and do not stop the other channels.
    """
    if not 0.0 < confidence_level < 1.0:
        raise ValueError("confidence_level must be between 0 and 1 (exclusive)")
    dataset = build_dataset(asset_bars, index_bars, min_rows=min_rows)
    logger.debug("aligned %d rows across %d columns", len(dataset), len(dataset.columns))

    if max_workers > 1:
        with ThreadPoolExecutor(
            max_workers=min(max_workers, len(DEPENDENT_CHANNELS)),
            thread_name_prefix="betascope-regression",
        ) as executor:
            futures = [
                executor.submit(_regress_channel, dataset, channel, confidence_level)
                for channel in DEPENDENT_CHANNELS
            ]
            outcomes = [future.result() for future in futures]
    else:
        outcomes = [
            _regress_channel(dataset, channel, confidence_level)
            for channel in DEPENDENT_CHANNELS
        ]

    results: dict[str, RegressionResult] = {}
    failures: dict[str, BetaScopeError] = {}
    for channel, outcome in zip(DEPENDENT_CHANNELS, outcomes):
        if isinstance(outcome, RegressionResult):
            results[channel] = outcome
        else:
            failures[channel] = outcome
    return BetaReport(dataset=dataset, results=results, failures=failures)
