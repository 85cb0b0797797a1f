"""Runtime wiring for a single beta estimation run."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from uuid import uuid4

from betascope.analytics.pipeline import DEPENDENT_CHANNELS, estimate_betas
from betascope.config import Settings
from betascope.data.base import PriceSource, bars_from_frame
from betascope.data.csv_data import CsvPriceSource
from betascope.data.yfinance_data import YFinancePriceSource
from betascope.domain.errors import BetaScopeError, DataProviderError
from betascope.domain.events import RunEvent
from betascope.domain.models import BetaReport, PriceBar
from betascope.logging.event_sink import (
    JsonlEventSink,
    generate_plotly_report,
    write_aligned_csv,
)
from betascope.logging.logger import HumanLogger


def build_price_source(settings: Settings) -> PriceSource:
    """Create the configured price source."""
    if settings.data_source == "yfinance":
        return YFinancePriceSource()
    if settings.data_source == "csv":
        return CsvPriceSource(data_dir=settings.historical_data_dir)
    fallback = YFinancePriceSource()
    return CsvPriceSource(
        data_dir=settings.historical_data_dir,
        missing_data_fetcher=lambda symbol: fallback.get_bars(symbol),
    )


def fetch_bars(
    price_source: PriceSource,
    symbol: str,
    settings: Settings,
    required: tuple[str, ...] = ("close",),
) -> tuple[PriceBar, ...]:
    """Retrieve bars for the configured date range as immutable records."""
    frame = price_source.get_bars(symbol, settings.start_date, settings.end_date)
    if not frame.empty:
        for column in required:
            if column not in frame.columns or frame[column].isna().all():
                raise DataProviderError(f"{symbol}: price data is missing column '{column}'")
    return bars_from_frame(frame)


def run(settings: Settings, price_source: PriceSource | None = None) -> int:
    """Estimate asset betas against the index and write run artifacts."""
    source = price_source or build_price_source(settings)
    human_logger = HumanLogger(level=settings.log_level)

    run_id = uuid4().hex
    run_directory = Path(settings.events_dir) / run_id
    run_directory.mkdir(parents=True, exist_ok=True)
    event_sink = JsonlEventSink(str(run_directory / "events.jsonl"))

    def emit(event_type: str, **payload: object) -> None:
        event_sink.emit(
            RunEvent(
                run_id=run_id,
                asset_symbol=settings.asset_symbol,
                index_symbol=settings.index_symbol,
                event_type=event_type,
                payload=dict(payload),
            )
        )

    human_logger.run_started(
        run_id,
        settings.asset_symbol,
        settings.index_symbol,
        settings.start_date,
        settings.end_date,
    )
    emit(
        "run_started",
        start_date=settings.start_date,
        end_date=settings.end_date,
        confidence_level=settings.confidence_level,
    )

    try:
        asset_bars = fetch_bars(
            source, settings.asset_symbol, settings, required=DEPENDENT_CHANNELS
        )
        human_logger.bars(settings.asset_symbol, len(asset_bars))
        index_bars = fetch_bars(source, settings.index_symbol, settings)
        human_logger.bars(settings.index_symbol, len(index_bars))
        report = estimate_betas(
            asset_bars,
            index_bars,
            confidence_level=settings.confidence_level,
            min_rows=settings.min_aligned_rows,
            max_workers=settings.max_workers,
        )
    except BetaScopeError as exc:
        human_logger.error(str(exc))
        emit("error", message=str(exc), kind=type(exc).__name__)
        return 1

    emit_report(report, human_logger, emit)
    aligned_path = write_aligned_csv(report.dataset, run_directory / "aligned.csv")
    human_logger.artifact("audit", str(aligned_path))
    if settings.write_report:
        report_path = run_directory / "report.html"
        generate_plotly_report(
            report,
            str(report_path),
            asset_symbol=settings.asset_symbol,
            index_symbol=settings.index_symbol,
        )
        human_logger.artifact("report", str(report_path))
    return 0


def emit_report(
    report: BetaReport,
    human_logger: HumanLogger,
    emit: Callable[..., None],
) -> None:
    """Log and record every channel outcome of a report."""
    dataset = report.dataset
    human_logger.dataset(dataset)
    emit(
        "dataset_aligned",
        rows=len(dataset),
        columns=list(dataset.columns),
        first_date=dataset.dates[0] if dataset.dates else None,
        last_date=dataset.dates[-1] if dataset.dates else None,
    )
    for result in report.results.values():
        human_logger.result(result)
        emit("regression_result", **result.to_record())
    for channel, failure in report.failures.items():
        human_logger.failure(channel, str(failure))
        emit(
            "regression_failed",
            channel=channel,
            kind=type(failure).__name__,
            message=str(failure),
        )
