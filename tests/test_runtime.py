from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from betascope.config import Settings
from betascope.data.csv_data import CsvPriceSource
from betascope.data.yfinance_data import YFinancePriceSource
from betascope.runtime import build_price_source, run

DATES = pd.bdate_range("2025-01-01", periods=12).strftime("%Y-%m-%d").tolist()
INDEX_CLOSES = [100.0, 101.0, 99.5, 100.7, 102.3, 101.1, 103.0, 102.2, 104.1, 103.3, 105.0, 104.2]
ASSET_CLOSES = [50.0, 50.9, 49.4, 50.5, 52.0, 50.8, 53.1, 52.0, 53.9, 53.0, 55.2, 54.1]


def _write_prices(data_dir: Path, index_closes: list[float] = INDEX_CLOSES) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(
        {
            "date": DATES,
            "low": [close * 0.98 for close in ASSET_CLOSES],
            "high": [close * 1.02 for close in ASSET_CLOSES],
            "close": ASSET_CLOSES,
        }
    ).to_csv(data_dir / "AAPL.csv", index=False)
    pd.DataFrame({"date": DATES, "close": index_closes}).to_csv(data_dir / "SPY.csv", index=False)


def _settings(tmp_path: Path, **overrides: object) -> Settings:
    return Settings(
        data_source="csv",
        historical_data_dir=str(tmp_path / "prices"),
        events_dir=str(tmp_path / "runs"),
    ).with_overrides(**overrides)


def load_events(path: Path) -> list[dict[str, Any]]:
    with path.open("r", encoding="utf-8") as handle:
        return [json.loads(line) for line in handle if line.strip()]


def _run_directory(tmp_path: Path) -> Path:
    runs = list((tmp_path / "runs").iterdir())
    assert len(runs) == 1
    return runs[0]


def test_run_writes_events_audit_and_report(tmp_path: Path) -> None:
    _write_prices(tmp_path / "prices")

    exit_code = run(_settings(tmp_path))

    assert exit_code == 0
    run_directory = _run_directory(tmp_path)
    events = load_events(run_directory / "events.jsonl")
    event_types = [event["event_type"] for event in events]
    assert event_types[0] == "run_started"
    assert event_types.count("regression_result") == 3
    assert "dataset_aligned" in event_types
    channels = [
        event["payload"]["channel"] for event in events if event["event_type"] == "regression_result"
    ]
    assert channels == ["low", "high", "close"]

    aligned = pd.read_csv(run_directory / "aligned.csv")
    assert list(aligned.columns) == [
        "date",
        "asset_low",
        "asset_high",
        "asset_close",
        "index_close",
    ]
    assert len(aligned) == len(DATES) - 1
    assert (run_directory / "report.html").exists()


def test_run_honours_date_range_and_skips_report(tmp_path: Path) -> None:
    _write_prices(tmp_path / "prices")

    exit_code = run(_settings(tmp_path, start_date=DATES[2], write_report=False))

    assert exit_code == 0
    run_directory = _run_directory(tmp_path)
    assert len(pd.read_csv(run_directory / "aligned.csv")) == len(DATES) - 3
    assert not (run_directory / "report.html").exists()


def test_run_reports_insufficient_data(tmp_path: Path) -> None:
    _write_prices(tmp_path / "prices")

    exit_code = run(_settings(tmp_path, end_date=DATES[2]))

    assert exit_code == 1
    events = load_events(_run_directory(tmp_path) / "events.jsonl")
    assert events[-1]["event_type"] == "error"
    assert events[-1]["payload"]["kind"] == "InsufficientDataError"


def test_run_records_degenerate_channels_without_failing(tmp_path: Path) -> None:
    _write_prices(tmp_path / "prices", index_closes=[100.0] * len(DATES))

    exit_code = run(_settings(tmp_path))

    assert exit_code == 0
    run_directory = _run_directory(tmp_path)
    events = load_events(run_directory / "events.jsonl")
    failed = [event for event in events if event["event_type"] == "regression_failed"]
    assert [event["payload"]["channel"] for event in failed] == ["low", "high", "close"]
    assert all(event["payload"]["kind"] == "DegenerateRegressionError" for event in failed)

    # No estimate exists for a failed channel, so no beta bar is drawn.
    report_html = (run_directory / "report.html").read_text(encoding="utf-8")
    assert '"x":["low","high","close"]' not in report_html
    assert "Failed regressions" in report_html
    assert "zero variance" in report_html


def test_run_reports_missing_prices(tmp_path: Path) -> None:
    exit_code = run(_settings(tmp_path))

    assert exit_code == 1


def test_run_rejects_asset_prices_without_low_and_high(tmp_path: Path) -> None:
    data_dir = tmp_path / "prices"
    _write_prices(data_dir)
    pd.DataFrame({"date": DATES, "close": ASSET_CLOSES}).to_csv(data_dir / "AAPL.csv", index=False)

    exit_code = run(_settings(tmp_path))

    assert exit_code == 1
    events = load_events(_run_directory(tmp_path) / "events.jsonl")
    assert events[-1]["event_type"] == "error"
    assert events[-1]["payload"]["kind"] == "DataProviderError"
    assert "missing column 'low'" in events[-1]["payload"]["message"]


def test_build_price_source_by_setting(tmp_path: Path) -> None:
    csv_source = build_price_source(_settings(tmp_path))
    auto_source = build_price_source(_settings(tmp_path, data_source="auto"))

    assert isinstance(csv_source, CsvPriceSource)
    assert csv_source.missing_data_fetcher is None
    assert isinstance(auto_source, CsvPriceSource)
    assert auto_source.missing_data_fetcher is not None
    assert isinstance(build_price_source(_settings(tmp_path, data_source="yfinance")), YFinancePriceSource)
