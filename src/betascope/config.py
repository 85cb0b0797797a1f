"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import date
from typing import Self

from dotenv import load_dotenv

from betascope.domain.errors import ConfigError

DATA_SOURCES = {"auto", "csv", "yfinance"}


def parse_symbol(value: str | None, default: str) -> str:
    """Normalize a ticker symbol from env strings."""
    if value is None or not value.strip():
        return default
    return value.strip().upper()


def parse_date(value: str | date | None, *, field_name: str) -> date | None:
    """Parse optional ISO dates (YYYY-MM-DD)."""
    if value is None or isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an ISO date (YYYY-MM-DD), got '{text}'") from exc


def parse_float(value: str | None, default: float, *, field_name: str) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be a number, got '{value}'") from exc


def parse_int(value: str | None, default: int, *, field_name: str) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer, got '{value}'") from exc


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    asset_symbol: str = "AAPL"
    index_symbol: str = "SPY"
    start_date: date | None = None
    end_date: date | None = None
    confidence_level: float = 0.95
    min_aligned_rows: int = 3
    max_workers: int = 1
    data_source: str = "auto"
    historical_data_dir: str = "historical_data"
    events_dir: str = "runs"
    log_level: str = "INFO"
    write_report: bool = True

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            asset_symbol=parse_symbol(os.getenv("ASSET_SYMBOL"), "AAPL"),
            index_symbol=parse_symbol(os.getenv("INDEX_SYMBOL"), "SPY"),
            start_date=parse_date(os.getenv("START_DATE"), field_name="start_date"),
            end_date=parse_date(os.getenv("END_DATE"), field_name="end_date"),
            confidence_level=parse_float(
                os.getenv("CONFIDENCE_LEVEL"), 0.95, field_name="confidence_level"
            ),
            min_aligned_rows=parse_int(
                os.getenv("MIN_ALIGNED_ROWS"), 3, field_name="min_aligned_rows"
            ),
            max_workers=parse_int(os.getenv("MAX_WORKERS"), 1, field_name="max_workers"),
            data_source=str(os.getenv("DATA_SOURCE", "auto")).strip().lower(),
            historical_data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            events_dir=str(os.getenv("EVENTS_DIR", "runs")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        overrides = dict(kwargs)
        for key in ("asset_symbol", "index_symbol"):
            value = overrides.get(key)
            if isinstance(value, str):
                overrides[key] = parse_symbol(value, getattr(self, key))
        for key in ("start_date", "end_date"):
            value = overrides.get(key)
            if isinstance(value, str):
                overrides[key] = parse_date(value, field_name=key)
        updated = replace(self, **overrides)
        return updated.validate()

    def validate(self) -> Self:
        """Validate settings fields."""
        if not self.asset_symbol or not self.index_symbol:
            raise ConfigError("asset_symbol and index_symbol must be set")
        if self.asset_symbol == self.index_symbol:
            raise ConfigError("asset_symbol and index_symbol must differ")
        if not 0.0 < self.confidence_level < 1.0:
            raise ConfigError("confidence_level must be between 0 and 1 (exclusive)")
        if self.min_aligned_rows < 3:
            raise ConfigError("min_aligned_rows must be at least 3")
        if self.max_workers < 1:
            raise ConfigError("max_workers must be positive")
        if self.data_source not in DATA_SOURCES:
            raise ConfigError("data_source must be one of auto, csv, yfinance")
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ConfigError("start_date must not be after end_date")
        return self
