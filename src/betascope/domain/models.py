"""Core beta-estimation domain models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pandas as pd

from .errors import BetaScopeError


@dataclass(frozen=True)
class PriceBar:
    """Daily low/high/close for one symbol."""

    date: date
    low: float
    high: float
    close: float


@dataclass(frozen=True)
class ReturnSeries:
    """Discrete returns for one price channel, ordered by date."""

    channel: str
    dates: tuple[date, ...] = ()
    values: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if len(self.dates) != len(self.values):
            raise ValueError(
                f"{self.channel}: {len(self.dates)} dates but {len(self.values)} values"
            )
        for previous, current in zip(self.dates, self.dates[1:]):
            if current <= previous:
                raise ValueError(
                    f"{self.channel}: dates must be strictly increasing ({previous} >= {current})"
                )

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class AlignedDataset:
    """Row-complete returns keyed by date, one finite value per column."""

    columns: tuple[str, ...]
    dates: tuple[date, ...] = ()
    rows: tuple[tuple[float, ...], ...] = ()

    def __post_init__(self) -> None:
        if len(self.dates) != len(self.rows):
            raise ValueError(f"{len(self.dates)} dates but {len(self.rows)} rows")
        width = len(self.columns)
        for row in self.rows:
            if len(row) != width:
                raise ValueError(f"row width {len(row)} does not match {width} columns")

    def __len__(self) -> int:
        return len(self.rows)

    def column(self, name: str) -> tuple[float, ...]:
        """Return all values of one column in date order."""
        try:
            position = self.columns.index(name)
        except ValueError:
            known = ", ".join(self.columns)
            raise ValueError(f"Unknown column '{name}'. Available: {known}") from None
        return tuple(row[position] for row in self.rows)

    def to_rows(self) -> list[tuple[Any, ...]]:
        """Audit view: ``(date, value, ...)`` per retained row."""
        return [(day, *row) for day, row in zip(self.dates, self.rows)]

    def to_frame(self) -> pd.DataFrame:
        frame = pd.DataFrame(list(self.rows), columns=list(self.columns), dtype=float)
        frame.index = pd.DatetimeIndex(pd.to_datetime(list(self.dates)), name="date")
        return frame


@dataclass(frozen=True)
class RegressionResult:
    """OLS fit of one dependent channel on the independent channel."""

    channel: str
    beta: float
    intercept: float
    standard_error: float
    ci_lower: float
    ci_upper: float
    confidence_level: float
    n_obs: int
    df: int
    r_squared: float = 0.0
    residual_std_error: float = 0.0

    def to_record(self) -> dict[str, Any]:
        """Convert result to serializable dict."""
        return {
            "channel": self.channel,
            "beta": self.beta,
            "intercept": self.intercept,
            "standard_error": self.standard_error,
            "ci_lower": self.ci_lower,
            "ci_upper": self.ci_upper,
            "confidence_level": self.confidence_level,
            "n_obs": self.n_obs,
            "df": self.df,
            "r_squared": self.r_squared,
            "residual_std_error": self.residual_std_error,
        }


@dataclass(frozen=True)
class BetaReport:
    """Outcome of one beta estimation run."""

    dataset: AlignedDataset
    results: Mapping[str, RegressionResult] = field(default_factory=dict)
    failures: Mapping[str, BetaScopeError] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failures
