"""Concise human-readable run logger."""

from __future__ import annotations

import logging
from datetime import date

from betascope.domain.models import AlignedDataset, RegressionResult


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("betascope")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def run_started(
        self,
        run_id: str,
        asset_symbol: str,
        index_symbol: str,
        start: date | None,
        end: date | None,
    ) -> None:
        self._logger.info(
            "run | %s | %s vs %s | %s .. %s",
            self._short_id(run_id),
            asset_symbol,
            index_symbol,
            start.isoformat() if start else "first",
            end.isoformat() if end else "last",
        )

    def bars(self, symbol: str, count: int) -> None:
        self._logger.info("bars | %s | %d rows", symbol, count)

    def dataset(self, dataset: AlignedDataset) -> None:
        if not dataset.dates:
            self._logger.info("aligned | 0 rows")
            return
        self._logger.info(
            "aligned | %d rows | %s .. %s",
            len(dataset),
            dataset.dates[0].isoformat(),
            dataset.dates[-1].isoformat(),
        )

    def result(self, result: RegressionResult) -> None:
        self._logger.info(
            "beta | %s | %s | se %s | %s%% ci [%s, %s] | r2 %s | n %d",
            result.channel,
            f"{result.beta:+.4f}",
            f"{result.standard_error:.4f}",
            self._format_level(result.confidence_level),
            f"{result.ci_lower:+.4f}",
            f"{result.ci_upper:+.4f}",
            f"{result.r_squared:.3f}",
            result.n_obs,
        )

    def failure(self, channel: str, message: str) -> None:
        self._logger.warning("failed | %s | %s", channel, message)

    def artifact(self, label: str, path: str) -> None:
        self._logger.info("%s | %s", label, path)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _short_id(value: str | None, head: int = 10) -> str:
        if not value:
            return ""
        return str(value)[:head]

    @staticmethod
    def _format_level(value: float) -> str:
        return f"{value * 100:.2f}".rstrip("0").rstrip(".")
