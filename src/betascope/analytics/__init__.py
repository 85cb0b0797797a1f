"""Return transformation, series alignment and OLS beta estimation."""

from .alignment import MIN_ALIGNED_ROWS, align_series
from .pipeline import DEPENDENT_CHANNELS, INDEX_COLUMN, build_dataset, estimate_betas
from .regression import DEFAULT_CONFIDENCE_LEVEL, fit_regression, t_critical
from .returns import compute_returns, returns_from_bars

__all__ = [
    "DEFAULT_CONFIDENCE_LEVEL",
    "DEPENDENT_CHANNELS",
    "INDEX_COLUMN",
    "MIN_ALIGNED_ROWS",
    "align_series",
    "build_dataset",
    "compute_returns",
    "estimate_betas",
    "fit_regression",
    "returns_from_bars",
    "t_critical",
]
