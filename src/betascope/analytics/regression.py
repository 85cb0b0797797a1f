"""Closed-form OLS beta with a Student-t confidence interval.

Fits ``y = a + b * x`` over an aligned dataset:

    b = Sxy / Sxx
    a = mean(y) - b * mean(x)
    se(b) = sqrt((RSS / (n - 2)) / Sxx)

and brackets the slope with ``b +/- t(1 - alpha / 2, n - 2) * se(b)``.
"""

from __future__ import annotations

import numpy as np
from scipy import stats

from betascope.domain.errors import (
    DegenerateRegressionError,
    InsufficientDataError,
    NonFiniteInputError,
)
from betascope.domain.models import AlignedDataset, RegressionResult

DEFAULT_CONFIDENCE_LEVEL = 0.95
MIN_OBSERVATIONS = 3


def t_critical(confidence_level: float, df: int) -> float:
    """Two-sided Student-t critical value for ``df`` degrees of freedom."""
    return float(stats.t.ppf(1.0 - (1.0 - confidence_level) / 2.0, df))


def fit_regression(
    dataset: AlignedDataset,
    dependent: str,
    independent: str,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    channel: str | None = None,
) -> RegressionResult:
    """Regress ``dependent`` on ``independent`` by ordinary least squares."""
    name = channel or dependent
    if not 0.0 < confidence_level < 1.0:
        raise ValueError("confidence_level must be between 0 and 1 (exclusive)")

    y = np.asarray(dataset.column(dependent), dtype=float)
    x = np.asarray(dataset.column(independent), dtype=float)
    n = len(x)
    if n < MIN_OBSERVATIONS:
        raise InsufficientDataError(n, MIN_OBSERVATIONS)
    # Aligner guarantees finite rows; anything else is an internal fault.
    for column, values in ((dependent, y), (independent, x)):
        if not np.isfinite(values).all():
            raise NonFiniteInputError(name, column)
    if np.all(x == x[0]):
        raise DegenerateRegressionError(name, independent)

    x_mean = x.mean()
    y_mean = y.mean()
    x_centered = x - x_mean
    sxx = float(np.dot(x_centered, x_centered))
    if sxx == 0.0:
        raise DegenerateRegressionError(name, independent)
    sxy = float(np.dot(x_centered, y - y_mean))

    beta = sxy / sxx
    intercept = float(y_mean - beta * x_mean)
    residuals = y - (intercept + beta * x)
    rss = float(np.dot(residuals, residuals))
    sst = float(np.dot(y - y_mean, y - y_mean))

    df = n - 2
    residual_variance = rss / df
    standard_error = float(np.sqrt(residual_variance / sxx))
    margin = t_critical(confidence_level, df) * standard_error

    return RegressionResult(
        channel=name,
        beta=beta,
        intercept=intercept,
        standard_error=standard_error,
        ci_lower=beta - margin,
        ci_upper=beta + margin,
        confidence_level=confidence_level,
        n_obs=n,
        df=df,
        r_squared=1.0 - rss / sst if sst > 0.0 else 0.0,
        residual_std_error=float(np.sqrt(residual_variance)),
    )
