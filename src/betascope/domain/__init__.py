"""Domain models, errors and event types."""

from .errors import (
    BetaScopeError,
    ConfigError,
    DataProviderError,
    DegenerateRegressionError,
    InsufficientDataError,
    NonFiniteInputError,
    RegressionError,
)
from .events import RunEvent
from .models import AlignedDataset, BetaReport, PriceBar, RegressionResult, ReturnSeries

__all__ = [
    "AlignedDataset",
    "BetaReport",
    "BetaScopeError",
    "ConfigError",
    "DataProviderError",
    "DegenerateRegressionError",
    "InsufficientDataError",
    "NonFiniteInputError",
    "PriceBar",
    "RegressionError",
    "RegressionResult",
    "ReturnSeries",
    "RunEvent",
]
