"""Price source implementations."""

from .base import PriceSource, bars_from_frame, normalize_bars, slice_date_range
from .csv_data import CsvPriceSource
from .yfinance_data import YFinancePriceSource

__all__ = [
    "CsvPriceSource",
    "PriceSource",
    "YFinancePriceSource",
    "bars_from_frame",
    "normalize_bars",
    "slice_date_range",
]
