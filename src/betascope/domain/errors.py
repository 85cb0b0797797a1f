"""Custom exceptions for clearer error handling across betascope."""

from __future__ import annotations


class BetaScopeError(Exception):
    """Base exception for all betascope errors."""


class ConfigError(BetaScopeError):
    """Raised when settings are invalid or missing."""


class DataProviderError(BetaScopeError):
    """Raised when price data retrieval fails."""


class InsufficientDataError(BetaScopeError):
    """Raised when too few aligned rows remain to fit a regression."""

    def __init__(self, row_count: int, minimum: int = 3) -> None:
        self.row_count = row_count
        self.minimum = minimum
        super().__init__(
            f"aligned dataset has {row_count} rows; at least {minimum} are required"
        )


class RegressionError(BetaScopeError):
    """Base for failures scoped to a single regression channel."""

    def __init__(self, channel: str, message: str) -> None:
        self.channel = channel
        super().__init__(f"{channel}: {message}")


class DegenerateRegressionError(RegressionError):
    """Raised when the independent column has zero variance."""

    def __init__(self, channel: str, column: str) -> None:
        self.column = column
        super().__init__(channel, f"independent column '{column}' has zero variance")


class NonFiniteInputError(RegressionError):
    """Raised when a non-finite value reaches the regression engine."""

    def __init__(self, channel: str, column: str) -> None:
        self.column = column
        super().__init__(channel, f"column '{column}' contains non-finite values")
