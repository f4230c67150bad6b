"""Custom exceptions for the asset distribution calculator."""

from __future__ import annotations


class AssetDistributionError(Exception):
    """Base exception for asset distribution calculator errors."""

    pass


class ValidationError(AssetDistributionError):
    """Raised when input validation fails."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidProbabilityError(AssetDistributionError, ValueError):
    """Raised when a probability lies outside the open interval (0, 1)."""

    def __init__(self, probability: float) -> None:
        self.probability = probability
        super().__init__(
            f"Probability must be strictly between 0 and 1, got {probability}"
        )


class DegenerateDistributionError(AssetDistributionError):
    """Raised when a density is requested for a zero-spread distribution."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DataFetchError(AssetDistributionError):
    """Raised when fetching market data fails."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        self.message = message
        super().__init__(f"Failed to fetch data from {source}: {message}")
