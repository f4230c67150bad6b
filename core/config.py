"""Default curve settings and input bounds for the distribution calculator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CurveConfig:
    """
    Discretization settings for density curves.

    Attributes:
        num_points: Number of samples on the curve
        num_std_dev: Half-width of the plotted range in standard deviations
    """

    num_points: int = 300
    num_std_dev: float = 3.0

    def __post_init__(self) -> None:
        """Validate curve parameters."""
        if self.num_points < 2:
            raise ValueError("num_points must be at least 2")
        if self.num_std_dev <= 0:
            raise ValueError("num_std_dev must be positive")


@dataclass(frozen=True)
class InputBounds:
    """
    Allowed ranges for user-facing inputs.

    The inverse CDF is undefined at exactly 0% and 100%, so the
    probability threshold range stops short of both ends.

    Attributes:
        min_years: Shortest holding period offered
        max_years: Longest holding period offered
        min_probability_threshold: Lowest threshold (percent)
        max_probability_threshold: Highest threshold (percent)
        probability_threshold_step: Slider step for the threshold
        min_investment_ratio: Lowest share of assets invested (percent)
        max_investment_ratio: Highest share of assets invested (percent)
        confidence_level: Level of the displayed confidence interval
    """

    min_years: int = 1
    max_years: int = 50
    min_probability_threshold: float = 0.1
    max_probability_threshold: float = 99.9
    probability_threshold_step: float = 0.1
    min_investment_ratio: float = 0.0
    max_investment_ratio: float = 100.0
    confidence_level: float = 0.95


DEFAULT_CURVE_CONFIG = CurveConfig()

DEFAULT_INPUT_BOUNDS = InputBounds()

# Holding period shown when the distribution page first opens
DEFAULT_YEARS = 10
