"""Discretized density curves of the terminal asset value for plotting."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, NamedTuple

import numpy as np
import pandas as pd
from scipy.integrate import trapezoid

from core.config import DEFAULT_CURVE_CONFIG
from core.distribution import DistributionModel, DistributionStatistics
from core.evaluators import lognormal_pdf, normal_pdf_general
from core.exceptions import DegenerateDistributionError, ValidationError

logger = logging.getLogger(__name__)


class DensitySample(NamedTuple):
    """One point of a density curve."""

    x: float  # asset value
    y: float  # probability density


@dataclass(frozen=True)
class DensityCurve:
    """
    Ordered samples of a probability density.

    x is strictly increasing and non-negative; x and y have equal length.

    Attributes:
        model: Model the density belongs to
        x: Asset values
        y: Density at each asset value
    """

    model: DistributionModel
    x: tuple[float, ...]
    y: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.x)

    def __iter__(self) -> Iterator[DensitySample]:
        return (DensitySample(x, y) for x, y in zip(self.x, self.y))

    def __getitem__(self, index: int) -> DensitySample:
        return DensitySample(self.x[index], self.y[index])

    @property
    def x_min(self) -> float:
        return self.x[0]

    @property
    def x_max(self) -> float:
        return self.x[-1]

    def to_frame(self) -> pd.DataFrame:
        """Return the curve as a DataFrame with columns x and y."""
        return pd.DataFrame({"x": self.x, "y": self.y})

    def probability_mass(self) -> float:
        """
        Integrate the density over the sampled range (trapezoid rule).

        Close to 1 when the range covers nearly all of the distribution;
        lower when the range is clipped at zero.
        """
        return float(trapezoid(self.y, self.x))


def _check_curve_options(num_points: int, num_std_dev: float) -> None:
    if num_points < 2:
        raise ValidationError("num_points", "Must be at least 2")
    if not num_std_dev > 0:
        raise ValidationError("num_std_dev", "Must be positive")


def _sample_range(x_min: float, x_max: float, num_points: int) -> np.ndarray:
    if not x_max > x_min:
        raise DegenerateDistributionError(
            f"Curve range collapses after clipping at zero: [{x_min}, {x_max}]"
        )
    return np.linspace(x_min, x_max, num_points)


def generate_normal_distribution_data(
    mean: float,
    std_dev: float,
    num_points: int = DEFAULT_CURVE_CONFIG.num_points,
    num_std_dev: float = DEFAULT_CURVE_CONFIG.num_std_dev,
) -> DensityCurve:
    """
    Sample a normal density over mean +/- num_std_dev * std_dev.

    The lower bound is clipped at zero so no negative asset values appear.

    Args:
        mean: Mean of the distribution
        std_dev: Standard deviation (must be positive)
        num_points: Number of samples (at least 2)
        num_std_dev: Half-width of the range in standard deviations

    Returns:
        DensityCurve with exactly num_points samples
    """
    _check_curve_options(num_points, num_std_dev)
    if std_dev <= 0:
        raise DegenerateDistributionError(
            "Cannot draw a density curve for a distribution with zero spread"
        )

    x_min = max(0.0, mean - num_std_dev * std_dev)
    x_max = mean + num_std_dev * std_dev
    xs = _sample_range(x_min, x_max, num_points)
    ys = np.asarray(normal_pdf_general(xs, mean, std_dev))

    logger.debug(f"Normal curve: {num_points} points over [{x_min:.2f}, {x_max:.2f}]")
    return DensityCurve(
        model=DistributionModel.NORMAL,
        x=tuple(xs.tolist()),
        y=tuple(ys.tolist()),
    )


def generate_lognormal_distribution_data(
    log_mean: float,
    log_std_dev: float,
    num_points: int = DEFAULT_CURVE_CONFIG.num_points,
    num_std_dev: float = DEFAULT_CURVE_CONFIG.num_std_dev,
) -> DensityCurve:
    """
    Sample a lognormal density.

    The range is taken in log space (log_mean +/- num_std_dev * log_std_dev,
    lower end clipped at 0) and exponentiated; samples are then spaced
    evenly on the natural scale between the two bounds.

    Args:
        log_mean: Mean of ln(X)
        log_std_dev: Standard deviation of ln(X) (must be positive)
        num_points: Number of samples (at least 2)
        num_std_dev: Half-width of the range in log standard deviations

    Returns:
        DensityCurve with exactly num_points samples
    """
    _check_curve_options(num_points, num_std_dev)
    if log_std_dev <= 0:
        raise DegenerateDistributionError(
            "Cannot draw a density curve for a distribution with zero spread"
        )

    log_x_min = max(0.0, log_mean - num_std_dev * log_std_dev)
    log_x_max = log_mean + num_std_dev * log_std_dev
    x_min = math.exp(log_x_min)
    x_max = math.exp(log_x_max)
    xs = _sample_range(x_min, x_max, num_points)
    ys = np.asarray(lognormal_pdf(xs, log_mean, log_std_dev))

    logger.debug(f"Lognormal curve: {num_points} points over [{x_min:.2f}, {x_max:.2f}]")
    return DensityCurve(
        model=DistributionModel.LOGNORMAL,
        x=tuple(xs.tolist()),
        y=tuple(ys.tolist()),
    )


def generate_distribution_curve(
    stats: DistributionStatistics,
    num_points: int = DEFAULT_CURVE_CONFIG.num_points,
    num_std_dev: float = DEFAULT_CURVE_CONFIG.num_std_dev,
) -> DensityCurve:
    """Sample the density of stats using the discretizer of its model."""
    if stats.model is DistributionModel.LOGNORMAL:
        return generate_lognormal_distribution_data(
            stats.log_mean, stats.log_std_dev, num_points, num_std_dev
        )
    return generate_normal_distribution_data(
        stats.mean, stats.std_dev, num_points, num_std_dev
    )


def try_generate_distribution_curve(
    stats: DistributionStatistics,
    num_points: int = DEFAULT_CURVE_CONFIG.num_points,
    num_std_dev: float = DEFAULT_CURVE_CONFIG.num_std_dev,
) -> DensityCurve | None:
    """
    Like generate_distribution_curve, but None when there is nothing to draw.

    That covers zero-spread statistics and lognormal ranges that collapse
    once the lower bound is clipped at ln(x) = 0 (tiny invested amounts).
    """
    try:
        return generate_distribution_curve(stats, num_points, num_std_dev)
    except DegenerateDistributionError as e:
        logger.info(f"No density curve for {stats.model.value} model: {e.message}")
        return None
