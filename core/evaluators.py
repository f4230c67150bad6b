"""Normal and lognormal density / cumulative probability in general form."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from core.distribution import DistributionModel, DistributionStatistics
from core.exceptions import DegenerateDistributionError
from core.special_functions import SQRT_2PI, _match_input, normal_cdf, normal_pdf


def _require_spread(spread: float, name: str) -> None:
    if spread <= 0:
        raise DegenerateDistributionError(
            f"Density is undefined for {name}={spread}: "
            "the distribution is a single certain value"
        )


def normal_pdf_general(x: ArrayLike, mean: float, std_dev: float) -> float | np.ndarray:
    """
    Density of a normal distribution with the given mean and std_dev.

    Raises:
        DegenerateDistributionError: If std_dev <= 0
    """
    _require_spread(std_dev, "std_dev")
    z = (np.asarray(x, dtype=float) - mean) / std_dev
    return _match_input(np.asarray(normal_pdf(z)) / std_dev, x)


def normal_cdf_general(x: ArrayLike, mean: float, std_dev: float) -> float | np.ndarray:
    """
    P(X <= x) for a normal distribution with the given mean and std_dev.

    With std_dev == 0 the distribution is a point mass at mean and the
    result is a step from 0 to 1 at x == mean.
    """
    values = np.asarray(x, dtype=float)
    if std_dev <= 0:
        return _match_input(np.where(values >= mean, 1.0, 0.0), x)
    z = (values - mean) / std_dev
    return _match_input(np.asarray(normal_cdf(z)), x)


def lognormal_pdf(x: ArrayLike, log_mean: float, log_std_dev: float) -> float | np.ndarray:
    """
    Density of a lognormal distribution, 0 outside the support (x <= 0).

    Args:
        x: Asset value(s)
        log_mean: Mean of ln(X)
        log_std_dev: Standard deviation of ln(X)

    Raises:
        DegenerateDistributionError: If log_std_dev <= 0 and any x is positive
    """
    values = np.asarray(x, dtype=float)
    positive = values > 0
    if not np.any(positive):
        return _match_input(np.zeros_like(values), x)

    _require_spread(log_std_dev, "log_std_dev")
    safe = np.where(positive, values, 1.0)

    z = (np.log(safe) - log_mean) / log_std_dev
    density = np.exp(-0.5 * z * z) / (safe * log_std_dev * SQRT_2PI)

    return _match_input(np.where(positive, density, 0.0), x)


def lognormal_cdf(x: ArrayLike, log_mean: float, log_std_dev: float) -> float | np.ndarray:
    """P(X <= x) for a lognormal distribution, 0 for x <= 0."""
    values = np.asarray(x, dtype=float)
    positive = values > 0
    safe = np.where(positive, values, 1.0)
    log_values = np.log(safe)

    if log_std_dev <= 0:
        probability = np.where(log_values >= log_mean, 1.0, 0.0)
    else:
        probability = np.asarray(normal_cdf((log_values - log_mean) / log_std_dev))

    return _match_input(np.where(positive, probability, 0.0), x)


def distribution_pdf(x: ArrayLike, stats: DistributionStatistics) -> float | np.ndarray:
    """Density of the terminal asset value under the model in stats."""
    if stats.model is DistributionModel.LOGNORMAL:
        return lognormal_pdf(x, stats.log_mean, stats.log_std_dev)
    return normal_pdf_general(x, stats.mean, stats.std_dev)


def distribution_cdf(x: ArrayLike, stats: DistributionStatistics) -> float | np.ndarray:
    """Probability that the terminal asset value is x or below."""
    if stats.model is DistributionModel.LOGNORMAL:
        return lognormal_cdf(x, stats.log_mean, stats.log_std_dev)
    return normal_cdf_general(x, stats.mean, stats.std_dev)
