"""Closed-form approximations of the standard normal special functions."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from core.exceptions import InvalidProbabilityError

# Abramowitz and Stegun, formula 7.1.26 (absolute error <= 1.5e-7)
ERF_A1 = 0.254829592
ERF_A2 = -0.284496736
ERF_A3 = 1.421413741
ERF_A4 = -1.453152027
ERF_A5 = 1.061405429
ERF_P = 0.3275911

# Beasley-Springer central region
BSM_A = (2.50662823884, -18.61500062529, 41.39119773534, -25.44106049637)
BSM_B = (-8.47351093090, 23.08336743743, -21.06224101826, 3.13082909833)

# Moro tail region, polynomial in log(-log(r))
BSM_C = (
    0.3374754822726147,
    0.9761690190917186,
    0.1607979714918209,
    0.0276438810333863,
    0.0038405729373609,
    0.0003951896511919,
    0.0000321767881768,
    0.0000002888167364,
    0.0000003960315187,
)

BSM_CENTRAL_HALF_WIDTH = 0.42

SQRT_2 = math.sqrt(2.0)
SQRT_2PI = math.sqrt(2.0 * math.pi)


def _match_input(result: np.ndarray, x: ArrayLike) -> float | np.ndarray:
    """Return a plain float for scalar input, the array otherwise."""
    if np.ndim(x) == 0:
        return float(result)
    return result


def erf(x: ArrayLike) -> float | np.ndarray:
    """
    Approximate the Gauss error function.

    The approximation is evaluated at |x| and the sign is restored
    afterwards, so erf(-x) == -erf(x) holds exactly.

    Args:
        x: Point or array of points

    Returns:
        erf(x), as a float for scalar input
    """
    values = np.asarray(x, dtype=float)
    sign = np.where(values >= 0, 1.0, -1.0)
    values = np.abs(values)

    t = 1.0 / (1.0 + ERF_P * values)
    poly = ((((ERF_A5 * t + ERF_A4) * t + ERF_A3) * t + ERF_A2) * t + ERF_A1) * t
    y = 1.0 - poly * np.exp(-values * values)

    return _match_input(sign * y, x)


def normal_cdf(x: ArrayLike) -> float | np.ndarray:
    """Standard normal cumulative distribution function, P(Z <= x)."""
    values = np.asarray(x, dtype=float)
    result = 0.5 * (1.0 + np.asarray(erf(values / SQRT_2)))
    return _match_input(result, x)


def normal_pdf(x: ArrayLike) -> float | np.ndarray:
    """Standard normal probability density function."""
    values = np.asarray(x, dtype=float)
    result = np.exp(-0.5 * values * values) / SQRT_2PI
    return _match_input(result, x)


def normal_inverse_cdf(p: float) -> float:
    """
    Inverse of the standard normal CDF (percent point function).

    Uses the Beasley-Springer-Moro approximation: a rational polynomial
    for |p - 0.5| < 0.42 and a polynomial in log(-log(r)) for the tails.

    Args:
        p: Probability strictly between 0 and 1

    Returns:
        z such that normal_cdf(z) is approximately p

    Raises:
        InvalidProbabilityError: If p <= 0, p >= 1 or p is NaN
    """
    p = float(p)
    if not 0.0 < p < 1.0:
        raise InvalidProbabilityError(p)

    a0, a1, a2, a3 = BSM_A
    b0, b1, b2, b3 = BSM_B
    y = p - 0.5

    if abs(y) < BSM_CENTRAL_HALF_WIDTH:
        r = y * y
        return y * (((a3 * r + a2) * r + a1) * r + a0) / (
            (((b3 * r + b2) * r + b1) * r + b0) * r + 1.0
        )

    r = 1.0 - p if y > 0 else p
    r = math.log(-math.log(r))

    # Horner evaluation of c0 + c1 r + ... + c8 r^8
    x = 0.0
    for coefficient in reversed(BSM_C):
        x = coefficient + r * x

    return -x if y < 0 else x
