"""Terminal-value distribution of an investment held for several years."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from core.exceptions import ValidationError
from utils.helpers import percent_to_rate

logger = logging.getLogger(__name__)


class DistributionModel(str, Enum):
    """Model used for the asset value at the end of the holding period."""

    NORMAL = "normal"  # discrete compounding, spread grows with sqrt(years)
    LOGNORMAL = "lognormal"  # continuous compounding (geometric Brownian motion)


def resolve_model(model: DistributionModel | str) -> DistributionModel:
    """Convert a model name to a DistributionModel."""
    try:
        return DistributionModel(model)
    except ValueError as e:
        raise ValidationError("model", f"Unknown distribution model: {model!r}") from e


@dataclass(frozen=True)
class InvestmentDistributionParams:
    """
    Inputs of the distribution model.

    Attributes:
        initial_assets: Amount invested at the start (must be positive)
        expected_return: Expected annual return in percent (may be negative;
            the normal model additionally needs it above -100)
        risk: Annual volatility in percent (non-negative)
        years: Holding period in years (must be positive, may be fractional)
    """

    initial_assets: float
    expected_return: float
    risk: float
    years: float

    def __post_init__(self) -> None:
        """Validate model inputs."""
        for name in ("initial_assets", "expected_return", "risk", "years"):
            if not math.isfinite(getattr(self, name)):
                raise ValidationError(name, "Must be a finite number")
        if self.initial_assets <= 0:
            raise ValidationError("initial_assets", "Must be positive")
        if self.risk < 0:
            raise ValidationError("risk", "Cannot be negative")
        if self.years <= 0:
            raise ValidationError("years", "Must be positive")

    @property
    def return_rate(self) -> float:
        """Expected annual return as a decimal."""
        return percent_to_rate(self.expected_return)

    @property
    def risk_rate(self) -> float:
        """Annual volatility as a decimal."""
        return percent_to_rate(self.risk)


@dataclass(frozen=True)
class DistributionStatistics:
    """
    Moments of the terminal asset value.

    mean and std_dev are on the natural (currency) scale. log_mean and
    log_std_dev describe ln(value) and are only set for the lognormal model.

    Attributes:
        model: Model the statistics were derived with
        mean: Expected terminal value
        std_dev: Standard deviation of the terminal value
        log_mean: Mean of ln(terminal value), lognormal only
        log_std_dev: Standard deviation of ln(terminal value), lognormal only
    """

    model: DistributionModel
    mean: float
    std_dev: float
    log_mean: float | None = None
    log_std_dev: float | None = None

    @property
    def is_degenerate(self) -> bool:
        """True when the distribution collapses to a single value (zero risk)."""
        if self.model is DistributionModel.LOGNORMAL:
            return not self.log_std_dev
        return self.std_dev <= 0

    @property
    def median(self) -> float:
        """Median terminal value."""
        if self.model is DistributionModel.LOGNORMAL and self.log_mean is not None:
            return math.exp(self.log_mean)
        return self.mean


def _normal_statistics(params: InvestmentDistributionParams) -> DistributionStatistics:
    # (1 + mu)^T needs a positive base
    if params.expected_return <= -100:
        raise ValidationError(
            "expected_return", "Must be greater than -100% for the normal model"
        )
    mean = params.initial_assets * (1 + params.return_rate) ** params.years
    std_dev = mean * params.risk_rate * math.sqrt(params.years)
    return DistributionStatistics(
        model=DistributionModel.NORMAL,
        mean=mean,
        std_dev=std_dev,
    )


def _lognormal_statistics(params: InvestmentDistributionParams) -> DistributionStatistics:
    mu = params.return_rate
    sigma = params.risk_rate
    years = params.years

    # Ito drift correction: the median grows at mu - sigma^2 / 2
    log_mean = math.log(params.initial_assets) + (mu - sigma**2 / 2) * years
    log_std_dev = sigma * math.sqrt(years)

    mean = params.initial_assets * math.exp(mu * years)
    std_dev = mean * math.sqrt(math.expm1(sigma**2 * years))

    return DistributionStatistics(
        model=DistributionModel.LOGNORMAL,
        mean=mean,
        std_dev=std_dev,
        log_mean=log_mean,
        log_std_dev=log_std_dev,
    )


def calculate_investment_distribution(
    params: InvestmentDistributionParams,
    model: DistributionModel | str = DistributionModel.NORMAL,
) -> DistributionStatistics:
    """
    Derive the distribution of the asset value after the holding period.

    Normal model:
        mean = A * (1 + mu)^T
        std_dev = mean * sigma * sqrt(T)

    Lognormal model:
        log_mean = ln(A) + (mu - sigma^2 / 2) * T
        log_std_dev = sigma * sqrt(T)
        mean = A * exp(mu * T)
        std_dev = mean * sqrt(exp(sigma^2 * T) - 1)

    Args:
        params: Initial amount, annual return and risk (percent), years
        model: Which model to use (NORMAL or LOGNORMAL)

    Returns:
        DistributionStatistics for the selected model
    """
    resolved = resolve_model(model)

    if resolved is DistributionModel.LOGNORMAL:
        stats = _lognormal_statistics(params)
    else:
        stats = _normal_statistics(params)

    logger.debug(
        f"{resolved.value} distribution for {params}: "
        f"mean={stats.mean:.2f}, std_dev={stats.std_dev:.2f}"
    )
    return stats
