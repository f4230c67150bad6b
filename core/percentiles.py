"""Percentile-based outcomes: worst case at a probability threshold, intervals."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from core.config import DEFAULT_INPUT_BOUNDS
from core.distribution import DistributionModel, DistributionStatistics
from core.exceptions import ValidationError
from core.special_functions import normal_inverse_cdf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorstCaseOutcome:
    """
    Asset value at the lower tail of the distribution.

    With a threshold of 90, only 10% of outcomes end below asset_value.

    Attributes:
        probability_threshold: Share of outcomes considered, in percent
        asset_value: Terminal asset value at the lower tail (>= 0)
        loss_or_gain: asset_value - initial_assets (negative means a loss)
        initial_assets: Amount invested at the start
    """

    probability_threshold: float
    asset_value: float
    loss_or_gain: float
    initial_assets: float

    @property
    def tail_probability(self) -> float:
        """Probability of ending below asset_value, in percent."""
        return 100 - self.probability_threshold

    @property
    def change_rate(self) -> float:
        """loss_or_gain relative to the initial amount."""
        return self.loss_or_gain / self.initial_assets


@dataclass(frozen=True)
class ConfidenceInterval:
    """Central interval holding `level` of the probability mass."""

    level: float
    lower: float
    upper: float


def clamp_probability_threshold(
    threshold: float,
    lower: float = DEFAULT_INPUT_BOUNDS.min_probability_threshold,
    upper: float = DEFAULT_INPUT_BOUNDS.max_probability_threshold,
) -> float:
    """
    Limit a threshold (percent) to a range the inverse CDF can handle.

    calculate_worst_case does not clamp; callers taking free-form input
    should pass the threshold through here first.
    """
    return min(max(threshold, lower), upper)


def _value_at_z(stats: DistributionStatistics, z: float) -> float:
    if stats.model is DistributionModel.LOGNORMAL:
        return math.exp(stats.log_mean + z * stats.log_std_dev)
    # The normal approximation puts mass below zero; assets cannot go negative
    return max(0.0, stats.mean + z * stats.std_dev)


def percentile_value(stats: DistributionStatistics, probability: float) -> float:
    """
    Asset value below which `probability` of the outcomes fall.

    Args:
        stats: Distribution of the terminal value
        probability: Cumulative probability strictly between 0 and 1

    Raises:
        InvalidProbabilityError: If probability is not in (0, 1)
    """
    return _value_at_z(stats, normal_inverse_cdf(probability))


def calculate_worst_case(
    stats: DistributionStatistics,
    initial_assets: float,
    probability_threshold: float,
) -> WorstCaseOutcome:
    """
    Worst outcome within the given probability threshold.

    The threshold (percent) is turned into the lower-tail probability
    1 - threshold / 100 and inverted to a z-score. For the normal model the
    value is mean + z * std_dev clipped at zero; for the lognormal model it
    is exp(log_mean + z * log_std_dev).

    Args:
        stats: Distribution of the terminal value
        initial_assets: Amount invested at the start
        probability_threshold: Percent of outcomes to consider, in (0, 100)

    Returns:
        WorstCaseOutcome with the asset value and signed change

    Raises:
        InvalidProbabilityError: If the threshold is 0, 100 or outside [0, 100]
    """
    tail_probability = 1 - probability_threshold / 100
    z = normal_inverse_cdf(tail_probability)
    asset_value = _value_at_z(stats, z)

    logger.debug(
        f"Worst case at {probability_threshold}% ({stats.model.value}): "
        f"z={z:.4f}, assets={asset_value:.2f}"
    )
    return WorstCaseOutcome(
        probability_threshold=probability_threshold,
        asset_value=asset_value,
        loss_or_gain=asset_value - initial_assets,
        initial_assets=initial_assets,
    )


def confidence_interval(
    stats: DistributionStatistics,
    level: float = DEFAULT_INPUT_BOUNDS.confidence_level,
) -> ConfidenceInterval:
    """
    Two-sided interval around the center holding `level` of the outcomes.

    For level 0.95 and the normal model this is mean +/- 1.96 * std_dev,
    with the lower bound clipped at zero.

    Raises:
        ValidationError: If level is not strictly between 0 and 1
    """
    if not 0 < level < 1:
        raise ValidationError("level", "Must be strictly between 0 and 1")

    z = normal_inverse_cdf((1 + level) / 2)
    return ConfidenceInterval(
        level=level,
        lower=_value_at_z(stats, -z),
        upper=_value_at_z(stats, z),
    )
