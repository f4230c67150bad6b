"""Tests for worst-case and interval calculations."""

import math

import pytest
from scipy import stats as scipy_stats

from core.distribution import (
    DistributionModel,
    InvestmentDistributionParams,
    calculate_investment_distribution,
)
from core.exceptions import InvalidProbabilityError, ValidationError
from core.percentiles import (
    calculate_worst_case,
    clamp_probability_threshold,
    confidence_interval,
    percentile_value,
)


def _stats(risk, model=DistributionModel.NORMAL, years=10):
    params = InvestmentDistributionParams(1_000_000, 7.5, risk, years)
    return calculate_investment_distribution(params, model)


class TestWorstCase:
    """Tests for calculate_worst_case."""

    def test_normal_matches_scipy(self, normal_stats):
        """At 90% the value is the 10th percentile of the normal."""
        outcome = calculate_worst_case(normal_stats, 1_000_000, 90)
        expected = scipy_stats.norm.ppf(0.10, loc=normal_stats.mean, scale=normal_stats.std_dev)
        assert outcome.asset_value == pytest.approx(expected, rel=1e-6)
        assert outcome.loss_or_gain == pytest.approx(outcome.asset_value - 1_000_000)

    def test_lognormal_matches_scipy(self, lognormal_stats):
        """At 90% the value is the 10th percentile of the lognormal."""
        outcome = calculate_worst_case(lognormal_stats, 1_000_000, 90)
        reference = scipy_stats.lognorm(
            s=lognormal_stats.log_std_dev, scale=math.exp(lognormal_stats.log_mean)
        )
        assert outcome.asset_value == pytest.approx(reference.ppf(0.10), rel=1e-6)

    def test_default_example_is_a_loss(self, normal_stats):
        """1M at 7.5% / 18% over 10 years: the 90% worst case is a loss."""
        outcome = calculate_worst_case(normal_stats, 1_000_000, 90)
        assert outcome.asset_value == pytest.approx(557_500, rel=0.01)
        assert outcome.loss_or_gain < 0
        assert outcome.change_rate == pytest.approx(outcome.loss_or_gain / 1_000_000)

    @pytest.mark.parametrize("model", [DistributionModel.NORMAL, DistributionModel.LOGNORMAL])
    def test_zero_risk_gives_mean(self, model):
        """Without risk the worst case is the expected value."""
        stats = _stats(0.0, model)
        outcome = calculate_worst_case(stats, 1_000_000, 90)
        assert outcome.asset_value == pytest.approx(stats.mean)
        assert outcome.loss_or_gain > 0

    @pytest.mark.parametrize("model", [DistributionModel.NORMAL, DistributionModel.LOGNORMAL])
    def test_more_risk_is_worse(self, model):
        """The worst case falls as risk rises."""
        values = [calculate_worst_case(_stats(r, model), 1_000_000, 90).asset_value for r in (5, 10, 15, 20)]
        assert values == sorted(values, reverse=True)
        assert len(set(values)) == len(values)

    def test_higher_threshold_is_worse(self, normal_stats):
        """Considering more outcomes reaches further into the tail."""
        at_80 = calculate_worst_case(normal_stats, 1_000_000, 80).asset_value
        at_95 = calculate_worst_case(normal_stats, 1_000_000, 95).asset_value
        assert at_95 < at_80

    def test_normal_clipped_at_zero(self):
        """Assets never go below zero under the normal approximation."""
        outcome = calculate_worst_case(_stats(100.0), 1_000_000, 99)
        assert outcome.asset_value == 0.0
        assert outcome.loss_or_gain == -1_000_000
        assert outcome.change_rate == -1.0

    def test_lognormal_stays_positive(self):
        """The lognormal worst case is positive even at extreme risk."""
        outcome = calculate_worst_case(_stats(100.0, DistributionModel.LOGNORMAL), 1_000_000, 99.9)
        assert outcome.asset_value > 0

    def test_threshold_50_is_median(self, lognormal_stats):
        """At 50% the worst case is the median."""
        outcome = calculate_worst_case(lognormal_stats, 1_000_000, 50)
        assert outcome.asset_value == pytest.approx(lognormal_stats.median)

    def test_tail_probability(self, normal_stats):
        """The tail is the complement of the threshold."""
        assert calculate_worst_case(normal_stats, 1_000_000, 90).tail_probability == pytest.approx(10)

    @pytest.mark.parametrize("threshold", [0, 100, -5, 150])
    def test_invalid_threshold_raises(self, normal_stats, threshold):
        """Thresholds of 0 or 100 have no finite worst case."""
        with pytest.raises(InvalidProbabilityError):
            calculate_worst_case(normal_stats, 1_000_000, threshold)


class TestClampProbabilityThreshold:
    """Tests for threshold clamping."""

    @pytest.mark.parametrize(
        "threshold,expected",
        [(0, 0.1), (100, 99.9), (-3, 0.1), (250, 99.9), (90, 90), (0.1, 0.1)],
    )
    def test_clamp(self, threshold, expected):
        """Thresholds are kept within [0.1, 99.9]."""
        assert clamp_probability_threshold(threshold) == expected

    def test_clamped_threshold_is_usable(self, normal_stats):
        """A clamped extreme threshold can be evaluated."""
        outcome = calculate_worst_case(normal_stats, 1_000_000, clamp_probability_threshold(100))
        assert outcome.probability_threshold == 99.9


class TestPercentileValue:
    """Tests for percentile_value."""

    def test_monotonic(self, lognormal_stats):
        """Higher probabilities give higher values."""
        values = [percentile_value(lognormal_stats, p) for p in (0.05, 0.25, 0.5, 0.75, 0.95)]
        assert values == sorted(values)

    def test_invalid_probability_raises(self, normal_stats):
        """Probabilities outside (0, 1) are rejected."""
        with pytest.raises(InvalidProbabilityError):
            percentile_value(normal_stats, 1.0)


class TestConfidenceInterval:
    """Tests for the central interval."""

    def test_normal_95(self):
        """mean +/- 1.96 std_dev for the normal model."""
        stats = _stats(10.0, years=1)
        interval = confidence_interval(stats, 0.95)
        assert interval.lower == pytest.approx(stats.mean - 1.96 * stats.std_dev, rel=1e-3)
        assert interval.upper == pytest.approx(stats.mean + 1.96 * stats.std_dev, rel=1e-3)

    def test_normal_lower_clipped(self, normal_stats):
        """A wide normal interval is clipped at zero."""
        assert confidence_interval(normal_stats).lower == 0.0

    def test_lognormal_matches_scipy(self, lognormal_stats):
        """Lognormal interval agrees with scipy."""
        reference = scipy_stats.lognorm(
            s=lognormal_stats.log_std_dev, scale=math.exp(lognormal_stats.log_mean)
        )
        lower, upper = reference.interval(0.9)
        interval = confidence_interval(lognormal_stats, 0.9)
        assert interval.lower == pytest.approx(lower, rel=1e-6)
        assert interval.upper == pytest.approx(upper, rel=1e-6)

    @pytest.mark.parametrize("level", [0, 1, -0.5, 1.5])
    def test_invalid_level_raises(self, normal_stats, level):
        """Level must be strictly between 0 and 1."""
        with pytest.raises(ValidationError):
            confidence_interval(normal_stats, level)
