"""Shared pytest fixtures for asset distribution calculator tests."""

import pytest

from core.distribution import (
    DistributionModel,
    DistributionStatistics,
    InvestmentDistributionParams,
    calculate_investment_distribution,
)
from core.settings import InvestmentSettings, SettingsStore


@pytest.fixture
def default_params() -> InvestmentDistributionParams:
    """1M invested at 7.5% return / 18% risk for 10 years."""
    return InvestmentDistributionParams(
        initial_assets=1_000_000,
        expected_return=7.5,
        risk=18.0,
        years=10,
    )


@pytest.fixture
def zero_risk_params() -> InvestmentDistributionParams:
    """Risk-free investment: the outcome is certain."""
    return InvestmentDistributionParams(
        initial_assets=1_000_000,
        expected_return=7.5,
        risk=0.0,
        years=10,
    )


@pytest.fixture
def normal_stats(default_params) -> DistributionStatistics:
    """Normal-approximation statistics for the default parameters."""
    return calculate_investment_distribution(default_params, DistributionModel.NORMAL)


@pytest.fixture
def lognormal_stats(default_params) -> DistributionStatistics:
    """Lognormal statistics for the default parameters."""
    return calculate_investment_distribution(default_params, DistributionModel.LOGNORMAL)


@pytest.fixture
def default_settings() -> InvestmentSettings:
    """Out-of-the-box settings."""
    return InvestmentSettings()


@pytest.fixture
def settings_store(tmp_path) -> SettingsStore:
    """Settings store writing to a temporary directory."""
    return SettingsStore(tmp_path / "config" / "settings.json")
