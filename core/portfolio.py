from __future__ import annotations

from dataclasses import dataclass

from core.percentiles import WorstCaseOutcome


@dataclass(frozen=True)
class AssetSplit:
    """
    Split of total assets into an invested part and a part kept aside.

    Only the invested part follows the return distribution; the rest is
    assumed to keep its value over the holding period.

    Attributes:
        total_assets: All assets, invested or not
        investment_ratio: Percentage of total_assets that is invested (0-100)
    """

    total_assets: float
    investment_ratio: float

    @property
    def investment_amount(self) -> float:
        return self.total_assets * self.investment_ratio / 100

    @property
    def non_investment_amount(self) -> float:
        return self.total_assets - self.investment_amount


@dataclass(frozen=True)
class TotalAssetsOutcome:
    """Outcome for all assets when the invested part ends at a given value."""

    total_assets: float
    asset_value: float
    change: float
    change_rate: float


def calculate_total_assets_worst_case(
    split: AssetSplit,
    outcome: WorstCaseOutcome,
) -> TotalAssetsOutcome:
    """
    Combine the invested part's worst case with the non-invested part.

    Args:
        split: Total assets and investment ratio
        outcome: Worst case of the invested part

    Returns:
        TotalAssetsOutcome with the total value and its change
    """
    total = outcome.asset_value + split.non_investment_amount
    change = total - split.total_assets
    change_rate = change / split.total_assets if split.total_assets else 0.0

    return TotalAssetsOutcome(
        total_assets=split.total_assets,
        asset_value=total,
        change=change,
        change_rate=change_rate,
    )
