"""Investment settings and their persistence (JSON file, URL query parameters)."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from core.distribution import InvestmentDistributionParams
from core.portfolio import AssetSplit

logger = logging.getLogger(__name__)

# Field name -> URL query parameter name
QUERY_PARAM_NAMES: dict[str, str] = {
    "total_assets": "totalAssets",
    "investment_ratio": "investmentRatio",
    "probability_threshold": "probabilityThreshold",
    "expected_return": "expectedReturn",
    "risk": "risk",
}


@dataclass(frozen=True)
class InvestmentSettings:
    """
    User settings shared by all pages.

    Attributes:
        total_assets: All assets, invested or not
        investment_ratio: Percentage of total assets invested (0-100)
        probability_threshold: Percent of outcomes considered for the worst case
        expected_return: Expected annual return in percent
        risk: Annual volatility in percent
    """

    total_assets: float = 1_000_000
    investment_ratio: float = 50.0
    probability_threshold: float = 90.0
    expected_return: float = 7.5
    risk: float = 18.0

    @property
    def asset_split(self) -> AssetSplit:
        return AssetSplit(self.total_assets, self.investment_ratio)

    @property
    def investment_amount(self) -> float:
        return self.asset_split.investment_amount

    def distribution_params(self, years: float) -> InvestmentDistributionParams:
        """Model inputs for the invested part over the given holding period."""
        return InvestmentDistributionParams(
            initial_assets=self.investment_amount,
            expected_return=self.expected_return,
            risk=self.risk,
            years=years,
        )

    def replace(self, **changes: float) -> "InvestmentSettings":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InvestmentSettings":
        """
        Create settings from a mapping of field names to numbers.

        Missing or unparseable fields keep their defaults; unknown keys
        are ignored.
        """
        values: dict[str, float] = {}
        for field_info in fields(cls):
            if field_info.name not in data:
                continue
            raw = data[field_info.name]
            try:
                values[field_info.name] = float(raw)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid value for {field_info.name}: {raw!r}")
        return cls(**values)

    def to_query_params(self) -> dict[str, str]:
        """Encode the settings as URL query parameters."""
        return {
            param: _format_number(getattr(self, name))
            for name, param in QUERY_PARAM_NAMES.items()
        }

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "InvestmentSettings":
        """Decode settings from URL query parameters (missing keys use defaults)."""
        data = {
            name: params[param]
            for name, param in QUERY_PARAM_NAMES.items()
            if param in params
        }
        return cls.from_dict(data)


DEFAULT_SETTINGS = InvestmentSettings()


def _format_number(value: float) -> str:
    """Format without a trailing .0 for whole numbers (1000000, 7.5)."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class SettingsStore:
    """Loads, saves and resets InvestmentSettings in a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> InvestmentSettings:
        """
        Load settings from disk.

        Returns defaults when the file does not exist or cannot be parsed.
        """
        if not self.path.exists():
            logger.info(f"No saved settings at {self.path}, using defaults")
            return DEFAULT_SETTINGS

        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to parse stored settings at {self.path}: {e}")
            return DEFAULT_SETTINGS

        if not isinstance(payload, dict):
            logger.error(f"Stored settings at {self.path} are not a JSON object")
            return DEFAULT_SETTINGS

        return InvestmentSettings.from_dict(payload)

    def save(self, settings: InvestmentSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(settings.to_dict(), handle)
        logger.info(f"Saved settings to {self.path}")

    def update(self, current: InvestmentSettings, **changes: float) -> InvestmentSettings:
        """Apply changes to current, save the result and return it."""
        updated = current.replace(**changes)
        self.save(updated)
        return updated

    def reset(self) -> InvestmentSettings:
        """Delete saved settings and return the defaults."""
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Removed saved settings at {self.path}")
        return DEFAULT_SETTINGS
