"""Input validation for asset distribution calculator parameters."""

from __future__ import annotations

from dataclasses import dataclass, field

from core.config import DEFAULT_INPUT_BOUNDS, InputBounds
from core.distribution import DistributionModel, resolve_model
from core.settings import InvestmentSettings


@dataclass
class ValidationResult:
    """Result of validation containing any errors found."""

    errors: list[tuple[str, str]] = field(default_factory=list)

    def add_error(self, field_name: str, message: str) -> None:
        """Add a validation error."""
        self.errors.append((field_name, message))

    def is_valid(self) -> bool:
        """Return True if no validation errors."""
        return len(self.errors) == 0

    def error_messages(self) -> list[str]:
        """Return formatted error messages."""
        return [f"{field_name}: {message}" for field_name, message in self.errors]


def validate_settings(
    settings: InvestmentSettings,
    bounds: InputBounds = DEFAULT_INPUT_BOUNDS,
) -> ValidationResult:
    """Validate the stored investment settings."""
    result = ValidationResult()

    if settings.total_assets < 0:
        result.add_error("total_assets", "Cannot be negative")
    if settings.total_assets > 1_000_000_000_000:  # 1 trillion sanity check
        result.add_error("total_assets", "Exceeds maximum allowed value")

    if not bounds.min_investment_ratio <= settings.investment_ratio <= bounds.max_investment_ratio:
        result.add_error(
            "investment_ratio",
            f"Must be between {bounds.min_investment_ratio:g}% "
            f"and {bounds.max_investment_ratio:g}%",
        )

    if not (
        bounds.min_probability_threshold
        <= settings.probability_threshold
        <= bounds.max_probability_threshold
    ):
        result.add_error(
            "probability_threshold",
            f"Must be between {bounds.min_probability_threshold:g}% "
            f"and {bounds.max_probability_threshold:g}%",
        )

    if settings.risk < 0:
        result.add_error("risk", "Cannot be negative")
    if settings.risk > 100:
        result.add_error("risk", "Annual risk above 100% is unrealistic")

    return result


def validate_years(years: float, bounds: InputBounds = DEFAULT_INPUT_BOUNDS) -> ValidationResult:
    """Validate the holding period."""
    result = ValidationResult()

    if years < bounds.min_years:
        result.add_error("years", f"Must be at least {bounds.min_years} year(s)")
    if years > bounds.max_years:
        result.add_error("years", f"Cannot exceed {bounds.max_years} years")

    return result


def validate_curve_options(num_points: int, num_std_dev: float) -> ValidationResult:
    """Validate density curve discretization options."""
    result = ValidationResult()

    if num_points < 2:
        result.add_error("num_points", "Must be at least 2")
    if num_points > 10_000:
        result.add_error("num_points", "Cannot exceed 10,000")

    if num_std_dev <= 0:
        result.add_error("num_std_dev", "Must be positive")

    return result


def validate_all(
    settings: InvestmentSettings,
    years: float,
    bounds: InputBounds = DEFAULT_INPUT_BOUNDS,
    model: DistributionModel | str = DistributionModel.NORMAL,
) -> ValidationResult:
    """Run all validations for the selected model and combine results."""
    combined = ValidationResult()

    validations = [
        validate_settings(settings, bounds),
        validate_years(years, bounds),
    ]

    for result in validations:
        combined.errors.extend(result.errors)

    if resolve_model(model) is DistributionModel.NORMAL and settings.expected_return <= -100:
        combined.add_error("expected_return", "Must be greater than -100% for the normal model")

    # The model needs a positive invested amount
    if combined.is_valid() and settings.investment_amount <= 0:
        combined.add_error(
            "investment_amount", "Nothing is invested; raise total assets or investment ratio"
        )

    return combined
