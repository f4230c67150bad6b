from __future__ import annotations


def format_currency(value: float) -> str:
    return f"${value:,.0f}"


def format_signed_currency(value: float) -> str:
    """Currency with an explicit sign: +$1,000 / -$1,000."""
    sign = "+" if value >= 0 else "-"
    return f"{sign}${abs(value):,.0f}"


def format_signed_percent(rate: float, decimals: int = 1) -> str:
    """Format a decimal rate as a signed percentage (0.125 -> +12.5%)."""
    return f"{rate * 100:+.{decimals}f}%"


def percent_to_rate(percent: float) -> float:
    return percent / 100


def rate_to_percent(rate: float) -> float:
    return rate * 100
