"""Tests for helper utility functions."""

import pytest

from utils.helpers import (
    format_currency,
    format_signed_currency,
    format_signed_percent,
    percent_to_rate,
    rate_to_percent,
)


class TestRateConversion:
    """Tests for percent / rate conversion."""

    def test_percent_to_rate(self):
        """7.5% is 0.075."""
        assert percent_to_rate(7.5) == pytest.approx(0.075)

    def test_rate_to_percent(self):
        """0.18 is 18%."""
        assert rate_to_percent(0.18) == pytest.approx(18.0)

    def test_negative(self):
        """Negative rates convert too."""
        assert percent_to_rate(-20) == pytest.approx(-0.2)


class TestFormatCurrency:
    """Tests for currency formatting."""

    def test_whole_dollars(self):
        """Whole dollar formatting."""
        assert format_currency(1000) == "$1,000"

    def test_rounding(self):
        """Cents are rounded away."""
        assert format_currency(1234.56) == "$1,235"

    def test_large_value(self):
        """Millions get thousands separators."""
        assert format_currency(2_061_032) == "$2,061,032"


class TestFormatSignedCurrency:
    """Tests for signed currency formatting."""

    def test_gain(self):
        """Gains get a plus sign."""
        assert format_signed_currency(1000) == "+$1,000"

    def test_loss(self):
        """Losses put the minus before the dollar sign."""
        assert format_signed_currency(-442_437.4) == "-$442,437"

    def test_zero(self):
        """Zero counts as a gain."""
        assert format_signed_currency(0) == "+$0"


class TestFormatSignedPercent:
    """Tests for signed percentage formatting."""

    def test_positive(self):
        """0.125 -> +12.5%."""
        assert format_signed_percent(0.125) == "+12.5%"

    def test_negative(self):
        """-0.4424 -> -44.2%."""
        assert format_signed_percent(-0.4424) == "-44.2%"

    def test_decimals(self):
        """Precision is configurable."""
        assert format_signed_percent(0.12346, decimals=2) == "+12.35%"
