"""Tests for the standard normal special-function approximations."""

import math

import numpy as np
import pytest
from scipy import special, stats

from core.exceptions import InvalidProbabilityError
from core.special_functions import (
    erf,
    normal_cdf,
    normal_inverse_cdf,
    normal_pdf,
)


class TestErf:
    """Tests for the error function approximation."""

    def test_matches_scipy(self):
        """Absolute error stays within the published 1.5e-7 bound."""
        x = np.linspace(-4, 4, 801)
        error = np.abs(erf(x) - special.erf(x))
        assert error.max() < 2e-7

    @pytest.mark.parametrize("x", [0.0, 0.1, 0.5, 1.0, 2.5, 6.0])
    def test_odd_symmetry(self, x):
        """erf(-x) == -erf(x)."""
        assert abs(erf(-x) + erf(x)) < 1e-6

    def test_odd_symmetry_exact_away_from_zero(self):
        """Sign extraction makes the symmetry exact for x != 0."""
        x = np.linspace(0.01, 5, 100)
        assert np.array_equal(erf(-x), -erf(x))

    def test_limits(self):
        """erf approaches +/-1 in the tails."""
        assert abs(erf(10.0) - 1.0) < 1e-7
        assert abs(erf(-10.0) + 1.0) < 1e-7

    def test_scalar_returns_float(self):
        """Scalar input gives a plain float."""
        assert isinstance(erf(0.5), float)

    def test_array_shape_preserved(self):
        """Array input keeps its shape."""
        x = np.zeros((3, 4))
        assert erf(x).shape == (3, 4)


class TestNormalCDF:
    """Tests for the standard normal CDF."""

    def test_center(self):
        """CDF at zero is one half."""
        assert abs(normal_cdf(0.0) - 0.5) < 1e-6

    @pytest.mark.parametrize("x", [0.3, 1.0, 1.96, 3.0, 5.0])
    def test_complement(self, x):
        """CDF(x) + CDF(-x) == 1."""
        assert abs(normal_cdf(x) + normal_cdf(-x) - 1.0) < 1e-6

    def test_matches_scipy(self):
        """Agrees with scipy's normal CDF."""
        x = np.linspace(-6, 6, 241)
        assert np.allclose(normal_cdf(x), stats.norm.cdf(x), atol=1e-7)

    def test_known_quantile(self):
        """About 97.5% of mass lies below 1.96."""
        assert abs(normal_cdf(1.96) - 0.975) < 1e-4

    def test_monotonic(self):
        """CDF never decreases."""
        values = normal_cdf(np.linspace(-5, 5, 500))
        assert np.all(np.diff(values) >= 0)

    def test_range(self):
        """Values stay within [0, 1]."""
        values = normal_cdf(np.linspace(-40, 40, 81))
        assert np.all(values >= 0)
        assert np.all(values <= 1)


class TestNormalPDF:
    """Tests for the standard normal PDF."""

    def test_peak(self):
        """Density at zero is 1 / sqrt(2 pi)."""
        assert abs(normal_pdf(0.0) - 1 / math.sqrt(2 * math.pi)) < 1e-15

    def test_matches_scipy(self):
        """Agrees with scipy's normal PDF."""
        x = np.linspace(-8, 8, 161)
        assert np.allclose(normal_pdf(x), stats.norm.pdf(x), rtol=1e-12, atol=0)

    def test_symmetric(self):
        """PDF is even."""
        assert normal_pdf(1.3) == normal_pdf(-1.3)


class TestNormalInverseCDF:
    """Tests for the Beasley-Springer-Moro inverse CDF."""

    def test_round_trip(self):
        """CDF(inverse(p)) == p across (0, 1)."""
        for p in np.linspace(0.001, 0.999, 999):
            assert abs(normal_cdf(normal_inverse_cdf(p)) - p) < 1e-4

    @pytest.mark.parametrize("p", [1e-6, 1e-4, 0.01, 0.0799, 0.0801, 0.5, 0.9, 0.9999, 1 - 1e-6])
    def test_matches_scipy(self, p):
        """Agrees with scipy's percent point function in both branches."""
        assert abs(normal_inverse_cdf(p) - stats.norm.ppf(p)) < 1e-5

    def test_median(self):
        """Inverse of one half is zero."""
        assert normal_inverse_cdf(0.5) == 0.0

    def test_antisymmetric(self):
        """inverse(1 - p) == -inverse(p)."""
        for p in [0.01, 0.1, 0.3, 0.45]:
            assert abs(normal_inverse_cdf(1 - p) + normal_inverse_cdf(p)) < 1e-8

    def test_lower_tail_for_worst_case(self):
        """10% lower tail is about -1.2816 standard deviations."""
        assert abs(normal_inverse_cdf(0.10) + 1.2816) < 1e-4

    def test_continuous_at_branch_boundary(self):
        """No jump where the central branch hands over to the tail branch."""
        below = normal_inverse_cdf(0.08 - 1e-9)
        above = normal_inverse_cdf(0.08 + 1e-9)
        assert abs(below - above) < 1e-4

    @pytest.mark.parametrize("p", [0.0, 1.0, -0.1, 1.5, float("nan")])
    def test_invalid_probability_raises(self, p):
        """Probabilities outside (0, 1) are rejected, not clamped."""
        with pytest.raises(InvalidProbabilityError):
            normal_inverse_cdf(p)

    def test_error_is_value_error(self):
        """Callers catching ValueError also see invalid probabilities."""
        with pytest.raises(ValueError):
            normal_inverse_cdf(1.0)

    def test_error_keeps_probability(self):
        """The offending probability is attached to the error."""
        with pytest.raises(InvalidProbabilityError) as excinfo:
            normal_inverse_cdf(0.0)
        assert excinfo.value.probability == 0.0


class TestPurity:
    """Evaluators are deterministic."""

    def test_repeated_calls_identical(self):
        """Same input, bit-identical output."""
        assert erf(0.7) == erf(0.7)
        assert normal_cdf(-1.1) == normal_cdf(-1.1)
        assert normal_pdf(2.2) == normal_pdf(2.2)
        assert normal_inverse_cdf(0.123) == normal_inverse_cdf(0.123)
