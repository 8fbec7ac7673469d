"""Tests for the quadrature core and the semi-infinite integral transform."""

import numpy as np
import pytest

from streaming.quadrature import (
    gauss_legendre_rule, quadgauss, cumint, tail_to_infinity, head_from_one,
    N_GAUSS,
)


class TestGaussLegendre:

    def test_rule_size(self):
        nodes, weights = gauss_legendre_rule()
        assert len(nodes) == N_GAUSS == 100
        assert len(weights) == N_GAUSS

    def test_rule_is_shared(self):
        """The rule is computed once and reused."""
        assert gauss_legendre_rule() is gauss_legendre_rule()

    def test_rule_read_only(self):
        nodes, weights = gauss_legendre_rule()
        with pytest.raises(ValueError):
            nodes[0] = 0.0
        with pytest.raises(ValueError):
            weights[0] = 0.0

    def test_nodes_inside_interval(self):
        """Open rule: no node sits exactly on ±1."""
        nodes, _ = gauss_legendre_rule()
        assert np.all(np.abs(nodes) < 1.0)

    def test_constant(self):
        """∫_{-1}^{1} 1 dx = 2."""
        assert quadgauss(lambda x: np.ones_like(x)) == pytest.approx(2.0, rel=1e-13)

    def test_polynomial_exact(self):
        """∫ x^10 dx = 2/11, well within the rule's exact degree."""
        assert quadgauss(lambda x: x**10) == pytest.approx(2 / 11, rel=1e-12)

    def test_odd_function_vanishes(self):
        assert quadgauss(lambda x: x**3) == pytest.approx(0.0, abs=1e-14)

    def test_complex_integrand(self):
        val = quadgauss(lambda x: (1 + 2j) * x**2)
        assert val == pytest.approx((1 + 2j) * 2 / 3, rel=1e-12)

    def test_explicit_rule(self):
        """A caller-supplied rule overrides the shared one."""
        rule = np.polynomial.legendre.leggauss(3)
        assert quadgauss(lambda x: x**4, rule=rule) == pytest.approx(0.4, rel=1e-12)


class TestCumint:

    def test_starts_at_zero(self):
        x = np.linspace(0, 3, 17)
        out = cumint(np.cos(x), x)
        assert out[0] == 0.0

    def test_linear_exact(self):
        """Trapezoid rule is exact for linear integrands."""
        x = np.linspace(0, 2, 11)
        out = cumint(3 * x + 1, x)
        np.testing.assert_allclose(out, 1.5 * x**2 + x, atol=1e-13)

    def test_recurrence(self):
        x = np.array([0.0, 0.5, 1.5, 1.75])
        g = np.array([1.0, 2.0, -1.0, 4.0])
        out = cumint(g, x)
        expected = [0.0, 0.75, 0.75 + 0.5, 0.75 + 0.5 + 0.375]
        np.testing.assert_allclose(out, expected, atol=1e-15)

    def test_decreasing_abscissa(self):
        """Decreasing x integrates with the sign of dx."""
        x = np.linspace(2, 0, 21)
        out = cumint(np.ones_like(x), x)
        np.testing.assert_allclose(out, x - 2, atol=1e-13)

    def test_complex(self):
        x = np.linspace(0, 1, 5)
        out = cumint(1j * np.ones_like(x), x)
        np.testing.assert_allclose(out, 1j * x, atol=1e-15)

    def test_integer_samples_promoted(self):
        out = cumint(np.array([1, 1, 1]), np.array([0, 1, 2]))
        assert out.dtype == np.float64
        np.testing.assert_allclose(out, [0.0, 1.0, 2.0])

    def test_deterministic(self):
        x = np.geomspace(1, 50, 200)
        g = np.sin(x) / x
        np.testing.assert_array_equal(cumint(g, x), cumint(g, x))

    def test_unequal_lengths(self):
        with pytest.raises(ValueError, match="equal-length"):
            cumint(np.ones(4), np.linspace(0, 1, 5))


class TestTailToInfinity:

    def test_inverse_square(self):
        """∫_r^∞ r'^-2 dr' = 1/r."""
        r = np.array([1.0, 2.0, 5.0, 10.0])
        out = tail_to_infinity(r, lambda s: 1 / s**2)
        np.testing.assert_allclose(out, 1 / r, rtol=1e-6)

    def test_inverse_cube(self):
        """∫_r^∞ r'^-3 dr' = 1/(2r²)."""
        r = np.linspace(1.0, 8.0, 50)
        out = tail_to_infinity(r, lambda s: 1 / s**3)
        np.testing.assert_allclose(out, 0.5 / r**2, rtol=1e-6)

    def test_complex_integrand(self):
        r = np.array([1.0, 3.0, 7.0])
        out = tail_to_infinity(r, lambda s: (2 - 1j) / s**2)
        np.testing.assert_allclose(out, (2 - 1j) / r, rtol=1e-6)

    def test_exponential_decay(self):
        """∫_r^∞ e^(-r') dr' = e^(-r), up to trapezoid error in 1/r."""
        r = np.linspace(1.0, 6.0, 2001)
        out = tail_to_infinity(r, lambda s: np.exp(-s))
        np.testing.assert_allclose(out, np.exp(-r), rtol=1e-3)

    def test_aligned_with_r(self):
        """Output is ascending-r aligned: tail decreases with r."""
        r = np.linspace(1.0, 5.0, 30)
        out = tail_to_infinity(r, lambda s: 1 / s**2)
        assert out.shape == r.shape
        assert np.all(np.diff(out) < 0)

    def test_last_entry_is_pure_tail(self):
        """At r_max only the Gauss-Legendre tail contributes."""
        r = np.linspace(1.0, 4.0, 10)
        out = tail_to_infinity(r, lambda s: 1 / s**2)
        assert out[-1] == pytest.approx(0.25, rel=1e-10)


class TestHeadFromOne:

    def test_linear(self):
        """∫_1^r r' dr' = (r² - 1)/2."""
        r = np.linspace(1.0, 5.0, 1000)
        out = head_from_one(r, lambda s: s)
        np.testing.assert_allclose(out, (r**2 - 1) / 2, atol=1e-10)

    def test_cubic_converges(self):
        """∫_1^r r'^3 dr' = (r⁴ - 1)/4 within trapezoid error."""
        r = np.linspace(1.0, 3.0, 2001)
        out = head_from_one(r, lambda s: s**3)
        np.testing.assert_allclose(out, (r**4 - 1) / 4, rtol=1e-5)

    def test_starts_at_zero(self):
        r = np.linspace(1.0, 2.0, 5)
        assert head_from_one(r, np.exp)[0] == 0.0

    def test_lower_limit_is_first_sample(self):
        """Samples starting at r = 2 integrate from 2, not from 1."""
        r = np.linspace(2.0, 3.0, 101)
        out = head_from_one(r, lambda s: s)
        assert out[0] == 0.0
        assert out[-1] == pytest.approx((9.0 - 4.0) / 2, rel=1e-12)
