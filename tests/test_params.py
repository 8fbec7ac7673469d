"""Tests for the parameter bundle and Hankel-ratio basis."""

import dataclasses

import numpy as np
import pytest
from scipy.special import hankel1, hankel2

from streaming.params import Params, HankelRatio


class TestParams:

    def test_gamma_squared(self, params):
        assert params.gamma2 == 10j
        assert params.gamma**2 == pytest.approx(10j, rel=1e-14)

    def test_principal_branch(self, params):
        """Principal root: both parts positive, so H⁽¹⁾(γr) decays."""
        assert params.gamma.real > 0
        assert params.gamma.imag > 0
        assert np.angle(params.gamma) == pytest.approx(np.pi / 4)

    def test_lambda(self, params):
        assert params.lam == pytest.approx(np.sqrt(2) * params.gamma)
        assert params.lam2 == pytest.approx(params.lam**2)

    def test_H0(self, params):
        assert params.H0 == pytest.approx(hankel1(0, params.gamma))

    def test_C(self, params):
        expected = hankel1(2, params.gamma) / hankel1(0, params.gamma)
        assert params.C == pytest.approx(expected)

    def test_basis_normalized_at_surface(self, params):
        """X(1) = 1 and Z(1) = C by construction."""
        assert params.X(1.0) == pytest.approx(1.0, rel=1e-14)
        assert params.Z(1.0) == pytest.approx(params.C, rel=1e-14)

    def test_basis_vectorized(self, params):
        r = np.linspace(1, 5, 9)
        for f in (params.X, params.Y, params.Z):
            assert f(r).shape == r.shape

    def test_basis_decays(self, params):
        r = np.array([1.0, 3.0, 6.0])
        assert np.all(np.diff(np.abs(params.X(r))) < 0)

    def test_recurrence(self, params):
        """H₀ + H₂ = (2/z)·H₁  ⇒  X + Z = 2Y/(γr)."""
        r = np.linspace(1, 4, 7)
        lhs = params.X(r) + params.Z(r)
        rhs = 2 * params.Y(r) / (params.gamma * r)
        np.testing.assert_allclose(lhs, rhs, rtol=1e-10)

    def test_immutable(self, params):
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.Re = 20.0

    @pytest.mark.parametrize("Re", [0.0, -1.0, np.inf, np.nan])
    def test_degenerate_Re_rejected(self, Re):
        with pytest.raises(ValueError, match="Re must be positive"):
            Params(0.1, Re)

    def test_negative_epsilon_rejected(self):
        with pytest.raises(ValueError, match="epsilon"):
            Params(-0.1, 10.0)

    def test_zero_epsilon_allowed(self):
        assert Params(0.0, 10.0).epsilon == 0.0

    def test_from_dict(self):
        p = Params.from_dict({'epsilon': '0.2', 'Re': 40})
        assert p.epsilon == 0.2
        assert p.Re == 40.0

    def test_from_case_mapping(self):
        """A normalized case carries extra sections that are ignored."""
        case = {'epsilon': 0.05, 'Re': 25.0, 'radial': {'r_max': 10.0},
                'grid': {'type': 'polar'}, 'times': {'n': 4}}
        p = Params.from_dict(case)
        assert (p.epsilon, p.Re) == (0.05, 25.0)


class TestHankelRatio:

    def test_first_kind(self):
        z = 2 + 1j
        f = HankelRatio(1, z, norm=2.0)
        assert f(1.5) == pytest.approx(hankel1(1, 1.5 * z) / 2.0)

    def test_second_kind(self):
        z = 1 + 1j
        f = HankelRatio(2, z, kind=2)
        assert f(0.5) == pytest.approx(hankel2(2, 0.5 * z))

    def test_second_harmonic_cross_product(self, params):
        """H₁⁽¹⁾H₂⁽²⁾ - H₁⁽²⁾H₂⁽¹⁾ = 4i/(πz) at z = λ, mixing both kinds."""
        lam = params.lam
        cross = (HankelRatio(1, lam)(1.0) * HankelRatio(2, lam, kind=2)(1.0)
                 - HankelRatio(1, lam, kind=2)(1.0) * HankelRatio(2, lam)(1.0))
        assert cross == pytest.approx(4j / (np.pi * lam), rel=1e-10)

    def test_invalid_kind(self):
        with pytest.raises(ValueError, match="kind"):
            HankelRatio(0, 1j, kind=3)
