"""Shared fixtures for streaming tests."""

import numpy as np
import pytest

from streaming.params import Params
from streaming.amplitude import ComplexAmplitude
from streaming.solvers import radial_samples, solve_all


@pytest.fixture
def params():
    """Moderate Reynolds number: Stokes layer thickness ~ 1/sqrt(Re)."""
    return Params(epsilon=0.1, Re=10.0)


@pytest.fixture
def radii():
    """Radial samples from the cylinder surface out to r = 10."""
    return radial_samples(10.0, 400)


@pytest.fixture(scope='session')
def solved():
    """(params, s1, s2mean, s2) for Re = 10, solved once per session."""
    p = Params(epsilon=0.1, Re=10.0)
    r = radial_samples(10.0, 400)
    return (p,) + solve_all(p, r)


@pytest.fixture
def synthetic_amplitudes():
    """Cheap analytic amplitudes of orders 1, 2, 2 on r in [1, 5]."""
    r = np.linspace(1.0, 5.0, 401)
    s1 = ComplexAmplitude(r, (1 + 0.5j) / r, 1)
    s2mean = ComplexAmplitude(r, 0.3 * r**2 - 0.1j / r**2, 2)
    s2 = ComplexAmplitude(r, (0.2 - 0.4j) * np.exp(-(r - 1)), 2)
    return s1, s2mean, s2
