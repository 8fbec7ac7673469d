"""Order-by-order asymptotic solutions for the oscillating cylinder.

Each solver returns the complex radial streamfunction of one harmonic,
wrapped as a ComplexAmplitude:

    first        O(ε),  K = 1, oscillating at the forcing frequency
    second_mean  O(ε²), K = 2, steady streaming (time-mean) part
    second       O(ε²), K = 2, oscillating at twice the forcing frequency

The second-order forcing is the Reynolds stress of the first-order Stokes
layer. The particular solutions are built from Green's functions, which
need integrals of the forcing both from the cylinder (r = 1) outward and
from r out to infinity; see streaming.quadrature for the semi-infinite
transform.

References:
    Holtsmark et al., "Boundary layer flow near a cylindrical obstacle in
    an oscillating, incompressible fluid", JASA 26(1), 1954.
    Riley, "Steady streaming", Annu. Rev. Fluid Mech. 33, 2001.
"""

import logging

import numpy as np

from streaming.amplitude import ComplexAmplitude, check_radial_samples
from streaming.params import HankelRatio
from streaming.quadrature import tail_to_infinity, head_from_one

logger = logging.getLogger(__name__)


def _prepare_radii(r):
    r = check_radial_samples(r)
    if not np.isclose(r[0], 1.0):
        # Boundary values of the integrals are read at the first sample
        logger.warning(
            "First radial sample is r = %g, not the cylinder surface r = 1; "
            "boundary values are taken there", r[0]
        )
    return r


def radial_samples(r_max, n, spacing='uniform'):
    """Ascending radial samples from the cylinder surface r = 1 to r_max.

    Parameters
    ----------
    r_max : float
        Outer radius, > 1.
    n : int
        Number of samples, >= 2.
    spacing : str
        'uniform' or 'geometric' (clustered toward the Stokes layer).
    """
    if r_max <= 1:
        raise ValueError(f"r_max must exceed the cylinder radius 1, got {r_max}")
    if n < 2:
        raise ValueError(f"Need at least 2 radial samples, got {n}")
    if spacing == 'uniform':
        return np.linspace(1.0, r_max, n)
    elif spacing == 'geometric':
        return np.geomspace(1.0, r_max, n)
    raise ValueError(f"Unknown radial spacing '{spacing}'")


def first_order(params, r):
    """O(ε) oscillatory solution, K = 1.

    ψ₀ = -(C/r - 2·Y(r)/γ): the potential-flow dipole plus the Stokes-layer
    correction that enforces no slip on r = 1.
    """
    r = _prepare_radii(r)
    gamma, Y, C = params.gamma, params.Y, params.C

    psi = -(C / r - 2 * Y(r) / gamma)
    return ComplexAmplitude(r, psi, 1)


def second_order_mean(params, r):
    """O(ε²) steady streaming solution, K = 2.

    The biharmonic particular solution for forcing f₀ is assembled from
    four moments of f₀,

        I⁻¹ = ∫_r^∞ f₀/r',  I¹ = ∫_r^∞ f₀·r',
        I³ = ∫_1^r f₀·r'³,  I⁵ = ∫_1^r f₀·r'⁵,

    plus the homogeneous terms fixed by no slip on r = 1 and boundedness
    at infinity.
    """
    r = _prepare_radii(r)
    Re, gamma2 = params.Re, params.gamma2
    X, Z, C = params.X, params.Z, params.C

    def f0(s):
        Xs, Zs = X(s), Z(s)
        return -0.5 * gamma2 * Re * (
            0.5 * (C * np.conj(Xs) - np.conj(C) * Xs) / s**2
            - 0.5 * np.conj(Zs) + 0.5 * Zs
            + Xs * np.conj(Zs) - np.conj(Xs) * Zs
        )

    Im1 = tail_to_infinity(r, lambda s: f0(s) / s)
    I1 = tail_to_infinity(r, lambda s: f0(s) * s)
    I3 = head_from_one(r, lambda s: f0(s) * s**3)
    I5 = head_from_one(r, lambda s: f0(s) * s**5)

    psi = (-r**4 / 48 * Im1 + r**2 / 16 * I1
           + I3 / 16 + Im1[0] / 16 - I1[0] / 8
           + (-I5 / 48 - Im1[0] / 24 + I1[0] / 16) / r**2)

    psi = psi - 0.5j * (-C / r**2 + Z(r))

    # Steady drift of the first-order Stokes layer
    psi = psi - 0.5 * np.imag(-np.conj(X(r)) * (C / r**2 - Z(r)))

    logger.debug("second_order_mean: Re=%g, n=%d, psi(r_max)=%s",
                 Re, len(r), psi[-1])
    return ComplexAmplitude(r, psi, 2)


def second_order(params, r):
    """O(ε²) oscillatory solution at twice the forcing frequency, K = 2.

    The second harmonic diffuses with wavenumber λ = √2·γ. Its Green's
    function pairs H₂⁽¹⁾(λr) with the kernel

        K_λ(r) = H₁⁽¹⁾(λ)·H₂⁽²⁾(λr) - H₁⁽²⁾(λ)·H₂⁽¹⁾(λr)

    which satisfies the no-slip condition at r = 1.
    """
    r = _prepare_radii(r)
    Re, gamma2 = params.Re, params.gamma2
    lam, lam2 = params.lam, params.lam2
    X, Z, C = params.X, params.Z, params.C

    def g0(s):
        return 0.5 * gamma2 * Re * (C * X(s) / s**2 - Z(s))

    H21 = HankelRatio(2, lam, kind=1)
    H22 = HankelRatio(2, lam, kind=2)
    H11_1 = HankelRatio(1, lam, kind=1)(1.0)
    H12_1 = HankelRatio(1, lam, kind=2)(1.0)
    H21_1 = H21(1.0)

    def K_lam(s):
        return H11_1 * H22(s) - H12_1 * H21(s)

    IKgr = head_from_one(r, lambda s: s * K_lam(s) * g0(s))
    IH21gr = tail_to_infinity(r, lambda s: s * H21(s) * g0(s))
    Igr_m1 = tail_to_infinity(r, lambda s: g0(s) / s)
    Igr3 = head_from_one(r, lambda s: g0(s) * s**3)

    coeff = 0.25j * np.pi / (lam2 * H11_1)
    I1 = coeff * IKgr * H21(r)
    I2 = coeff * IH21gr * K_lam(r)
    I3 = ((H21(r) - H21_1 / r**2) * Igr_m1[0]
          + IH21gr[0] / r**2) / (lam2 * lam * H11_1)
    I4 = -0.25 / lam2 * (Igr_m1 * r**2 - Igr_m1[0] / r**2 + Igr3 / r**2)

    psi = I1 + I2 + I3 + I4 + 0.5j * (-C / r**2 + Z(r))

    logger.debug("second_order: Re=%g, n=%d, psi(r_max)=%s",
                 Re, len(r), psi[-1])
    return ComplexAmplitude(r, psi, 2)


SOLVERS = {
    'first': first_order,
    'second_mean': second_order_mean,
    'second': second_order,
}


def solve(kind, params, r):
    """Dispatch to a solver by name ('first', 'second_mean', 'second')."""
    try:
        solver = SOLVERS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown solver '{kind}', expected one of {sorted(SOLVERS)}"
        ) from None
    return solver(params, r)


def solve_all(params, r):
    """All three amplitudes needed for the O(ε²) solution.

    Returns
    -------
    (s1, s2mean, s2) : ComplexAmplitude
    """
    return tuple(solve(kind, params, r)
                 for kind in ('first', 'second_mean', 'second'))
