"""Radial operators for a streamfunction of angular harmonic order K.

For ψ(r, Θ) = ψ(r)·sin(KΘ) the polar Laplacian reduces to

    D²_K ψ = (1/r)·d/dr(r·dψ/dr) - K²ψ/r²

and the velocity (u_r, u_Θ) = (1/r ∂ψ/∂Θ, -∂ψ/∂r) reduces to
(K·ψ/r, -dψ/dr). Derivatives use numpy.gradient, second-order central
differences in the interior of a non-uniform grid.
"""

import numpy as np


def _check_radii(r):
    r = np.asarray(r, dtype=float)
    if np.any(r == 0):
        raise ValueError("Radial samples must not contain r = 0")
    return r


def laplacian(psi, r, order):
    """Discrete D²_K ψ on the sample grid r."""
    r = _check_radii(r)
    dpsi = np.gradient(psi, r)
    return np.gradient(r * dpsi, r) / r - order**2 * psi / r**2


def curl(psi, r, order):
    """Polar velocity (u_r, u_Θ) induced by a harmonic-K streamfunction."""
    r = _check_radii(r)
    return order * psi / r, -np.gradient(psi, r)
