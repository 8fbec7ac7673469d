"""Quadrature core: Gauss-Legendre rule, cumulative trapezoid, and the
semi-infinite integral transform used by every forcing term in the solvers.

The improper integral ∫_r^∞ f(r') dr' is split at r_max = max(r):

    ∫_r^r_max   f dr'  = ∫_{1/r_max}^{1/r} f(1/u)·(1/u)² du    (trapezoid in u)
    ∫_r_max^∞   f dr'  = ∫_{-1}^{1} f(t)·2·r_max/(x+1)² dx,  t = 2·r_max/(x+1)

The second piece is a fixed 100-point Gauss-Legendre sum.
"""

import logging
from functools import lru_cache

import numpy as np

logger = logging.getLogger(__name__)

N_GAUSS = 100


@lru_cache(maxsize=None)
def gauss_legendre_rule(n=N_GAUSS):
    """Nodes and weights of the n-point Gauss-Legendre rule on [-1, 1].

    Computed once per process; the arrays are read-only.
    """
    nodes, weights = np.polynomial.legendre.leggauss(n)
    nodes.flags.writeable = False
    weights.flags.writeable = False
    return nodes, weights


def quadgauss(f, rule=None):
    """Approximate ∫_{-1}^{1} f(x) dx as Σ wᵢ·f(xᵢ).

    Parameters
    ----------
    f : callable
        Vectorized over the node array.
    rule : (nodes, weights) or None
        Explicit rule. Defaults to the shared 100-point rule.
    """
    nodes, weights = gauss_legendre_rule() if rule is None else rule
    return np.dot(weights, f(nodes))


def cumint(g, x):
    """Forward cumulative trapezoidal integral of samples g over x.

    out[0] = 0 and out[i] = out[i-1] + ½(g[i-1] + g[i])·(x[i] - x[i-1]).
    x may be increasing or decreasing; g may be complex.
    """
    g = np.asarray(g)
    x = np.asarray(x, dtype=float)
    if g.shape != x.shape:
        raise ValueError(
            f"cumint needs equal-length samples, got {g.shape} and {x.shape}"
        )
    out = np.zeros(g.shape, dtype=np.result_type(g.dtype, float))
    if len(g) > 1:
        out[1:] = np.cumsum(0.5 * (g[:-1] + g[1:]) * np.diff(x))
    return out


def tail_to_infinity(r, f0):
    """∫_r^∞ f0(r') dr' at every sample of the ascending array r.

    Parameters
    ----------
    r : ndarray
        Ascending radial samples, all > 0.
    f0 : callable
        Integrand, vectorized over r'.

    Returns
    -------
    ndarray aligned with r.
    """
    r = np.asarray(r, dtype=float)
    r_rev = r[::-1]

    # Contribution from each r up to r_max, integrated in u = 1/r'
    head = cumint(f0(r_rev) * r_rev**2, 1.0 / r_rev)

    r_max = r_rev[0]

    def mapped(x):
        # x = -1 maps to t = ∞ where the integrand vanishes
        at_inf = x == -1.0
        xp1 = np.where(at_inf, 1.0, x + 1.0)
        t = 2 * r_max / xp1
        return np.where(at_inf, 0.0, 2 * r_max * f0(t) / xp1**2)

    tail = quadgauss(mapped)
    logger.debug("tail_to_infinity: r_max=%g, tail=%s", r_max, tail)

    return (head + tail)[::-1]


def head_from_one(r, f0):
    """∫ f0(r') dr' from r[0] to every sample.

    The lower limit is the first sample, not a fixed r = 1; callers pass
    samples that start on the cylinder surface to get ∫_1^r.
    """
    r = np.asarray(r, dtype=float)
    return cumint(f0(r), r)
