"""Complex harmonic amplitudes and their evaluation on a spatial grid.

A ComplexAmplitude of order K holds the radial profile ψ(r) of one
harmonic, ψ(r, Θ, t) = Re[ψ(r)·e^(-iKt)]·sin(KΘ). Evaluating it on a Grid
interpolates the radial profiles, applies the angular modulation and
projects through time, giving a real-valued Soln. Solns are combined
order by order through ``scale`` and ``combine``:

    s = ε·s₁(t) + ε²·(s̄₂ + s₂(t))
"""

import logging
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from streaming.operators import laplacian, curl

logger = logging.getLogger(__name__)

RADIUS_RTOL = 1e-12


def _frozen(a, dtype=None):
    a = np.array(a, dtype=dtype)
    a.flags.writeable = False
    return a


def check_radial_samples(r):
    """Validate radial samples: 1-D, strictly increasing, all > 0.

    Returns the samples as a float array.
    """
    r = np.asarray(r, dtype=float)
    if r.ndim != 1 or len(r) < 2:
        raise ValueError(
            f"Radial samples must be a 1-D array of at least 2 points, "
            f"got shape {r.shape}"
        )
    if np.any(r <= 0):
        raise ValueError(
            f"Radial samples must be positive, got min(r) = {r.min()}"
        )
    if np.any(np.diff(r) <= 0):
        raise ValueError("Radial samples must be strictly increasing")
    return r


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Grid:
    """Evaluation points in Cartesian coordinates with derived polar ones.

    x and y may have any (matching) shape; scalars become 1-element arrays.
    r and theta are always computed from x and y.
    """
    x: np.ndarray
    y: np.ndarray
    r: np.ndarray = field(init=False, repr=False)
    theta: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        x = np.atleast_1d(np.asarray(self.x, dtype=float))
        y = np.atleast_1d(np.asarray(self.y, dtype=float))
        if x.shape != y.shape:
            raise ValueError(
                f"Grid x and y must have the same shape, got {x.shape} and {y.shape}"
            )
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
            raise ValueError("Grid coordinates must be finite")
        r = np.sqrt(x**2 + y**2)
        if np.any(r == 0):
            raise ValueError("Grid contains the origin, where Θ is undefined")
        object.__setattr__(self, 'x', _frozen(x))
        object.__setattr__(self, 'y', _frozen(y))
        object.__setattr__(self, 'r', _frozen(r))
        object.__setattr__(self, 'theta', _frozen(np.arctan2(y, x)))

    @classmethod
    def from_polar(cls, r, theta):
        """Grid from polar coordinates (broadcast against each other)."""
        r, theta = np.broadcast_arrays(np.asarray(r, dtype=float),
                                       np.asarray(theta, dtype=float))
        return cls(r * np.cos(theta), r * np.sin(theta))

    @property
    def shape(self):
        return self.x.shape

    @property
    def ndim(self):
        return self.x.ndim

    def __repr__(self):
        return f"Grid({self.ndim}-dimensional, shape={self.shape})"


# ---------------------------------------------------------------------------
# Complex amplitude
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ComplexAmplitude:
    """Radial profile of one harmonic of the streaming solution.

    Attributes
    ----------
    r : ndarray
        Ascending radial samples.
    psi : ndarray (complex)
        Streamfunction amplitude ψ(r).
    order : int
        Harmonic order K.
    omega : ndarray (complex)
        Vorticity -D²_K ψ, derived.
    ur, utheta : ndarray (complex)
        Velocity curl_K ψ, derived.
    """
    r: np.ndarray
    psi: np.ndarray
    order: int
    omega: np.ndarray = field(init=False, repr=False)
    ur: np.ndarray = field(init=False, repr=False)
    utheta: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        r = check_radial_samples(self.r)
        psi = np.asarray(self.psi, dtype=complex)
        if psi.shape != r.shape:
            raise ValueError(
                f"psi has shape {psi.shape}, expected {r.shape} to match r"
            )
        ur, utheta = curl(psi, r, self.order)
        object.__setattr__(self, 'r', _frozen(r))
        object.__setattr__(self, 'psi', _frozen(psi))
        object.__setattr__(self, 'order', int(self.order))
        object.__setattr__(self, 'omega', _frozen(-laplacian(psi, r, self.order)))
        object.__setattr__(self, 'ur', _frozen(ur))
        object.__setattr__(self, 'utheta', _frozen(utheta))

    def __repr__(self):
        return (f"ComplexAmplitude(order={self.order}, "
                f"r=[{self.r[0]:g}, {self.r[-1]:g}], n={len(self.r)})")


# ---------------------------------------------------------------------------
# Real-valued solution and its algebra
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Soln:
    """Physical (real) streaming solution at an instant or over a history.

    In history form t is a 1-D array of times and each field carries a
    trailing time axis, shape grid.shape + (len(t),).
    """
    t: Union[float, np.ndarray]
    psi: np.ndarray
    omega: np.ndarray
    ur: np.ndarray
    utheta: np.ndarray

    def __post_init__(self):
        if np.ndim(self.t) == 0:
            object.__setattr__(self, 't', float(self.t))
        else:
            object.__setattr__(self, 't', _frozen(self.t, dtype=float))
        for name in ('psi', 'omega', 'ur', 'utheta'):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @property
    def is_history(self):
        return np.ndim(self.t) > 0

    def fields(self):
        return {'psi': self.psi, 'omega': self.omega,
                'ur': self.ur, 'utheta': self.utheta}

    def __repr__(self):
        if self.is_history:
            return (f"Soln(history from t = {self.t[0]:g} to {self.t[-1]:g}, "
                    f"{len(self.t)} steps)")
        return f"Soln(t = {self.t:g})"


def scale(soln, a):
    """a·soln, field by field. Keeps soln.t."""
    return Soln(soln.t, a * soln.psi, a * soln.omega,
                a * soln.ur, a * soln.utheta)


def combine(s1, s2):
    """s1 + s2, field by field. Both must share the same sampling; keeps s1.t."""
    if s1.psi.shape != s2.psi.shape:
        raise ValueError(
            f"Cannot combine solutions sampled on shapes {s1.psi.shape} "
            f"and {s2.psi.shape}"
        )
    return Soln(s1.t, s1.psi + s2.psi, s1.omega + s2.omega,
                s1.ur + s2.ur, s1.utheta + s2.utheta)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def realize(t, psi0, omega0, ur0, utheta0, order):
    """Project complex harmonic fields to real time t via Re[f·e^(-iKt)]."""
    phase = np.exp(-1j * order * t)
    return Soln(t,
                np.real(psi0 * phase),
                np.real(omega0 * phase),
                np.real(ur0 * phase),
                np.real(utheta0 * phase))


def _interpolate(r_new, r, values):
    """Piecewise-linear interpolation of complex samples, no extrapolation."""
    return (np.interp(r_new, r, values.real)
            + 1j * np.interp(r_new, r, values.imag))


def evaluate(t, grid, amplitude):
    """Evaluate one harmonic amplitude on a grid at time t.

    Parameters
    ----------
    t : float
        Time (the harmonic phase is e^(-iKt)).
    grid : Grid
        Evaluation points; every radius must lie within the amplitude's
        radial samples.
    amplitude : ComplexAmplitude

    Returns
    -------
    Soln at time t, fields shaped like the grid.

    Raises
    ------
    ValueError
        If the grid is empty or a grid radius falls outside [r[0], r[-1]].
    """
    r = amplitude.r
    if grid.r.size == 0:
        raise ValueError("Grid is empty, there are no points to evaluate")
    r_lo, r_hi = grid.r.min(), grid.r.max()
    # Round-off from polar -> Cartesian -> polar is accepted at the ends
    tol = RADIUS_RTOL * r[-1]
    if r_lo < r[0] - tol or r_hi > r[-1] + tol:
        raise ValueError(
            f"Grid radii span [{r_lo:g}, {r_hi:g}], outside the amplitude's "
            f"radial samples [{r[0]:g}, {r[-1]:g}]"
        )

    K = amplitude.order
    sin_k = np.sin(K * grid.theta)
    cos_k = np.cos(K * grid.theta)

    psi = _interpolate(grid.r, r, amplitude.psi) * sin_k
    omega = _interpolate(grid.r, r, amplitude.omega) * sin_k
    ur = _interpolate(grid.r, r, amplitude.ur) * cos_k
    utheta = _interpolate(grid.r, r, amplitude.utheta) * sin_k

    return realize(t, psi, omega, ur, utheta, K)


def _check_orders(s1, s2mean, s2):
    if s1.order != 1:
        raise ValueError(f"First-order amplitude must have order 1, got {s1.order}")
    for name, s in (('mean second-order', s2mean), ('second-order', s2)):
        if s.order != 2:
            raise ValueError(f"{name} amplitude must have order 2, got {s.order}")


def evaluate_composite(t, params, grid, s1, s2mean, s2):
    """Streaming solution to O(ε²) at time t.

    s = ε·s₁(t) + ε²·(s̄₂(0) + s₂(t)), with s̄₂ the steady mean part.
    """
    _check_orders(s1, s2mean, s2)
    eps = params.epsilon
    second = combine(evaluate(0.0, grid, s2mean), evaluate(t, grid, s2))
    return combine(scale(evaluate(t, grid, s1), eps), scale(second, eps**2))


def evaluate_history(times, params, grid, s1, s2mean, s2):
    """Composite solution over a sequence of times, in history form.

    A failure at any time aborts the whole sweep.

    Returns
    -------
    Soln with t = times and fields of shape grid.shape + (len(times),).
    """
    times = np.atleast_1d(np.asarray(times, dtype=float))
    if times.ndim != 1 or len(times) == 0:
        raise ValueError(f"times must be a non-empty 1-D sequence, got shape {times.shape}")
    _check_orders(s1, s2mean, s2)

    logger.debug("Evaluating history over %d times on grid %s", len(times), grid.shape)
    snapshots = [evaluate_composite(ti, params, grid, s1, s2mean, s2)
                 for ti in times]

    stacked = {name: np.stack([s.fields()[name] for s in snapshots], axis=-1)
               for name in ('psi', 'omega', 'ur', 'utheta')}
    return Soln(times, **stacked)


def cartesian(soln, grid):
    """Rotate (u_r, u_Θ) into Cartesian (u_x, u_y) using the local Θ."""
    theta = grid.theta
    if soln.is_history:
        theta = theta[..., np.newaxis]
    c, s = np.cos(theta), np.sin(theta)
    ux = soln.ur * c - soln.utheta * s
    uy = soln.ur * s + soln.utheta * c
    return ux, uy
