"""Visualization for streaming amplitudes and evaluated fields.

All plot functions return (fig, ax) tuples for composability. Field plots
triangulate the grid points, so polar, Cartesian and scattered grids are
all handled the same way.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle

from streaming.amplitude import cartesian


def _draw_cylinder(ax):
    ax.add_patch(Circle((0, 0), 1.0, facecolor='0.7', edgecolor='k',
                        linewidth=1, zorder=3))


def _snapshot(soln, index):
    if soln.is_history:
        return {name: f[..., index] for name, f in soln.fields().items()}
    return soln.fields()


def plot_profiles(amplitude, ax=None, title=None):
    """Plot |ψ|, Re ψ and Im ψ of a complex amplitude against r.

    Parameters
    ----------
    amplitude : ComplexAmplitude
    ax : matplotlib Axes or None
        Existing axes to plot on.
    title : str or None
        Plot title (defaults to the harmonic order).

    Returns
    -------
    fig, ax
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 4))
    else:
        fig = ax.figure

    r, psi = amplitude.r, amplitude.psi
    ax.plot(r, np.abs(psi), 'k-', linewidth=2, label='|ψ|')
    ax.plot(r, psi.real, 'b--', linewidth=1.5, label='Re ψ')
    ax.plot(r, psi.imag, 'r:', linewidth=1.5, label='Im ψ')
    ax.axhline(0, color='k', linewidth=0.5, linestyle='--')

    ax.set_xlabel("r / a")
    ax.set_ylabel("ψ")
    ax.set_title(title or f"Order {amplitude.order} amplitude")
    ax.legend()
    fig.tight_layout()
    return fig, ax


def plot_streamlines(grid, soln, index=-1, levels=30, ax=None, title=None):
    """Filled contours of ψ around the cylinder.

    Parameters
    ----------
    grid : Grid
    soln : Soln
        Instantaneous or history form; for a history, `index` selects
        the time step.
    levels : int
        Number of contour levels.

    Returns
    -------
    fig, ax
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(6, 6))
    else:
        fig = ax.figure

    psi = _snapshot(soln, index)['psi']
    x, y = grid.x.ravel(), grid.y.ravel()
    cs = ax.tricontourf(x, y, psi.ravel(), levels=levels, cmap='RdBu_r')
    ax.tricontour(x, y, psi.ravel(), levels=levels, colors='k',
                  linewidths=0.4)
    fig.colorbar(cs, ax=ax, label='ψ')
    _draw_cylinder(ax)

    t = soln.t[index] if soln.is_history else soln.t
    ax.set_xlabel("x / a")
    ax.set_ylabel("y / a")
    ax.set_title(title or f"Streamfunction at t = {t:.3f}")
    ax.set_aspect('equal')
    fig.tight_layout()
    return fig, ax


def plot_velocity(grid, soln, index=-1, ax=None, title=None):
    """Quiver plot of the Cartesian velocity (u_x, u_y).

    Returns
    -------
    fig, ax
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(6, 6))
    else:
        fig = ax.figure

    ux, uy = cartesian(soln, grid)
    if soln.is_history:
        ux, uy = ux[..., index], uy[..., index]
    speed = np.hypot(ux, uy)

    q = ax.quiver(grid.x.ravel(), grid.y.ravel(), ux.ravel(), uy.ravel(),
                  speed.ravel(), cmap='viridis')
    fig.colorbar(q, ax=ax, label='|u|')
    _draw_cylinder(ax)

    ax.set_xlabel("x / a")
    ax.set_ylabel("y / a")
    ax.set_title(title or "Velocity")
    ax.set_aspect('equal')
    fig.tight_layout()
    return fig, ax
