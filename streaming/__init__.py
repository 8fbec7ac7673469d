"""Steady streaming around an oscillating circular cylinder.

Matched-asymptotic solution to O(ε²) built from Hankel-function Green's
functions and evaluated on arbitrary grids in space and time.
"""

from streaming.params import Params
from streaming.amplitude import (
    Grid, ComplexAmplitude, Soln, scale, combine, realize,
    evaluate, evaluate_composite, evaluate_history, cartesian,
)
from streaming.solvers import (
    first_order, second_order_mean, second_order, solve, solve_all,
    radial_samples,
)
