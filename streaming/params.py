"""Physical parameters and Hankel-ratio basis for the oscillating cylinder.

The cylinder (unit radius) oscillates with amplitude ε at scaled Reynolds
number Re. The unsteady Stokes layer has complex wavenumber

    γ² = i·Re,   γ = √(i·Re)  (principal branch, Re(γ) > 0, Im(γ) > 0)

so outgoing solutions H_n⁽¹⁾(γr) decay away from the cylinder. The basis
functions are normalized by H₀ = H₀⁽¹⁾(γ):

    X(r) = H₀⁽¹⁾(γr)/H₀,  Y(r) = H₁⁽¹⁾(γr)/H₀,  Z(r) = H₂⁽¹⁾(γr)/H₀,
    C = H₂⁽¹⁾(γ)/H₀
"""

from dataclasses import dataclass, field

import numpy as np
from scipy.special import hankel1, hankel2


@dataclass(frozen=True)
class HankelRatio:
    """r ↦ H_order^(kind)(wavenumber·r) / norm, vectorized over r."""
    order: int
    wavenumber: complex
    norm: complex = 1.0
    kind: int = 1

    def __post_init__(self):
        if self.kind not in (1, 2):
            raise ValueError(f"Hankel kind must be 1 or 2, got {self.kind}")

    def __call__(self, r):
        h = hankel1 if self.kind == 1 else hankel2
        return h(self.order, self.wavenumber * np.asarray(r)) / self.norm


@dataclass(frozen=True)
class Params:
    """Immutable parameter bundle for a given (ε, Re).

    Attributes
    ----------
    epsilon : float
        Oscillation amplitude (expansion parameter).
    Re : float
        Scaled Reynolds number, must be > 0.
    gamma2, gamma : complex
        γ² = i·Re and its principal square root.
    lam, lam2 : complex
        λ = √2·γ and λ² = 2γ², wavenumber of the second harmonic.
    H0 : complex
        H₀⁽¹⁾(γ).
    X, Y, Z : HankelRatio
        Orders 0, 1, 2 of H⁽¹⁾(γr)/H₀.
    C : complex
        H₂⁽¹⁾(γ)/H₀.
    """
    epsilon: float
    Re: float
    gamma2: complex = field(init=False, repr=False)
    gamma: complex = field(init=False, repr=False)
    lam: complex = field(init=False, repr=False)
    lam2: complex = field(init=False, repr=False)
    H0: complex = field(init=False, repr=False)
    X: HankelRatio = field(init=False, repr=False)
    Y: HankelRatio = field(init=False, repr=False)
    Z: HankelRatio = field(init=False, repr=False)
    C: complex = field(init=False, repr=False)

    def __post_init__(self):
        if not np.isfinite(self.Re) or self.Re <= 0:
            raise ValueError(f"Re must be positive and finite, got {self.Re}")
        if not np.isfinite(self.epsilon) or self.epsilon < 0:
            raise ValueError(
                f"epsilon must be non-negative and finite, got {self.epsilon}"
            )

        gamma2 = 1j * self.Re
        gamma = np.sqrt(complex(gamma2))
        H0 = hankel1(0, gamma)

        derived = {
            'gamma2': gamma2,
            'gamma': gamma,
            'lam': np.sqrt(2) * gamma,
            'lam2': 2 * gamma2,
            'H0': H0,
            'X': HankelRatio(0, gamma, H0),
            'Y': HankelRatio(1, gamma, H0),
            'Z': HankelRatio(2, gamma, H0),
            'C': hankel1(2, gamma) / H0,
        }
        for name, value in derived.items():
            object.__setattr__(self, name, value)

    @classmethod
    def from_dict(cls, d):
        """Build from a mapping with 'epsilon' and 'Re' keys."""
        return cls(epsilon=float(d['epsilon']), Re=float(d['Re']))
