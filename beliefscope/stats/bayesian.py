"""Beta distribution parameters with numerically stable density evaluation.

The density is only ever evaluated in log space: the Beta function is built
from ``gammaln`` so parameters in the thousands do not overflow the way a
direct Gamma(a) * Gamma(b) / Gamma(a + b) would past roughly 150.  Instances
are immutable: ``update()`` returns a *new* ``BetaParameters``.
"""

from __future__ import annotations

import numpy as np
from scipy import stats as sp_stats
from scipy.special import gammaln

# Below this both parameters can fall under 1 and the density turns U-shaped.
PARAMETER_FLOOR = 0.5

# Outside this band the quantile function loses precision and sampling
# switches to the log-space rejection sampler.
MODERATE_RANGE = (0.1, 1000.0)


class BetaParameters:
    """Immutable ``Beta(alpha, beta)`` parameter pair.

    Parameters
    ----------
    alpha : float
        Pseudo-count in favour of the decision.
    beta : float
        Pseudo-count against the decision.
    """

    __slots__ = ("alpha", "beta")

    def __init__(self, alpha: float, beta: float) -> None:
        if alpha <= 0 or beta <= 0:
            raise ValueError("Alpha and beta must be positive")
        self.alpha = float(alpha)
        self.beta = float(beta)

    # ------------------------------------------------------------------
    # Update (returns new instance -- immutable)
    # ------------------------------------------------------------------

    def update(self, support: float, against: float) -> BetaParameters:
        """Return a **new** instance with fractional pseudo-observations added."""
        if support < 0 or against < 0:
            raise ValueError("pseudo-observations must be non-negative")
        return BetaParameters(self.alpha + support, self.beta + against)

    # ------------------------------------------------------------------
    # Moments and shape
    # ------------------------------------------------------------------

    def mean(self) -> float:
        """alpha / (alpha + beta)"""
        return self.alpha / (self.alpha + self.beta)

    def variance(self) -> float:
        ab = self.alpha + self.beta
        return (self.alpha * self.beta) / (ab * ab * (ab + 1))

    def mode(self) -> float:
        """Location of peak density.

        For unimodal shapes (both parameters above 1) this is the usual
        ``(alpha - 1) / (alpha + beta - 2)``.  Otherwise the density runs off
        to a boundary, and the mode snaps to 0.99 or 0.01 on the side of the
        dominant parameter.
        """
        if self.alpha > 1 and self.beta > 1:
            return (self.alpha - 1) / (self.alpha + self.beta - 2)
        return 0.99 if self.alpha >= self.beta else 0.01

    def is_moderate(self) -> bool:
        low, high = MODERATE_RANGE
        return low <= self.alpha <= high and low <= self.beta <= high

    # ------------------------------------------------------------------
    # Log-space density
    # ------------------------------------------------------------------

    def log_beta_function(self) -> float:
        """log B(alpha, beta) via log-gamma."""
        return float(gammaln(self.alpha) + gammaln(self.beta) - gammaln(self.alpha + self.beta))

    def log_pdf(self, x):
        """Log density at ``x`` (scalar or array).

        Points outside the open unit interval get ``-inf``.
        """
        x = np.asarray(x, dtype=float)
        inside = (x > 0) & (x < 1)
        safe = np.where(inside, x, 0.5)
        log_density = (
            (self.alpha - 1) * np.log(safe)
            + (self.beta - 1) * np.log1p(-safe)
            - self.log_beta_function()
        )
        out = np.where(inside, log_density, -np.inf)
        return float(out) if out.ndim == 0 else out

    # ------------------------------------------------------------------
    # Analytic summaries
    # ------------------------------------------------------------------

    def credible_interval(self, mass: float = 0.95) -> tuple[float, float]:
        """Exact equal-tailed interval from the Beta quantile function.

        Serves as the reference the sampled order-statistic interval is
        logged against; probabilities on the 0-1 scale.
        """
        if not 0 < mass < 1:
            raise ValueError("mass must lie strictly between 0 and 1")
        tail = (1 - mass) / 2
        low, high = sp_stats.beta.ppf([tail, 1 - tail], self.alpha, self.beta)
        return float(low), float(high)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BetaParameters):
            return NotImplemented
        return self.alpha == other.alpha and self.beta == other.beta

    def __hash__(self) -> int:
        return hash((self.alpha, self.beta))

    def __repr__(self) -> str:
        return f"BetaParameters(alpha={self.alpha:.3f}, beta={self.beta:.3f})"
