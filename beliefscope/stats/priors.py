"""Prior parameterization from a user's stated confidence."""

from __future__ import annotations

from beliefscope.core.config import settings
from beliefscope.stats.bayesian import PARAMETER_FLOOR, BetaParameters


def prior_parameters(
    prior_percent: float,
    concentration: float | None = None,
) -> BetaParameters:
    """Build the Beta prior from a percent confidence and a concentration.

    Parameters
    ----------
    prior_percent : float
        Confidence in the decision, expected in the open interval (0, 100).
        The calling layer keeps it off the endpoints; if 0 or 100 do get
        through, the parameter floor absorbs them.
    concentration : float | None
        Prior strength in pseudo-observations.  Higher = tighter prior.
        Defaults to ``settings.PRIOR_CONCENTRATION``.

    Returns
    -------
    BetaParameters
        ``alpha = max(0.5, p * c)``, ``beta = max(0.5, (1 - p) * c)`` with
        ``p = prior_percent / 100``.
    """
    if concentration is None:
        concentration = settings.PRIOR_CONCENTRATION
    p = prior_percent / 100
    alpha = max(PARAMETER_FLOOR, p * concentration)
    beta = max(PARAMETER_FLOOR, (1 - p) * concentration)
    return BetaParameters(alpha, beta)
