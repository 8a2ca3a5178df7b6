"""Leave-one-out sensitivity of the posterior mean.

Each input is dropped in turn and the posterior mean recomputed; the impact
of an input is how far the full mean sits from the mean without it.  This is
not a Shapley decomposition: interactions between inputs are ignored, so the
impacts need not sum to anything in particular.

The reported direction is the held-out input's own support/oppose flag, not
the sign of its impact.  The two can disagree, for instance a weakly
"supporting" evaluation with low strength pushes pseudo-counts mostly onto
beta.

Reduced runs never apply correlation adjustment, even when the full run
did.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy as np

from beliefscope.stats.aggregation import Evidence
from beliefscope.stats.bayesian import BetaParameters
from beliefscope.stats.pipeline import posterior_mean
from beliefscope.stats.schemas import PosteriorConfig, SensitivityItem


def leave_one_out(
    prior: BetaParameters,
    evidence: Sequence[Evidence],
    full_mean: float,
    config: PosteriorConfig,
    rng: np.random.Generator,
    names: Mapping[str, str] | None = None,
) -> list[SensitivityItem]:
    """Rank inputs by leave-one-out impact on the posterior mean.

    Parameters
    ----------
    prior : BetaParameters
        Prior parameters; the same prior is used for every reduced run.
    evidence : Sequence[Evidence]
        The full input list.
    full_mean : float
        Posterior mean (percent) of the run with every input included.
    config : PosteriorConfig
        Sampling settings for the reduced runs.
    rng : np.random.Generator
        Random source, consumed by every reduced run in turn.
    names : Mapping[str, str] | None
        Display names by identifier; falls back to the identifier.

    Returns
    -------
    list[SensitivityItem]
        One entry per input, sorted by absolute impact, largest first.
        Empty when there are fewer than two inputs.
    """
    if len(evidence) < 2:
        return []

    names = names or {}
    results: list[SensitivityItem] = []
    for index, held_out in enumerate(evidence):
        reduced = [e for i, e in enumerate(evidence) if i != index]
        reduced_mean = posterior_mean(prior, reduced, config, rng)
        results.append(
            SensitivityItem(
                criterion_id=held_out.identifier,
                name=names.get(held_out.identifier) or held_out.identifier,
                impact=full_mean - reduced_mean,
                direction=held_out.direction,
            )
        )

    results.sort(key=lambda item: abs(item.impact), reverse=True)
    return results
