"""Aggregate-and-sample core shared by the entry points and sensitivity analysis.

Only the posterior mean comes back from here; diagnostics and sensitivity
are layered on top by ``beliefscope.stats.engine``.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from beliefscope.stats.aggregation import Evidence, fold_evidence
from beliefscope.stats.bayesian import BetaParameters
from beliefscope.stats.sampling import sample_posterior
from beliefscope.stats.schemas import CorrelationGroup, PosteriorConfig


def posterior_mean(
    prior: BetaParameters,
    evidence: Sequence[Evidence],
    config: PosteriorConfig,
    rng: np.random.Generator,
    correlation_groups: Sequence[CorrelationGroup] | None = None,
) -> float:
    """Sampled posterior mean, in percent."""
    posterior, _ = fold_evidence(
        prior, evidence, config.evidence_strength_scale, correlation_groups
    )
    draw = sample_posterior(
        posterior,
        config.sample_count,
        rng,
        use_quasi_random=config.use_quasi_random,
    )
    return float(np.mean(draw.samples)) * 100
