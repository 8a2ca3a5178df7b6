"""Entry points that run the full posterior pipeline.

``compute_posterior_from_evidence`` and ``compute_posterior_from_evaluations``
are the two calls the surrounding application makes.  Both:

1. Parameterize the Beta prior from the stated confidence
2. Normalize inputs into tagged ``Evidence`` records
3. Fold the evidence into the prior (with optional correlation discount)
4. Sample the posterior through the strategy chain
5. Summarize the draws and check convergence

The evaluation form additionally reports the win percentage and a
leave-one-out sensitivity ranking.  Sensitivity reuses the
aggregate-and-sample core in ``beliefscope.stats.pipeline``; nothing here
calls back into itself.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from beliefscope.stats.aggregation import (
    Evidence,
    evidence_from_evaluations,
    evidence_from_items,
    fold_evidence,
)
from beliefscope.stats.diagnostics import convergence_diagnostic, summarize, win_percentage
from beliefscope.stats.priors import prior_parameters
from beliefscope.stats.sampling import sample_posterior
from beliefscope.stats.schemas import (
    CorrelationGroup,
    Criterion,
    CriterionEvaluation,
    EvidenceItem,
    PosteriorConfig,
    PosteriorResult,
)
from beliefscope.stats.sensitivity import leave_one_out

logger = logging.getLogger(__name__)

Seed = int | np.random.Generator | None


def compute_posterior_from_evidence(
    prior_percent: float,
    evidence_items: Sequence[EvidenceItem],
    config: PosteriorConfig | None = None,
    correlation_groups: Sequence[CorrelationGroup] | None = None,
    seed: Seed = None,
    include_samples: bool = True,
) -> PosteriorResult:
    """Posterior from directional evidence items.

    Parameters
    ----------
    prior_percent : float
        Prior confidence in (0, 100).
    evidence_items : Sequence[EvidenceItem]
        Evidence in the caller's order.  May be empty, in which case the
        result describes the prior.
    config : PosteriorConfig | None
        Tunables; defaults come from ``settings``.
    correlation_groups : Sequence[CorrelationGroup] | None
        Used only when ``config.apply_correlation_adjustment`` is set.
    seed : int | np.random.Generator | None
        Random source.  Identical inputs and seed give identical results.
    include_samples : bool
        Attach the raw draws to the result.

    Returns
    -------
    PosteriorResult
        ``win_percentage`` and ``sensitivity_analysis`` are left as None.
    """
    evidence = evidence_from_items(evidence_items)
    return _analyze(
        prior_percent,
        evidence,
        config or PosteriorConfig(),
        correlation_groups,
        np.random.default_rng(seed),
        include_samples=include_samples,
    )


def compute_posterior_from_evaluations(
    prior_percent: float,
    evaluations: Sequence[CriterionEvaluation],
    criteria: Sequence[Criterion],
    config: PosteriorConfig | None = None,
    correlation_groups: Sequence[CorrelationGroup] | None = None,
    seed: Seed = None,
    include_samples: bool = True,
) -> PosteriorResult:
    """Posterior from criterion evaluations, with win rate and sensitivity.

    Evaluations are joined to ``criteria`` by id; an evaluation whose
    criterion is missing is weighted at importance 50.  Sensitivity entries
    are named after the criterion where one exists.
    """
    evidence = evidence_from_evaluations(evaluations, criteria)
    names = {c.id: c.name for c in criteria if c.name}
    return _analyze(
        prior_percent,
        evidence,
        config or PosteriorConfig(),
        correlation_groups,
        np.random.default_rng(seed),
        include_samples=include_samples,
        evaluation_extras=True,
        names=names,
    )


def _analyze(
    prior_percent: float,
    evidence: list[Evidence],
    config: PosteriorConfig,
    correlation_groups: Sequence[CorrelationGroup] | None,
    rng: np.random.Generator,
    include_samples: bool = True,
    evaluation_extras: bool = False,
    names: dict[str, str] | None = None,
) -> PosteriorResult:
    # ----------------------------------------------------------
    # 1. Prior
    # ----------------------------------------------------------
    prior = prior_parameters(prior_percent, config.prior_concentration)

    # ----------------------------------------------------------
    # 2. Fold evidence
    # ----------------------------------------------------------
    groups = correlation_groups if config.apply_correlation_adjustment else None
    posterior, steps = fold_evidence(
        prior, evidence, config.evidence_strength_scale, groups
    )

    # ----------------------------------------------------------
    # 3. Sample
    # ----------------------------------------------------------
    draw = sample_posterior(
        posterior,
        config.sample_count,
        rng,
        use_quasi_random=config.use_quasi_random,
    )

    # ----------------------------------------------------------
    # 4. Summaries and diagnostics
    # ----------------------------------------------------------
    mean, interval = summarize(draw.samples, config.credible_mass)
    convergence = convergence_diagnostic(draw.samples)

    # ----------------------------------------------------------
    # 5. Evaluation-only extras
    # ----------------------------------------------------------
    win: float | None = None
    sensitivity = None
    if evaluation_extras:
        win = win_percentage(draw.samples)
        sensitivity = leave_one_out(prior, evidence, mean, config, rng, names)

    if logger.isEnabledFor(logging.DEBUG):
        exact_low, exact_high = posterior.credible_interval(config.credible_mass)
        logger.debug(
            "Posterior %r -> %r via %s: mean=%.2f (exact %.2f) "
            "interval=(%.2f, %.2f) (exact %.2f, %.2f) z=%.3f ess=%s",
            prior,
            posterior,
            draw.method,
            mean,
            posterior.mean() * 100,
            interval[0],
            interval[1],
            exact_low * 100,
            exact_high * 100,
            convergence.geweke_z_score,
            convergence.effective_sample_size,
        )

    return PosteriorResult(
        posterior=mean,
        credible_interval=interval,
        samples=draw.samples.tolist() if include_samples else None,
        win_percentage=win,
        sensitivity_analysis=sensitivity,
        convergence=convergence,
        prior_alpha=prior.alpha,
        prior_beta=prior.beta,
        posterior_alpha=posterior.alpha,
        posterior_beta=posterior.beta,
        updates=steps,
        sampling_method=draw.method,
    )
