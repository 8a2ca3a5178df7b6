"""beliefscope Bayesian posterior engine.

Public API:
- BetaParameters: immutable Beta(alpha, beta) with log-space density
- prior_parameters: Beta prior from a percent confidence and concentration
- fold_evidence: pseudo-observation update over tagged Evidence records
- sample_posterior: quasi-random / rejection sampling with a fallback chain
- convergence_diagnostic: Geweke z-score, effective sample size, MC error
- leave_one_out: sensitivity ranking of inputs
- compute_posterior_from_evidence / compute_posterior_from_evaluations:
  the two pipeline entry points
"""

from beliefscope.stats.aggregation import Evidence, EvidenceKind, fold_evidence
from beliefscope.stats.bayesian import BetaParameters
from beliefscope.stats.diagnostics import (
    convergence_diagnostic,
    effective_sample_size,
    geweke_z_score,
    monte_carlo_standard_error,
    summarize,
    win_percentage,
)
from beliefscope.stats.display import confidence_label, distribution_curve
from beliefscope.stats.engine import (
    compute_posterior_from_evaluations,
    compute_posterior_from_evidence,
)
from beliefscope.stats.priors import prior_parameters
from beliefscope.stats.sampling import sample_posterior, van_der_corput
from beliefscope.stats.schemas import (
    ConvergenceDiagnostic,
    CorrelationGroup,
    Criterion,
    CriterionEvaluation,
    EvidenceItem,
    PosteriorConfig,
    PosteriorResult,
    SensitivityItem,
    UpdateStep,
)
from beliefscope.stats.sensitivity import leave_one_out

__all__ = [
    "BetaParameters",
    "prior_parameters",
    "Evidence",
    "EvidenceKind",
    "fold_evidence",
    "sample_posterior",
    "van_der_corput",
    "summarize",
    "win_percentage",
    "geweke_z_score",
    "effective_sample_size",
    "monte_carlo_standard_error",
    "convergence_diagnostic",
    "leave_one_out",
    "compute_posterior_from_evidence",
    "compute_posterior_from_evaluations",
    "confidence_label",
    "distribution_curve",
    "EvidenceItem",
    "Criterion",
    "CriterionEvaluation",
    "CorrelationGroup",
    "PosteriorConfig",
    "PosteriorResult",
    "ConvergenceDiagnostic",
    "SensitivityItem",
    "UpdateStep",
]
