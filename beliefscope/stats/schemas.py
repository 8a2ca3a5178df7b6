"""Input and output models for the posterior engine.

Inputs arrive from the surrounding application already range-checked; the
``Field`` bounds here reject anything that slipped through at construction
time so the numerical code only ever sees values in range.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from beliefscope.core.config import settings


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class EvidenceItem(BaseModel):
    """A single weighted piece of evidence.

    ``value`` carries both direction and magnitude: 0 opposes the decision
    outright, 50 is neutral, 100 supports it outright.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    label: str = ""
    kind: Literal["past_outcome", "emotional", "data", "constraint"] = "data"
    value: float = Field(ge=0, le=100)
    weight: float = Field(ge=0, le=100)


class Criterion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    importance: float = Field(default=50.0, ge=0, le=100)


class CriterionEvaluation(BaseModel):
    """How one criterion bears on the decision.

    Direction lives in ``supports_decision`` so that ``strength`` is a pure
    magnitude.
    """

    model_config = ConfigDict(frozen=True)

    criterion_id: str
    supports_decision: bool
    strength: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=100)


class CorrelationGroup(BaseModel):
    """Evidence the caller considers redundant.

    ``correlation`` runs from 0 (independent) to 1 (identical).
    """

    model_config = ConfigDict(frozen=True)

    member_ids: list[str]
    correlation: float = Field(ge=0, le=1)


class PosteriorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    evidence_strength_scale: float = Field(
        default_factory=lambda: settings.EVIDENCE_STRENGTH_SCALE, ge=0
    )
    prior_concentration: float = Field(
        default_factory=lambda: settings.PRIOR_CONCENTRATION, gt=0
    )
    apply_correlation_adjustment: bool = Field(
        default_factory=lambda: settings.APPLY_CORRELATION_ADJUSTMENT
    )
    use_quasi_random: bool = Field(default_factory=lambda: settings.USE_QUASI_RANDOM)
    sample_count: int = Field(default_factory=lambda: settings.SAMPLE_COUNT, gt=0)
    credible_mass: float = Field(
        default_factory=lambda: settings.CREDIBLE_MASS, gt=0, lt=1
    )


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class ConvergenceDiagnostic(BaseModel):
    geweke_z_score: float
    is_converged: bool
    effective_sample_size: float
    mc_error: float


class SensitivityItem(BaseModel):
    criterion_id: str
    name: str
    impact: float
    direction: Literal["supporting", "opposing"]


class UpdateStep(BaseModel):
    """What one input contributed to the posterior parameters."""

    identifier: str
    pseudo_count: float
    alpha_change: float
    beta_change: float
    correlation_factor: float = 1.0


class PosteriorResult(BaseModel):
    posterior: float
    credible_interval: tuple[float, float]
    samples: list[float] | None = None
    win_percentage: float | None = None
    sensitivity_analysis: list[SensitivityItem] | None = None
    convergence: ConvergenceDiagnostic
    prior_alpha: float
    prior_beta: float
    posterior_alpha: float
    posterior_beta: float
    updates: list[UpdateStep] = Field(default_factory=list)
    sampling_method: str
