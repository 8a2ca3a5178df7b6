"""Pseudo-observation aggregation of evidence into Beta parameters.

Two input shapes reach the engine: plain evidence items, where a single
``value`` encodes direction and magnitude, and criterion evaluations, where
direction is a separate flag and ``strength`` is magnitude only.  Both are
normalized into the tagged ``Evidence`` record and folded by one function.

Correlation adjustment
----------------------
Evidence the caller marks as correlated should not count as independent
confirmation.  Each member of a group of size *k* with correlation *r* keeps
``(1 + (k - 1) * (1 - r)) / k`` of its pseudo-count: the whole group is
worth ``1 + (k - 1) * (1 - r)`` independent items.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Mapping, Sequence

from beliefscope.stats.bayesian import BetaParameters
from beliefscope.stats.schemas import (
    CorrelationGroup,
    Criterion,
    CriterionEvaluation,
    EvidenceItem,
    UpdateStep,
)

logger = logging.getLogger(__name__)

DEFAULT_IMPORTANCE = 50.0


class EvidenceKind(str, enum.Enum):
    item = "item"
    evaluation = "evaluation"


class Evidence:
    """One input to the update, tagged with the shape it came from.

    For ``EvidenceKind.item``, ``magnitude`` is the directional value and
    ``supports`` is derived from it (value of 50 or more).  For
    ``EvidenceKind.evaluation``, ``magnitude`` is the direction-free strength.
    All numbers stay on the 0-100 scale the caller used.
    """

    __slots__ = ("kind", "identifier", "magnitude", "confidence", "importance", "supports")

    def __init__(
        self,
        kind: EvidenceKind,
        identifier: str,
        magnitude: float,
        confidence: float,
        importance: float = 100.0,
        supports: bool = True,
    ) -> None:
        self.kind = kind
        self.identifier = identifier
        self.magnitude = magnitude
        self.confidence = confidence
        self.importance = importance
        self.supports = supports

    @classmethod
    def from_item(cls, item: EvidenceItem) -> Evidence:
        return cls(
            kind=EvidenceKind.item,
            identifier=item.id,
            magnitude=item.value,
            confidence=item.weight,
            supports=item.value >= 50,
        )

    @classmethod
    def from_evaluation(
        cls,
        evaluation: CriterionEvaluation,
        criteria_by_id: Mapping[str, Criterion],
    ) -> Evidence:
        criterion = criteria_by_id.get(evaluation.criterion_id)
        if criterion is None:
            logger.debug(
                "No criterion %r; using importance %s",
                evaluation.criterion_id,
                DEFAULT_IMPORTANCE,
            )
            importance = DEFAULT_IMPORTANCE
        else:
            importance = criterion.importance
        return cls(
            kind=EvidenceKind.evaluation,
            identifier=evaluation.criterion_id,
            magnitude=evaluation.strength,
            confidence=evaluation.confidence,
            importance=importance,
            supports=evaluation.supports_decision,
        )

    @property
    def direction(self) -> str:
        return "supporting" if self.supports else "opposing"

    def pseudo_count(self, scale: float) -> float:
        """Total pseudo-observations this input is worth before correlation."""
        if self.kind is EvidenceKind.item:
            return (self.confidence / 100) * scale
        return (self.confidence / 100) * (self.importance / 100) * scale

    def split(self, pseudo_count: float) -> tuple[float, float]:
        """Divide a pseudo-count into (alpha, beta) increments."""
        share = self.magnitude / 100
        if self.kind is EvidenceKind.item:
            return (share * pseudo_count, (1 - share) * pseudo_count)
        toward = share * pseudo_count
        away = (1 - share) * pseudo_count
        if self.supports:
            return (toward, away)
        return (away, toward)

    def __repr__(self) -> str:
        return (
            f"Evidence({self.kind.value}, {self.identifier!r}, "
            f"magnitude={self.magnitude}, confidence={self.confidence})"
        )


def evidence_from_items(items: Iterable[EvidenceItem]) -> list[Evidence]:
    return [Evidence.from_item(item) for item in items]


def evidence_from_evaluations(
    evaluations: Iterable[CriterionEvaluation],
    criteria: Iterable[Criterion],
) -> list[Evidence]:
    criteria_by_id = {c.id: c for c in criteria}
    return [Evidence.from_evaluation(ev, criteria_by_id) for ev in evaluations]


# ======================================================================
# Correlation adjustment
# ======================================================================


def correlation_factors(
    evidence: Sequence[Evidence],
    groups: Sequence[CorrelationGroup],
) -> dict[str, float]:
    """Pseudo-count multiplier for every identifier that sits in a group.

    Group size counts only the members present in ``evidence``.  An
    identifier listed by several groups takes the first one.  Identifiers in
    no group are absent from the result (multiplier 1).
    """
    present = {e.identifier for e in evidence}
    factors: dict[str, float] = {}
    for group in groups:
        members = [m for m in dict.fromkeys(group.member_ids) if m in present]
        size = len(members)
        if size < 2:
            continue
        effective = 1 + (size - 1) * (1 - group.correlation)
        factor = effective / size
        for member in members:
            factors.setdefault(member, factor)
    return factors


# ======================================================================
# Fold
# ======================================================================


def fold_evidence(
    prior: BetaParameters,
    evidence: Sequence[Evidence],
    scale: float,
    correlation_groups: Sequence[CorrelationGroup] | None = None,
) -> tuple[BetaParameters, list[UpdateStep]]:
    """Fold evidence into the prior, one pseudo-observation update per input.

    Parameters
    ----------
    prior : BetaParameters
        Starting parameters; not modified.
    evidence : Sequence[Evidence]
        Normalized inputs, in the caller's order.
    scale : float
        Pseudo-observations a full-confidence input is worth.
    correlation_groups : Sequence[CorrelationGroup] | None
        When given, discount members of correlated groups.

    Returns
    -------
    tuple[BetaParameters, list[UpdateStep]]
        Posterior parameters and one ledger row per input.  With no
        evidence the prior comes back unchanged.
    """
    factors = correlation_factors(evidence, correlation_groups) if correlation_groups else {}

    posterior = prior
    steps: list[UpdateStep] = []
    for item in evidence:
        factor = factors.get(item.identifier, 1.0)
        pseudo = item.pseudo_count(scale) * factor
        support, against = item.split(pseudo)
        posterior = posterior.update(support, against)
        steps.append(
            UpdateStep(
                identifier=item.identifier,
                pseudo_count=pseudo,
                alpha_change=support,
                beta_change=against,
                correlation_factor=factor,
            )
        )
    return posterior, steps
