"\"\"\"FORGE scoring orchestration: gate, score and rank.\"\"\""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import pendulum
import structlog

from ..schemas import CandidateAnalysis, CandidateProfile, EvidenceItem, JobConfiguration
from ..schemas.analysis import DataQuality, GateStatus
from .evaluators.capability import CapabilityScorer
from .evaluators.context import ContextScorer
from .evaluators.salary import CompensationFitAdjuster
from .evaluators.velocity import LearningVelocityEvaluator
from .evidence import EvidenceNormalizer, NormalizedEvidence
from .explanations import build_explanation
from .timeutils import resolve_as_of

_GATE_ORDER: dict[str, int] = {"ranked": 0, "review": 1, "filtered": 2}

VERDICT_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (0.6, "Strong Hire"),
    (0.4, "Possible"),
    (0.25, "Risky but High Potential"),
)


def decide_gate(cs_required: float, tau: float, has_corroborated: bool) -> tuple[GateStatus, str]:
    """Apply the capability gate to the required-skill aggregate."""
    if cs_required >= tau:
        return "ranked", f"CS_required {cs_required:.2f} >= tau {tau:.2f}"
    if cs_required > 0 and has_corroborated:
        return "review", f"CS_required {cs_required:.2f} < tau {tau:.2f} with verified proof"
    if cs_required > 0:
        return "filtered", f"CS_required {cs_required:.2f} < tau {tau:.2f} and only self-reported claims"
    return "filtered", "No proof for any required skill"


def verdict_for(gate_status: GateStatus, forge_score: float) -> str:
    if gate_status == "filtered":
        return "Reject"
    for threshold, label in VERDICT_THRESHOLDS:
        if forge_score >= threshold:
            return label
    return "Reject"


def rank_analyses(analyses: Iterable[CandidateAnalysis]) -> list[CandidateAnalysis]:
    """Ranked, then review (both by FORGE), then filtered by capability; ties by id."""

    def sort_key(analysis: CandidateAnalysis) -> tuple[int, float, str]:
        primary = analysis.capability_score if analysis.gate_status == "filtered" else analysis.forge_score
        return (_GATE_ORDER[analysis.gate_status], -primary, analysis.id)

    return sorted(analyses, key=sort_key)


class ForgeEngine:
    """Coordinates normalization and the scorers for one candidate at a time.

    The engine holds no per-candidate state; given the same candidate, job
    and ``as_of`` it always produces the same analysis.
    """

    def __init__(
        self,
        *,
        normalizer: EvidenceNormalizer | None = None,
        capability: CapabilityScorer | None = None,
        context: ContextScorer | None = None,
        comp_fit: CompensationFitAdjuster | None = None,
        velocity: LearningVelocityEvaluator | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._now_provider = now_provider or pendulum.now
        self._normalizer = normalizer or EvidenceNormalizer(now_provider=self._now_provider)
        self._capability = capability or CapabilityScorer()
        self._context = context or ContextScorer()
        self._comp_fit = comp_fit or CompensationFitAdjuster()
        self._velocity = velocity or LearningVelocityEvaluator()
        self._logger = structlog.get_logger(__name__)

    def evaluate(
        self,
        *,
        candidate: CandidateProfile,
        job: JobConfiguration,
        as_of: Any = None,
    ) -> CandidateAnalysis:
        reference = resolve_as_of(as_of, self._now_provider)
        normalized = self._normalizer.normalize(candidate, job.skills, as_of=reference)

        capability = self._capability.evaluate(job.skills, normalized.evidence)
        context = self._context.evaluate(candidate, normalized)
        comp_fit = self._comp_fit.assess(candidate.salary_expectation, job.budget)
        xs_adjusted = self._comp_fit.apply(context.score, comp_fit)
        velocity = self._velocity.evaluate(normalized.repositories, reference)

        evidence_list = self._flatten(normalized.evidence, job)
        has_corroborated = any(item.is_corroborated for item in evidence_list)
        gate_status, gate_reason = decide_gate(capability.required, job.tau, has_corroborated)

        forge_score = min(max(capability.display * xs_adjusted + velocity.bonus, 0.0), 1.0)
        forge_score = round(forge_score, 4)

        explanation = build_explanation(
            name=candidate.name,
            capability_display=capability.display,
            capability_required=capability.required,
            context_score=xs_adjusted,
            forge_score=forge_score,
            tau=job.tau,
            gate_status=gate_status,
            skills=capability.skills,
            context=context.breakdown,
            comp_fit=comp_fit,
            velocity_bonus=velocity.bonus,
            warnings=normalized.warnings,
        )

        analysis = CandidateAnalysis(
            id=candidate.candidate_id,
            name=candidate.name,
            handle=candidate.handle,
            capability_score=round(capability.display, 4),
            capability_required=round(capability.required, 4),
            context_score=round(xs_adjusted, 4),
            context_score_raw=round(context.score, 4),
            learning_velocity_bonus=velocity.bonus,
            forge_score=forge_score,
            gate_status=gate_status,
            gate_reason=gate_reason,
            tau=job.tau,
            verdict=verdict_for(gate_status, forge_score),
            data_quality=self._data_quality(candidate, normalized),
            per_skill_breakdown=capability.skills,
            context_breakdown=context.breakdown,
            evidence_list=evidence_list,
            explanation=explanation,
            comp_fit=comp_fit,
            warnings=normalized.warnings,
        )

        self._logger.debug(
            "analysis.scored",
            candidate_id=analysis.id,
            capability=analysis.capability_score,
            capability_required=analysis.capability_required,
            context=analysis.context_score,
            forge=analysis.forge_score,
            gate_status=gate_status,
        )
        return analysis

    def evaluate_batch(
        self,
        *,
        candidates: Sequence[CandidateProfile],
        job: JobConfiguration,
        as_of: Any = None,
    ) -> list[CandidateAnalysis]:
        """Score and order a batch; faults propagate to the caller."""
        return rank_analyses(
            self.evaluate(candidate=candidate, job=job, as_of=as_of) for candidate in candidates
        )

    @staticmethod
    def _flatten(evidence: dict[str, list[EvidenceItem]], job: JobConfiguration) -> list[EvidenceItem]:
        return [item for skill in job.skills for item in evidence.get(skill.name, [])]

    @staticmethod
    def _data_quality(candidate: CandidateProfile, normalized: NormalizedEvidence) -> DataQuality:
        if normalized.has_hosting:
            count = len(normalized.repositories)
            if count >= 10:
                return "full"
            if count >= 3:
                return "partial"
            return "fallback"
        return "partial" if candidate.has_text_signals else "fallback"
