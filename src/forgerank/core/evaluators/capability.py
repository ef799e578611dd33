"\"\"\"Capability scoring from tiered evidence.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from ...schemas import EvidenceItem, ProofTier, SkillBreakdown, SkillRequirement
from ...schemas.analysis import SkillStatus


@dataclass
class CapabilityConfig:
    """Policy constants for per-skill scoring."""

    corroboration_rate: float = 0.10
    max_corroborating_sources: int = 3
    proven_threshold: float = 60.0
    weak_threshold: float = 20.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.corroboration_rate < 1.0:
            raise ValueError("corroboration_rate must be in [0, 1)")
        if self.max_corroborating_sources < 0:
            raise ValueError("max_corroborating_sources must be non-negative")
        if self.weak_threshold > self.proven_threshold:
            raise ValueError("weak_threshold must not exceed proven_threshold")


@dataclass(slots=True)
class CapabilityResult:
    """Per-skill breakdown plus both aggregate views (0-1)."""

    skills: list[SkillBreakdown]
    display: float
    required: float


class CapabilityScorer:
    """Score each skill inside the band of its strongest proof tier.

    The band for a tier runs from the ceiling of the next lower tier to
    ``100 * multiplier``. Extra independent sources close part of the
    remaining gap to the ceiling but never leave the band, so a stronger
    tier always outranks any pile of weaker ones.
    """

    method = "capability"

    def __init__(self, *, config: CapabilityConfig | None = None) -> None:
        self._config = config or CapabilityConfig()

    def evaluate(
        self,
        skills: Sequence[SkillRequirement],
        evidence: Mapping[str, Sequence[EvidenceItem]],
    ) -> CapabilityResult:
        breakdown = [self.score_skill(skill, evidence.get(skill.name, ())) for skill in skills]
        display = self._weighted_average(breakdown)
        required = self._weighted_average([item for item in breakdown if item.is_required])
        return CapabilityResult(skills=breakdown, display=display, required=required)

    def score_skill(self, skill: SkillRequirement, items: Sequence[EvidenceItem]) -> SkillBreakdown:
        real = [item for item in items if item.proof_tier is not ProofTier.NONE]
        if not real:
            return SkillBreakdown(
                name=skill.name,
                weight=skill.weight,
                is_required=skill.is_required,
                category=skill.category,
                score=0.0,
                best_tier=ProofTier.NONE,
                evidence_count=0,
                corroborating_sources=0,
                status="Missing",
                reason=f"No evidence found for {skill.name}",
            )

        best = min(real, key=lambda item: (item.proof_tier.rank, -item.raw_strength))
        tier = best.proof_tier
        ceiling = self.tier_ceiling(tier)
        floor = self.tier_floor(tier)
        base = floor + (ceiling - floor) * best.raw_strength

        sources = {item.source for item in real}
        extra = min(len(sources) - 1, self._config.max_corroborating_sources)
        score = base
        for _ in range(extra):
            score += (ceiling - score) * self._config.corroboration_rate
        score = round(min(max(score, 0.0), 100.0), 2)

        status = self._status(score)
        return SkillBreakdown(
            name=skill.name,
            weight=skill.weight,
            is_required=skill.is_required,
            category=skill.category,
            score=score,
            best_tier=tier,
            evidence_count=len(real),
            corroborating_sources=extra,
            status=status,
            reason=self._reason(tier, len(real), extra, best),
        )

    @staticmethod
    def tier_ceiling(tier: ProofTier) -> float:
        return 100.0 * tier.multiplier

    @staticmethod
    def tier_floor(tier: ProofTier) -> float:
        lower = tier.next_lower()
        return 100.0 * lower.multiplier if lower is not None else 0.0

    def _status(self, score: float) -> SkillStatus:
        if score >= self._config.proven_threshold:
            return "Proven"
        if score >= self._config.weak_threshold:
            return "Weak"
        return "Missing"

    @staticmethod
    def _reason(tier: ProofTier, count: int, extra: int, best: EvidenceItem) -> str:
        label = tier.value.replace("_", " ")
        reason = f"Best proof is {label} ({best.title or best.source})"
        if count > 1:
            reason += f"; {count} evidence items"
        if extra:
            reason += f", corroborated by {extra} more source{'s' if extra > 1 else ''}"
        return reason

    @staticmethod
    def _weighted_average(breakdown: Sequence[SkillBreakdown]) -> float:
        if not breakdown:
            return 0.0
        total_weight = sum(item.weight for item in breakdown)
        if total_weight <= 0:
            return sum(item.score for item in breakdown) / len(breakdown) / 100.0
        weighted = sum(item.score * item.weight for item in breakdown)
        return weighted / total_weight / 100.0
