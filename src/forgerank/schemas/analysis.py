"\"\"\"Scoring result types returned to callers.\"\"\""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field

from .common import CamelModel
from .evidence import EvidenceItem, ProofTier

GateStatus = Literal["ranked", "review", "filtered"]
SkillStatus = Literal["Proven", "Weak", "Missing"]
DataQuality = Literal["full", "partial", "fallback"]
CompFitStatus = Literal["within_budget", "below_budget", "slightly_above", "way_above", "unknown"]


class SkillBreakdown(CamelModel):
    """Per-skill capability score (0-100)."""

    name: str
    weight: float
    is_required: bool
    category: str
    score: float
    best_tier: ProofTier
    evidence_count: int
    corroborating_sources: int
    status: SkillStatus
    reason: str

    model_config = ConfigDict(frozen=True)


class ContextSignal(CamelModel):
    name: str
    score: float
    source: str

    model_config = ConfigDict(frozen=True)


class ContextBreakdown(CamelModel):
    """Behavioral sub-scores (0-100) behind XS."""

    teamwork: ContextSignal
    communication: ContextSignal
    adaptability: ContextSignal
    ownership: ContextSignal
    source: Literal["hosting", "text"]

    model_config = ConfigDict(frozen=True)

    def signals(self) -> list[ContextSignal]:
        return [self.teamwork, self.communication, self.adaptability, self.ownership]


class CompFit(CamelModel):
    """Compensation fit descriptor and the XS adjustment it caused."""

    status: CompFitStatus
    xs_adjustment: float = 0.0
    candidate_target: float | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    currency: str | None = None
    overage_ratio: float | None = None
    note: str = ""

    model_config = ConfigDict(frozen=True)


class Explanation(CamelModel):
    summary: str
    one_liner: str
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class CandidateAnalysis(CamelModel):
    """Final scored verdict for one candidate."""

    id: str
    name: str
    handle: str | None = None
    capability_score: float
    capability_required: float
    context_score: float
    context_score_raw: float
    learning_velocity_bonus: float
    forge_score: float
    gate_status: GateStatus
    gate_reason: str
    tau: float
    verdict: str
    data_quality: DataQuality
    per_skill_breakdown: list[SkillBreakdown]
    context_breakdown: ContextBreakdown
    evidence_list: list[EvidenceItem]
    explanation: Explanation
    comp_fit: CompFit
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
