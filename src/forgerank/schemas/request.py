"\"\"\"Request and response envelopes for batch analysis.\"\"\""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .analysis import CandidateAnalysis
from .common import CamelModel
from .job import DEFAULT_TAU, BudgetBand, JobConfiguration, SkillRequirement

FORGE_FORMULA = "FORGE_SCORE = CS × XS where CS_required ≥ τ"


class CandidateInput(CamelModel):
    """Rich candidate object as sent by callers.

    Sub-objects are kept loose here; the structured adapter validates each
    one separately so a malformed source only drops that source.
    """

    id: str | None = None
    name: str | None = None
    role_type: str | None = None
    github: str | None = None
    portfolio_url: str | None = None
    salary_expectation: Any = None
    signals: Any = None
    stats: Any = None
    top_repos: Any = None
    portfolio: Any = None


class JobConfigInput(CamelModel):
    role_title: str | None = None
    budget: BudgetBand | None = None
    gate_threshold: float | None = Field(default=None, ge=0.0, le=1.0)


class AnalyzeRequest(CamelModel):
    """POST /analyze body."""

    skills: list[SkillRequirement] = Field(default_factory=list, validate_default=True)
    candidates: list[Any] = Field(default_factory=list, validate_default=True)
    tau: float | None = Field(default=None, ge=0.0, le=1.0)
    job_config: JobConfigInput | None = None
    as_of: str | None = None

    @field_validator("skills")
    @classmethod
    def _skills_present(cls, skills: list[SkillRequirement]) -> list[SkillRequirement]:
        if not skills:
            raise ValueError("Skills array is required")
        return skills

    @field_validator("candidates")
    @classmethod
    def _candidates_present(cls, candidates: list[Any]) -> list[Any]:
        if not candidates:
            raise ValueError("Candidates array is required")
        return candidates

    def resolved_tau(self) -> float:
        if self.job_config and self.job_config.gate_threshold is not None:
            return self.job_config.gate_threshold
        if self.tau is not None:
            return self.tau
        return DEFAULT_TAU

    def to_job(self) -> JobConfiguration:
        job_config = self.job_config or JobConfigInput()
        return JobConfiguration(
            skills=self.skills,
            tau=self.resolved_tau(),
            budget=job_config.budget,
            role_title=job_config.role_title,
        )


class AnalysisError(CamelModel):
    username: str
    error: str


class AnalyzeMeta(CamelModel):
    candidates_analyzed: int
    skills_evaluated: int
    tau: float
    ranked: int
    review: int
    filtered: int
    formula: str = FORGE_FORMULA
    analyzed_at: str | None = None


class AnalyzeResponse(CamelModel):
    success: bool = True
    candidates: list[CandidateAnalysis] = Field(default_factory=list)
    errors: list[AnalysisError] | None = None
    meta: AnalyzeMeta
