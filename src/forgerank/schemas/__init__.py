"\"\"\"Pydantic schema definitions shared by the scoring engine and its surfaces.\"\"\""

from __future__ import annotations

from .analysis import (
    CandidateAnalysis,
    CompFit,
    ContextBreakdown,
    ContextSignal,
    Explanation,
    SkillBreakdown,
)
from .candidate import (
    CandidateProfile,
    FreeTextClaim,
    HostingFetch,
    HostingSnapshot,
    HostingStats,
    HostingUser,
    PortfolioExtraction,
    PortfolioProject,
    PortfolioSkillMention,
    PortfolioTestimonial,
    RepositorySummary,
    SalaryExpectation,
)
from .evidence import TIER_MULTIPLIERS, TIER_ORDER, EvidenceItem, ProofTier
from .job import DEFAULT_TAU, BudgetBand, JobConfiguration, SkillRequirement
from .request import (
    AnalysisError,
    AnalyzeMeta,
    AnalyzeRequest,
    AnalyzeResponse,
    CandidateInput,
)

__all__ = [
    "AnalysisError",
    "AnalyzeMeta",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "BudgetBand",
    "CandidateAnalysis",
    "CandidateInput",
    "CandidateProfile",
    "CompFit",
    "ContextBreakdown",
    "ContextSignal",
    "DEFAULT_TAU",
    "EvidenceItem",
    "Explanation",
    "FreeTextClaim",
    "HostingFetch",
    "HostingSnapshot",
    "HostingStats",
    "HostingUser",
    "JobConfiguration",
    "PortfolioExtraction",
    "PortfolioProject",
    "PortfolioSkillMention",
    "PortfolioTestimonial",
    "ProofTier",
    "RepositorySummary",
    "SalaryExpectation",
    "SkillBreakdown",
    "SkillRequirement",
    "TIER_MULTIPLIERS",
    "TIER_ORDER",
]
