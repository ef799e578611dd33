"\"\"\"Canonical candidate profile and its signal sources.\"\"\""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field

from .common import CamelModel

FetchStatus = Literal["success", "degraded", "failed", "skipped"]
FetchErrorKind = Literal["not_found", "rate_limited", "network", "timeout", "invalid"]
ClaimSource = Literal["resume", "linkedin", "extracurricular"]


class HostingUser(CamelModel):
    """Code-hosting account metadata."""

    login: str
    name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    blog: str | None = None
    followers: int = 0
    public_repos: int = 0
    created_at: str | None = None


class HostingStats(CamelModel):
    """Aggregate activity counters for a hosting account."""

    commits: int = 0
    issues: int = 0
    prs: int = 0
    reviews: int = 0
    stars: int = 0
    forks: int = 0


class RepositorySummary(CamelModel):
    """One repository as returned by the hosting fetcher."""

    name: str
    description: str | None = None
    language: str | None = None
    stars: int = 0
    forks: int = 0
    owner: str | None = None
    is_fork: bool = False
    commits: int | None = None
    topics: list[str] = Field(default_factory=list)
    url: str | None = None
    pushed_at: str | None = None
    created_at: str | None = None


class HostingSnapshot(CamelModel):
    """User metadata plus repositories for one handle."""

    user: HostingUser
    stats: HostingStats | None = None
    repositories: list[RepositorySummary] = Field(default_factory=list)


class HostingFetch(CamelModel):
    """Explicit outcome of the code-hosting fetch step."""

    status: FetchStatus = "skipped"
    origin: Literal["fetched", "supplied", "none"] = "none"
    snapshot: HostingSnapshot | None = None
    error_kind: FetchErrorKind | None = None
    error: str | None = None

    @property
    def usable(self) -> bool:
        return self.status in ("success", "degraded") and self.snapshot is not None


class PortfolioProject(CamelModel):
    title: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    url: str | None = None
    has_live_demo: bool = False
    has_case_study: bool = False


class PortfolioSkillMention(CamelModel):
    skill: str
    context: str = ""
    frequency: int = 1
    has_project: bool = False


class PortfolioTestimonial(CamelModel):
    text: str
    author: str | None = None
    company: str | None = None
    role: str | None = None


class PortfolioExtraction(CamelModel):
    """Structured data pulled from a portfolio site."""

    url: str
    title: str | None = None
    projects: list[PortfolioProject] = Field(default_factory=list)
    skills: list[PortfolioSkillMention] = Field(default_factory=list)
    testimonials: list[PortfolioTestimonial] = Field(default_factory=list)
    reliability: float = Field(default=0.5, ge=0.0, le=1.0)


class FreeTextClaim(CamelModel):
    """Self-reported text such as a resume or LinkedIn summary."""

    source: ClaimSource
    text: str


class SalaryExpectation(CamelModel):
    min: float | None = None
    max: float | None = None
    target: float | None = None
    currency: str | None = None


class CandidateProfile(CamelModel):
    """Provider-neutral candidate, immutable once built."""

    candidate_id: str
    name: str
    handle: str | None = None
    portfolio_url: str | None = None
    hosting: HostingFetch = Field(default_factory=HostingFetch)
    portfolio: PortfolioExtraction | None = None
    claims: list[FreeTextClaim] = Field(default_factory=list)
    writing_links: list[str] = Field(default_factory=list)
    salary_expectation: SalaryExpectation | None = None
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def has_text_signals(self) -> bool:
        return bool(self.claims or self.writing_links or self.portfolio or self.portfolio_url)
