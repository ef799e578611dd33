"\"\"\"Behavioral context (XS) scoring.\"\"\""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ...schemas import CandidateProfile, ContextBreakdown, ContextSignal
from ..evidence import NormalizedEvidence, owns_repository
from ..timeutils import days_since

SIGNAL_NAMES: tuple[str, ...] = ("teamwork", "communication", "adaptability", "ownership")


def _default_weights() -> dict[str, float]:
    return {name: 25.0 for name in SIGNAL_NAMES}


@dataclass
class ContextConfig:
    """Sub-score weights (must sum to 100) and fallback levels."""

    weights: dict[str, float] = field(default_factory=_default_weights)
    recent_days: int = 180
    text_baseline: float = 30.0
    linkedin_teamwork: float = 50.0
    writing_communication: float = 60.0
    resume_communication: float = 45.0
    portfolio_adaptability: float = 55.0
    initiative_ownership: float = 55.0

    def __post_init__(self) -> None:
        unknown = set(self.weights) - set(SIGNAL_NAMES)
        if unknown:
            raise ValueError(f"Unknown context signals: {sorted(unknown)}")
        merged = _default_weights()
        merged.update(self.weights)
        if any(value < 0 for value in merged.values()):
            raise ValueError("Context weights must be non-negative")
        if not math.isclose(sum(merged.values()), 100.0, abs_tol=1e-6):
            raise ValueError("Context weights must sum to 100")
        self.weights = merged


@dataclass(slots=True)
class ContextResult:
    breakdown: ContextBreakdown
    score: float


class ContextScorer:
    """Derive teamwork, communication, adaptability and ownership signals."""

    method = "context"

    def __init__(self, *, config: ContextConfig | None = None) -> None:
        self._config = config or ContextConfig()

    def evaluate(self, candidate: CandidateProfile, normalized: NormalizedEvidence) -> ContextResult:
        fallback = self._from_text(candidate)
        if normalized.has_hosting:
            breakdown = self._floor(self._from_hosting(candidate, normalized), fallback)
        else:
            breakdown = fallback
        weights = self._config.weights
        score = sum(weights[signal.name] * signal.score for signal in breakdown.signals()) / 10000.0
        return ContextResult(breakdown=breakdown, score=min(max(score, 0.0), 1.0))

    def _from_hosting(self, candidate: CandidateProfile, normalized: NormalizedEvidence) -> ContextBreakdown:
        repos = normalized.repositories
        handle = candidate.handle
        owned = [repo for repo in repos if owns_repository(handle, repo)]
        contributed = [repo for repo in repos if not owns_repository(handle, repo)]
        ages = [days_since(repo.pushed_at, normalized.as_of) for repo in repos]
        recent = [age for age in ages if age is not None and age < self._config.recent_days]
        languages = {repo.language.lower() for repo in repos if repo.language}
        described = [repo for repo in repos if repo.description and len(repo.description) > 20]
        followers = normalized.hosting_user.followers if normalized.hosting_user else 0
        stats = normalized.hosting_stats
        total_stars = sum(repo.stars for repo in owned)

        teamwork = len(contributed) * 15 + min(followers / 5, 20)
        communication = (len(described) / max(len(repos), 1)) * 80
        if stats is not None:
            teamwork += min(stats.reviews * 1.5, 30) + min(stats.prs, 20)
            communication += min(stats.issues / 2, 20)
        if candidate.writing_links:
            communication += 10
        adaptability = len(languages) * 12
        ownership = len(owned) * 8 + math.log10(total_stars + 1) * 10 + len(recent) * 5

        return ContextBreakdown(
            teamwork=self._signal("teamwork", teamwork, "hosting"),
            communication=self._signal("communication", communication, "hosting"),
            adaptability=self._signal("adaptability", adaptability, "hosting"),
            ownership=self._signal("ownership", ownership, "hosting"),
            source="hosting",
        )

    def _from_text(self, candidate: CandidateProfile) -> ContextBreakdown:
        cfg = self._config
        sources = {claim.source for claim in candidate.claims}
        portfolio = candidate.portfolio
        projects = portfolio.projects if portfolio else []
        testimonials = portfolio.testimonials if portfolio else []
        technologies = {tech.lower() for project in projects for tech in project.technologies}

        if "linkedin" in sources or testimonials:
            source = "linkedin" if "linkedin" in sources else "portfolio"
            teamwork = self._signal("teamwork", cfg.linkedin_teamwork, source)
        else:
            teamwork = self._signal("teamwork", cfg.text_baseline, "baseline")

        if candidate.writing_links:
            communication = self._signal("communication", cfg.writing_communication, "writing")
        elif "resume" in sources or any(project.has_case_study for project in projects):
            communication = self._signal("communication", cfg.resume_communication, "resume")
        else:
            communication = self._signal("communication", cfg.text_baseline, "baseline")

        if len(technologies) >= 2:
            adaptability = self._signal("adaptability", cfg.portfolio_adaptability, "portfolio")
        else:
            adaptability = self._signal("adaptability", cfg.text_baseline, "baseline")

        if "extracurricular" in sources or projects:
            ownership = self._signal(
                "ownership",
                cfg.initiative_ownership,
                "extracurricular" if "extracurricular" in sources else "portfolio",
            )
        else:
            ownership = self._signal("ownership", cfg.text_baseline, "baseline")

        return ContextBreakdown(
            teamwork=teamwork,
            communication=communication,
            adaptability=adaptability,
            ownership=ownership,
            source="text",
        )

    @staticmethod
    def _floor(hosting: ContextBreakdown, text: ContextBreakdown) -> ContextBreakdown:
        """Weak hosting activity never scores below the text-only view."""
        picked = {
            name: max(getattr(hosting, name), getattr(text, name), key=lambda signal: signal.score)
            for name in SIGNAL_NAMES
        }
        return ContextBreakdown(**picked, source="hosting")

    @staticmethod
    def _signal(name: str, value: float, source: str) -> ContextSignal:
        return ContextSignal(name=name, score=round(min(max(value, 0.0), 100.0), 2), source=source)
