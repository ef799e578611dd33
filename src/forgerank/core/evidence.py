"\"\"\"Evidence normalization: heterogeneous candidate signals to tiered evidence.\"\"\""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import pendulum
import structlog

from ..schemas import (
    CandidateProfile,
    EvidenceItem,
    HostingStats,
    HostingUser,
    PortfolioExtraction,
    ProofTier,
    RepositorySummary,
    SkillRequirement,
)
from .matching import mentions_skill, repository_matches
from .timeutils import days_since, parse_date, recency_weight, resolve_as_of


def _default_claim_strengths() -> dict[str, float]:
    return {"resume": 0.8, "linkedin": 0.7, "extracurricular": 0.6}


@dataclass
class EvidenceConfig:
    """Configuration for evidence normalization."""

    max_repositories: int = 30
    fuzzy_threshold: float = 90.0
    recency_midpoint_days: float = 180.0
    recency_scale_days: float = 60.0
    claim_strengths: dict[str, float] = field(default_factory=_default_claim_strengths)


@dataclass(slots=True)
class NormalizedEvidence:
    """Evidence map plus the raw material it was derived from."""

    evidence: dict[str, list[EvidenceItem]]
    repositories: list[RepositorySummary]
    as_of: pendulum.DateTime
    hosting_user: HostingUser | None = None
    hosting_stats: HostingStats | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def has_hosting(self) -> bool:
        """True only when repositories or non-zero activity counters exist."""
        if self.repositories:
            return True
        stats = self.hosting_stats
        return stats is not None and any(stats.model_dump().values())

    def items(self) -> list[EvidenceItem]:
        return [item for items in self.evidence.values() for item in items]


def owns_repository(handle: str | None, repository: RepositorySummary) -> bool:
    """Repositories without an owner are treated as the candidate's own."""
    if repository.is_fork:
        return False
    if not repository.owner or not handle:
        return True
    return repository.owner.lower() == handle.lower()


class EvidenceNormalizer:
    """Build a per-skill, tier-ordered evidence map for one candidate."""

    def __init__(
        self,
        *,
        config: EvidenceConfig | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._config = config or EvidenceConfig()
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def normalize(
        self,
        candidate: CandidateProfile,
        skills: Sequence[SkillRequirement],
        *,
        as_of: Any = None,
    ) -> NormalizedEvidence:
        reference = resolve_as_of(as_of, self._now_provider)
        warnings = list(candidate.warnings)

        repositories: list[RepositorySummary] = []
        hosting_user: HostingUser | None = None
        hosting_stats: HostingStats | None = None
        hosting = candidate.hosting
        if hosting.usable:
            snapshot = hosting.snapshot
            hosting_user = snapshot.user
            hosting_stats = snapshot.stats
            repositories = self._top_repositories(snapshot.repositories)
            if hosting.status == "degraded":
                warnings.append(f"Hosting data incomplete: {hosting.error or 'partial response'}")
        elif hosting.status == "failed":
            warnings.append(
                f"Hosting data unavailable ({hosting.error_kind or 'error'}): {hosting.error or 'fetch failed'}"
            )

        if candidate.portfolio_url and candidate.portfolio is None:
            warnings.append("Portfolio URL provided but no extraction was available")

        collected: list[EvidenceItem] = []
        collected.extend(self._repository_items(candidate.handle, repositories, skills, reference))
        if candidate.portfolio is not None:
            collected.extend(self._portfolio_items(candidate.portfolio, skills))
        collected.extend(self._claim_items(candidate, skills))

        evidence = self._group(collected, skills)

        self._logger.debug(
            "evidence.normalized",
            candidate_id=candidate.candidate_id,
            items=sum(len(items) for items in evidence.values()),
            repositories=len(repositories),
        )

        return NormalizedEvidence(
            evidence=evidence,
            repositories=repositories,
            as_of=reference,
            hosting_user=hosting_user,
            hosting_stats=hosting_stats,
            warnings=warnings,
        )

    def _top_repositories(self, repositories: Iterable[RepositorySummary]) -> list[RepositorySummary]:
        epoch = pendulum.datetime(1970, 1, 1)

        def pushed(repo: RepositorySummary) -> pendulum.DateTime:
            return parse_date(repo.pushed_at, default=epoch) or epoch

        ordered = sorted(repositories, key=lambda repo: repo.name.lower())
        ordered.sort(key=pushed, reverse=True)
        return ordered[: self._config.max_repositories]

    def _repository_items(
        self,
        handle: str | None,
        repositories: Sequence[RepositorySummary],
        skills: Sequence[SkillRequirement],
        as_of: pendulum.DateTime,
    ) -> list[EvidenceItem]:
        items: list[EvidenceItem] = []
        for repo in repositories:
            matched = [skill for skill in skills if repository_matches(skill.name, repo)]
            if not matched:
                continue
            owned = owns_repository(handle, repo)
            tier = ProofTier.OWNED_ARTIFACT if owned else ProofTier.LINKED_ARTIFACT
            recency = recency_weight(
                days_since(repo.pushed_at, as_of),
                midpoint_days=self._config.recency_midpoint_days,
                scale_days=self._config.recency_scale_days,
            )
            strength = self._repository_strength(repo, owned=owned, recency=recency)
            owner = repo.owner or handle or "candidate"
            for skill in matched:
                items.append(
                    EvidenceItem(
                        skill_name=skill.name,
                        proof_tier=tier,
                        source_type="repository",
                        source=f"repo:{owner.lower()}/{repo.name}",
                        raw_strength=strength,
                        recency=recency,
                        observed_at=repo.pushed_at,
                        title=repo.name,
                        description=repo.description,
                        url=repo.url,
                    )
                )
        return items

    @staticmethod
    def _repository_strength(
        repo: RepositorySummary,
        *,
        owned: bool,
        recency: float | None,
    ) -> float:
        strength = 0.4 if owned else 0.3
        if repo.stars >= 10:
            strength += 0.1
        if repo.stars >= 50:
            strength += 0.1
        if repo.stars >= 100:
            strength += 0.1
        if repo.commits is not None:
            if repo.commits >= 100:
                strength += 0.2
            elif repo.commits >= 25:
                strength += 0.1
        if repo.description and len(repo.description) > 20:
            strength += 0.1
        if recency is not None:
            strength += 0.2 * recency
        return min(max(strength, 0.0), 1.0)

    def _portfolio_items(
        self,
        portfolio: PortfolioExtraction,
        skills: Sequence[SkillRequirement],
    ) -> list[EvidenceItem]:
        reliability_scale = 0.5 + 0.5 * portfolio.reliability
        items: list[EvidenceItem] = []

        for project in portfolio.projects:
            text = " ".join([project.title, project.description, *project.technologies])
            verifiable = project.has_live_demo or project.has_case_study
            tier = ProofTier.LINKED_ARTIFACT if verifiable else ProofTier.CLAIM_ONLY
            base = 0.5
            if project.has_live_demo:
                base += 0.2
            if project.has_case_study:
                base += 0.2
            for skill in skills:
                if not mentions_skill(skill.name, text):
                    continue
                items.append(
                    EvidenceItem(
                        skill_name=skill.name,
                        proof_tier=tier,
                        source_type="portfolio",
                        source=f"portfolio:{project.title}",
                        raw_strength=min(base * reliability_scale, 1.0),
                        title=project.title,
                        description=project.description or None,
                        url=project.url or portfolio.url,
                    )
                )

        for index, testimonial in enumerate(portfolio.testimonials):
            author = testimonial.author or f"testimonial-{index + 1}"
            for skill in skills:
                if not mentions_skill(skill.name, testimonial.text):
                    continue
                items.append(
                    EvidenceItem(
                        skill_name=skill.name,
                        proof_tier=ProofTier.THIRD_PARTY,
                        source_type="testimonial",
                        source=f"testimonial:{author}",
                        raw_strength=0.6,
                        title=f"Testimonial from {author}",
                        description=testimonial.text[:160],
                        url=portfolio.url,
                    )
                )

        for mention in portfolio.skills:
            if mention.has_project:
                continue
            for skill in skills:
                if not mentions_skill(skill.name, mention.skill):
                    continue
                items.append(
                    EvidenceItem(
                        skill_name=skill.name,
                        proof_tier=ProofTier.CLAIM_ONLY,
                        source_type="portfolio",
                        source=f"portfolio-mention:{mention.skill.lower()}",
                        raw_strength=min(0.3 + 0.1 * mention.frequency, 1.0),
                        title=f"Mentioned on portfolio {mention.frequency}x",
                        description=mention.context[:160] or None,
                        url=portfolio.url,
                    )
                )
        return items

    def _claim_items(
        self,
        candidate: CandidateProfile,
        skills: Sequence[SkillRequirement],
    ) -> list[EvidenceItem]:
        items: list[EvidenceItem] = []
        for claim in candidate.claims:
            strength = self._config.claim_strengths.get(claim.source, 0.5)
            for skill in skills:
                if not mentions_skill(skill.name, claim.text, fuzzy_threshold=self._config.fuzzy_threshold):
                    continue
                items.append(
                    EvidenceItem(
                        skill_name=skill.name,
                        proof_tier=ProofTier.CLAIM_ONLY,
                        source_type=claim.source,
                        source=claim.source,
                        raw_strength=strength,
                        title=f"{claim.source.capitalize()} claim",
                        description=_excerpt(claim.text, skill.name),
                    )
                )
        return items

    @staticmethod
    def _group(
        items: Iterable[EvidenceItem],
        skills: Sequence[SkillRequirement],
    ) -> dict[str, list[EvidenceItem]]:
        by_key: dict[tuple[str, str], EvidenceItem] = {}
        for item in items:
            existing = by_key.get(item.dedup_key)
            if existing is None or _sort_key(item) < _sort_key(existing):
                by_key[item.dedup_key] = item

        grouped: dict[str, list[EvidenceItem]] = {skill.name: [] for skill in skills}
        for item in by_key.values():
            grouped[item.skill_name].append(item)

        for skill in skills:
            bucket = grouped[skill.name]
            bucket.sort(key=_sort_key)
            if not bucket and skill.is_required:
                bucket.append(
                    EvidenceItem(
                        skill_name=skill.name,
                        proof_tier=ProofTier.NONE,
                        source_type="none",
                        source="none",
                        title=f"No evidence found for {skill.name}",
                    )
                )
        return grouped


def _sort_key(item: EvidenceItem) -> tuple[int, float, str]:
    return (item.proof_tier.rank, -item.raw_strength, item.source)


def _excerpt(text: str, skill_name: str, width: int = 80) -> str:
    lowered = text.lower()
    position = lowered.find(skill_name.lower())
    if position < 0:
        return text[: width * 2].strip()
    start = max(position - width, 0)
    return text[start : position + len(skill_name) + width].strip()
