"\"\"\"Structured candidate object adapter.\"\"\""

from __future__ import annotations

import re
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from ..schemas import (
    CandidateInput,
    CandidateProfile,
    FreeTextClaim,
    HostingFetch,
    HostingSnapshot,
    HostingStats,
    HostingUser,
    PortfolioExtraction,
    RepositorySummary,
    SalaryExpectation,
)
from .handle import is_valid_handle, normalize_handle

ModelT = TypeVar("ModelT", bound=BaseModel)

_CLAIM_FIELDS: tuple[tuple[str, str], ...] = (
    ("resumeText", "resume"),
    ("linkedinText", "linkedin"),
    ("extracurricularText", "extracurricular"),
)
_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


class StructuredAdapter:
    """Adapter converting caller-supplied candidate objects into profiles.

    Each optional source (salary, signals, stats, repositories, portfolio)
    is validated on its own; a malformed source is dropped with a warning
    instead of rejecting the whole candidate.
    """

    provider = "structured"

    def can_handle(self, raw: Any) -> bool:
        return isinstance(raw, Mapping)

    def to_profile(self, raw: Any, *, index: int) -> CandidateProfile:
        if not isinstance(raw, Mapping):
            raise ValueError("Candidate entry must be an object")
        try:
            data = CandidateInput.model_validate(dict(raw))
        except ValidationError as exc:
            raise ValueError(f"Invalid candidate object: {exc.errors()[0]['msg']}") from exc

        warnings: list[str] = []
        signals = data.signals if isinstance(data.signals, Mapping) else {}
        if data.signals is not None and not isinstance(data.signals, Mapping):
            warnings.append("Ignored malformed signals: expected an object")

        handle = self._handle(data.github or signals.get("githubUsername"), warnings)
        portfolio_url = data.portfolio_url or _text(signals.get("portfolioUrl"))
        name = (data.name or "").strip() or handle or data.id or f"Candidate {index + 1}"
        candidate_id = self._candidate_id(data, handle, name, index)

        salary = self._validate(SalaryExpectation, data.salary_expectation, "salaryExpectation", warnings)
        hosting = self._hosting(data, handle or candidate_id, warnings)
        portfolio = self._portfolio(data.portfolio, portfolio_url, warnings)

        claims: list[FreeTextClaim] = []
        for key, source in _CLAIM_FIELDS:
            text = _text(signals.get(key))
            if text:
                claims.append(FreeTextClaim(source=source, text=text))
        raw_links = signals.get("writingLinks") or []
        if not isinstance(raw_links, list):
            warnings.append("Ignored malformed writingLinks: expected a list")
            raw_links = []
        writing_links = [link.strip() for link in raw_links if isinstance(link, str) and link.strip()]

        return CandidateProfile(
            candidate_id=candidate_id,
            name=name,
            handle=handle,
            portfolio_url=portfolio_url,
            hosting=hosting,
            portfolio=portfolio,
            claims=claims,
            writing_links=writing_links,
            salary_expectation=salary,
            warnings=warnings,
        )

    @staticmethod
    def _handle(value: Any, warnings: list[str]) -> str | None:
        if not isinstance(value, str) or not value.strip():
            return None
        handle = normalize_handle(value)
        if not is_valid_handle(handle):
            warnings.append(f"Ignored invalid code-hosting handle {value!r}")
            return None
        return handle

    @staticmethod
    def _candidate_id(data: CandidateInput, handle: str | None, name: str, index: int) -> str:
        if data.id and data.id.strip():
            return data.id.strip()
        if handle:
            return handle
        if data.name:
            slug = _SLUG_PATTERN.sub("_", data.name.lower()).strip("_")
            if slug:
                return f"cand_{slug}"
        return f"candidate-{index + 1}"

    def _hosting(self, data: CandidateInput, login: str, warnings: list[str]) -> HostingFetch:
        if data.stats is None and data.top_repos is None:
            return HostingFetch()

        stats = self._validate(HostingStats, data.stats, "stats", warnings)
        repositories: list[RepositorySummary] = []
        if data.top_repos is not None:
            if isinstance(data.top_repos, list):
                for position, entry in enumerate(data.top_repos):
                    repo = self._validate(RepositorySummary, entry, f"topRepos[{position}]", warnings)
                    if repo is not None:
                        repositories.append(repo)
            else:
                warnings.append("Ignored malformed topRepos: expected a list")

        if stats is None and not repositories:
            return HostingFetch()
        snapshot = HostingSnapshot(
            user=HostingUser(login=login),
            stats=stats,
            repositories=repositories,
        )
        return HostingFetch(status="success", origin="supplied", snapshot=snapshot)

    def _portfolio(
        self,
        payload: Any,
        portfolio_url: str | None,
        warnings: list[str],
    ) -> PortfolioExtraction | None:
        if payload is None:
            return None
        if isinstance(payload, Mapping) and "url" not in payload and portfolio_url:
            payload = {**payload, "url": portfolio_url}
        return self._validate(PortfolioExtraction, payload, "portfolio", warnings)

    @staticmethod
    def _validate(
        model: type[ModelT],
        payload: Any,
        label: str,
        warnings: list[str],
    ) -> ModelT | None:
        if payload is None:
            return None
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            detail = f"{location}: {first['msg']}" if location else first["msg"]
            warnings.append(f"Ignored malformed {label} ({detail})")
            return None


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
