"\"\"\"Batch analysis pipeline assembly and execution.\"\"\""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Sequence

import pendulum
import structlog
from structlog.contextvars import bound_contextvars

from . import __version__
from .adapters import CandidateAdapter, HandleAdapter, StructuredAdapter
from .core import ForgeEngine, rank_analyses
from .core.timeutils import parse_date, resolve_as_of
from .schemas import (
    AnalysisError,
    AnalyzeMeta,
    AnalyzeRequest,
    AnalyzeResponse,
    CandidateAnalysis,
    CandidateProfile,
    HostingFetch,
    JobConfiguration,
)
from .sources import HostingFetcher, PortfolioExtractor

DEFAULT_MAX_BATCH_SIZE = 300


class InvalidRequestError(ValueError):
    """Raised when a batch is rejected before any candidate is processed."""


class AdapterRegistry:
    """Registry resolving raw batch entries to candidate adapters."""

    def __init__(self, adapters: Iterable[CandidateAdapter]):
        self._adapters = {adapter.provider: adapter for adapter in adapters}

    def get(self, provider: str) -> CandidateAdapter:
        try:
            return self._adapters[provider]
        except KeyError as exc:
            raise KeyError(f"Unsupported provider: {provider!r}") from exc

    def resolve(self, raw: Any) -> CandidateAdapter:
        for adapter in self._adapters.values():
            if adapter.can_handle(raw):
                return adapter
        raise KeyError(f"Unsupported candidate entry of type {type(raw).__name__}")

    def providers(self) -> List[str]:
        return list(self._adapters.keys())


class CandidateLoadError(ValueError):
    """Raised when candidate loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[Any]):
        super().__init__("Candidate loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Candidate loading failed: {self.errors}"


class CandidateLoader:
    """Load raw candidate entries (handles or objects) from JSONL."""

    def load(self, path: Path) -> list[Any]:
        entries: list[Any] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, (str, dict)):
                    errors.append(f"line {idx}: expected a handle string or candidate object")
                    continue
                entries.append(record)
        if errors:
            raise CandidateLoadError(errors, entries)
        return entries


class JobLoader:
    """Load job configuration documents."""

    def load(self, path: Path) -> JobConfiguration:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid job JSON: {exc}") from exc
        return JobConfiguration.model_validate(data)


class OutputWriter:
    """Persist analysis results."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


@dataclass(slots=True)
class BatchResult:
    """Ordered analyses plus per-candidate errors for one batch."""

    analyses: list[CandidateAnalysis]
    errors: list[AnalysisError]
    tau: float
    skills_evaluated: int
    analyzed_at: str
    warnings: list[str] = field(default_factory=list)

    def count(self, gate_status: str) -> int:
        return sum(1 for analysis in self.analyses if analysis.gate_status == gate_status)

    def meta(self) -> AnalyzeMeta:
        return AnalyzeMeta(
            candidates_analyzed=len(self.analyses),
            skills_evaluated=self.skills_evaluated,
            tau=self.tau,
            ranked=self.count("ranked"),
            review=self.count("review"),
            filtered=self.count("filtered"),
            analyzed_at=self.analyzed_at,
        )

    def to_response(self) -> AnalyzeResponse:
        return AnalyzeResponse(
            success=True,
            candidates=self.analyses,
            errors=self.errors or None,
            meta=self.meta(),
        )


class AnalysisPipeline:
    """End-to-end batch orchestrator: adapt, fetch, score, rank."""

    def __init__(
        self,
        *,
        engine: ForgeEngine,
        registry: AdapterRegistry,
        fetcher: HostingFetcher | None = None,
        portfolio_extractor: PortfolioExtractor | None = None,
        fetch_timeout: float = 15.0,
        max_concurrency: int = 8,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        candidate_loader: CandidateLoader | None = None,
        job_loader: JobLoader | None = None,
        writer: OutputWriter | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._engine = engine
        self._registry = registry
        self._fetcher = fetcher
        self._portfolio_extractor = portfolio_extractor
        self._fetch_timeout = fetch_timeout
        self._max_concurrency = max(1, max_concurrency)
        self._max_batch_size = max_batch_size
        self._candidates = candidate_loader or CandidateLoader()
        self._jobs = job_loader or JobLoader()
        self._writer = writer or OutputWriter()
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    async def analyze_request(self, request: AnalyzeRequest) -> AnalyzeResponse:
        job = request.to_job()
        if request.as_of and parse_date(request.as_of) is None:
            raise InvalidRequestError("asOf must be an ISO date or YYYY-MM")
        result = await self.analyze_batch(job, request.candidates, as_of=request.as_of)
        return result.to_response()

    async def analyze_batch(
        self,
        job: JobConfiguration,
        raw_candidates: Sequence[Any],
        *,
        as_of: Any = None,
    ) -> BatchResult:
        if not raw_candidates:
            raise InvalidRequestError("Candidates array is required")
        if len(raw_candidates) > self._max_batch_size:
            raise InvalidRequestError(f"Maximum {self._max_batch_size} candidates per request")

        reference = resolve_as_of(as_of, self._now_provider)
        errors: list[AnalysisError] = []
        profiles: list[CandidateProfile] = []
        for index, raw in enumerate(raw_candidates):
            try:
                adapter = self._registry.resolve(raw)
                profiles.append(adapter.to_profile(raw, index=index))
            except (KeyError, ValueError) as exc:
                message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
                errors.append(AnalysisError(username=_entry_label(raw, index), error=message))
                self._logger.warning("candidates.rejected", index=index, error=message)

        semaphore = asyncio.Semaphore(self._max_concurrency)
        enriched = await asyncio.gather(*(self._enrich(profile, semaphore) for profile in profiles))

        analyses: list[CandidateAnalysis] = []
        for profile in enriched:
            if profile.hosting.status == "failed":
                errors.append(
                    AnalysisError(
                        username=profile.handle or profile.candidate_id,
                        error=profile.hosting.error or "Hosting fetch failed",
                    )
                )
                if not profile.has_text_signals:
                    continue
            with bound_contextvars(candidate_id=profile.candidate_id):
                try:
                    analysis = self._engine.evaluate(candidate=profile, job=job, as_of=reference)
                except Exception as exc:  # noqa: BLE001
                    self._logger.exception("analysis.failed", error=str(exc))
                    errors.append(
                        AnalysisError(
                            username=profile.handle or profile.candidate_id,
                            error=f"Analysis failed: {exc}",
                        )
                    )
                    continue
                self._logger.info(
                    "analysis.result",
                    gate_status=analysis.gate_status,
                    forge_score=analysis.forge_score,
                    capability_required=analysis.capability_required,
                    verdict=analysis.verdict,
                )
            analyses.append(analysis)

        return BatchResult(
            analyses=rank_analyses(analyses),
            errors=errors,
            tau=job.tau,
            skills_evaluated=len(job.skills),
            analyzed_at=self._now_provider().to_iso8601_string(),
        )

    async def _enrich(self, profile: CandidateProfile, semaphore: asyncio.Semaphore) -> CandidateProfile:
        updates: dict[str, Any] = {}
        warnings = list(profile.warnings)
        async with semaphore:
            if profile.handle and profile.hosting.origin == "none" and self._fetcher is not None:
                updates["hosting"] = await self._fetch_hosting(profile.handle)
            if profile.portfolio_url and profile.portfolio is None and self._portfolio_extractor is not None:
                extraction, warning = await self._extract_portfolio(profile.portfolio_url)
                if extraction is not None:
                    updates["portfolio"] = extraction
                if warning:
                    warnings.append(warning)
        if not updates and warnings == profile.warnings:
            return profile
        updates["warnings"] = warnings
        return profile.model_copy(update=updates)

    async def _fetch_hosting(self, handle: str) -> HostingFetch:
        try:
            return await asyncio.wait_for(self._fetcher.fetch(handle), timeout=self._fetch_timeout)
        except asyncio.TimeoutError:
            self._logger.warning("hosting.fetch_timeout", handle=handle, timeout=self._fetch_timeout)
            return HostingFetch(
                status="failed",
                origin="fetched",
                error_kind="timeout",
                error=f"Hosting fetch timed out after {self._fetch_timeout:g}s",
            )
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("hosting.fetch_failed", handle=handle, error=str(exc))
            return HostingFetch(status="failed", origin="fetched", error_kind="network", error=str(exc))

    async def _extract_portfolio(self, url: str) -> tuple[Any, str | None]:
        try:
            extraction = await asyncio.wait_for(
                self._portfolio_extractor.extract(url),
                timeout=self._fetch_timeout,
            )
        except asyncio.TimeoutError:
            self._logger.warning("portfolio.extract_timeout", url=url)
            return None, "Portfolio extraction timed out"
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("portfolio.extract_failed", url=url, error=str(exc))
            return None, f"Portfolio extraction failed: {exc}"
        return extraction, None

    def run(
        self,
        *,
        candidates_path: Path,
        job_path: Path,
        output_path: Path,
        tau: float | None = None,
        as_of: str | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> BatchResult:
        job = self._jobs.load(job_path)
        if tau is not None:
            job = JobConfiguration.model_validate({**job.model_dump(), "tau": tau})

        load_errors: list[str] = []
        try:
            raw_candidates = self._candidates.load(candidates_path)
        except CandidateLoadError as exc:
            raw_candidates = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("candidates.partial_load", errors=exc.errors)

        result = asyncio.run(self.analyze_batch(job, raw_candidates, as_of=as_of))
        result.warnings.extend(load_errors)

        if audit_logger:
            for analysis in result.analyses:
                audit_logger.append(
                    {
                        "candidate_id": analysis.id,
                        "gate_status": analysis.gate_status,
                        "gate_reason": analysis.gate_reason,
                        "capability_required": analysis.capability_required,
                        "forge_score": analysis.forge_score,
                        "verdict": analysis.verdict,
                        "tau": analysis.tau,
                        "comp_fit": analysis.comp_fit.status,
                        "warnings": analysis.warnings,
                    }
                )

        metadata = {
            **result.meta().to_wire(),
            "roleTitle": job.role_title,
            "loadErrors": load_errors,
            "appVersion": __version__,
        }
        self._writer.write(
            output_path,
            {
                "metadata": metadata,
                "candidates": [analysis.to_wire() for analysis in result.analyses],
                "errors": [error.to_wire() for error in result.errors],
            },
        )
        return result


def default_registry() -> AdapterRegistry:
    """Return the default adapter registry."""
    return AdapterRegistry(adapters=[HandleAdapter(), StructuredAdapter()])


def _entry_label(raw: Any, index: int) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict):
        for key in ("github", "id", "name"):
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        signals = raw.get("signals")
        if isinstance(signals, dict) and isinstance(signals.get("githubUsername"), str):
            return signals["githubUsername"]
    return f"candidate-{index + 1}"
