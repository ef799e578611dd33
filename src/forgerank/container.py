"\"\"\"Dependency injection container for the ranking service.\"\"\""

from __future__ import annotations

from dataclasses import dataclass

from dependency_injector import containers, providers

from .adapters import HandleAdapter, StructuredAdapter
from .core import (
    CapabilityScorer,
    CompensationFitAdjuster,
    ContextScorer,
    EvidenceNormalizer,
    ForgeEngine,
    LearningVelocityEvaluator,
)
from .core.evaluators.capability import CapabilityConfig
from .core.evaluators.context import ContextConfig
from .core.evaluators.salary import SalaryConfig
from .core.evaluators.velocity import VelocityConfig
from .core.evidence import EvidenceConfig
from .pipeline import DEFAULT_MAX_BATCH_SIZE, AdapterRegistry, AnalysisPipeline
from .sources import FetcherConfig, GitHubFetcher


@dataclass
class PipelineConfig:
    """Batch-level limits for the analysis pipeline."""

    fetch_timeout: float = 15.0
    max_concurrency: int = 8
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE


class ForgeContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    pipeline_config = providers.Singleton(PipelineConfig)

    handle_adapter = providers.Singleton(HandleAdapter)
    structured_adapter = providers.Singleton(StructuredAdapter)

    adapter_registry = providers.Singleton(
        AdapterRegistry,
        adapters=providers.List(handle_adapter, structured_adapter),
    )

    evidence_normalizer = providers.Singleton(EvidenceNormalizer)
    capability_scorer = providers.Singleton(CapabilityScorer)
    context_scorer = providers.Singleton(ContextScorer)
    comp_fit_adjuster = providers.Singleton(CompensationFitAdjuster)
    velocity_evaluator = providers.Singleton(LearningVelocityEvaluator)

    engine = providers.Singleton(
        ForgeEngine,
        normalizer=evidence_normalizer,
        capability=capability_scorer,
        context=context_scorer,
        comp_fit=comp_fit_adjuster,
        velocity=velocity_evaluator,
    )

    hosting_fetcher = providers.Singleton(GitHubFetcher)

    pipeline = providers.Factory(
        AnalysisPipeline,
        engine=engine,
        registry=adapter_registry,
        fetcher=hosting_fetcher,
        fetch_timeout=pipeline_config.provided.fetch_timeout,
        max_concurrency=pipeline_config.provided.max_concurrency,
        max_batch_size=pipeline_config.provided.max_batch_size,
    )


def create_container(*, settings: dict | None = None) -> ForgeContainer:
    """Instantiate container with optional overrides."""

    container = ForgeContainer()

    if not settings:
        return container

    core_settings = settings.get("core", {}) if isinstance(settings, dict) else {}
    hosting_settings = settings.get("hosting", {}) if isinstance(settings, dict) else {}

    pipeline_kwargs = {}
    if "max_batch_size" in core_settings:
        pipeline_kwargs["max_batch_size"] = core_settings["max_batch_size"]
    if "timeout_seconds" in hosting_settings:
        pipeline_kwargs["fetch_timeout"] = hosting_settings["timeout_seconds"]
    if "max_concurrency" in hosting_settings:
        pipeline_kwargs["max_concurrency"] = hosting_settings["max_concurrency"]
    if pipeline_kwargs:
        container.pipeline_config.override(
            providers.Singleton(PipelineConfig, **pipeline_kwargs)
        )

    fetcher_kwargs = {
        key: hosting_settings[key]
        for key in ("api_url", "timeout_seconds", "max_repositories")
        if key in hosting_settings
    }
    if fetcher_kwargs:
        container.hosting_fetcher.override(
            providers.Singleton(GitHubFetcher, config=FetcherConfig(**fetcher_kwargs))
        )

    evaluator_settings = settings.get("evaluators", {}) if isinstance(settings, dict) else {}

    if "evidence" in evaluator_settings:
        evidence_config = EvidenceConfig(**evaluator_settings["evidence"])
        container.evidence_normalizer.override(
            providers.Singleton(EvidenceNormalizer, config=evidence_config)
        )

    if "capability" in evaluator_settings:
        capability_config = CapabilityConfig(**evaluator_settings["capability"])
        container.capability_scorer.override(
            providers.Singleton(CapabilityScorer, config=capability_config)
        )

    if "context" in evaluator_settings:
        context_config = ContextConfig(**evaluator_settings["context"])
        container.context_scorer.override(
            providers.Singleton(ContextScorer, config=context_config)
        )

    if "salary" in evaluator_settings:
        salary_config = SalaryConfig(**evaluator_settings["salary"])
        container.comp_fit_adjuster.override(
            providers.Singleton(CompensationFitAdjuster, config=salary_config)
        )

    if "velocity" in evaluator_settings:
        velocity_config = VelocityConfig(**evaluator_settings["velocity"])
        container.velocity_evaluator.override(
            providers.Singleton(LearningVelocityEvaluator, config=velocity_config)
        )

    return container
