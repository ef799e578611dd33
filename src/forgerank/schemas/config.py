"\"\"\"Pydantic configuration schema for YAML settings.\"\"\""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CoreConfig(BaseModel):
    tau: float | None = Field(default=None, ge=0.0, le=1.0)
    max_batch_size: int | None = Field(default=None, ge=1)


class HostingConfig(BaseModel):
    api_url: str | None = None
    timeout_seconds: float | None = Field(default=None, gt=0.0)
    max_concurrency: int | None = Field(default=None, ge=1)
    max_repositories: int | None = Field(default=None, ge=1)


class EvaluatorConfig(BaseModel):
    evidence: dict[str, Any] | None = None
    capability: dict[str, Any] | None = None
    context: dict[str, Any] | None = None
    salary: dict[str, Any] | None = None
    velocity: dict[str, Any] | None = None


class AppConfig(BaseModel):
    core: CoreConfig = Field(default_factory=CoreConfig)
    hosting: HostingConfig = Field(default_factory=HostingConfig)
    evaluators: EvaluatorConfig = Field(default_factory=EvaluatorConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        core_settings = self.core.model_dump(exclude_none=True)
        if core_settings:
            settings["core"] = core_settings
        hosting_settings = self.hosting.model_dump(exclude_none=True)
        if hosting_settings:
            settings["hosting"] = hosting_settings
        evaluator_settings = self.evaluators.model_dump(exclude_none=True)
        if evaluator_settings:
            settings["evaluators"] = evaluator_settings
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")
    return AppConfig.model_validate(raw)
