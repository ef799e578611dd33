from __future__ import annotations

from pydantic import Field, field_validator, model_validator

from .common import CamelModel

DEFAULT_TAU = 0.4


class SkillRequirement(CamelModel):
    """A weighted skill the job asks for."""

    name: str = Field(min_length=1)
    weight: float = Field(default=10.0, ge=0.0, le=100.0)
    is_required: bool = True
    importance: str | None = None
    category: str = "technical"

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Skill name must not be blank")
        return value


class BudgetBand(CamelModel):
    """Compensation budget for the role."""

    min: float | None = Field(default=None, ge=0.0)
    max: float | None = Field(default=None, ge=0.0)
    currency: str | None = None

    @model_validator(mode="after")
    def _ordered(self) -> "BudgetBand":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("Budget min must not exceed max")
        return self


class JobConfiguration(CamelModel):
    """Per-batch job settings supplied by the caller."""

    skills: list[SkillRequirement] = Field(min_length=1)
    tau: float = Field(default=DEFAULT_TAU, ge=0.0, le=1.0)
    budget: BudgetBand | None = None
    role_title: str | None = None

    @field_validator("skills")
    @classmethod
    def _requires_gate_skill(cls, skills: list[SkillRequirement]) -> list[SkillRequirement]:
        if not any(skill.is_required for skill in skills):
            raise ValueError("At least one skill must be required")
        names = [skill.name.lower() for skill in skills]
        if len(set(names)) != len(names):
            raise ValueError("Skill names must be unique")
        return skills

    @property
    def required_skills(self) -> list[SkillRequirement]:
        return [skill for skill in self.skills if skill.is_required]
