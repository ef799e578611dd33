"\"\"\"Learning-velocity bonus from repository history.\"\"\""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import pendulum

from ...schemas import RepositorySummary
from ..timeutils import days_since

MAX_VELOCITY_BONUS = 0.10


@dataclass
class VelocityConfig:
    """Windows and caps for the learning-velocity bonus."""

    recent_window_days: int = 180
    baseline_window_days: int = 540
    per_technology_bonus: float = 0.02
    max_technology_bonus: float = 0.06
    strong_activity_bonus: float = 0.04
    activity_bonus: float = 0.02
    max_bonus: float = MAX_VELOCITY_BONUS

    def __post_init__(self) -> None:
        if self.recent_window_days <= 0 or self.baseline_window_days <= 0:
            raise ValueError("velocity windows must be positive")
        if not 0.0 <= self.max_bonus <= MAX_VELOCITY_BONUS:
            raise ValueError(f"max_bonus must be in [0, {MAX_VELOCITY_BONUS}]")


@dataclass(slots=True)
class VelocityResult:
    bonus: float
    new_technologies: list[str]
    recent_repositories: int
    older_repositories: int
    trend: str


class LearningVelocityEvaluator:
    """Reward a rising trend: new technologies and a quickening repo rate."""

    method = "velocity"

    def __init__(self, *, config: VelocityConfig | None = None) -> None:
        self._config = config or VelocityConfig()

    def evaluate(
        self,
        repositories: Sequence[RepositorySummary],
        as_of: pendulum.DateTime,
    ) -> VelocityResult:
        cfg = self._config
        recent: list[RepositorySummary] = []
        older: list[RepositorySummary] = []
        for repo in repositories:
            age = days_since(repo.created_at or repo.pushed_at, as_of)
            if age is None:
                continue
            if age < cfg.recent_window_days:
                recent.append(repo)
            else:
                older.append(repo)

        if not older:
            return VelocityResult(0.0, [], len(recent), 0, "no_baseline")

        known = self._technologies(older)
        new_technologies = sorted(self._technologies(recent) - known)
        bonus = min(len(new_technologies) * cfg.per_technology_bonus, cfg.max_technology_bonus)

        expected = len(older) * cfg.recent_window_days / cfg.baseline_window_days
        if len(recent) > 1.5 * expected:
            bonus += cfg.strong_activity_bonus
        elif len(recent) > expected:
            bonus += cfg.activity_bonus

        bonus = round(min(max(bonus, 0.0), cfg.max_bonus), 4)
        trend = "rising" if bonus > 0 else "flat"
        return VelocityResult(bonus, new_technologies, len(recent), len(older), trend)

    @staticmethod
    def _technologies(repositories: Sequence[RepositorySummary]) -> set[str]:
        found: set[str] = set()
        for repo in repositories:
            if repo.language:
                found.add(repo.language.lower())
            found.update(topic.lower() for topic in repo.topics)
        return found
