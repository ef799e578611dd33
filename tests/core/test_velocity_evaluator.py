from __future__ import annotations

import pendulum
import pytest

from forgerank.core.evaluators.velocity import LearningVelocityEvaluator, VelocityConfig
from forgerank.schemas import RepositorySummary

AS_OF = pendulum.datetime(2025, 1, 1)


def repo(name: str, language: str, created_at: str, topics: list[str] | None = None) -> RepositorySummary:
    return RepositorySummary(name=name, language=language, created_at=created_at, topics=topics or [])


def older(count: int = 3, language: str = "Python") -> list[RepositorySummary]:
    return [repo(f"old-{index}", language, "2022-03-01T00:00:00Z") for index in range(count)]


def test_no_older_repositories_means_no_bonus():
    evaluator = LearningVelocityEvaluator()
    result = evaluator.evaluate([repo("new", "Rust", "2024-11-01T00:00:00Z")], AS_OF)

    assert result.bonus == 0.0
    assert result.trend == "no_baseline"


def test_new_languages_and_faster_pace_earn_bonus():
    recent = [
        repo("new-rust", "Rust", "2024-10-01T00:00:00Z"),
        repo("new-go", "Go", "2024-11-15T00:00:00Z"),
    ]
    result = LearningVelocityEvaluator().evaluate(older() + recent, AS_OF)

    assert result.new_technologies == ["go", "rust"]
    assert result.bonus == pytest.approx(0.08)
    assert result.trend == "rising"


def test_flat_history_earns_nothing():
    result = LearningVelocityEvaluator().evaluate(older(), AS_OF)

    assert result.bonus == 0.0
    assert result.trend == "flat"


def test_bonus_is_capped():
    recent = [
        repo(f"new-{index}", f"lang-{index}", "2024-12-01T00:00:00Z", topics=[f"topic-{index}"])
        for index in range(6)
    ]
    result = LearningVelocityEvaluator().evaluate(older() + recent, AS_OF)

    assert result.bonus == pytest.approx(0.10)


def test_config_rejects_bonus_above_limit():
    with pytest.raises(ValueError):
        VelocityConfig(max_bonus=0.2)
