from __future__ import annotations

import pytest

from forgerank.container import create_container
from forgerank.schemas.config import AppConfig, load_config


def test_create_container_with_overrides():
    container = create_container(
        settings={
            "core": {"max_batch_size": 50},
            "hosting": {"api_url": "https://ghe.example.com/api/v3", "timeout_seconds": 5, "max_concurrency": 2},
            "evaluators": {
                "evidence": {"max_repositories": 10},
                "capability": {"corroboration_rate": 0.05},
                "context": {"weights": {"teamwork": 40, "communication": 10}},
                "salary": {"tolerance_ratio": 0.15},
                "velocity": {"max_bonus": 0.05},
            },
        }
    )

    engine = container.engine()
    pipeline = container.pipeline()

    assert engine._normalizer._config.max_repositories == 10
    assert engine._capability._config.corroboration_rate == 0.05
    assert engine._context._config.weights["teamwork"] == 40
    assert engine._context._config.weights["ownership"] == 25
    assert engine._comp_fit._config.tolerance_ratio == 0.15
    assert engine._velocity._config.max_bonus == 0.05
    assert pipeline.max_batch_size == 50
    assert pipeline._fetch_timeout == 5
    assert pipeline._max_concurrency == 2
    assert pipeline._fetcher._config.api_url == "https://ghe.example.com/api/v3"


def test_default_container_uses_shared_engine():
    container = create_container()

    assert container.pipeline()._engine is container.pipeline()._engine
    assert container.pipeline().max_batch_size == 300


def test_invalid_context_weights_are_rejected():
    with pytest.raises(ValueError):
        create_container(settings={"evaluators": {"context": {"weights": {"teamwork": 90}}}})


def test_load_config_validation():
    data = {
        "core": {"tau": 0.6},
        "hosting": {"timeout_seconds": 3},
        "evaluators": {"salary": {"tolerance_ratio": 0.2}},
    }
    app_config = load_config(data)
    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["core"] == {"tau": 0.6}
    assert settings["hosting"] == {"timeout_seconds": 3}
    assert settings["evaluators"]["salary"]["tolerance_ratio"] == 0.2


def test_load_config_rejects_bad_values():
    with pytest.raises(ValueError):
        load_config(["not", "a", "mapping"])
    with pytest.raises(ValueError):
        load_config({"core": {"tau": 1.5}})
