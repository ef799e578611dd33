from __future__ import annotations

import pytest

from forgerank.adapters import HandleAdapter, StructuredAdapter, is_valid_handle, normalize_handle
from forgerank.pipeline import default_registry


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("octocat", "octocat"),
        ("@OctoCat", "octocat"),
        ("github.com/octo-cat/", "octo-cat"),
        ("https://github.com/Octo-Cat/some-repo", "octo-cat"),
        ("  torvalds  ", "torvalds"),
    ],
)
def test_normalize_handle(raw: str, expected: str):
    assert normalize_handle(raw) == expected


def test_handle_validation():
    assert is_valid_handle("a")
    assert is_valid_handle("octo-cat")
    assert not is_valid_handle("")
    assert not is_valid_handle("octo--cat")
    assert not is_valid_handle("a" * 40)


def test_handle_adapter_builds_profile_awaiting_fetch():
    profile = HandleAdapter().to_profile("@Ada", index=0)

    assert profile.candidate_id == "ada"
    assert profile.handle == "ada"
    assert profile.hosting.status == "skipped"
    assert profile.hosting.origin == "none"


def test_handle_adapter_rejects_invalid_handle():
    with pytest.raises(ValueError):
        HandleAdapter().to_profile("!!!", index=0)


def test_structured_adapter_uses_supplied_stats_as_snapshot():
    profile = StructuredAdapter().to_profile(
        {
            "id": "c-1",
            "name": "Ada Lovelace",
            "github": "ada",
            "stats": {"commits": 400, "issues": 10, "prs": 30, "reviews": 12, "stars": 80, "forks": 4},
            "topRepos": [
                {"name": "engine", "description": "Analytical engine simulator", "language": "Python", "stars": 80}
            ],
            "salaryExpectation": {"target": 120000, "currency": "USD"},
            "signals": {"resumeText": "Python expert", "writingLinks": ["https://ada.dev/notes"]},
        },
        index=0,
    )

    assert profile.candidate_id == "c-1"
    assert profile.hosting.status == "success"
    assert profile.hosting.origin == "supplied"
    assert profile.hosting.snapshot.stats.reviews == 12
    assert profile.hosting.snapshot.repositories[0].owner is None
    assert profile.salary_expectation.target == 120000
    assert [claim.source for claim in profile.claims] == ["resume"]
    assert profile.writing_links == ["https://ada.dev/notes"]
    assert profile.warnings == []


def test_structured_adapter_drops_malformed_sources_with_warnings():
    profile = StructuredAdapter().to_profile(
        {
            "name": "Grace Hopper",
            "salaryExpectation": "a lot",
            "topRepos": [{"description": "missing name"}],
            "signals": {"linkedinText": "Compiler pioneer"},
        },
        index=4,
    )

    assert profile.candidate_id == "cand_grace_hopper"
    assert profile.salary_expectation is None
    assert profile.hosting.status == "skipped"
    assert len(profile.warnings) == 2
    assert profile.claims[0].source == "linkedin"


def test_structured_adapter_id_fallbacks():
    adapter = StructuredAdapter()

    assert adapter.to_profile({"signals": {"githubUsername": "@Linus"}}, index=0).candidate_id == "linus"
    assert adapter.to_profile({}, index=2).candidate_id == "candidate-3"


def test_structured_adapter_ignores_invalid_handle():
    profile = StructuredAdapter().to_profile({"name": "X", "github": "bad--handle"}, index=0)

    assert profile.handle is None
    assert any("handle" in warning for warning in profile.warnings)


def test_registry_resolves_by_entry_shape():
    registry = default_registry()

    assert registry.resolve("ada").provider == "handle"
    assert registry.resolve({"name": "Ada"}).provider == "structured"
    with pytest.raises(KeyError):
        registry.resolve(42)
    assert registry.providers() == ["handle", "structured"]
