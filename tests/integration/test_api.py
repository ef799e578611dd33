from __future__ import annotations

import asyncio
from typing import Any

import pendulum
import pytest
from fastapi.testclient import TestClient

from forgerank import __version__
from forgerank.api import create_app
from forgerank.core import ForgeEngine
from forgerank.pipeline import AnalysisPipeline, default_registry
from forgerank.schemas import HostingFetch, HostingSnapshot, HostingUser, RepositorySummary

AS_OF = pendulum.datetime(2025, 1, 1)
SKILLS = [{"name": "React", "weight": 70}, {"name": "CSS", "weight": 30, "isRequired": False}]


class RecordingFetcher:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def fetch(self, handle: str) -> HostingFetch:
        self.calls.append(handle)
        await asyncio.sleep(0)
        repo = RepositorySummary(
            name="storefront",
            owner=handle,
            language="TypeScript",
            description="React storefront with CSS modules",
            stars=15,
            pushed_at="2024-11-01T00:00:00Z",
            created_at="2023-05-01T00:00:00Z",
        )
        return HostingFetch(
            status="success",
            origin="fetched",
            snapshot=HostingSnapshot(user=HostingUser(login=handle), repositories=[repo]),
        )


class BrokenPipeline:
    async def analyze_request(self, request: Any) -> Any:
        raise RuntimeError("database on fire")


@pytest.fixture
def fetcher() -> RecordingFetcher:
    return RecordingFetcher()


@pytest.fixture
def client(fetcher: RecordingFetcher) -> TestClient:
    pipeline = AnalysisPipeline(
        engine=ForgeEngine(now_provider=lambda: AS_OF),
        registry=default_registry(),
        fetcher=fetcher,
        now_provider=lambda: AS_OF,
    )
    return TestClient(create_app(pipeline))


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_analyze_ranks_candidates(client: TestClient):
    response = client.post(
        "/analyze",
        json={"skills": SKILLS, "candidates": ["alice", {"name": "Bob", "signals": {"resumeText": "React"}}]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "errors" not in body
    assert [candidate["gateStatus"] for candidate in body["candidates"]] == ["ranked", "filtered"]
    assert body["meta"]["formula"] == "FORGE_SCORE = CS × XS where CS_required ≥ τ"
    assert body["meta"]["candidatesAnalyzed"] == 2
    assert body["meta"]["skillsEvaluated"] == 2
    assert body["meta"]["ranked"] == 1
    assert body["meta"]["filtered"] == 1
    first = body["candidates"][0]
    assert first["id"] == "alice"
    assert {"forgeScore", "capabilityScore", "capabilityRequired", "contextScore", "explanation"} <= set(first)


def test_gate_threshold_takes_precedence(client: TestClient):
    response = client.post(
        "/analyze",
        json={"skills": SKILLS, "candidates": ["alice"], "tau": 0.1, "jobConfig": {"gateThreshold": 0.8}},
    )

    assert response.status_code == 200
    assert response.json()["meta"]["tau"] == 0.8


def test_as_of_pins_recency_reference(client: TestClient):
    body = {"skills": SKILLS, "candidates": ["alice"]}

    default = client.post("/analyze", json=body).json()["candidates"][0]
    pinned = client.post("/analyze", json={**body, "asOf": "2025-01-01"}).json()["candidates"][0]
    later = client.post("/analyze", json={**body, "asOf": "2027-01"}).json()["candidates"][0]

    assert pinned == default
    assert later["capabilityScore"] < pinned["capabilityScore"]


def test_unparseable_as_of_is_rejected(client: TestClient, fetcher: RecordingFetcher):
    response = client.post("/analyze", json={"skills": SKILLS, "candidates": ["alice"], "asOf": "someday"})

    assert response.status_code == 400
    assert response.json()["error"] == "asOf must be an ISO date or YYYY-MM"
    assert fetcher.calls == []


def test_per_candidate_failures_are_reported(client: TestClient):
    response = client.post("/analyze", json={"skills": SKILLS, "candidates": ["alice", "!!!"]})

    body = response.json()
    assert response.status_code == 200
    assert len(body["candidates"]) == 1
    assert body["errors"][0]["username"] == "!!!"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"skills": SKILLS, "candidates": []}, "Candidates array is required"),
        ({"candidates": ["alice"]}, "Skills array is required"),
        (
            {"skills": [{"name": "React", "isRequired": False}], "candidates": ["alice"]},
            "At least one skill must be required",
        ),
        ({"skills": SKILLS, "candidates": ["user"] * 301}, "Maximum 300 candidates per request"),
    ],
)
def test_invalid_requests_fail_before_any_fetch(
    client: TestClient, fetcher: RecordingFetcher, payload: dict, message: str
):
    response = client.post("/analyze", json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": message}
    assert fetcher.calls == []


def test_out_of_range_tau_is_rejected(client: TestClient):
    response = client.post("/analyze", json={"skills": SKILLS, "candidates": ["alice"], "tau": 1.5})

    assert response.status_code == 400
    assert response.json()["error"].startswith("tau:")


def test_malformed_body_is_rejected(client: TestClient):
    invalid = client.post("/analyze", content="{not json", headers={"content-type": "application/json"})
    not_object = client.post("/analyze", json=["alice"])

    assert invalid.status_code == 400
    assert invalid.json()["error"] == "Request body must be valid JSON"
    assert not_object.json()["error"] == "Request body must be a JSON object"


def test_unexpected_failure_returns_500():
    client = TestClient(create_app(BrokenPipeline()))

    response = client.post("/analyze", json={"skills": SKILLS, "candidates": ["alice"]})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to analyze candidates"}
