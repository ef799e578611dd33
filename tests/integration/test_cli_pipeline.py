from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from forgerank.cli import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


def write_candidates(path: Path) -> None:
    candidates = [
        {
            "id": "C-001",
            "name": "Ada Lovelace",
            "stats": {"commits": 320, "prs": 40, "reviews": 25, "issues": 12},
            "topRepos": [
                {
                    "name": "infra-modules",
                    "description": "Terraform modules for AWS landing zones",
                    "language": "HCL",
                    "stars": 45,
                    "topics": ["terraform", "aws"],
                    "pushedAt": "2024-11-20T00:00:00Z",
                    "createdAt": "2022-01-10T00:00:00Z",
                },
                {
                    "name": "alerting",
                    "description": "Prometheus alert rules and dashboards",
                    "language": "Go",
                    "stars": 12,
                    "pushedAt": "2024-10-02T00:00:00Z",
                    "createdAt": "2022-07-01T00:00:00Z",
                },
            ],
            "salaryExpectation": {"target": 140000, "currency": "USD"},
        },
        {
            "id": "C-002",
            "name": "Bob Builder",
            "signals": {"resumeText": "Five years of Terraform and AWS operations."},
        },
    ]
    path.write_text(
        "\n".join(json.dumps(item, ensure_ascii=False) for item in candidates),
        encoding="utf-8",
    )


def job_payload() -> dict:
    return {
        "roleTitle": "Site Reliability Engineer",
        "tau": 0.4,
        "skills": [
            {"name": "Terraform", "weight": 50},
            {"name": "AWS", "weight": 30},
            {"name": "Prometheus", "weight": 20, "isRequired": False},
        ],
        "budget": {"min": 100000, "max": 130000, "currency": "USD"},
    }


def test_cli_runs_pipeline_and_writes_output(tmp_path: Path, runner: CliRunner) -> None:
    candidates_path = tmp_path / "candidates.jsonl"
    job_path = tmp_path / "job.json"
    output_path = tmp_path / "results.json"
    audit_path = tmp_path / "audit" / "audit.jsonl"
    write_candidates(candidates_path)
    write_json(job_path, job_payload())

    result = runner.invoke(
        app,
        [
            "run",
            "--candidates",
            str(candidates_path),
            "--job",
            str(job_path),
            "--output",
            str(output_path),
            "--as-of",
            "2025-01",
            "--log-level",
            "WARNING",
            "--audit-log",
            str(audit_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Processed 2 candidates (1 ranked, 0 review, 1 filtered, 0 errors)" in result.output
    assert output_path.exists()

    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["roleTitle"] == "Site Reliability Engineer"
    assert rendered["metadata"]["tau"] == 0.4
    assert rendered["metadata"]["loadErrors"] == []
    assert rendered["errors"] == []

    first, second = rendered["candidates"]
    assert first["id"] == "C-001"
    assert first["gateStatus"] == "ranked"
    assert first["compFit"]["status"] == "slightly_above"
    assert first["explanation"]["summary"]
    assert second["id"] == "C-002"
    assert second["verdict"] == "Reject"

    audit_lines = audit_path.read_text(encoding="utf-8").strip().splitlines()
    assert [json.loads(line)["candidate_id"] for line in audit_lines] == ["C-001", "C-002"]


def test_cli_tau_override_applies(tmp_path: Path, runner: CliRunner) -> None:
    candidates_path = tmp_path / "candidates.jsonl"
    job_path = tmp_path / "job.json"
    output_path = tmp_path / "results.json"
    write_candidates(candidates_path)
    write_json(job_path, job_payload())

    result = runner.invoke(
        app,
        [
            "run",
            "--candidates",
            str(candidates_path),
            "--job",
            str(job_path),
            "--output",
            str(output_path),
            "--tau",
            "0.0",
            "--log-level",
            "WARNING",
        ],
    )

    assert result.exit_code == 0, result.output
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["tau"] == 0.0
    assert rendered["metadata"]["filtered"] == 0


def test_cli_reports_invalid_job(tmp_path: Path, runner: CliRunner) -> None:
    candidates_path = tmp_path / "candidates.jsonl"
    job_path = tmp_path / "job.json"
    write_candidates(candidates_path)
    write_json(job_path, {"skills": [{"name": "AWS", "isRequired": False}]})

    result = runner.invoke(
        app,
        [
            "run",
            "--candidates",
            str(candidates_path),
            "--job",
            str(job_path),
            "--output",
            str(tmp_path / "results.json"),
            "--log-level",
            "WARNING",
        ],
    )

    assert result.exit_code == 1
    assert not (tmp_path / "results.json").exists()
