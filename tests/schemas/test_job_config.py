from __future__ import annotations

import pytest
from pydantic import ValidationError

from forgerank.schemas import (
    TIER_ORDER,
    BudgetBand,
    EvidenceItem,
    JobConfiguration,
    ProofTier,
    SkillRequirement,
)


def test_skill_requirement_defaults_and_aliases():
    skill = SkillRequirement.model_validate({"name": "  React ", "isRequired": False})

    assert skill.name == "React"
    assert skill.weight == 10.0
    assert skill.is_required is False
    assert skill.to_wire()["isRequired"] is False


def test_job_requires_at_least_one_required_skill():
    with pytest.raises(ValidationError) as exc:
        JobConfiguration(skills=[SkillRequirement(name="React", is_required=False)])
    assert "At least one skill must be required" in str(exc.value)


def test_job_rejects_duplicate_skill_names():
    with pytest.raises(ValidationError) as exc:
        JobConfiguration(skills=[SkillRequirement(name="React"), SkillRequirement(name="react")])
    assert "unique" in str(exc.value)


@pytest.mark.parametrize("tau", [-0.1, 1.5])
def test_job_rejects_tau_out_of_range(tau: float):
    with pytest.raises(ValidationError):
        JobConfiguration(skills=[SkillRequirement(name="React")], tau=tau)


def test_budget_band_must_be_ordered():
    with pytest.raises(ValidationError):
        BudgetBand(min=120_000, max=100_000)


def test_proof_tiers_are_totally_ordered():
    assert [tier.rank for tier in TIER_ORDER] == [0, 1, 2, 3, 4]
    assert [tier.multiplier for tier in TIER_ORDER] == [1.0, 0.7, 0.4, 0.15, 0.0]
    assert ProofTier.OWNED_ARTIFACT.next_lower() is ProofTier.LINKED_ARTIFACT
    assert ProofTier.NONE.next_lower() is None


def test_evidence_corroboration_excludes_claims():
    def item(tier: ProofTier) -> EvidenceItem:
        return EvidenceItem(skill_name="React", proof_tier=tier, source_type="test", source="x")

    assert item(ProofTier.THIRD_PARTY).is_corroborated
    assert not item(ProofTier.CLAIM_ONLY).is_corroborated
    assert not item(ProofTier.NONE).is_corroborated
    assert item(ProofTier.OWNED_ARTIFACT).to_wire()["proofTier"] == "owned_artifact"
