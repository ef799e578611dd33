from __future__ import annotations

import pytest

from forgerank.core.evaluators.capability import CapabilityConfig, CapabilityScorer
from forgerank.schemas import EvidenceItem, ProofTier, SkillRequirement


def item(skill: str, tier: ProofTier, strength: float, source: str) -> EvidenceItem:
    return EvidenceItem(
        skill_name=skill,
        proof_tier=tier,
        source_type="test",
        source=source,
        raw_strength=strength,
    )


def placeholder(skill: str) -> EvidenceItem:
    return EvidenceItem(skill_name=skill, proof_tier=ProofTier.NONE, source_type="none", source="none")


def test_score_sits_inside_tier_band():
    scorer = CapabilityScorer()
    skill = SkillRequirement(name="React")

    owned = scorer.score_skill(skill, [item("React", ProofTier.OWNED_ARTIFACT, 1.0, "repo:a/x")])
    linked = scorer.score_skill(skill, [item("React", ProofTier.LINKED_ARTIFACT, 0.5, "repo:b/y")])
    claim = scorer.score_skill(skill, [item("React", ProofTier.CLAIM_ONLY, 0.0, "resume")])

    assert owned.score == 100.0
    assert linked.score == pytest.approx(55.0)
    assert claim.score == 0.0
    assert owned.status == "Proven"
    assert claim.status == "Missing"


def test_higher_tier_dominates_any_number_of_lower_tier_items():
    scorer = CapabilityScorer()
    skill = SkillRequirement(name="React")
    claims = [
        item("React", ProofTier.CLAIM_ONLY, 0.99, source)
        for source in ("resume", "linkedin", "extracurricular", "portfolio-mention:react", "blog")
    ]
    weakest_third_party = [item("React", ProofTier.THIRD_PARTY, 0.0, "testimonial:grace")]

    piled = scorer.score_skill(skill, claims)
    single = scorer.score_skill(skill, weakest_third_party)

    assert piled.corroborating_sources == 3
    assert piled.score < single.score


def test_corroboration_closes_part_of_gap_to_ceiling():
    scorer = CapabilityScorer()
    skill = SkillRequirement(name="Python")
    one = scorer.score_skill(skill, [item("Python", ProofTier.LINKED_ARTIFACT, 0.0, "repo:a/1")])
    two = scorer.score_skill(
        skill,
        [
            item("Python", ProofTier.LINKED_ARTIFACT, 0.0, "repo:a/1"),
            item("Python", ProofTier.CLAIM_ONLY, 0.5, "resume"),
        ],
    )

    assert one.score == pytest.approx(40.0)
    assert two.score == pytest.approx(43.0)
    assert two.best_tier is ProofTier.LINKED_ARTIFACT
    assert two.score <= 70.0


def test_missing_required_skill_contributes_zero_to_required_aggregate():
    scorer = CapabilityScorer()
    job_skills = [
        SkillRequirement(name="Rust", weight=50, is_required=True),
        SkillRequirement(name="React", weight=50, is_required=False),
    ]
    evidence = {
        "Rust": [placeholder("Rust")],
        "React": [item("React", ProofTier.OWNED_ARTIFACT, 1.0, "repo:a/x")],
    }

    result = scorer.evaluate(job_skills, evidence)

    assert result.required == 0.0
    assert result.display == pytest.approx(0.5)
    rust = result.skills[0]
    assert rust.score == 0.0
    assert rust.best_tier is ProofTier.NONE
    assert rust.evidence_count == 0


def test_required_aggregate_is_weighted():
    scorer = CapabilityScorer()
    job_skills = [
        SkillRequirement(name="React", weight=75),
        SkillRequirement(name="Python", weight=25),
    ]
    evidence = {
        "React": [item("React", ProofTier.OWNED_ARTIFACT, 1.0, "repo:a/x")],
        "Python": [placeholder("Python")],
    }

    result = scorer.evaluate(job_skills, evidence)

    assert result.required == pytest.approx(0.75)
    assert result.display == pytest.approx(0.75)


def test_zero_weights_fall_back_to_equal_average():
    scorer = CapabilityScorer()
    job_skills = [
        SkillRequirement(name="React", weight=0),
        SkillRequirement(name="Python", weight=0),
    ]
    evidence = {
        "React": [item("React", ProofTier.OWNED_ARTIFACT, 1.0, "repo:a/x")],
        "Python": [placeholder("Python")],
    }

    assert scorer.evaluate(job_skills, evidence).required == pytest.approx(0.5)


def test_status_thresholds_follow_config():
    scorer = CapabilityScorer(config=CapabilityConfig(proven_threshold=50, weak_threshold=10))
    skill = SkillRequirement(name="React")

    breakdown = scorer.score_skill(skill, [item("React", ProofTier.LINKED_ARTIFACT, 0.5, "repo:b/y")])

    assert breakdown.status == "Proven"


def test_invalid_capability_config_raises():
    with pytest.raises(ValueError):
        CapabilityConfig(corroboration_rate=1.5)
    with pytest.raises(ValueError):
        CapabilityConfig(proven_threshold=10, weak_threshold=20)
