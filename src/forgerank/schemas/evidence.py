"\"\"\"Proof tiers and evidence items.\"\"\""

from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, Field

from .common import CamelModel


class ProofTier(str, Enum):
    """Confidence level of a piece of evidence, strongest first."""

    OWNED_ARTIFACT = "owned_artifact"
    LINKED_ARTIFACT = "linked_artifact"
    THIRD_PARTY = "third_party"
    CLAIM_ONLY = "claim_only"
    NONE = "none"

    @property
    def multiplier(self) -> float:
        return TIER_MULTIPLIERS[self]

    @property
    def rank(self) -> int:
        """Position in the total order; 0 is the strongest tier."""
        return TIER_ORDER.index(self)

    def next_lower(self) -> "ProofTier | None":
        index = self.rank + 1
        return TIER_ORDER[index] if index < len(TIER_ORDER) else None


TIER_ORDER: tuple[ProofTier, ...] = (
    ProofTier.OWNED_ARTIFACT,
    ProofTier.LINKED_ARTIFACT,
    ProofTier.THIRD_PARTY,
    ProofTier.CLAIM_ONLY,
    ProofTier.NONE,
)

TIER_MULTIPLIERS: dict[ProofTier, float] = {
    ProofTier.OWNED_ARTIFACT: 1.0,
    ProofTier.LINKED_ARTIFACT: 0.7,
    ProofTier.THIRD_PARTY: 0.4,
    ProofTier.CLAIM_ONLY: 0.15,
    ProofTier.NONE: 0.0,
}


class EvidenceItem(CamelModel):
    """A single piece of evidence supporting one skill."""

    skill_name: str
    proof_tier: ProofTier
    source_type: str
    source: str
    raw_strength: float = Field(default=0.0, ge=0.0, le=1.0)
    recency: float | None = Field(default=None, ge=0.0, le=1.0)
    observed_at: str | None = None
    title: str = ""
    description: str | None = None
    url: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.skill_name.lower(), self.source)

    @property
    def is_corroborated(self) -> bool:
        """True for anything stronger than self-reported text."""
        return self.proof_tier.rank < ProofTier.CLAIM_ONLY.rank
