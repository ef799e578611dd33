"\"\"\"Core scoring engine components.\"\"\""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .evidence import EvidenceConfig, EvidenceNormalizer, NormalizedEvidence
from .evaluators import (
    CapabilityScorer,
    CompensationFitAdjuster,
    ContextScorer,
    LearningVelocityEvaluator,
)
from .screening import ForgeEngine, decide_gate, rank_analyses, verdict_for

__all__ = [
    "ForgeEngine",
    "decide_gate",
    "rank_analyses",
    "verdict_for",
    "EvidenceConfig",
    "EvidenceNormalizer",
    "NormalizedEvidence",
    "CapabilityScorer",
    "ContextScorer",
    "CompensationFitAdjuster",
    "LearningVelocityEvaluator",
]
