"\"\"\"Scorer implementations for the FORGE engine.\"\"\""

from .capability import CapabilityConfig, CapabilityScorer
from .context import ContextConfig, ContextScorer
from .salary import CompensationFitAdjuster, SalaryConfig
from .velocity import LearningVelocityEvaluator, VelocityConfig

__all__ = [
    "CapabilityConfig",
    "CapabilityScorer",
    "ContextConfig",
    "ContextScorer",
    "CompensationFitAdjuster",
    "SalaryConfig",
    "LearningVelocityEvaluator",
    "VelocityConfig",
]
