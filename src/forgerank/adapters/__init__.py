"\"\"\"Candidate input adapters.\"\"\""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..schemas import CandidateProfile
from .handle import HandleAdapter, is_valid_handle, normalize_handle
from .structured import StructuredAdapter


@runtime_checkable
class CandidateAdapter(Protocol):
    """Candidate input adapter contract.

    Implementations turn one raw batch entry (a bare handle string or a
    caller-supplied object) into a provider-neutral ``CandidateProfile``.
    """

    provider: str

    def can_handle(self, raw: Any) -> bool:
        """Return True when the adapter understands the raw entry."""

    def to_profile(self, raw: Any, *, index: int) -> CandidateProfile:
        """Build the canonical profile; raise ``ValueError`` for unusable input."""


__all__ = [
    "CandidateAdapter",
    "HandleAdapter",
    "StructuredAdapter",
    "is_valid_handle",
    "normalize_handle",
]
