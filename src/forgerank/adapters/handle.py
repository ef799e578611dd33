"\"\"\"Bare code-hosting handle adapter.\"\"\""

from __future__ import annotations

import re
from typing import Any

from ..schemas import CandidateProfile

_URL_PATTERN = re.compile(r"^(?:https?://)?(?:www\.)?github\.com/([^/\s]+)", re.IGNORECASE)
_VALID_HANDLE = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9]|-(?=[a-zA-Z0-9])){0,38}$")
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9-]")


def normalize_handle(value: str) -> str:
    """Accept ``user``, ``@user``, ``github.com/user`` or a full profile URL."""
    cleaned = value.strip()
    if cleaned.startswith("@"):
        cleaned = cleaned[1:]
    match = _URL_PATTERN.match(cleaned)
    if match:
        cleaned = match.group(1)
    cleaned = cleaned.split("/")[0]
    cleaned = _INVALID_CHARS.sub("", "".join(cleaned.split()))
    return cleaned.strip("-").lower()


def is_valid_handle(handle: str) -> bool:
    return bool(handle) and len(handle) <= 39 and bool(_VALID_HANDLE.match(handle))


class HandleAdapter:
    """Adapter converting a bare handle string into a profile awaiting a fetch."""

    provider = "handle"

    def can_handle(self, raw: Any) -> bool:
        return isinstance(raw, str)

    def to_profile(self, raw: Any, *, index: int) -> CandidateProfile:
        handle = normalize_handle(str(raw))
        if not is_valid_handle(handle):
            raise ValueError(f"Invalid username: {raw!r}")
        return CandidateProfile(candidate_id=handle, name=handle, handle=handle)
