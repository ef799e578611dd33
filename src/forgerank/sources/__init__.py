"\"\"\"External signal sources consumed by the pipeline.\"\"\""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..schemas import HostingFetch, PortfolioExtraction
from .github import FetcherConfig, GitHubFetcher, HostingError


@runtime_checkable
class HostingFetcher(Protocol):
    """Fetch a code-hosting snapshot for a handle; never raises."""

    async def fetch(self, handle: str) -> HostingFetch:
        """Return the explicit fetch outcome for ``handle``."""


@runtime_checkable
class PortfolioExtractor(Protocol):
    """Extract structured projects, skills and testimonials from a portfolio URL."""

    async def extract(self, url: str) -> PortfolioExtraction | None:
        """Return the extraction, or None when the page yields nothing usable."""


__all__ = [
    "FetcherConfig",
    "GitHubFetcher",
    "HostingError",
    "HostingFetcher",
    "PortfolioExtractor",
]
