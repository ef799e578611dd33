"\"\"\"GitHub REST client producing hosting snapshots.\"\"\""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from ..adapters.handle import is_valid_handle, normalize_handle
from ..schemas import HostingFetch, HostingSnapshot, HostingStats, HostingUser, RepositorySummary
from ..schemas.candidate import FetchErrorKind

DEFAULT_API_URL = "https://api.github.com"


class HostingError(RuntimeError):
    """Raised internally when a hosting request cannot be satisfied."""

    def __init__(self, kind: FetchErrorKind, message: str, status: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.status = status


@dataclass
class FetcherConfig:
    """Connection settings for the GitHub client."""

    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = 15.0
    max_repositories: int = 100
    token: str | None = None

    def __post_init__(self) -> None:
        if self.token is None:
            self.token = os.environ.get("GITHUB_TOKEN") or None
        self.max_repositories = max(1, min(self.max_repositories, 100))


class GitHubFetcher:
    """Fetch user metadata and repositories, reporting failures as data."""

    def __init__(
        self,
        *,
        config: FetcherConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or FetcherConfig()
        self._transport = transport
        self._logger = structlog.get_logger(__name__)

    async def fetch(self, handle: str) -> HostingFetch:
        username = normalize_handle(handle)
        if not is_valid_handle(username):
            return self._failed(HostingError("invalid", f"Invalid username: {handle!r}", 400), handle)

        async with self._client() as client:
            try:
                user, stats_seed = await self._get_user(client, username)
            except HostingError as exc:
                return self._failed(exc, username)

            try:
                repositories = await self._get_repositories(client, username)
            except HostingError as exc:
                self._logger.warning(
                    "hosting.repos_failed",
                    handle=username,
                    kind=exc.kind,
                    error=str(exc),
                )
                return HostingFetch(
                    status="degraded",
                    origin="fetched",
                    snapshot=HostingSnapshot(user=user, stats=stats_seed),
                    error_kind=exc.kind,
                    error=str(exc),
                )

        stats = HostingStats(
            stars=sum(repo.stars for repo in repositories if not repo.is_fork),
            forks=sum(repo.forks for repo in repositories if not repo.is_fork),
        )
        self._logger.info("hosting.fetched", handle=username, repositories=len(repositories))
        return HostingFetch(
            status="success",
            origin="fetched",
            snapshot=HostingSnapshot(user=user, stats=stats, repositories=repositories),
        )

    def _client(self) -> httpx.AsyncClient:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return httpx.AsyncClient(
            base_url=self._config.api_url,
            headers=headers,
            timeout=self._config.timeout_seconds,
            transport=self._transport,
        )

    async def _get_user(self, client: httpx.AsyncClient, username: str) -> tuple[HostingUser, HostingStats]:
        data = await self._get_json(client, f"/users/{username}")
        if not isinstance(data, dict):
            raise HostingError("invalid", "Unexpected user payload")
        if data.get("type") == "Organization":
            raise HostingError(
                "invalid",
                "Cannot analyze GitHub organizations. Please provide a user account.",
                400,
            )
        user = HostingUser(
            login=data.get("login") or username,
            name=data.get("name"),
            bio=data.get("bio"),
            avatar_url=data.get("avatar_url"),
            blog=data.get("blog") or None,
            followers=int(data.get("followers") or 0),
            public_repos=int(data.get("public_repos") or 0),
            created_at=data.get("created_at"),
        )
        return user, HostingStats()

    async def _get_repositories(self, client: httpx.AsyncClient, username: str) -> list[RepositorySummary]:
        data = await self._get_json(
            client,
            f"/users/{username}/repos",
            params={"per_page": self._config.max_repositories, "sort": "pushed"},
        )
        if not isinstance(data, list):
            raise HostingError("invalid", "Unexpected repositories payload")
        return [self._to_repository(entry) for entry in data if isinstance(entry, dict)]

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise HostingError("timeout", f"GitHub request timed out: {path}") from exc
        except httpx.HTTPError as exc:
            raise HostingError("network", f"GitHub request failed: {exc}") from exc

        if response.status_code == 404:
            raise HostingError("not_found", "User not found", 404)
        if response.status_code in (403, 429) and response.headers.get("x-ratelimit-remaining") == "0":
            reset = response.headers.get("x-ratelimit-reset")
            suffix = f" Rate limit resets at {reset}." if reset else ""
            raise HostingError(
                "rate_limited",
                f"GitHub API rate limit exceeded.{suffix} Consider adding a GITHUB_TOKEN.",
                response.status_code,
            )
        if response.status_code >= 400:
            raise HostingError(
                "network",
                f"GitHub API error: {response.status_code} {response.reason_phrase}",
                response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise HostingError("invalid", "GitHub returned malformed JSON") from exc

    @staticmethod
    def _to_repository(entry: dict[str, Any]) -> RepositorySummary:
        owner = entry.get("owner") or {}
        return RepositorySummary(
            name=entry.get("name") or "",
            description=entry.get("description"),
            language=entry.get("language"),
            stars=int(entry.get("stargazers_count") or 0),
            forks=int(entry.get("forks_count") or 0),
            owner=owner.get("login") if isinstance(owner, dict) else None,
            is_fork=bool(entry.get("fork")),
            topics=[topic for topic in entry.get("topics") or [] if isinstance(topic, str)],
            url=entry.get("html_url"),
            pushed_at=entry.get("pushed_at"),
            created_at=entry.get("created_at"),
        )

    def _failed(self, exc: HostingError, handle: str) -> HostingFetch:
        self._logger.warning("hosting.fetch_failed", handle=handle, kind=exc.kind, error=str(exc))
        return HostingFetch(status="failed", origin="fetched", error_kind=exc.kind, error=str(exc))
