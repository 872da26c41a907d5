"""GitHub REST API descriptor source.

Lists a user's repositories and reads files and trees from them. Per-file
failures of any kind come back as absent; only listing errors raise.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any
from urllib.parse import quote

import httpx

from .assets import REMOTE_IMAGE_DIRS
from .exceptions import GitHubError
from .logging import setup_logging
from .models import RepoInfo

GITHUB_API_URL = "https://api.github.com"
PER_PAGE = 100
REQUEST_TIMEOUT = 30

logger = setup_logging()


def repo_from_api(data: dict[str, Any]) -> RepoInfo:
    """Map a GitHub repository payload onto RepoInfo."""
    return RepoInfo(
        name=data["name"],
        full_name=data.get("full_name") or data["name"],
        url=data.get("html_url") or "",
        description=data.get("description") or None,
        homepage=data.get("homepage") or None,
        topics=tuple(data.get("topics") or ()),
        language=data.get("language") or None,
        archived=bool(data.get("archived", False)),
        pushed_at=data.get("pushed_at") or "",
        default_branch=data.get("default_branch") or "main",
    )


class GitHubSource:
    """Descriptor source backed by the GitHub REST API."""

    image_dirs = REMOTE_IMAGE_DIRS

    def __init__(
        self,
        username: str,
        token: str | None = None,
        base_url: str = GITHUB_API_URL,
        client: httpx.AsyncClient | None = None,
    ):
        self.username = username
        self.base_url = base_url.rstrip("/")
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = client or httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
        self._client.headers.update(headers)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubSource:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _repo_url(self, repo_name: str, suffix: str) -> str:
        return f"{self.base_url}/repos/{quote(self.username)}/{quote(repo_name)}/{suffix}"

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any | None:
        """GET a JSON document; None on any failure."""
        try:
            resp = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.debug("github_request_failed", url=url, error=str(e))
            return None
        if resp.status_code != 200:
            logger.debug("github_request_status", url=url, status=resp.status_code)
            return None
        try:
            return resp.json()
        except ValueError:
            return None

    async def list_repositories(self) -> list[RepoInfo]:
        """All repositories of the user, most recently pushed first."""
        url = f"{self.base_url}/users/{quote(self.username)}/repos"
        repos: list[RepoInfo] = []
        page = 1
        while True:
            params = {"per_page": PER_PAGE, "sort": "pushed", "page": page}
            try:
                resp = await self._client.get(url, params=params)
            except httpx.HTTPError as e:
                raise GitHubError(f"Could not list repositories for {self.username}: {e}") from e
            if resp.status_code != 200:
                raise GitHubError(
                    f"Could not list repositories for {self.username}: "
                    f"GitHub returned {resp.status_code}: {resp.text[:200]}"
                )
            try:
                batch = resp.json()
            except ValueError as e:
                raise GitHubError(f"Could not list repositories for {self.username}: invalid JSON") from e
            if not isinstance(batch, list):
                raise GitHubError(
                    f"Could not list repositories for {self.username}: unexpected response"
                )
            repos.extend(repo_from_api(item) for item in batch)
            if len(batch) < PER_PAGE:
                break
            page += 1
        return repos

    async def get_file_content(self, repo_name: str, path: str) -> str | None:
        """Decoded text of one file, or None."""
        data = await self._get_json(self._repo_url(repo_name, f"contents/{quote(path)}"))
        if not isinstance(data, dict) or not data.get("content"):
            return None
        try:
            return base64.b64decode(data["content"]).decode("utf-8")
        except (binascii.Error, ValueError):
            return None

    async def get_file_tree(self, repo_name: str, branch: str) -> list[str]:
        """Every blob path in the branch, or an empty list."""
        data = await self._get_json(
            self._repo_url(repo_name, f"git/trees/{quote(branch, safe='')}"),
            params={"recursive": "1"},
        )
        if not isinstance(data, dict):
            return []
        return [
            item["path"]
            for item in data.get("tree") or []
            if item.get("type") == "blob" and item.get("path")
        ]

    async def get_release_date(self, repo_name: str) -> str | None:
        """Publish timestamp of the latest release, or None."""
        data = await self._get_json(self._repo_url(repo_name, "releases/latest"))
        if not isinstance(data, dict):
            return None
        return data.get("published_at") or None
