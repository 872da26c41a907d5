"""Shared fixtures."""

from __future__ import annotations

import pytest

from portfolio_sync.assets import REMOTE_IMAGE_DIRS
from portfolio_sync.models import RepoInfo


class FakeSource:
    """In-memory descriptor source.

    ``files`` maps repo name -> {path: content}; the tree is the key set.
    """

    image_dirs = REMOTE_IMAGE_DIRS

    def __init__(self, repos, files=None, releases=None, broken=()):
        self.repos = list(repos)
        self.files = files or {}
        self.releases = releases or {}
        self.broken = set(broken)
        self.requested: list[tuple[str, str]] = []

    async def list_repositories(self):
        return list(self.repos)

    async def get_file_content(self, repo_name, path):
        if repo_name in self.broken:
            raise RuntimeError("boom")
        self.requested.append((repo_name, path))
        return self.files.get(repo_name, {}).get(path)

    async def get_file_tree(self, repo_name, branch):
        return list(self.files.get(repo_name, {}))

    async def get_release_date(self, repo_name):
        return self.releases.get(repo_name)


def make_repo(name="demo-repo", **kwargs) -> RepoInfo:
    defaults = {
        "full_name": f"octocat/{name}",
        "url": f"https://github.com/octocat/{name}",
        "pushed_at": "2026-09-01T10:00:00Z",
    }
    defaults.update(kwargs)
    return RepoInfo(name=name, **defaults)


@pytest.fixture
def fake_source_cls():
    return FakeSource


@pytest.fixture
def repo_factory():
    return make_repo
