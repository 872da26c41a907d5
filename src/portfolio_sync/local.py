"""Local directory descriptor source.

Treats one directory as one repository: files come from the filesystem,
dates and the GitHub URL from git when the directory is a checkout.
"""

from __future__ import annotations

import json
import re
import subprocess
from pathlib import Path

from .assets import LOCAL_IMAGE_DIRS, walk_files
from .metadata import clean_repo_name
from .models import RepoInfo

GIT_TIMEOUT = 10

_SSH_REMOTE_RE = re.compile(r"^git@([^:]+):(.+?)(?:\.git)?/?$")
_HTTPS_REMOTE_RE = re.compile(r"^https?://(?:[^@/]+@)?([^/]+)/(.+?)(?:\.git)?/?$")


def _git(root: Path, *args: str) -> str | None:
    """Run a git command in root; stripped stdout, or None on any failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=root, capture_output=True, text=True, timeout=GIT_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def normalize_remote_url(remote: str | None) -> str:
    """``git@github.com:user/repo.git`` -> ``https://github.com/user/repo``."""
    if not remote:
        return ""
    for pattern in (_SSH_REMOTE_RE, _HTTPS_REMOTE_RE):
        match = pattern.match(remote.strip())
        if match:
            return f"https://{match.group(1)}/{match.group(2)}"
    return remote.strip()


def last_commit_date(root: Path) -> str | None:
    return _git(root, "log", "-1", "--format=%cI")


def latest_tag_date(root: Path) -> str | None:
    output = _git(root, "tag", "-l", "--sort=-creatordate", "--format=%(creatordate:iso-strict)")
    return output.splitlines()[0] if output else None


def _read_package_homepage(root: Path) -> str | None:
    try:
        pkg = json.loads((root / "package.json").read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if isinstance(pkg, dict) and isinstance(pkg.get("homepage"), str):
        return pkg["homepage"] or None
    return None


class LocalSource:
    """Descriptor source for a single local project directory."""

    image_dirs = LOCAL_IMAGE_DIRS

    def __init__(self, directory: str | Path):
        self.root = Path(directory).resolve()
        if not self.root.is_dir():
            raise ValueError(f"Not a directory: {directory}")

    def describe(self) -> RepoInfo:
        """RepoInfo for the directory itself."""
        remote = normalize_remote_url(_git(self.root, "remote", "get-url", "origin"))
        full_name = "/".join(remote.rstrip("/").split("/")[-2:]) if remote else self.root.name
        return RepoInfo(
            name=self.root.name,
            full_name=full_name,
            url=remote,
            homepage=_read_package_homepage(self.root),
            pushed_at=last_commit_date(self.root) or "",
        )

    async def list_repositories(self) -> list[RepoInfo]:
        return [self.describe()]

    async def get_file_content(self, repo_name: str, path: str) -> str | None:
        try:
            return (self.root / path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    async def get_file_tree(self, repo_name: str, branch: str) -> list[str]:
        return list(walk_files(self.root))

    async def get_release_date(self, repo_name: str) -> str | None:
        return latest_tag_date(self.root)

    @property
    def display_name(self) -> str:
        return clean_repo_name(self.root.name)
