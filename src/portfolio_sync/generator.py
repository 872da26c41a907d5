"""Portfolio generator - runs the detectors and merge engine per repository.

Per repository, independent reads are fanned out with asyncio.gather and
joined before merging. Repositories are processed one at a time.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from .assets import locate_assets
from .formatter import sort_entries
from .logging import setup_logging
from .merge import Detections, merge_entry, parse_override
from .metadata import detect_metadata
from .models import PortfolioEntry, RepoInfo
from .readme import README_NAMES, find_readme, parse_readme
from .schema import CONFIG_FILENAME
from .tech import MANIFEST_FILES, detect_tech_stack

logger = setup_logging()

ProgressCallback = Callable[[str, int, int], None]


class DescriptorSource(Protocol):
    """Where repository summaries and file contents come from."""

    image_dirs: frozenset[str]

    async def list_repositories(self) -> list[RepoInfo]: ...

    async def get_file_content(self, repo_name: str, path: str) -> str | None: ...

    async def get_file_tree(self, repo_name: str, branch: str) -> list[str]: ...

    async def get_release_date(self, repo_name: str) -> str | None: ...


@dataclass
class RepoScan:
    """Raw override text plus detector output for one repository."""

    repo: RepoInfo
    detections: Detections
    override_text: str | None = None


@dataclass
class GenerateStats:
    found: int = 0
    processed: int = 0
    with_config: int = 0
    auto_detected: int = 0
    errors: list[str] = field(default_factory=list)


async def _fetch_many(source: DescriptorSource, repo_name: str, paths: Iterable[str]) -> dict[str, str | None]:
    paths = list(paths)
    contents = await asyncio.gather(*(source.get_file_content(repo_name, p) for p in paths))
    return dict(zip(paths, contents))


async def collect_detections(
    source: DescriptorSource,
    repo: RepoInfo,
    now: datetime | None = None,
) -> RepoScan:
    """Read everything the detectors need and run them."""
    override_text, tree, release_date = await asyncio.gather(
        source.get_file_content(repo.name, CONFIG_FILENAME),
        source.get_file_tree(repo.name, repo.default_branch),
        source.get_release_date(repo.name),
    )

    # Without a tree, fall back to probing the canonical names.
    if tree:
        root_files = {p for p in tree if "/" not in p}
        readme_path = find_readme(tree)
        manifest_paths = [m for m in MANIFEST_FILES if m in root_files]
    else:
        readme_path = README_NAMES[0]
        manifest_paths = list(MANIFEST_FILES)

    readme_text, manifests = await asyncio.gather(
        source.get_file_content(repo.name, readme_path) if readme_path else _none(),
        _fetch_many(source, repo.name, manifest_paths),
    )

    detections = Detections(
        readme=parse_readme(readme_text),
        tech=detect_tech_stack(manifests, tree, repo.topics, repo.language),
        assets=locate_assets(tree, source.image_dirs),
        meta=detect_metadata(repo, release_date, now),
    )
    return RepoScan(repo=repo, detections=detections, override_text=override_text)


async def _none() -> None:
    return None


async def process_repo(
    source: DescriptorSource,
    repo: RepoInfo,
    now: datetime | None = None,
) -> tuple[PortfolioEntry, bool]:
    """Finalized entry for one repository, and whether a valid override was used."""
    scan = await collect_detections(source, repo, now)
    override = parse_override(scan.override_text, repo.name)
    return merge_entry(repo, scan.detections, override), override is not None


async def generate(
    source: DescriptorSource,
    exclude: Iterable[str] = (),
    progress_callback: ProgressCallback | None = None,
    stats: GenerateStats | None = None,
    now: datetime | None = None,
) -> list[PortfolioEntry]:
    """Build sorted entries for every repository the source lists.

    Excluded and dot-prefixed repositories are skipped. A failure in one
    repository is logged and skipped without stopping the run.
    """
    stats = stats if stats is not None else GenerateStats()
    excluded = set(exclude)

    repos = await source.list_repositories()
    stats.found = len(repos)
    selected = [r for r in repos if r.name not in excluded and not r.name.startswith(".")]
    total = len(selected)

    entries: list[PortfolioEntry] = []
    for i, repo in enumerate(selected):
        if progress_callback:
            progress_callback(repo.name, i + 1, total)
        try:
            entry, has_config = await process_repo(source, repo, now)
        except Exception as e:
            logger.warning("repo_failed", repo=repo.name, error=str(e))
            stats.errors.append(f"{repo.name}: {e}")
            continue

        entries.append(entry)
        stats.processed += 1
        if has_config:
            stats.with_config += 1
        else:
            stats.auto_detected += 1

    return sort_entries(entries)
