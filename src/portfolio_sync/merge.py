"""Metadata merge engine.

Combines an optional override document with detector output into one entry.
An explicitly set override value always wins; anything the override leaves
unset falls back to detection; anything neither provides is omitted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from pydantic import ValidationError

from .assets import AssetResult
from .logging import setup_logging
from .metadata import MetadataResult, clean_repo_name
from .models import PortfolioEntry, RepoInfo
from .readme import ReadmeResult
from .schema import Links, PortfolioConfig, validate_config
from .tech import TechResult

logger = setup_logging()


@dataclass
class Detections:
    """Outputs of the four detectors for one repository."""

    readme: ReadmeResult = field(default_factory=ReadmeResult)
    tech: TechResult = field(default_factory=TechResult)
    assets: AssetResult = field(default_factory=AssetResult)
    meta: MetadataResult = field(default_factory=MetadataResult)


def parse_override(raw: str | None, repo_name: str = "") -> PortfolioConfig | None:
    """Parse and validate override text; None when absent or malformed."""
    if not raw:
        return None
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.info("override_invalid_json", repo=repo_name, error=str(e))
        return None

    result = validate_config(document)
    if not result.success:
        logger.info("override_invalid", repo=repo_name, errors=result.errors)
        return None
    return result.config


def _pick_description(repo: RepoInfo, readme: ReadmeResult) -> str | None:
    description = repo.description or None
    if readme.description and (not description or len(readme.description) > len(description)):
        return readme.description
    return description


def build_auto_entry(repo: RepoInfo, detections: Detections) -> PortfolioEntry:
    """Entry from detection alone."""
    return PortfolioEntry(
        name=clean_repo_name(repo.name),
        github=repo.url,
        short_description=repo.description or detections.readme.short_description,
        description=_pick_description(repo, detections.readme),
        category=detections.tech.category,
        technologies=list(detections.tech.technologies),
        status=detections.meta.status,
        date_completed=detections.meta.date_completed,
        models=list(detections.assets.models),
        images=list(detections.assets.images),
        thumbnail=detections.assets.thumbnail,
        links=dict(detections.meta.links),
    )


def _links_dict(links: Links | None) -> dict[str, str]:
    if links is None:
        return {}
    return links.model_dump(by_alias=True, exclude_none=True)


def merge_entry(
    repo: RepoInfo,
    detections: Detections,
    override: PortfolioConfig | None = None,
) -> PortfolioEntry:
    """Resolve override vs. detection into one finalized entry."""
    entry = build_auto_entry(repo, detections)
    if override is None:
        return entry

    entry.name = override.name
    # Empty override strings and lists count as unset so nothing is emitted empty.
    for attr in ("short_description", "description", "category", "status",
                 "date_completed", "thumbnail"):
        value = getattr(override, attr)
        if value:
            setattr(entry, attr, value)

    for attr in ("technologies", "models", "images"):
        value = getattr(override, attr)
        if value:
            setattr(entry, attr, list(value))

    entry.links = {**entry.links, **_links_dict(override.links)}
    if override.media is not None:
        media = override.media.model_dump(by_alias=True, exclude_none=True)
        entry.media = {k: v for k, v in media.items() if v != ""}
    entry.featured = override.featured
    entry.enabled = not override.exclude
    return entry


def init_config(repo: RepoInfo, detections: Detections) -> PortfolioConfig:
    """Fresh override document from detection, for ``portfolio-sync init``."""
    entry = build_auto_entry(repo, detections)
    return PortfolioConfig(
        name=entry.name,
        short_description=entry.short_description,
        description=entry.description,
        category=entry.category,
        technologies=entry.technologies or None,
        status=entry.status,
        date_completed=entry.date_completed,
        models=entry.models or None,
        images=entry.images or None,
        thumbnail=entry.thumbnail,
        links=_valid_links(entry.links),
    )


def _valid_links(links: dict[str, str]) -> Links | None:
    if not links:
        return None
    try:
        return Links.model_validate(links)
    except ValidationError:
        logger.info("links_dropped", links=links)
        return None


def update_config(existing: PortfolioConfig, fresh: PortfolioConfig) -> PortfolioConfig:
    """Refresh an override document without clobbering manual edits.

    Fields the existing document sets are kept; absent ones are filled from
    ``fresh``. Empty strings and an empty ``technologies`` list count as
    absent. ``models`` and ``images`` always take the fresh values.
    """
    updates = {}
    for attr in ("short_description", "description", "category", "status",
                 "date_completed", "thumbnail", "links"):
        if getattr(existing, attr) in (None, ""):
            updates[attr] = getattr(fresh, attr)
    if not existing.technologies:
        updates["technologies"] = fresh.technologies
    updates["models"] = fresh.models
    updates["images"] = fresh.images
    return existing.model_copy(update=updates)
