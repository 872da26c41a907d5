"""Repository descriptors and finalized portfolio entries."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RepoInfo:
    """Normalized summary of one repository, as supplied by a descriptor source."""

    name: str
    full_name: str
    url: str
    description: str | None = None
    homepage: str | None = None
    topics: tuple[str, ...] = ()
    language: str | None = None
    archived: bool = False
    pushed_at: str = ""
    default_branch: str = "main"


@dataclass
class PortfolioEntry:
    """One finalized portfolio record.

    ``enabled`` is a UI-only toggle and never serialized.
    """

    name: str
    github: str
    short_description: str | None = None
    description: str | None = None
    category: str | None = None
    technologies: list[str] = field(default_factory=list)
    status: str | None = None
    date_completed: str | None = None
    models: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    thumbnail: str | None = None
    media: dict[str, Any] = field(default_factory=dict)
    links: dict[str, str] = field(default_factory=dict)
    featured: bool | None = None
    enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Persisted form: camelCase keys, absent and empty values left out."""
        data = {
            "name": self.name,
            "shortDescription": self.short_description,
            "description": self.description,
            "category": self.category,
            "technologies": list(self.technologies),
            "status": self.status,
            "dateCompleted": self.date_completed,
            "models": list(self.models),
            "images": list(self.images),
            "thumbnail": self.thumbnail,
            "media": dict(self.media),
            "links": dict(self.links),
            "featured": self.featured,
            "github": self.github,
        }
        return {k: v for k, v in data.items() if v is not None and v != [] and v != {}}


def toggle_enabled(entries: list[PortfolioEntry], index: int) -> list[PortfolioEntry]:
    """Return a copy of entries with one entry's enabled flag flipped."""
    updated = list(entries)
    updated[index] = dataclasses.replace(entries[index], enabled=not entries[index].enabled)
    return updated


def toggle_featured(entries: list[PortfolioEntry], index: int) -> list[PortfolioEntry]:
    """Return a copy of entries with one entry's featured flag flipped."""
    updated = list(entries)
    updated[index] = dataclasses.replace(entries[index], featured=not entries[index].featured)
    return updated
