"""Entry formatter: JSON, YAML and Markdown renderings of a portfolio."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Literal

from .models import PortfolioEntry

OutputFormat = Literal["json", "yaml", "markdown"]
OUTPUT_FORMATS: tuple[str, ...] = ("json", "yaml", "markdown")

FORMAT_EXTENSIONS: dict[str, str] = {
    "json": ".json",
    "yaml": ".yaml",
    "markdown": ".md",
}

FEATURED_MARKER = " ⭐"

# Plain scalars that YAML could misread need quoting.
_YAML_PLAIN_RE = re.compile(r"^[A-Za-z0-9_./][A-Za-z0-9 _./:+()-]*$")
_YAML_NUMBER_RE = re.compile(r"^[-+]?[0-9][0-9_.:]*$")
_YAML_RESERVED = frozenset({"true", "false", "yes", "no", "on", "off", "null", "~"})


def sort_entries(entries: Iterable[PortfolioEntry]) -> list[PortfolioEntry]:
    """Featured first, then newest ``dateCompleted``; undated last. Stable."""
    by_date = sorted(entries, key=lambda e: e.date_completed or "", reverse=True)
    return sorted(by_date, key=lambda e: not e.featured)


def prepare_entries(entries: Iterable[PortfolioEntry]) -> list[PortfolioEntry]:
    """Drop disabled entries and sort the rest."""
    return sort_entries(e for e in entries if e.enabled)


def to_json(entries: list[PortfolioEntry]) -> str:
    return json.dumps(
        {"projects": [e.to_dict() for e in entries]},
        indent=2,
        ensure_ascii=False,
    )


def _yaml_str(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _yaml_scalar(value: str) -> str:
    if (
        _YAML_PLAIN_RE.match(value)
        and not _YAML_NUMBER_RE.match(value)
        and value.lower() not in _YAML_RESERVED
        and ": " not in value
        and not value.endswith(":")
    ):
        return value
    return _yaml_str(value)


def to_yaml(entries: list[PortfolioEntry]) -> str:
    """Line-based YAML, one block per entry in a fixed field order."""
    lines = ["projects:"]
    for e in entries:
        lines.append(f"  - name: {_yaml_str(e.name)}")
        if e.short_description:
            lines.append(f"    shortDescription: {_yaml_str(e.short_description)}")
        if e.description:
            lines.append(f"    description: {_yaml_str(e.description)}")
        if e.category:
            lines.append(f"    category: {_yaml_scalar(e.category)}")
        if e.technologies:
            techs = ", ".join(_yaml_scalar(t) for t in e.technologies)
            lines.append(f"    technologies: [{techs}]")
        if e.status:
            lines.append(f"    status: {_yaml_scalar(e.status)}")
        if e.date_completed:
            lines.append(f"    dateCompleted: {_yaml_str(e.date_completed)}")
        lines.append(f"    github: {_yaml_scalar(e.github)}")
        if e.featured:
            lines.append("    featured: true")
        if e.models:
            lines.append("    models:")
            lines.extend(f"      - {_yaml_scalar(m)}" for m in e.models)
        if e.images:
            lines.append("    images:")
            lines.extend(f"      - {_yaml_scalar(i)}" for i in e.images)
        if e.thumbnail:
            lines.append(f"    thumbnail: {_yaml_scalar(e.thumbnail)}")
        for key in ("liveDemo", "docs"):
            if e.links.get(key):
                lines.append(f"    {key}: {_yaml_scalar(e.links[key])}")
        for key in ("video", "website", "pdf"):
            if e.media.get(key):
                lines.append(f"    {key}: {_yaml_scalar(e.media[key])}")
        lines.append("")
    return "\n".join(lines)


def _group_by_category(entries: list[PortfolioEntry]) -> dict[str, list[PortfolioEntry]]:
    groups: dict[str, list[PortfolioEntry]] = {}
    for e in entries:
        groups.setdefault(e.category or "Other", []).append(e)
    return groups


def to_markdown(entries: list[PortfolioEntry]) -> str:
    """Markdown grouped by category in first-seen order."""
    lines = [f"# Portfolio ({len(entries)} projects)\n"]

    for category, projects in _group_by_category(entries).items():
        lines.append(f"## {category}\n")
        for p in projects:
            marker = FEATURED_MARKER if p.featured else ""
            lines.append(f"### {p.name}{marker}\n")
            if p.short_description:
                lines.append(f"{p.short_description}\n")
            if p.technologies:
                lines.append(f"- **Tech:** {', '.join(p.technologies)}")
            if p.status:
                lines.append(f"- **Status:** {p.status}")
            if p.date_completed:
                lines.append(f"- **Date:** {p.date_completed}")
            lines.append(f"- **GitHub:** {p.github}")
            if p.links.get("liveDemo"):
                lines.append(f"- **Live:** {p.links['liveDemo']}")
            if p.links.get("docs"):
                lines.append(f"- **Docs:** {p.links['docs']}")
            if p.media.get("video"):
                lines.append(f"- **Video:** {p.media['video']}")
            if p.media.get("website"):
                lines.append(f"- **Website:** {p.media['website']}")
            if p.models:
                lines.append(f"- **3D Models:** {len(p.models)} file(s)")
            if p.images:
                lines.append(f"- **Images:** {len(p.images)} file(s)")
            if p.description and p.description != p.short_description:
                lines.append(f"\n{p.description}")
            lines.append("")

    return "\n".join(lines)


_RENDERERS = {
    "json": to_json,
    "yaml": to_yaml,
    "markdown": to_markdown,
}


def format_entries(entries: Iterable[PortfolioEntry], fmt: OutputFormat = "json") -> str:
    """Render enabled entries, sorted, in the requested format."""
    if fmt not in _RENDERERS:
        raise ValueError(f"Unknown format {fmt!r}. Use: {', '.join(OUTPUT_FORMATS)}")
    return _RENDERERS[fmt](prepare_entries(entries))


def resolve_output_path(path: str | Path, fmt: OutputFormat) -> Path:
    """Give the output path the extension that matches ``fmt``."""
    path = Path(path)
    expected = FORMAT_EXTENSIONS[fmt]
    if path.suffix == expected:
        return path
    return path.with_suffix(expected)
