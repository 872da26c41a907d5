"""Status, completion date and link detection from repository timestamps."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .models import RepoInfo

STATUS_COMPLETED = "Completed"
STATUS_ARCHIVED = "Archived"


@dataclass
class MetadataResult:
    status: str = STATUS_COMPLETED
    date_completed: str | None = None
    links: dict[str, str] = field(default_factory=dict)


def clean_repo_name(name: str) -> str:
    """``my-cool_repo`` -> ``My Cool Repo``."""
    spaced = re.sub(r"[-_]", " ", name)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_year_month(value: str | None) -> str | None:
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"


def _one_year_before(now: datetime) -> datetime:
    try:
        return now.replace(year=now.year - 1)
    except ValueError:  # Feb 29
        return now.replace(year=now.year - 1, day=28)


def infer_status(archived: bool, pushed_at: str | None, now: datetime | None = None) -> str:
    """Archived when flagged so or untouched for over a year, else Completed."""
    if archived:
        return STATUS_ARCHIVED
    pushed = parse_timestamp(pushed_at)
    if pushed is None:
        return STATUS_COMPLETED
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return STATUS_ARCHIVED if pushed < _one_year_before(now) else STATUS_COMPLETED


def detect_metadata(
    repo: RepoInfo,
    release_date: str | None = None,
    now: datetime | None = None,
) -> MetadataResult:
    """Status from push recency, completion date from the latest release or push."""
    links = {"liveDemo": repo.homepage} if repo.homepage else {}
    return MetadataResult(
        status=infer_status(repo.archived, repo.pushed_at, now),
        date_completed=to_year_month(release_date) or to_year_month(repo.pushed_at),
        links=links,
    )
