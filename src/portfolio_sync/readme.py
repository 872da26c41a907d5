"""README extractor. Turns README prose into a description and a one-sentence summary."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

README_NAMES = ("README.md", "README", "README.rst", "readme.md", "Readme.md")
SECTION_HEADINGS = ("description", "about", "overview")
MAX_PARAGRAPH_LINES = 3
SHORT_DESCRIPTION_MAX = 120

HEADING_RE = re.compile(r"^#+\s*")
SENTENCE_RE = re.compile(r"^[^.!?]+[.!?]")


@dataclass
class ReadmeResult:
    description: str | None = None
    short_description: str | None = None


def find_readme(paths: Iterable[str]) -> str | None:
    """Pick the root-level README from a file listing."""
    root_files = [p for p in paths if "/" not in p]
    for name in README_NAMES:
        if name in root_files:
            return name
    for name in root_files:
        if name.lower() in ("readme.md", "readme"):
            return name
    return None


def _is_heading(line: str) -> bool:
    return line.startswith("#")


def _is_badge(line: str) -> bool:
    return line.startswith("[![") or (line.startswith("![") and "badge" in line)


def _is_markup(line: str) -> bool:
    return line.startswith("<") and not line.startswith("<a")


def _is_skippable(line: str) -> bool:
    stripped = line.strip()
    return (
        not stripped
        or _is_heading(stripped)
        or _is_badge(stripped)
        or _is_markup(stripped)
    )


def extract_section(content: str, headings: Iterable[str] = SECTION_HEADINGS) -> str | None:
    """Return the text under the first heading named in ``headings``."""
    wanted = set(headings)
    captured: list[str] = []
    capturing = False

    for line in content.splitlines():
        stripped = line.strip()
        if _is_heading(stripped):
            if HEADING_RE.sub("", stripped).strip().lower() in wanted and not capturing:
                capturing = True
                continue
            if capturing:
                break
        if capturing and stripped:
            captured.append(stripped)

    return " ".join(captured) if captured else None


def extract_first_paragraph(content: str) -> str | None:
    """Return the first prose paragraph after the title.

    Badges, images-as-badges and raw markup are skipped. The paragraph ends at
    the first skippable line once content has started, or after three lines.
    """
    paragraph: list[str] = []
    past_title = False

    for line in content.splitlines():
        if not past_title:
            if _is_heading(line.strip()):
                past_title = True
                continue
            if _is_skippable(line):
                continue
            past_title = True

        if _is_skippable(line):
            if paragraph:
                break
            continue

        paragraph.append(line.strip())
        if len(paragraph) >= MAX_PARAGRAPH_LINES:
            break

    return " ".join(paragraph) if paragraph else None


def first_sentence(text: str, max_len: int = SHORT_DESCRIPTION_MAX) -> str:
    match = SENTENCE_RE.match(text)
    sentence = match.group(0).strip() if match else text.strip()
    if len(sentence) > max_len:
        return sentence[: max_len - 3] + "..."
    return sentence


def parse_readme(content: str | None) -> ReadmeResult:
    """Extract description and short description from README text.

    A Description/About/Overview section wins over the first paragraph.
    Returns an empty result for a missing or content-free README.
    """
    if not content:
        return ReadmeResult()

    description = extract_section(content) or extract_first_paragraph(content)
    if not description:
        return ReadmeResult()

    return ReadmeResult(
        description=description,
        short_description=first_sentence(description),
    )
