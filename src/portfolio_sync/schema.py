"""Schema for the per-repository .portfolio.json override document.

Validation collects every violation, not just the first, as
``field.path: message`` strings.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Literal
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictBool, ValidationError
from pydantic.alias_generators import to_camel

from .exceptions import ConfigExistsError, ConfigNotFoundError, InvalidConfigError

CONFIG_FILENAME = ".portfolio.json"

DATE_COMPLETED_RE = re.compile(r"^\d{4}-\d{2}$")

Status = Literal["Completed", "In Progress", "Archived"]
GameType = Literal["unity-webgl", "itch"]


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc or " " in value:
        raise ValueError("Invalid url")
    return value


def _check_year_month(value: str) -> str:
    if not DATE_COMPLETED_RE.match(value):
        raise ValueError("Must be YYYY-MM format")
    return value


Url = Annotated[str, AfterValidator(_check_url)]
YearMonth = Annotated[str, AfterValidator(_check_year_month)]


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Game(_Document):
    type: GameType
    url: Url


class Media(_Document):
    video: Url | None = None
    website: Url | None = None
    pdf: str | None = None
    game: Game | None = None


class Links(_Document):
    live_demo: Url | None = None
    docs: Url | None = None


class PortfolioConfig(_Document):
    """Manual override for one repository. Unset fields defer to auto-detection."""

    name: str = Field(min_length=1)
    short_description: str | None = None
    description: str | None = None
    category: str | None = None
    technologies: list[str] | None = None
    status: Status | None = None
    date_completed: YearMonth | None = None
    models: list[str] | None = None
    images: list[str] | None = None
    thumbnail: str | None = None
    media: Media | None = None
    links: Links | None = None
    featured: StrictBool | None = None
    exclude: StrictBool | None = None

    def to_document(self) -> dict[str, Any]:
        """Serialize with camelCase keys, leaving out unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class ValidationResult:
    """Outcome of validating an override document."""

    config: PortfolioConfig | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.config is not None


def _format_error(error: dict[str, Any]) -> str:
    path = ".".join(str(part) for part in error["loc"])
    message = error["msg"]
    ctx = error.get("ctx") or {}
    if error["type"] == "value_error" and "error" in ctx:
        message = str(ctx["error"])
    elif error["type"] == "missing":
        message = "Required"
    return f"{path}: {message}" if path else message


def validate_config(document: Any) -> ValidationResult:
    """Validate a parsed override document.

    Unknown fields are ignored. On failure every violation is reported.
    """
    try:
        config = PortfolioConfig.model_validate(document)
    except ValidationError as e:
        return ValidationResult(errors=[_format_error(err) for err in e.errors()])
    return ValidationResult(config=config)


def config_path(directory: str | Path) -> Path:
    return Path(directory) / CONFIG_FILENAME


def read_config(directory: str | Path) -> PortfolioConfig:
    """Read and validate the .portfolio.json in a directory."""
    path = config_path(directory)
    if not path.is_file():
        raise ConfigNotFoundError(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidConfigError(path, [str(e)]) from e

    result = validate_config(document)
    if not result.success:
        raise InvalidConfigError(path, result.errors)
    return result.config


def write_config(config: PortfolioConfig, directory: str | Path, overwrite: bool = True) -> Path:
    """Write .portfolio.json pretty-printed with a trailing newline."""
    path = config_path(directory)
    if not overwrite and path.exists():
        raise ConfigExistsError(path)
    path.write_text(
        json.dumps(config.to_document(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return path
