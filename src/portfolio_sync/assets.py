"""Asset locator: 3D models, screenshots and a representative thumbnail."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

MODEL_EXTENSIONS = frozenset({".stl", ".gltf", ".glb", ".obj", ".fbx", ".3mf"})
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg"})

REMOTE_IMAGE_DIRS = frozenset({"docs", "assets", "images", "screenshots", "media"})
LOCAL_IMAGE_DIRS = REMOTE_IMAGE_DIRS | {"public"}

SKIP_DIRS = frozenset({
    "node_modules", ".git", "dist", "build", "__pycache__",
    ".next", ".cache", "vendor", ".venv", "venv",
    ".tox", ".mypy_cache", ".pytest_cache", ".ruff_cache",
})

THUMBNAIL_PATTERNS = tuple(
    re.compile(rf"^{prefix}", re.IGNORECASE)
    for prefix in ("thumb", "cover", "hero", "banner", "preview")
)


@dataclass
class AssetResult:
    models: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    thumbnail: str | None = None


def walk_files(root: str | Path) -> Iterator[str]:
    """Yield repo-relative POSIX paths under root, skipping infrastructure dirs.

    Directories are pruned before recursion; traversal order is sorted so the
    listing is stable across runs. Unreadable directories yield nothing.
    """
    root = Path(root)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        rel_dir = Path(dirpath).relative_to(root)
        for fname in sorted(filenames):
            yield (rel_dir / fname).as_posix()


def _in_image_dir(path: str, image_dirs: frozenset[str]) -> bool:
    parts = PurePosixPath(path).parts
    return len(parts) > 1 and parts[0].lower() in image_dirs


def pick_thumbnail(images: list[str]) -> str | None:
    """First image matching a thumbnail pattern, by pattern priority; else the first image."""
    if not images:
        return None
    for pattern in THUMBNAIL_PATTERNS:
        for image in images:
            if pattern.match(PurePosixPath(image).name):
                return image
    return images[0]


def locate_assets(
    paths: Iterable[str],
    image_dirs: frozenset[str] = REMOTE_IMAGE_DIRS,
) -> AssetResult:
    """Classify a flat file listing into models and images.

    Models count anywhere in the tree. Images only count below one of
    ``image_dirs`` at the top level of the repository.
    """
    models: list[str] = []
    images: list[str] = []
    for path in paths:
        ext = PurePosixPath(path).suffix.lower()
        if ext in MODEL_EXTENSIONS:
            models.append(path)
        elif ext in IMAGE_EXTENSIONS and _in_image_dir(path, image_dirs):
            images.append(path)
    return AssetResult(models=models, images=images, thumbnail=pick_thumbnail(images))
