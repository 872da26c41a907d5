"""Tests for the asset locator."""

import pytest

from portfolio_sync.assets import (
    LOCAL_IMAGE_DIRS,
    locate_assets,
    pick_thumbnail,
    walk_files,
)


class TestLocateAssets:
    def test_images_only_in_asset_dirs(self):
        result = locate_assets(["docs/photo.png", "src/icon.png", "cad/arm.stl"])
        assert result.images == ["docs/photo.png"]
        assert result.models == ["cad/arm.stl"]
        assert result.thumbnail == "docs/photo.png"

    def test_extensions_case_insensitive(self):
        result = locate_assets(["Models/Part.STL", "assets/Shot.JPG"])
        assert result.models == ["Models/Part.STL"]
        assert result.images == ["assets/Shot.JPG"]

    def test_nested_under_asset_dir(self):
        result = locate_assets(["media/2024/deep/pic.webp"])
        assert result.images == ["media/2024/deep/pic.webp"]

    def test_asset_dir_must_be_top_level(self):
        result = locate_assets(["src/docs/pic.png", "docs.png"])
        assert result.images == []
        assert result.thumbnail is None

    def test_public_only_locally(self):
        paths = ["public/hero.png"]
        assert locate_assets(paths).images == []
        assert locate_assets(paths, LOCAL_IMAGE_DIRS).images == ["public/hero.png"]

    def test_empty(self):
        result = locate_assets([])
        assert result.models == []
        assert result.images == []
        assert result.thumbnail is None


class TestPickThumbnail:
    def test_pattern_priority(self):
        images = ["docs/banner.png", "docs/Cover.jpg", "docs/a.png"]
        assert pick_thumbnail(images) == "docs/Cover.jpg"

    def test_matches_basename_only(self):
        images = ["docs/thumbs/a.png", "docs/preview-1.png"]
        assert pick_thumbnail(images) == "docs/preview-1.png"

    def test_falls_back_to_first(self):
        assert pick_thumbnail(["docs/z.png", "docs/a.png"]) == "docs/z.png"

    def test_none_for_no_images(self):
        assert pick_thumbnail([]) is None


@pytest.fixture
def project_tree(tmp_path):
    (tmp_path / "README.md").write_text("# Demo\n")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "shot.png").write_bytes(b"png")
    (tmp_path / "cad").mkdir()
    (tmp_path / "cad" / "arm.stl").write_bytes(b"solid")
    for skipped in ("node_modules", ".git", "build", ".venv"):
        (tmp_path / skipped).mkdir()
        (tmp_path / skipped / "junk.stl").write_bytes(b"x")
    return tmp_path


class TestWalkFiles:
    def test_prunes_infrastructure_dirs(self, project_tree):
        files = list(walk_files(project_tree))
        assert files == ["README.md", "cad/arm.stl", "docs/shot.png"]

    def test_missing_root(self, tmp_path):
        assert list(walk_files(tmp_path / "nope")) == []

    def test_feeds_locator(self, project_tree):
        result = locate_assets(walk_files(project_tree), LOCAL_IMAGE_DIRS)
        assert result.models == ["cad/arm.stl"]
        assert result.images == ["docs/shot.png"]
