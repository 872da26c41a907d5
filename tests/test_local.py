"""Tests for the local directory descriptor source."""

import asyncio
import json

import pytest

from portfolio_sync.local import LocalSource, normalize_remote_url


@pytest.mark.parametrize("remote, expected", [
    ("git@github.com:octocat/robot-arm.git", "https://github.com/octocat/robot-arm"),
    ("https://github.com/octocat/robot-arm.git", "https://github.com/octocat/robot-arm"),
    ("https://token@github.com/octocat/robot-arm", "https://github.com/octocat/robot-arm"),
    ("http://github.com/octocat/robot-arm/", "https://github.com/octocat/robot-arm"),
    ("", ""),
    (None, ""),
])
def test_normalize_remote_url(remote, expected):
    assert normalize_remote_url(remote) == expected


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "robot-arm"
    root.mkdir()
    (root / "README.md").write_text("# Robot Arm\n\nAn arm.\n")
    (root / "package.json").write_text(json.dumps({"homepage": "https://arm.dev"}))
    (root / "public").mkdir()
    (root / "public" / "hero.png").write_bytes(b"png")
    (root / "node_modules").mkdir()
    (root / "node_modules" / "x.js").write_text("")
    return root


class TestLocalSource:
    def test_not_a_directory(self, tmp_path):
        with pytest.raises(ValueError, match="Not a directory"):
            LocalSource(tmp_path / "missing")

    def test_describe_without_git(self, project, monkeypatch):
        monkeypatch.setattr("portfolio_sync.local._git", lambda root, *args: None)
        repo = LocalSource(project).describe()
        assert repo.name == "robot-arm"
        assert repo.full_name == "robot-arm"
        assert repo.url == ""
        assert repo.homepage == "https://arm.dev"
        assert repo.pushed_at == ""

    def test_describe_with_remote(self, project, monkeypatch):
        answers = {
            "remote": "git@github.com:octocat/robot-arm.git",
            "log": "2026-09-01T10:00:00+02:00",
        }
        monkeypatch.setattr("portfolio_sync.local._git", lambda root, *args: answers.get(args[0]))
        repo = LocalSource(project).describe()
        assert repo.url == "https://github.com/octocat/robot-arm"
        assert repo.full_name == "octocat/robot-arm"
        assert repo.pushed_at == "2026-09-01T10:00:00+02:00"

    def test_release_date_from_newest_tag(self, project, monkeypatch):
        tags = "2026-05-01T00:00:00+00:00\n2025-01-01T00:00:00+00:00"
        monkeypatch.setattr("portfolio_sync.local._git", lambda root, *args: tags)
        assert asyncio.run(LocalSource(project).get_release_date("robot-arm")) == "2026-05-01T00:00:00+00:00"

    def test_files(self, project):
        source = LocalSource(project)
        tree = asyncio.run(source.get_file_tree("robot-arm", "main"))
        assert tree == ["README.md", "package.json", "public/hero.png"]
        assert asyncio.run(source.get_file_content("robot-arm", "README.md")).startswith("# Robot Arm")
        assert asyncio.run(source.get_file_content("robot-arm", "nope.txt")) is None

    def test_display_name(self, project):
        assert LocalSource(project).display_name == "Robot Arm"
