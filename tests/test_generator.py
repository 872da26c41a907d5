"""Tests for the per-repository pipeline and the generate run."""

import asyncio
import json
from datetime import datetime, timezone

import pytest

from portfolio_sync.generator import (
    GenerateStats,
    collect_detections,
    generate,
    process_repo,
)

NOW = datetime(2026, 10, 17, tzinfo=timezone.utc)

README = """# Robot Arm

[![CI](https://img.shields.io/badge/ci-passing-green)](https://ci)

A six-axis robotic arm. Controlled from a Raspberry Pi.

## Usage
Run it.
"""


@pytest.fixture
def arm_files():
    return {
        "README.md": README,
        "requirements.txt": "numpy\npyserial\n",
        "cad/arm.stl": "solid",
        "docs/arm.png": "png",
        "src/main.py": "print()",
    }


def _run(coro):
    return asyncio.run(coro)


class TestCollectDetections:
    def test_runs_all_detectors(self, fake_source_cls, repo_factory, arm_files):
        repo = repo_factory("robot-arm", topics=("robotics",), language="Python")
        source = fake_source_cls([repo], {"robot-arm": arm_files}, {"robot-arm": "2026-03-02T00:00:00Z"})

        scan = _run(collect_detections(source, repo, NOW))

        assert scan.override_text is None
        assert scan.detections.readme.short_description == "A six-axis robotic arm."
        assert scan.detections.tech.technologies == ["Python", "NumPy"]
        assert scan.detections.tech.category == "Robotics"
        assert scan.detections.assets.models == ["cad/arm.stl"]
        assert scan.detections.assets.images == ["docs/arm.png"]
        assert scan.detections.meta.date_completed == "2026-03"

    def test_only_present_manifests_fetched(self, fake_source_cls, repo_factory, arm_files):
        repo = repo_factory("robot-arm")
        source = fake_source_cls([repo], {"robot-arm": arm_files})
        _run(collect_detections(source, repo, NOW))
        paths = {path for _, path in source.requested}
        assert "requirements.txt" in paths
        assert "package.json" not in paths

    def test_empty_tree_probes_defaults(self, fake_source_cls, repo_factory):
        repo = repo_factory("empty")
        source = fake_source_cls([repo])
        scan = _run(collect_detections(source, repo, NOW))
        paths = {path for _, path in source.requested}
        assert {"README.md", "package.json", "go.mod"} <= paths
        assert scan.detections.readme.description is None
        assert scan.detections.tech.category == "Software"


class TestProcessRepo:
    def test_override_applied(self, fake_source_cls, repo_factory, arm_files):
        repo = repo_factory("robot-arm", topics=("robotics",), language="Python")
        files = dict(arm_files)
        files[".portfolio.json"] = json.dumps({"name": "Robot Arm", "featured": True, "models": ["cad/arm.stl"]})
        source = fake_source_cls([repo], {"robot-arm": files})

        entry, has_config = _run(process_repo(source, repo, NOW))

        assert has_config
        assert entry.category == "Robotics"
        assert "Python" in entry.technologies
        assert entry.featured is True
        assert entry.models == ["cad/arm.stl"]

    @pytest.mark.parametrize("language, tree, expected", [
        ("Python", ["main.py", "tools/Helper.cs"], "Python"),
        ("TypeScript", ["src/index.ts", "scripts/deploy.py"], "Software"),
    ])
    def test_category_follows_primary_language(self, fake_source_cls, repo_factory, language, tree, expected):
        repo = repo_factory("tool", language=language)
        source = fake_source_cls([repo], {"tool": {path: "" for path in tree}})

        entry, _ = _run(process_repo(source, repo, NOW))

        assert entry.category == expected

    def test_invalid_override_ignored(self, fake_source_cls, repo_factory, arm_files):
        repo = repo_factory("robot-arm")
        files = dict(arm_files)
        files[".portfolio.json"] = '{"name": "Arm", "dateCompleted": "2024/03"}'
        source = fake_source_cls([repo], {"robot-arm": files})

        entry, has_config = _run(process_repo(source, repo, NOW))

        assert not has_config
        assert entry.name == "Robot Arm"
        assert entry.date_completed == "2026-09"


class TestGenerate:
    def test_sorted_and_counted(self, fake_source_cls, repo_factory):
        repos = [
            repo_factory("old-tool", pushed_at="2025-12-01T00:00:00Z"),
            repo_factory("new-tool", pushed_at="2026-08-01T00:00:00Z"),
            repo_factory("star", pushed_at="2024-01-01T00:00:00Z"),
        ]
        files = {"star": {".portfolio.json": '{"name": "Star", "featured": true}'}}
        source = fake_source_cls(repos, files)
        stats = GenerateStats()

        entries = _run(generate(source, stats=stats, now=NOW))

        assert [e.name for e in entries] == ["Star", "New Tool", "Old Tool"]
        assert stats.found == 3
        assert stats.processed == 3
        assert stats.with_config == 1
        assert stats.auto_detected == 2

    def test_failure_skips_repo(self, fake_source_cls, repo_factory):
        repos = [repo_factory("good"), repo_factory("bad")]
        source = fake_source_cls(repos, broken={"bad"})
        stats = GenerateStats()

        entries = _run(generate(source, stats=stats, now=NOW))

        assert [e.name for e in entries] == ["Good"]
        assert stats.processed == 1
        assert stats.errors == ["bad: boom"]

    def test_exclude_and_dot_repos(self, fake_source_cls, repo_factory):
        repos = [repo_factory("keep"), repo_factory("skip-me"), repo_factory(".github")]
        source = fake_source_cls(repos)

        entries = _run(generate(source, exclude=["skip-me"], now=NOW))

        assert [e.name for e in entries] == ["Keep"]

    def test_override_exclude_kept_disabled(self, fake_source_cls, repo_factory):
        files = {"hidden": {".portfolio.json": '{"name": "Hidden", "exclude": true}'}}
        source = fake_source_cls([repo_factory("hidden")], files)

        entries = _run(generate(source, now=NOW))

        assert len(entries) == 1
        assert not entries[0].enabled

    def test_progress_callback(self, fake_source_cls, repo_factory):
        source = fake_source_cls([repo_factory("a"), repo_factory("b")])
        calls = []
        _run(generate(source, progress_callback=lambda *args: calls.append(args), now=NOW))
        assert calls == [("a", 1, 2), ("b", 2, 2)]
