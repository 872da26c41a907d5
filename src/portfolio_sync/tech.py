"""Technology and category classifier.

Reads package manifests, a file-extension census and GitHub topics, and
resolves one category label through an ordered first-match rule list.
"""

from __future__ import annotations

import json
import re
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath

MANIFEST_FILES = (
    "package.json",
    "Cargo.toml",
    "requirements.txt",
    "pyproject.toml",
    "go.mod",
)

# package.json dependency -> technology
PACKAGE_MAP: Mapping[str, str] = {
    "react": "React", "react-dom": "React", "next": "Next.js",
    "vue": "Vue", "nuxt": "Nuxt", "angular": "Angular", "@angular/core": "Angular",
    "svelte": "Svelte", "three": "Three.js",
    "@react-three/fiber": "React Three Fiber",
    "@react-three/drei": "React Three Fiber",
    "express": "Express", "fastify": "Fastify", "koa": "Koa",
    "tailwindcss": "Tailwind CSS", "@prisma/client": "Prisma",
    "prisma": "Prisma", "mongoose": "MongoDB", "socket.io": "Socket.io",
    "electron": "Electron", "react-native": "React Native",
    "tensorflow": "TensorFlow", "pytorch": "PyTorch",
    "vite": "Vite", "webpack": "Webpack", "esbuild": "esbuild",
    "typescript": "TypeScript", "zod": "Zod",
}

# requirement / pyproject name -> technology
PYTHON_PACKAGE_MAP: Mapping[str, str] = {
    "tensorflow": "TensorFlow", "torch": "PyTorch", "pytorch": "PyTorch",
    "flask": "Flask", "django": "Django", "fastapi": "FastAPI",
    "scikit-learn": "scikit-learn", "pandas": "Pandas",
    "numpy": "NumPy", "opencv": "OpenCV", "keras": "Keras",
}

# Cargo.toml substring -> technology
CARGO_MARKERS: Mapping[str, str] = {
    "bevy": "Bevy",
    "tokio": "Tokio",
    "actix": "Actix",
    "wasm": "WebAssembly",
}

# GitHub topic -> technology
TOPIC_MAP: Mapping[str, str] = {
    "react": "React", "nextjs": "Next.js", "vue": "Vue", "angular": "Angular",
    "svelte": "Svelte", "typescript": "TypeScript", "python": "Python",
    "rust": "Rust", "go": "Go", "machine-learning": "Machine Learning",
    "three-js": "Three.js", "threejs": "Three.js", "tailwindcss": "Tailwind CSS",
    "docker": "Docker", "kubernetes": "Kubernetes", "graphql": "GraphQL",
    "tensorflow": "TensorFlow", "pytorch": "PyTorch",
}

# Extension -> Language mapping
EXT_LANG: Mapping[str, str] = {
    ".ts": "TypeScript", ".tsx": "TypeScript",
    ".js": "JavaScript", ".jsx": "JavaScript",
    ".py": "Python",
    ".rs": "Rust",
    ".go": "Go",
    ".cs": "C#",
    ".cpp": "C++", ".c": "C",
    ".java": "Java", ".kt": "Kotlin",
    ".swift": "Swift",
    ".rb": "Ruby",
    ".php": "PHP",
    ".lua": "Lua",
    ".ino": "Arduino",
    ".dart": "Dart",
}

REQUIREMENT_NAME_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


@dataclass
class TechResult:
    technologies: list[str] = field(default_factory=list)
    category: str = "Software"
    languages: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Signals:
    """Everything the category rules look at."""

    topics: frozenset[str] = frozenset()
    technologies: frozenset[str] = frozenset()
    languages: frozenset[str] = frozenset()


@dataclass(frozen=True)
class CategoryRule:
    label: str
    predicate: Callable[[Signals], bool]


def _topic(*names: str) -> Callable[[Signals], bool]:
    wanted = frozenset(names)
    return lambda s: bool(s.topics & wanted)


def _tech(*names: str) -> Callable[[Signals], bool]:
    wanted = frozenset(names)
    return lambda s: bool(s.technologies & wanted)


def _lang(*names: str) -> Callable[[Signals], bool]:
    wanted = frozenset(names)
    return lambda s: bool(s.languages & wanted)


def _any(*predicates: Callable[[Signals], bool]) -> Callable[[Signals], bool]:
    return lambda s: any(p(s) for p in predicates)


# Evaluated top to bottom, first match wins. 3D precedes web frameworks, so a
# repo with both React and Three.js is "Web 3D".
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("Game Development", _any(
        _topic("game", "gamedev", "unity", "unreal"), _tech("Bevy"))),
    CategoryRule("Machine Learning", _any(
        _topic("machine-learning", "deep-learning", "ai"),
        _tech("TensorFlow", "PyTorch", "scikit-learn", "Keras"))),
    CategoryRule("Robotics", _any(
        _topic("robotics", "arduino", "embedded"), _lang("Arduino"))),
    CategoryRule("Web 3D", _any(
        _topic("three-js", "threejs", "webgl", "3d"),
        _tech("Three.js", "React Three Fiber"))),
    CategoryRule("Web App", _any(
        _topic("react", "vue", "angular", "nextjs", "webapp"),
        _tech("React", "Vue", "Angular", "Svelte", "Next.js", "Nuxt"))),
    CategoryRule("Backend/API", _any(
        _topic("api", "backend", "server"),
        _tech("Express", "Fastify", "Koa", "Flask", "Django", "FastAPI"))),
    CategoryRule("Mobile App", _any(
        _topic("mobile", "react-native", "flutter"), _tech("React Native"))),
    CategoryRule("Desktop App", _tech("Electron")),
    CategoryRule("CLI Tool", _topic("cli", "tool")),
    # Language fallbacks
    CategoryRule("Game Development", _lang("C#")),
    CategoryRule("Systems Programming", _lang("Rust")),
    CategoryRule("Backend/API", _lang("Go")),
    CategoryRule("Python", _lang("Python")),
    CategoryRule("Systems Programming", _lang("C++", "C")),
    CategoryRule("Mobile App", _lang("Swift", "Kotlin", "Dart")),
)

DEFAULT_CATEGORY = "Software"


def infer_category(signals: Signals, rules: Iterable[CategoryRule] = CATEGORY_RULES) -> str:
    for rule in rules:
        if rule.predicate(signals):
            return rule.label
    return DEFAULT_CATEGORY


class _OrderedSet:
    """Insertion-ordered collection that ignores repeats."""

    def __init__(self):
        self._items: dict[str, None] = {}

    def add(self, item: str) -> None:
        self._items.setdefault(item, None)

    def discard(self, item: str) -> None:
        self._items.pop(item, None)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def to_list(self) -> list[str]:
        return list(self._items)


def _detect_node(content: str, tech: _OrderedSet, langs: _OrderedSet) -> None:
    """Detect technologies from package.json dependency keys."""
    try:
        pkg = json.loads(content)
    except (json.JSONDecodeError, ValueError):
        return
    if not isinstance(pkg, dict):
        return

    langs.add("JavaScript")
    for dep_key in ("dependencies", "devDependencies"):
        deps = pkg.get(dep_key)
        if not isinstance(deps, dict):
            continue
        for dep in deps:
            if dep in PACKAGE_MAP:
                tech.add(PACKAGE_MAP[dep])


def _detect_rust(content: str, tech: _OrderedSet, langs: _OrderedSet) -> None:
    langs.add("Rust")
    for marker, name in CARGO_MARKERS.items():
        if marker in content:
            tech.add(name)


def _detect_requirements(content: str, tech: _OrderedSet, langs: _OrderedSet) -> None:
    langs.add("Python")
    for line in content.splitlines():
        match = REQUIREMENT_NAME_RE.match(line)
        if not match:
            continue
        name = match.group(1).lower()
        if name in PYTHON_PACKAGE_MAP:
            tech.add(PYTHON_PACKAGE_MAP[name])


def _detect_pyproject(content: str, tech: _OrderedSet, langs: _OrderedSet) -> None:
    langs.add("Python")
    for key, name in PYTHON_PACKAGE_MAP.items():
        if key in content:
            tech.add(name)


def _detect_go(content: str, tech: _OrderedSet, langs: _OrderedSet) -> None:
    langs.add("Go")


MANIFEST_DETECTORS: Mapping[str, Callable[[str, _OrderedSet, _OrderedSet], None]] = {
    "package.json": _detect_node,
    "Cargo.toml": _detect_rust,
    "requirements.txt": _detect_requirements,
    "pyproject.toml": _detect_pyproject,
    "go.mod": _detect_go,
}


def extension_census(paths: Iterable[str]) -> Counter:
    """Count files per known source extension."""
    counts: Counter = Counter()
    for path in paths:
        ext = PurePosixPath(path).suffix.lower()
        if ext in EXT_LANG:
            counts[ext] += 1
    return counts


def detect_tech_stack(
    manifests: Mapping[str, str | None],
    paths: Iterable[str] = (),
    topics: Iterable[str] = (),
    language: str | None = None,
) -> TechResult:
    """Detect technologies, languages and category for one repository.

    Args:
        manifests: Manifest filename -> content. Missing or unreadable ones are None.
        paths: Flat file listing used for the extension census when
            ``language`` is unknown.
        topics: GitHub topic tags.
        language: Primary language reported by the hosting service, if any.
    """
    tech = _OrderedSet()
    langs = _OrderedSet()
    topics = list(topics)

    if language:
        tech.add(language)
        langs.add(language)

    for manifest, detector in MANIFEST_DETECTORS.items():
        content = manifests.get(manifest)
        if content:
            detector(content, tech, langs)

    # The census only stands in for a missing primary language.
    if not language:
        for ext in extension_census(paths):
            langs.add(EXT_LANG[ext])

    # TypeScript supersedes JavaScript
    if "TypeScript" in langs and "JavaScript" in langs:
        langs.discard("JavaScript")

    for topic in topics:
        if topic in TOPIC_MAP:
            tech.add(TOPIC_MAP[topic])

    technologies = tech.to_list()
    languages = langs.to_list()
    # Language fallbacks consult the primary language alone when there is one.
    category = infer_category(Signals(
        topics=frozenset(topics),
        technologies=frozenset(technologies),
        languages=frozenset([language] if language else languages),
    ))
    return TechResult(technologies=technologies, category=category, languages=languages)
