"""Shared helper utilities for analyzer implementations."""

from __future__ import annotations

import json
from typing import Dict, Iterable, List, Sequence, Tuple

# Node.js dependency helpers


def parse_package_json(text: str | None) -> Dict[str, object]:
    """Return the parsed package.json contents or an empty dict."""
    if not text:
        return {}
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def load_node_dependencies(text: str | None) -> Dict[str, List[str]]:
    """Return Node.js dependency names separated into runtime/dev lists."""
    data = parse_package_json(text)

    def _extract(key: str) -> List[str]:
        deps = data.get(key, {})
        if isinstance(deps, dict):
            return list(deps.keys())
        return []

    return {
        "dependencies": _extract("dependencies"),
        "devDependencies": _extract("devDependencies"),
    }


def all_node_dependencies(text: str | None) -> List[str]:
    """Return the lower-cased union of runtime and dev dependency names."""
    deps = load_node_dependencies(text)
    return [name.lower() for name in deps["dependencies"] + deps["devDependencies"]]


# Path heuristics


def has_test_files(files: Iterable[str]) -> bool:
    """Substring match, so ``latest.txt`` counts as a test file."""
    return any("test" in path or "spec" in path or "__tests__" in path for path in files)


_CI_MARKERS: Tuple[str, ...] = (".github/workflows", ".travis.yml", ".circleci")


def has_ci_config(files: Iterable[str]) -> bool:
    return any(marker in path for path in files for marker in _CI_MARKERS)


def detect_gitignore_stack(files: Sequence[str]) -> Tuple[str, str]:
    """Infer ``(framework, package_manager)`` for .gitignore generation."""
    paths = set(files)
    if "package.json" in paths:
        if any("next.config" in path for path in files):
            return "Next.js", "npm"
        if "vite.config.ts" in paths or "vite.config.js" in paths:
            return "Vite", "npm"
        if any("angular.json" in path for path in files):
            return "Angular", "npm"
        if "vue.config.js" in paths:
            return "Vue", "npm"
        return "Node.js", "npm"
    if "requirements.txt" in paths or "setup.py" in paths:
        return "Python", "pip"
    if "Cargo.toml" in paths:
        return "Rust", "cargo"
    if "go.mod" in paths:
        return "Go", "go mod"
    return "unknown", "unknown"


__all__ = [
    "all_node_dependencies",
    "detect_gitignore_stack",
    "has_ci_config",
    "has_test_files",
    "load_node_dependencies",
    "parse_package_json",
]
