"""Project type classification and entry point lookup."""

from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from .utils import all_node_dependencies

PROJECT_TYPES: Tuple[str, ...] = (
    "nextjs",
    "react",
    "vue",
    "express",
    "django",
    "flask",
    "fastapi",
    "cli",
    "library",
    "reactNative",
    "go",
    "rust",
    "python",
    "unknown",
)

ENTRY_POINT_PATTERNS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "nextjs": (
            "src/app/page.tsx",
            "src/app/page.js",
            "src/pages/index.tsx",
            "src/pages/index.js",
            "pages/index.tsx",
            "pages/index.js",
            "app/page.tsx",
        ),
        "react": (
            "src/App.tsx",
            "src/App.jsx",
            "src/index.tsx",
            "src/index.jsx",
            "src/main.tsx",
            "src/main.jsx",
        ),
        "vue": ("src/App.vue", "src/main.ts", "src/main.js"),
        "express": (
            "src/server.ts",
            "src/app.ts",
            "server.js",
            "app.js",
            "src/index.ts",
            "index.js",
        ),
        "django": ("manage.py", "settings.py", "urls.py", "wsgi.py"),
        "flask": ("app.py", "main.py", "application.py", "wsgi.py"),
        "fastapi": ("main.py", "app/main.py", "src/main.py"),
        "cli": ("src/cli.ts", "src/index.ts", "bin/cli.js", "cli.js"),
        "library": ("src/index.ts", "lib/index.js", "index.ts", "src/lib.rs"),
        "reactNative": ("App.tsx", "App.js", "index.js", "app/index.tsx"),
        "go": ("main.go", "cmd/main.go", "cmd/server/main.go"),
        "rust": ("src/main.rs", "src/lib.rs"),
        "python": ("__main__.py", "main.py", "setup.py", "app.py"),
    }
)

_NEXT_CONFIG_FILES = frozenset({"next.config.js", "next.config.ts", "next.config.mjs"})
_LIBRARY_INDEX_FILES = frozenset({"src/index.ts", "src/index.js", "lib/index.js", "index.ts"})
_APPLICATION_MARKERS: Tuple[str, ...] = ("app.", "server.", "main.")
_PYTHON_FRAMEWORKS: Tuple[str, ...] = ("fastapi", "flask", "django")


def detect_project_type(
    files: Sequence[str],
    package_json_text: Optional[str] = None,
    language: Optional[str] = None,
) -> str:
    """Classify the repository's primary framework or ecosystem.

    Unparseable ``package_json_text`` counts as having no dependencies. The
    same text is searched for Python framework names when the repository
    looks like a Python project, so those types are only reported when the
    caller passes requirements-like text in this argument.
    """
    deps = set(all_node_dependencies(package_json_text))
    paths = set(files)
    lang = language.lower() if language else None

    if "next" in deps or paths & _NEXT_CONFIG_FILES:
        return "nextjs"
    if "react-native" in deps:
        return "reactNative"
    if "react" in deps or "react-dom" in deps:
        return "react"
    if "vue" in deps:
        return "vue"
    if "express" in deps:
        return "express"

    if "requirements.txt" in paths and lang == "python" and package_json_text:
        requirements = package_json_text.lower()
        for framework in _PYTHON_FRAMEWORKS:
            if framework in requirements:
                return framework

    if "go.mod" in paths or lang == "go":
        return "go"
    if "Cargo.toml" in paths or lang == "rust":
        return "rust"
    if lang == "python":
        return "python"

    has_index = bool(paths & _LIBRARY_INDEX_FILES)
    has_app = any(marker in path for path in files for marker in _APPLICATION_MARKERS)
    if has_index and not has_app:
        return "library"

    return "unknown"


def find_entry_points(files: Sequence[str], project_type: str) -> List[str]:
    """Return the canonical entry points present in ``files``, in table order."""
    paths = set(files)
    return [
        candidate
        for candidate in ENTRY_POINT_PATTERNS.get(project_type, ())
        if candidate in paths
    ]


__all__ = [
    "ENTRY_POINT_PATTERNS",
    "PROJECT_TYPES",
    "detect_project_type",
    "find_entry_points",
]
