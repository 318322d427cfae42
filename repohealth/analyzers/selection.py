"""Pick a bounded, prioritized set of source files worth summarizing."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .project_type import find_entry_points

MAX_FILES = 25
MAX_FILES_PER_DIRECTORY = 3

CORE_DIRECTORY_PATTERNS: Tuple[str, ...] = (
    "src/lib/",
    "src/core/",
    "lib/",
    "core/",
    "src/app/api/",
    "src/pages/api/",
    "api/",
    "routes/",
    "controllers/",
    "models/",
    "schema.prisma",
    "src/components/",
    "components/",
)

_SKIPPED_MARKERS: Tuple[str, ...] = (".test.", ".spec.")
_SKIPPED_SUFFIXES: Tuple[str, ...] = (".css", ".scss", ".json")


def select_files(
    files: Sequence[str],
    project_type: str,
    key_files_content: Optional[Mapping[str, str]] = None,
) -> List[str]:
    """Return at most ``MAX_FILES`` unique paths drawn from ``files``.

    Entry points come first, then up to three files from each core directory,
    then top-level source files. ``key_files_content`` is accepted for
    interface parity and currently unused.
    """
    selected: List[str] = []
    seen: Set[str] = set()

    def _add(paths: Iterable[str], limit: int) -> None:
        added = 0
        for path in paths:
            if added >= limit:
                break
            if path in seen:
                continue
            selected.append(path)
            seen.add(path)
            added += 1

    _add(find_entry_points(files, project_type), MAX_FILES)

    for pattern in CORE_DIRECTORY_PATTERNS:
        _add(
            (path for path in files if path.startswith(pattern) and _is_core_candidate(path)),
            MAX_FILES_PER_DIRECTORY,
        )
        if len(selected) >= MAX_FILES:
            break

    if len(selected) < MAX_FILES:
        _add(
            (path for path in files if _is_top_level_source(path)),
            MAX_FILES - len(selected),
        )

    return selected[:MAX_FILES]


def _is_core_candidate(path: str) -> bool:
    if any(marker in path for marker in _SKIPPED_MARKERS):
        return False
    return not path.endswith(_SKIPPED_SUFFIXES)


def _is_top_level_source(path: str) -> bool:
    # The root-level check only guards ".ts"; ".js" and ".tsx" match at any depth.
    if path.startswith("src/") and path.count("/") == 1:
        return True
    if "/" not in path and path.endswith(".ts"):
        return True
    return path.endswith(".js") or path.endswith(".tsx")


__all__ = [
    "CORE_DIRECTORY_PATTERNS",
    "MAX_FILES",
    "MAX_FILES_PER_DIRECTORY",
    "select_files",
]
