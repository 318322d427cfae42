"""Pure heuristics over repository file listings."""

from __future__ import annotations

from .health import RECOMMENDATION_ACTIONS, score
from .project_type import (
    ENTRY_POINT_PATTERNS,
    PROJECT_TYPES,
    detect_project_type,
    find_entry_points,
)
from .selection import CORE_DIRECTORY_PATTERNS, MAX_FILES, select_files

__all__ = [
    "CORE_DIRECTORY_PATTERNS",
    "ENTRY_POINT_PATTERNS",
    "MAX_FILES",
    "PROJECT_TYPES",
    "RECOMMENDATION_ACTIONS",
    "detect_project_type",
    "find_entry_points",
    "score",
    "select_files",
]
