"""Repository health scoring, code summaries, and project file generation."""

from .analyzers import detect_project_type, find_entry_points, score, select_files
from .models import MissingFiles, RepoMetadata, RepositorySnapshot, ScoreReport, Scores

__version__ = "0.1.0"

__all__ = [
    "MissingFiles",
    "RepoMetadata",
    "RepositorySnapshot",
    "ScoreReport",
    "Scores",
    "__version__",
    "detect_project_type",
    "find_entry_points",
    "score",
    "select_files",
]
