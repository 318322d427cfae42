"""Point-deduction health scoring over a repository file listing."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence, Tuple

from ..models import MissingFiles, RepoMetadata, ScoreReport, Scores
from .utils import has_test_files

RECOMMENDATION_ACTIONS: Tuple[str, ...] = (
    "generateReadme",
    "generateGitignore",
    "generateLicense",
    "generateContributing",
)

README_MIN_LENGTH = 500

_BUILD_DIR_PREFIXES: Tuple[str, ...] = ("dist/", "build/", ".next/")
_SOURCE_DIR_PREFIXES: Tuple[str, ...] = ("src/", "lib/", "app/")
_SOURCE_DIR_MIN_FILES = 10


def score(
    files: Sequence[str],
    metadata: RepoMetadata | Mapping[str, Any] | None,
    missing_files: MissingFiles | Mapping[str, Any],
    key_files_content: Mapping[str, str] | None = None,
) -> ScoreReport:
    """Compute documentation/structure scores, issues and recommendations.

    Never raises: absent metadata or key file content simply contributes
    nothing. ``metadata`` is accepted for interface parity with the rest of
    the pipeline but does not influence the scores.
    """
    if not isinstance(missing_files, MissingFiles):
        missing_files = MissingFiles.from_dict(missing_files or {})
    contents = key_files_content or {}

    issues: List[str] = []
    documentation = 100
    structure = 100

    if missing_files.readme:
        issues.append("❌ Missing README.md - No project documentation")
        documentation -= 30
    else:
        readme = contents.get("README.md") or contents.get("readme.md") or ""
        if readme and len(readme) < README_MIN_LENGTH:
            issues.append("⚠️ README.md is too short - Needs more documentation")
            documentation -= 15

    if missing_files.gitignore:
        issues.append("❌ Missing .gitignore - May have unnecessary files committed")
        structure -= 20

    if missing_files.license:
        issues.append("⚠️ Missing LICENSE - Project licensing unclear")
        documentation -= 10

    if missing_files.contributing:
        issues.append("💡 No CONTRIBUTING.md - Could help attract contributors")
        documentation -= 5

    if any("node_modules/" in path for path in files):
        issues.append("🚨 node_modules committed to repository!")
        structure -= 30

    if any(path == ".env" or ".env.local" in path for path in files):
        issues.append("🚨 Environment files may be committed - Security risk!")
        structure -= 25

    if any(path.startswith(_BUILD_DIR_PREFIXES) for path in files):
        issues.append("⚠️ Build artifacts committed to repository")
        structure -= 15

    has_source_dir = any(path.startswith(_SOURCE_DIR_PREFIXES) for path in files)
    if not has_source_dir and len(files) > _SOURCE_DIR_MIN_FILES:
        issues.append("💡 Consider organizing code into src/ or lib/ folders")
        structure -= 10

    if not has_test_files(files):
        issues.append("💡 No tests found - Consider adding test coverage")
        structure -= 10

    documentation = max(0, documentation)
    structure = max(0, structure)
    # Halves round up.
    overall = (documentation + structure + 1) // 2

    flags = (
        missing_files.readme,
        missing_files.gitignore,
        missing_files.license,
        missing_files.contributing,
    )
    recommendations = tuple(
        action for action, missing in zip(RECOMMENDATION_ACTIONS, flags) if missing
    )

    return ScoreReport(
        scores=Scores(overall=overall, documentation=documentation, structure=structure),
        issues=tuple(issues),
        recommendations=recommendations,
    )


__all__ = ["README_MIN_LENGTH", "RECOMMENDATION_ACTIONS", "score"]
