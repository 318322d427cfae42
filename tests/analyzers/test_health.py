"""Tests for the health scorer."""

from __future__ import annotations

import pytest

from repohealth.analyzers.health import RECOMMENDATION_ACTIONS, score
from repohealth.models import MissingFiles, RepoMetadata

METADATA = RepoMetadata(name="demo", description=None, language="TypeScript")
NOTHING_MISSING = MissingFiles()
ALL_MISSING = MissingFiles(readme=True, gitignore=True, license=True, contributing=True)
LONG_README = "# Demo\n" + "x" * 600


def test_all_standard_files_missing() -> None:
    report = score(["src/index.ts", "tests/index.test.ts"], METADATA, ALL_MISSING, {})

    assert report.scores.documentation == 55
    assert report.scores.structure == 80
    assert report.scores.overall == 68
    assert report.recommendations == RECOMMENDATION_ACTIONS
    assert len(report.issues) == 4


def test_healthy_repository_scores_full_marks() -> None:
    files = ["README.md", ".gitignore", "LICENSE", "src/index.ts", "test/index.spec.ts"]
    report = score(files, METADATA, NOTHING_MISSING, {"README.md": LONG_README})

    assert report.scores.overall == 100
    assert report.issues == ()
    assert report.recommendations == ()
    assert report.summary == "Repository health: 100/100. Found 0 issues."


def test_node_modules_deducts_thirty_once() -> None:
    files = ["node_modules/foo.js", "node_modules/bar/index.js", "src/index.ts", "src/index.test.ts"]
    report = score(files, METADATA, NOTHING_MISSING, {"README.md": LONG_README})

    assert report.scores.structure == 70
    vendored = [issue for issue in report.issues if "node_modules" in issue]
    assert len(vendored) == 1


def test_short_readme_is_flagged_under_either_casing() -> None:
    for name in ("README.md", "readme.md"):
        report = score(["src/a.ts", "a.test.ts"], METADATA, NOTHING_MISSING, {name: "# tiny"})
        assert report.scores.documentation == 85
        assert report.issues[0].startswith("⚠️ README.md is too short")


def test_empty_readme_content_is_not_flagged_as_short() -> None:
    report = score(["src/a.ts", "a.test.ts"], METADATA, NOTHING_MISSING, {"README.md": ""})

    assert report.scores.documentation == 100
    assert report.issues == ()


def test_env_files_and_build_artifacts() -> None:
    files = [".env", "config/.env.local.example", "dist/bundle.js", "src/a.ts", "spec/a.ts"]
    report = score(files, METADATA, NOTHING_MISSING, {})

    assert report.scores.structure == 100 - 25 - 15
    assert report.issues == (
        "🚨 Environment files may be committed - Security risk!",
        "⚠️ Build artifacts committed to repository",
    )


def test_env_example_at_root_is_not_a_secret() -> None:
    report = score([".env.example", "src/a.ts", "a_test.py"], METADATA, NOTHING_MISSING, {})

    assert report.scores.structure == 100


def test_source_directory_rule_needs_more_than_ten_files() -> None:
    ten = [f"file{i}.py" for i in range(9)] + ["test_x.py"]
    eleven = ten + ["extra.py"]

    assert score(ten, METADATA, NOTHING_MISSING, {}).scores.structure == 100
    report = score(eleven, METADATA, NOTHING_MISSING, {})
    assert report.scores.structure == 90
    assert report.issues == ("💡 Consider organizing code into src/ or lib/ folders",)


def test_test_detection_uses_plain_substrings() -> None:
    # "latest" contains "test", which counts as having tests.
    report = score(["latest.txt", "src/a.ts"], METADATA, NOTHING_MISSING, {})

    assert report.scores.structure == 100


def test_missing_tests_are_flagged() -> None:
    report = score(["src/a.ts"], METADATA, NOTHING_MISSING, {})

    assert report.scores.structure == 90
    assert report.issues[-1] == "💡 No tests found - Consider adding test coverage"


def test_scores_never_go_negative() -> None:
    files = (
        [".env", "node_modules/a.js", "dist/a.js", "build/b.js"]
        + [f"misc/file{i}.txt" for i in range(10)]
    )
    report = score(files, METADATA, ALL_MISSING, {})

    assert report.scores.structure == 0
    assert report.scores.documentation == 55
    assert report.scores.overall == round((0 + 55) / 2)


def test_empty_file_listing_only_reports_missing_flags_and_tests() -> None:
    report = score([], None, {"readme": True}, None)

    assert report.scores.documentation == 70
    assert report.recommendations == ("generateReadme",)
    assert report.issues == (
        "❌ Missing README.md - No project documentation",
        "💡 No tests found - Consider adding test coverage",
    )


@pytest.mark.parametrize(
    "files, missing",
    [
        ([], ALL_MISSING),
        (["node_modules/x.js", ".env", "dist/a"], NOTHING_MISSING),
        (["src/a.ts", "README.md"], MissingFiles(license=True)),
    ],
)
def test_overall_is_rounded_mean_and_deterministic(files, missing) -> None:
    first = score(files, METADATA, missing, {})
    second = score(files, METADATA, missing, {})

    assert first == second
    assert 0 <= first.scores.documentation <= 100
    assert 0 <= first.scores.structure <= 100
    total = first.scores.documentation + first.scores.structure
    assert first.scores.overall == (total + 1) // 2


def test_to_dict_matches_boundary_shape() -> None:
    report = score(["src/a.ts"], METADATA, MissingFiles(gitignore=True), {})

    payload = report.to_dict()
    assert payload["scores"] == {"overall": 85, "documentation": 100, "structure": 70}
    assert payload["recommendations"] == ["generateGitignore"]
    assert payload["summary"] == "Repository health: 85/100. Found 2 issues."


@pytest.mark.parametrize(
    "files, missing, expected",
    [
        # documentation 90, structure 75
        ([".env", "src/a.ts", "a.test.ts"], MissingFiles(license=True), 83),
        # documentation 85, structure 60
        (["node_modules/x.js", "src/a.ts"], MissingFiles(license=True, contributing=True), 73),
        # documentation 100, structure 75
        ([".env", "src/a.ts", "a.test.ts"], NOTHING_MISSING, 88),
    ],
)
def test_overall_rounds_halves_up(files, missing, expected) -> None:
    report = score(files, METADATA, missing, {"README.md": LONG_README})

    assert report.scores.overall == expected
