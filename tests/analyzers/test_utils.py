"""Tests for analyzer helper utilities."""

from __future__ import annotations

import pytest

from repohealth.analyzers.utils import (
    all_node_dependencies,
    detect_gitignore_stack,
    has_ci_config,
    load_node_dependencies,
)


def test_load_node_dependencies_splits_runtime_and_dev() -> None:
    deps = load_node_dependencies('{"dependencies": {"next": "1"}, "devDependencies": {"Jest": "2"}}')

    assert deps == {"dependencies": ["next"], "devDependencies": ["Jest"]}
    assert all_node_dependencies('{"devDependencies": {"Jest": "2"}}') == ["jest"]


@pytest.mark.parametrize("text", [None, "", "[1, 2]", "{oops", '{"dependencies": ["a"]}'])
def test_unusable_package_json_yields_no_dependencies(text) -> None:
    assert all_node_dependencies(text) == []


@pytest.mark.parametrize(
    "files, expected",
    [
        (["package.json", "next.config.mjs"], ("Next.js", "npm")),
        (["package.json", "vite.config.ts"], ("Vite", "npm")),
        (["package.json", "angular.json"], ("Angular", "npm")),
        (["package.json", "vue.config.js"], ("Vue", "npm")),
        (["package.json"], ("Node.js", "npm")),
        (["setup.py"], ("Python", "pip")),
        (["Cargo.toml"], ("Rust", "cargo")),
        (["go.mod"], ("Go", "go mod")),
        (["Makefile"], ("unknown", "unknown")),
    ],
)
def test_detect_gitignore_stack(files, expected) -> None:
    assert detect_gitignore_stack(files) == expected


def test_has_ci_config() -> None:
    assert has_ci_config([".github/workflows/ci.yml"])
    assert has_ci_config([".circleci/config.yml"])
    assert not has_ci_config(["src/main.py"])
