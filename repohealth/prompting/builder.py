"""Builds LLM prompts from Jinja2 templates."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import RepositorySnapshot

FILE_TREE_LIMIT = 50
GITIGNORE_FILES_LIMIT = 30
KEY_FILES_JSON_LIMIT = 2000
README_EXCERPT_LIMIT = 2000
CONFIG_EXCERPT_LIMIT = 1000

_README_NAMES = ("README.md", "readme.md")


class PromptBuilder:
    """Renders the prompt templates shipped in ``prompting/templates``."""

    SYSTEM_PROMPT = (
        "You are a senior developer documentation writer. Stay grounded in repository facts. "
        "Generate project-specific content and never invent commands, files, or tools."
    )

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def readme_prompt(self, snapshot: RepositorySnapshot) -> str:
        return self._render(
            "readme.j2",
            repo_name=snapshot.metadata.name or snapshot.repo,
            description=snapshot.metadata.description,
            language=snapshot.metadata.language,
            dependencies=format_dependencies(snapshot.key_files_content.get("package.json")),
            file_tree="\n".join(snapshot.files[:FILE_TREE_LIMIT]),
            key_files_content=json.dumps(
                dict(snapshot.key_files_content), ensure_ascii=False
            )[:KEY_FILES_JSON_LIMIT],
        )

    def gitignore_prompt(
        self,
        snapshot: RepositorySnapshot,
        *,
        framework: str,
        package_manager: str,
    ) -> str:
        return self._render(
            "gitignore.j2",
            language=snapshot.metadata.language,
            framework=framework,
            package_manager=package_manager,
            files=list(snapshot.files[:GITIGNORE_FILES_LIMIT]),
        )

    def contributing_prompt(
        self,
        snapshot: RepositorySnapshot,
        *,
        has_tests: bool,
        has_ci: bool,
    ) -> str:
        return self._render(
            "contributing.j2",
            repo_name=snapshot.metadata.name or snapshot.repo,
            language=snapshot.metadata.language,
            has_tests=has_tests,
            has_ci=has_ci,
        )

    def api_docs_prompt(self, code_files: Sequence[Tuple[str, str]]) -> str:
        return self._render("api_docs.j2", code_files=list(code_files))

    def license_text(self, *, holder: str, year: int) -> str:
        return self._render("license_mit.j2", holder=holder, year=year)

    def summary_prompt(
        self,
        snapshot: RepositorySnapshot,
        *,
        project_type: str,
        source_files: Mapping[str, str],
        schema: Mapping[str, Any],
    ) -> str:
        readme = _first_present(snapshot.key_files_content, _README_NAMES) or "No README"
        config_files: List[Tuple[str, str]] = [
            (name, content[:CONFIG_EXCERPT_LIMIT])
            for name, content in snapshot.key_files_content.items()
            if name not in _README_NAMES
        ]
        return self._render(
            "summary.j2",
            metadata=snapshot.metadata,
            project_type=project_type,
            file_tree="\n".join(snapshot.files[:FILE_TREE_LIMIT]),
            readme=readme[:README_EXCERPT_LIMIT],
            config_files=config_files,
            source_files=list(source_files.items()),
            schema=json.dumps(schema, indent=2),
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _render(self, template_name: str, **context: Any) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context).strip() + "\n"

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )


def format_dependencies(package_json_text: str | None) -> str:
    """Render package.json dependency blocks for the README prompt."""
    if not package_json_text:
        return ""
    try:
        data = json.loads(package_json_text)
    except json.JSONDecodeError:
        return "Could not parse package.json"
    if not isinstance(data, dict):
        return "Could not parse package.json"
    blocks: Dict[str, Any] = {
        key: data[key]
        for key in ("dependencies", "devDependencies")
        if data.get(key) is not None
    }
    return json.dumps(blocks, indent=2)


def _first_present(contents: Mapping[str, str], names: Iterable[str]) -> str | None:
    for name in names:
        value = contents.get(name)
        if value:
            return value
    return None


__all__ = ["PromptBuilder", "format_dependencies"]
