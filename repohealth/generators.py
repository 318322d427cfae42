"""LLM-backed generation of missing project files."""

from __future__ import annotations

from datetime import UTC, datetime
from types import MappingProxyType
from typing import Callable, List, Mapping, Protocol, Sequence, Tuple

from .analyzers.utils import detect_gitignore_stack, has_ci_config, has_test_files
from .errors import GenerationError, LLMError
from .logging import get_logger
from .models import GeneratedFile, RepositorySnapshot
from .prompting.builder import PromptBuilder

API_DOCS_MAX_FILES = 10
API_DOCS_MAX_CHARS = 2000

_CODE_EXTENSIONS: Tuple[str, ...] = (".ts", ".js", ".tsx", ".jsx", ".py", ".java", ".go", ".rs")
_API_DOCS_EXCLUDED: Tuple[str, ...] = ("node_modules", "test", "spec", ".d.ts")


class TextRunner(Protocol):
    def run(self, prompt: str, *, system: str | None = None) -> str: ...


class FileReader(Protocol):
    def get_file_content(self, owner: str, repo: str, path: str) -> str | None: ...


def select_api_doc_files(files: Sequence[str]) -> List[str]:
    """Pick up to ten source files worth documenting."""
    selected: List[str] = []
    for path in files:
        if len(selected) >= API_DOCS_MAX_FILES:
            break
        if _extension(path) not in _CODE_EXTENSIONS:
            continue
        if any(marker in path for marker in _API_DOCS_EXCLUDED):
            continue
        selected.append(path)
    return selected


def _extension(path: str) -> str:
    index = path.rfind(".")
    return path[index:] if index >= 0 else ""


class FileGenerator:
    """Produces README, .gitignore, LICENSE, CONTRIBUTING and API docs files."""

    def __init__(
        self,
        runner: TextRunner,
        file_reader: FileReader | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.runner = runner
        self.file_reader = file_reader
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("generators")

    def generate_readme(self, snapshot: RepositorySnapshot) -> GeneratedFile:
        prompt = self.prompt_builder.readme_prompt(snapshot)
        return GeneratedFile("README.md", self._complete(prompt, "README.md"))

    def generate_gitignore(self, snapshot: RepositorySnapshot) -> GeneratedFile:
        framework, package_manager = detect_gitignore_stack(snapshot.files)
        prompt = self.prompt_builder.gitignore_prompt(
            snapshot, framework=framework, package_manager=package_manager
        )
        return GeneratedFile(
            ".gitignore",
            self._complete(prompt, ".gitignore"),
            {"detected_framework": framework},
        )

    def generate_license(
        self,
        snapshot: RepositorySnapshot,
        *,
        holder: str | None = None,
        year: int | None = None,
    ) -> GeneratedFile:
        """Render an MIT license; no model call is involved."""
        content = self.prompt_builder.license_text(
            holder=holder or snapshot.owner,
            year=year or datetime.now(UTC).year,
        )
        return GeneratedFile("LICENSE", content, {"license": "MIT"})

    def generate_contributing(self, snapshot: RepositorySnapshot) -> GeneratedFile:
        prompt = self.prompt_builder.contributing_prompt(
            snapshot,
            has_tests=has_test_files(snapshot.files),
            has_ci=has_ci_config(snapshot.files),
        )
        return GeneratedFile("CONTRIBUTING.md", self._complete(prompt, "CONTRIBUTING.md"))

    def generate_api_docs(self, snapshot: RepositorySnapshot) -> GeneratedFile:
        if self.file_reader is None:
            raise GenerationError("API docs generation requires a GitHub file reader")

        candidates = select_api_doc_files(snapshot.files)
        code_files: List[Tuple[str, str]] = []
        for path in candidates:
            content = self.file_reader.get_file_content(snapshot.owner, snapshot.repo, path)
            if content:
                code_files.append((path, content[:API_DOCS_MAX_CHARS]))

        if not code_files:
            raise GenerationError("No code files found to document")

        prompt = self.prompt_builder.api_docs_prompt(code_files)
        return GeneratedFile(
            "API_DOCS.md",
            self._complete(prompt, "API_DOCS.md"),
            {"files_documented": candidates},
        )

    def _complete(self, prompt: str, file_name: str) -> str:
        self.logger.info("Generating %s", file_name)
        try:
            text = self.runner.run(prompt, system=PromptBuilder.SYSTEM_PROMPT)
        except LLMError as exc:
            raise GenerationError(f"Failed to generate {file_name}: {exc}") from exc
        if not text or not text.strip():
            raise GenerationError(f"Model returned no content for {file_name}")
        return text.strip() + "\n"


GeneratorMethod = Callable[[FileGenerator, RepositorySnapshot], GeneratedFile]

ACTIONS: Mapping[str, GeneratorMethod] = MappingProxyType(
    {
        "readme": FileGenerator.generate_readme,
        "gitignore": FileGenerator.generate_gitignore,
        "license": FileGenerator.generate_license,
        "contributing": FileGenerator.generate_contributing,
        "api-docs": FileGenerator.generate_api_docs,
        "generateReadme": FileGenerator.generate_readme,
        "generateGitignore": FileGenerator.generate_gitignore,
        "generateLicense": FileGenerator.generate_license,
        "generateContributing": FileGenerator.generate_contributing,
        "generateApiDocs": FileGenerator.generate_api_docs,
    }
)


__all__ = ["ACTIONS", "FileGenerator", "select_api_doc_files"]
