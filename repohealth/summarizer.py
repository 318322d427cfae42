"""Deep code summary: pick source files, read them, ask the model for a structured digest."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Protocol

from pydantic import BaseModel, Field, ValidationError

from .analyzers.project_type import detect_project_type
from .analyzers.selection import select_files
from .errors import LLMError
from .logging import get_logger
from .models import RepositorySnapshot
from .prompting.builder import PromptBuilder

DEFAULT_MAX_FILE_CHARS = 10_000
TRUNCATION_MARKER = "\n... (truncated)"


class TechStack(BaseModel):
    framework: Optional[str] = None
    language: str
    database: Optional[str] = None
    deployment: Optional[str] = None
    ai_tools: List[str] = Field(default_factory=list)
    other_tools: List[str] = Field(default_factory=list)


class Architecture(BaseModel):
    pattern: str
    components: List[str] = Field(default_factory=list)
    data_flow: str


class CodeQuality(BaseModel):
    has_types: bool
    has_tests: bool
    patterns: List[str] = Field(default_factory=list)


class RepoSummary(BaseModel):
    """Structured digest returned by the model."""

    purpose: str = Field(description="One-sentence description of what this project does")
    category: Literal[
        "Web Application",
        "Library",
        "CLI Tool",
        "API Service",
        "Mobile App",
        "Desktop App",
        "Other",
    ]
    tech_stack: TechStack
    architecture: Architecture
    key_features: List[str] = Field(default_factory=list)
    code_quality: CodeQuality
    narrative: str = Field(
        description='4-6 bullet points, each on its own line starting with "- "'
    )


class JSONRunner(Protocol):
    def run_json(self, prompt: str, *, system: str | None = None) -> dict: ...


class FileReader(Protocol):
    def get_file_content(self, owner: str, repo: str, path: str) -> str | None: ...


@dataclass
class SummaryResult:
    """Summary plus the inputs that produced it."""

    project_type: str
    files_analyzed: List[str]
    summary: RepoSummary

    def to_dict(self) -> Dict[str, object]:
        payload = self.summary.model_dump()
        payload["files_analyzed"] = list(self.files_analyzed)
        return {
            "project_type": self.project_type,
            "files_analyzed_count": len(self.files_analyzed),
            "summary": payload,
        }


def truncate_source(content: str, max_chars: int = DEFAULT_MAX_FILE_CHARS) -> str:
    if len(content) > max_chars:
        return content[:max_chars] + TRUNCATION_MARKER
    return content


class RepoSummarizer:
    """Reads a prioritized slice of the codebase and asks the model to explain it."""

    SYSTEM_PROMPT = (
        "You are a senior engineer reviewing an unfamiliar codebase. "
        "Answer only with JSON that matches the requested shape."
    )

    def __init__(
        self,
        runner: JSONRunner,
        file_reader: FileReader,
        prompt_builder: PromptBuilder | None = None,
        *,
        max_file_chars: int = DEFAULT_MAX_FILE_CHARS,
    ) -> None:
        self.runner = runner
        self.file_reader = file_reader
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.max_file_chars = max_file_chars
        self.logger = get_logger("summarizer")

    def summarize(self, snapshot: RepositorySnapshot) -> SummaryResult:
        project_type = detect_project_type(
            snapshot.files,
            snapshot.key_files_content.get("package.json"),
            snapshot.metadata.language,
        )
        selected = select_files(snapshot.files, project_type, snapshot.key_files_content)
        self.logger.info(
            "Reading %d source files for %s (type=%s)",
            len(selected),
            snapshot.full_name,
            project_type,
        )

        source_files = self._read_sources(snapshot, selected)
        self.logger.info("Read %d files for %s", len(source_files), snapshot.full_name)

        prompt = self.prompt_builder.summary_prompt(
            snapshot,
            project_type=project_type,
            source_files=source_files,
            schema=RepoSummary.model_json_schema(),
        )
        payload = self.runner.run_json(prompt, system=self.SYSTEM_PROMPT)
        try:
            summary = RepoSummary.model_validate(payload)
        except ValidationError as exc:
            raise LLMError(f"Model summary did not match the expected shape: {exc}") from exc

        return SummaryResult(
            project_type=project_type,
            files_analyzed=list(source_files),
            summary=summary,
        )

    def _read_sources(self, snapshot: RepositorySnapshot, paths: List[str]) -> Dict[str, str]:
        contents: Dict[str, str] = {}
        for path in paths:
            content = self.file_reader.get_file_content(snapshot.owner, snapshot.repo, path)
            if not content:
                self.logger.warning("Skipping unreadable file %s", path)
                continue
            contents[path] = truncate_source(content, self.max_file_chars)
        return contents


__all__ = [
    "RepoSummarizer",
    "RepoSummary",
    "SummaryResult",
    "TRUNCATION_MARKER",
    "truncate_source",
]
