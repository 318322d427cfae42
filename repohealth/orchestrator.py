"""Pipeline orchestration for analyze / summarize / generate / issue flows."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from .analyzers.health import score
from .config import RepoHealthConfig, load_config
from .errors import GitHubError, RepoHealthError
from .generators import ACTIONS, FileGenerator
from .github.client import GitHubClient
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import CreatedIssue, GeneratedFile, IssueBatchResult, IssueDraft, RepositorySnapshot, ScoreReport
from .prompting.builder import PromptBuilder
from .repo_fetcher import RepoFetcher
from .summarizer import RepoSummarizer, SummaryResult


@dataclass
class AnalysisResult:
    """Snapshot of a repository together with its health report."""

    snapshot: RepositorySnapshot
    report: ScoreReport

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = self.snapshot.to_dict()
        payload.update(self.report.to_dict())
        return payload


@dataclass
class GenerationOutcome:
    """Files generated for the requested actions plus per-action failures."""

    files: List[GeneratedFile] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)


class Orchestrator:
    """Coordinates the GitHub, scoring, summary and generation steps."""

    def __init__(
        self,
        config: RepoHealthConfig | None = None,
        *,
        github: GitHubClient | None = None,
        llm_runner: LLMRunner | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.config = config or load_config()
        self.github = github or self._build_github_client(self.config)
        self._llm_runner = llm_runner
        self.prompt_builder = prompt_builder or PromptBuilder(self.config.templates_dir)
        self.fetcher = RepoFetcher(self.github)
        self.logger = get_logger("orchestrator")

    @property
    def llm_runner(self) -> LLMRunner:
        # Built lazily so scoring works without LLM credentials.
        if self._llm_runner is None:
            self._llm_runner = self._build_llm_runner(self.config)
        return self._llm_runner

    def analyze(self, repo_url: str) -> AnalysisResult:
        """Fetch the repository and score its health."""
        snapshot = self.fetcher.fetch(repo_url)
        report = score(
            snapshot.files,
            snapshot.metadata,
            snapshot.missing_files,
            snapshot.key_files_content,
        )
        self.logger.info("%s: %s", snapshot.full_name, report.summary)
        return AnalysisResult(snapshot=snapshot, report=report)

    def summarize(self, snapshot: RepositorySnapshot) -> SummaryResult:
        """Produce the deep code summary for an already fetched snapshot."""
        self.logger.info("Starting deep code analysis for %s", snapshot.full_name)
        summarizer = RepoSummarizer(
            self.llm_runner,
            self.github,
            self.prompt_builder,
            max_file_chars=self.config.summary.max_file_chars,
        )
        return summarizer.summarize(snapshot)

    def generate(self, snapshot: RepositorySnapshot, actions: Sequence[str]) -> GenerationOutcome:
        """Run each requested generator; failures are collected, not raised."""
        unknown = [action for action in actions if action not in ACTIONS]
        if unknown:
            raise ValueError(f"Unknown generation actions requested: {', '.join(unknown)}")

        generator = FileGenerator(self.llm_runner, self.github, self.prompt_builder)
        outcome = GenerationOutcome()
        seen: set[str] = set()
        for action in actions:
            method = ACTIONS[action]
            if method.__name__ in seen:
                continue
            seen.add(method.__name__)
            try:
                outcome.files.append(method(generator, snapshot))
            except RepoHealthError as exc:
                self.logger.warning("Action %s failed for %s: %s", action, snapshot.full_name, exc)
                outcome.errors[action] = str(exc)
        return outcome

    def create_issues(self, owner: str, repo: str, drafts: Iterable[IssueDraft]) -> IssueBatchResult:
        """Open one GitHub issue per draft, recording failures per title."""
        drafts = list(drafts)
        created: List[CreatedIssue] = []
        errors: List[str] = []
        for draft in drafts:
            try:
                data = self.github.create_issue(owner, repo, draft.title, draft.body)
            except GitHubError as exc:
                errors.append(f'Failed to create issue "{draft.title}": {exc}')
                continue
            created.append(
                CreatedIssue(
                    title=draft.title,
                    number=int(data.get("number", 0)),
                    url=str(data.get("html_url", "")),
                )
            )
        result = IssueBatchResult(created=created, errors=errors, requested=len(drafts))
        self.logger.info("%s/%s: %s", owner, repo, result.message)
        return result

    @staticmethod
    def write_files(files: Iterable[GeneratedFile], output_dir: Path, *, force: bool = False) -> List[Path]:
        """Write generated files under ``output_dir``; existing files need ``force``."""
        output_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for generated in files:
            target = output_dir / generated.file_name
            if target.exists() and not force:
                raise FileExistsError(f"{target} already exists; pass --force to overwrite")
            target.write_text(generated.content, encoding="utf-8")
            written.append(target)
        return written

    @staticmethod
    def _build_github_client(config: RepoHealthConfig) -> GitHubClient:
        return GitHubClient(
            config.github.token,
            api_base=config.github.api_base,
            request_timeout=config.github.request_timeout,
        )

    @staticmethod
    def _build_llm_runner(config: RepoHealthConfig) -> LLMRunner:
        llm = config.llm
        kwargs: Dict[str, object] = {}
        if llm.api_key:
            kwargs["api_key"] = llm.api_key
        if llm.temperature is not None:
            kwargs["temperature"] = llm.temperature
        if llm.request_timeout is not None:
            kwargs["request_timeout"] = llm.request_timeout
        if llm.max_retries is not None:
            kwargs["max_retries"] = llm.max_retries
        if llm.retry_delay is not None:
            kwargs["retry_delay"] = llm.retry_delay
        return LLMRunner(
            llm.model,
            base_url=llm.base_url,
            max_tokens=llm.max_tokens,
            **kwargs,  # type: ignore[arg-type]
        )


__all__ = ["AnalysisResult", "GenerationOutcome", "Orchestrator"]
