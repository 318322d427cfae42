"""Exception hierarchy for repohealth."""

from __future__ import annotations


class RepoHealthError(RuntimeError):
    """Base class for failures raised by the I/O layers."""


class InvalidRepositoryURL(RepoHealthError, ValueError):
    """Raised when a URL does not point at a GitHub repository."""


class GitHubError(RepoHealthError):
    """Raised when the GitHub API request fails."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class LLMError(RepoHealthError):
    """Raised when the language model call fails or returns unusable output."""


class GenerationError(RepoHealthError):
    """Raised when a project file cannot be generated."""


__all__ = [
    "RepoHealthError",
    "InvalidRepositoryURL",
    "GitHubError",
    "LLMError",
    "GenerationError",
]
