"""GitHub API access."""

from .client import GitHubClient, parse_github_url, require_github_url

__all__ = ["GitHubClient", "parse_github_url", "require_github_url"]
