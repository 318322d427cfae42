"""Build repository snapshots from the GitHub API."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .github.client import GitHubClient, require_github_url
from .logging import get_logger
from .models import MissingFiles, RepoMetadata, RepositorySnapshot

KEY_FILES: Tuple[str, ...] = (
    "package.json",
    "README.md",
    "readme.md",
    ".gitignore",
    "LICENSE",
    "CONTRIBUTING.md",
    "requirements.txt",
    "setup.py",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
)


def detect_missing_files(files: Sequence[str]) -> MissingFiles:
    """Case-insensitive existence checks for the standard project files."""
    lowered = [path.lower() for path in files]
    return MissingFiles(
        readme="readme.md" not in lowered,
        gitignore=".gitignore" not in files,
        license=not any(path.startswith("license") for path in lowered),
        contributing="contributing.md" not in lowered,
    )


def blob_paths(tree: Sequence[Mapping[str, Any]]) -> List[str]:
    """Return file paths from a recursive tree listing, skipping directories."""
    return [
        str(item.get("path") or "")
        for item in tree
        if item.get("type") == "blob"
    ]


def metadata_from_repo_info(info: Mapping[str, Any]) -> RepoMetadata:
    return RepoMetadata(
        name=str(info.get("name") or ""),
        description=info.get("description"),
        language=info.get("language"),
        stars=info.get("stargazers_count"),
        topics=tuple(info.get("topics") or ()),
        forks=info.get("forks_count"),
        default_branch=info.get("default_branch"),
        created_at=info.get("created_at"),
        updated_at=info.get("updated_at"),
    )


class RepoFetcher:
    """Fetches metadata, the file listing, and key file contents for a repository."""

    def __init__(self, client: GitHubClient | None = None) -> None:
        self.client = client or GitHubClient()
        self.logger = get_logger("fetcher")

    def fetch(self, repo_url: str) -> RepositorySnapshot:
        """Return a snapshot for ``repo_url``; raises InvalidRepositoryURL or GitHubError."""
        owner, repo = require_github_url(repo_url)
        self.logger.info("Fetching repository %s/%s", owner, repo)

        info = self.client.get_repo_info(owner, repo)
        metadata = metadata_from_repo_info(info)

        tree = self.client.get_tree(owner, repo, metadata.default_branch)
        files = blob_paths(tree)
        self.logger.debug("Tree for %s/%s lists %d files", owner, repo, len(files))

        key_files_content = self._read_key_files(owner, repo, files)

        return RepositorySnapshot(
            owner=owner,
            repo=repo,
            files=tuple(files),
            metadata=metadata,
            key_files_content=MappingProxyType(key_files_content),
            missing_files=detect_missing_files(files),
        )

    def _read_key_files(self, owner: str, repo: str, files: Sequence[str]) -> Dict[str, str]:
        present = set(files)
        contents: Dict[str, str] = {}
        for name in KEY_FILES:
            if name not in present:
                continue
            content = self.client.get_file_content(owner, repo, name)
            if content:
                contents[name] = content
            else:
                self.logger.warning("Key file %s could not be read from %s/%s", name, owner, repo)
        return contents


__all__ = [
    "KEY_FILES",
    "RepoFetcher",
    "blob_paths",
    "detect_missing_files",
    "metadata_from_repo_info",
]
