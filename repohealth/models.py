"""Core data models shared across repohealth components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class RepoMetadata:
    """Repository metadata as reported by the hosting service."""

    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stars: Optional[int] = None
    topics: Tuple[str, ...] = ()
    forks: Optional[int] = None
    default_branch: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RepoMetadata":
        topics = data.get("topics") or ()
        return cls(
            name=str(data.get("name") or ""),
            description=data.get("description"),
            language=data.get("language"),
            stars=data.get("stars"),
            topics=tuple(str(topic) for topic in topics),
            forks=data.get("forks"),
            default_branch=data.get("default_branch"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "language": self.language,
            "stars": self.stars,
            "topics": list(self.topics),
            "forks": self.forks,
            "default_branch": self.default_branch,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class MissingFiles:
    """Which standard project files are absent from the repository."""

    readme: bool = False
    gitignore: bool = False
    license: bool = False
    contributing: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MissingFiles":
        return cls(
            readme=bool(data.get("readme", False)),
            gitignore=bool(data.get("gitignore", False)),
            license=bool(data.get("license", False)),
            contributing=bool(data.get("contributing", False)),
        )

    def to_dict(self) -> Dict[str, bool]:
        return {
            "readme": self.readme,
            "gitignore": self.gitignore,
            "license": self.license,
            "contributing": self.contributing,
        }


@dataclass(frozen=True)
class RepositorySnapshot:
    """Immutable view of a remote repository handed to the analyzers."""

    owner: str
    repo: str
    files: Tuple[str, ...]
    metadata: RepoMetadata
    key_files_content: Mapping[str, str]
    missing_files: MissingFiles

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "repo": self.repo,
            "files": list(self.files),
            "file_count": len(self.files),
            "metadata": self.metadata.to_dict(),
            "key_files_content": dict(self.key_files_content),
            "missing_files": self.missing_files.to_dict(),
        }


@dataclass(frozen=True)
class Scores:
    """Health sub-scores plus the derived overall score."""

    overall: int
    documentation: int
    structure: int


@dataclass(frozen=True)
class ScoreReport:
    """Output of the health scorer."""

    scores: Scores
    issues: Tuple[str, ...]
    recommendations: Tuple[str, ...]

    @property
    def summary(self) -> str:
        return (
            f"Repository health: {self.scores.overall}/100. "
            f"Found {len(self.issues)} issues."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": {
                "overall": self.scores.overall,
                "documentation": self.scores.documentation,
                "structure": self.scores.structure,
            },
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
            "summary": self.summary,
        }


@dataclass
class GeneratedFile:
    """A project file produced by one of the generators."""

    file_name: str
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class IssueDraft:
    """Title and body for an issue to be opened on the repository."""

    title: str
    body: str


@dataclass
class CreatedIssue:
    """Issue successfully created on the remote repository."""

    title: str
    number: int
    url: str


@dataclass
class IssueBatchResult:
    """Outcome of creating a batch of issues."""

    created: List[CreatedIssue]
    errors: List[str]
    requested: int

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return f"Created {len(self.created)} of {self.requested} issues"
