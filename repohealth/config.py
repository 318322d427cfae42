"""Configuration loading for repohealth (.repohealth.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence, TypeVar

import yaml

CONFIG_FILENAME = ".repohealth.yml"

_N = TypeVar("_N", int, float)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Language model settings."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None
    max_retries: Optional[int] = None
    retry_delay: Optional[float] = None


@dataclass
class GitHubConfig:
    """GitHub API access settings."""

    token: Optional[str] = None
    api_base: Optional[str] = None
    request_timeout: Optional[float] = None


@dataclass
class SummaryConfig:
    """Limits applied when reading source files for the deep summary."""

    max_file_chars: int = 10_000


@dataclass
class RepoHealthConfig:
    """Represents the settings defined in .repohealth.yml."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    templates_dir: Optional[Path] = None


def load_config(config_path: Path | str | None = None) -> RepoHealthConfig:
    """Load configuration from disk, filling gaps from the environment."""
    config_file = _resolve_config_path(Path(config_path) if config_path else Path.cwd())
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        loaded = _read_config(config_file)
        if not isinstance(loaded, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
        data = loaded

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig(
        model=_as_str(llm_data.get("model")),
        base_url=_as_str(llm_data.get("base_url")),
        api_key=_as_str(llm_data.get("api_key")),
        temperature=_as_float(llm_data.get("temperature")),
        max_tokens=_as_int(llm_data.get("max_tokens")),
        request_timeout=_as_float(llm_data.get("request_timeout")),
        max_retries=_as_int(llm_data.get("max_retries")),
        retry_delay=_as_float(llm_data.get("retry_delay")),
    )

    github_data = _as_dict(data.get("github"))
    github = GitHubConfig(
        token=_as_str(github_data.get("token")) or _first_env_value(("REPOHEALTH_GITHUB_TOKEN", "GITHUB_TOKEN")),
        api_base=_as_str(github_data.get("api_base")),
        request_timeout=_as_float(github_data.get("request_timeout")),
    )

    summary_data = _as_dict(data.get("summary"))
    summary = SummaryConfig()
    max_chars = _as_int(summary_data.get("max_file_chars"))
    if max_chars is not None and max_chars > 0:
        summary.max_file_chars = max_chars

    prompting_data = _as_dict(data.get("prompting"))
    templates_dir_str = _as_str(prompting_data.get("templates_dir"))
    templates_dir = root / templates_dir_str if templates_dir_str else None

    return RepoHealthConfig(
        root=root,
        llm=llm,
        github=github,
        summary=summary,
        templates_dir=templates_dir,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _first_env_value(keys: Sequence[str]) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    # YAML turns bare yes/no into booleans; keep them readable.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _as_number(value: Any, kind: Callable[[Any], _N]) -> Optional[_N]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return kind(value)
    except (TypeError, ValueError):
        return None


def _as_float(value: Any) -> Optional[float]:
    return _as_number(value, float)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, float):
        return None
    return _as_number(value, int)


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GitHubConfig",
    "LLMConfig",
    "RepoHealthConfig",
    "SummaryConfig",
    "load_config",
]
