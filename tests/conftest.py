from __future__ import annotations

from pathlib import Path

import pytest

from repohealth.config import RepoHealthConfig
from tests._fixtures.fakes import FakeGitHubClient, RecordingLLMRunner


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials and endpoints out of the test run."""
    for key in (
        "GITHUB_TOKEN",
        "REPOHEALTH_GITHUB_TOKEN",
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "OPENAI_MODEL",
        "REPOHEALTH_LLM_API_KEY",
        "REPOHEALTH_LLM_BASE_URL",
        "REPOHEALTH_LLM_MODEL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config(tmp_path: Path) -> RepoHealthConfig:
    return RepoHealthConfig(root=tmp_path)


@pytest.fixture
def github() -> FakeGitHubClient:
    return FakeGitHubClient(
        {
            "package.json": '{"dependencies": {"next": "14.0.0", "react": "18.2.0"}}',
            "README.md": "# Demo\n\nShort readme.\n",
            "src/app/page.tsx": "export default function Page() { return null }\n",
            "src/lib/agent.ts": "export const agent = {}\n",
            "src/lib/github.ts": "export function getRepo() {}\n",
        }
    )


@pytest.fixture
def llm() -> RecordingLLMRunner:
    return RecordingLLMRunner()
