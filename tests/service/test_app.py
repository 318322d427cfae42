"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from repohealth.config import RepoHealthConfig
from repohealth.errors import GitHubError
from repohealth.orchestrator import Orchestrator
from repohealth.service import create_app
from tests._fixtures.fakes import SUMMARY_PAYLOAD, FakeGitHubClient, RecordingLLMRunner


class _MissingRepoClient(FakeGitHubClient):
    def get_repo_info(self, owner, repo):
        raise GitHubError("Not Found", status=404)


@pytest.fixture
def llm() -> RecordingLLMRunner:
    return RecordingLLMRunner(text="# Generated", payload=SUMMARY_PAYLOAD)


@pytest.fixture
def client(config: RepoHealthConfig, github: FakeGitHubClient, llm: RecordingLLMRunner) -> TestClient:
    orchestrator = Orchestrator(config, github=github, llm_runner=llm)  # type: ignore[arg-type]
    return TestClient(create_app(lambda: orchestrator))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_score_endpoint(client: TestClient) -> None:
    response = client.post(
        "/score",
        json={
            "files": ["src/index.ts", "src/index.test.ts", ".gitignore", "LICENSE", "CONTRIBUTING.md"],
            "missing_files": {"readme": True},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["scores"] == {"overall": 85, "documentation": 70, "structure": 100}
    assert data["issues"] == ["❌ Missing README.md - No project documentation"]
    assert data["recommendations"] == ["generateReadme"]
    assert data["summary"] == "Repository health: 85/100. Found 1 issues."


def test_select_files_endpoint(client: TestClient) -> None:
    response = client.post(
        "/select-files",
        json={
            "files": ["src/App.tsx", "src/components/Nav.tsx", "package.json"],
            "package_json_text": '{"dependencies": {"react": "18.2.0"}}',
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "projectType": "react",
        "selectedFiles": ["src/App.tsx", "src/components/Nav.tsx"],
    }


def test_score_accepts_camel_case_payload(client: TestClient) -> None:
    response = client.post(
        "/score",
        json={
            "files": ["src/a.ts", "src/a.test.ts", ".gitignore", ".env"],
            "metadata": {"name": "demo", "description": None, "language": "TypeScript"},
            "missingFiles": {
                "readme": False,
                "gitignore": False,
                "license": True,
                "contributing": False,
            },
            "keyFilesContent": {"README.md": "# Demo\n" + "x" * 600},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["scores"] == {"overall": 83, "documentation": 90, "structure": 75}
    assert data["recommendations"] == ["generateLicense"]


def test_select_files_accepts_camel_case_payload(client: TestClient) -> None:
    response = client.post(
        "/select-files",
        json={
            "files": ["go.mod", "main.go", "cmd/server/main.go"],
            "packageJsonText": None,
            "language": "Go",
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "projectType": "go",
        "selectedFiles": ["main.go", "cmd/server/main.go"],
    }


def test_analyze_endpoint(client: TestClient) -> None:
    response = client.post("/analyze", json={"repo_url": "https://github.com/octo/demo"})

    assert response.status_code == 200
    data = response.json()
    assert data["owner"] == "octo"
    assert data["repo"] == "demo"
    assert data["scores"]["overall"] == 70
    assert data["missing_files"]["gitignore"] is True


def test_analyze_rejects_invalid_url(client: TestClient) -> None:
    response = client.post("/analyze", json={"repo_url": "https://gitlab.com/octo/demo"})

    assert response.status_code == 400


def test_analyze_maps_missing_repository_to_404(config: RepoHealthConfig, llm: RecordingLLMRunner) -> None:
    orchestrator = Orchestrator(config, github=_MissingRepoClient(), llm_runner=llm)  # type: ignore[arg-type]
    client = TestClient(create_app(lambda: orchestrator))

    response = client.post("/analyze", json={"repo_url": "https://github.com/octo/gone"})

    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


def test_deep_analyze_requires_fields(client: TestClient) -> None:
    response = client.post("/deep-analyze", json={"owner": "octo", "repo": "demo"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Missing required fields"}


def test_deep_analyze_endpoint(client: TestClient, llm: RecordingLLMRunner) -> None:
    response = client.post(
        "/deep-analyze",
        json={
            "owner": "octo",
            "repo": "demo",
            "files": ["package.json", "src/app/page.tsx", "src/lib/agent.ts"],
            "metadata": {"name": "demo", "language": "TypeScript"},
            "key_files_content": {"package.json": '{"dependencies": {"next": "14.0.0"}}'},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["project_type"] == "nextjs"
    assert data["files_analyzed_count"] == 2
    assert data["summary"]["purpose"] == SUMMARY_PAYLOAD["purpose"]
    assert llm.calls[0]["json"] is True


def test_deep_analyze_reports_llm_failure(config: RepoHealthConfig, github: FakeGitHubClient) -> None:
    orchestrator = Orchestrator(config, github=github, llm_runner=RecordingLLMRunner(fail=True))  # type: ignore[arg-type]
    client = TestClient(create_app(lambda: orchestrator))

    response = client.post(
        "/deep-analyze",
        json={"owner": "octo", "repo": "demo", "files": [], "metadata": {"name": "demo"}},
    )

    assert response.status_code == 502


def test_generate_endpoint(client: TestClient) -> None:
    response = client.post(
        "/generate",
        json={"repo_url": "https://github.com/octo/demo", "actions": ["readme", "gitignore"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert [item["file_name"] for item in data["files"]] == ["README.md", ".gitignore"]
    assert data["files"][0]["content"] == "# Generated\n"
    assert data["files"][1]["metadata"] == {"detected_framework": "Node.js"}
    assert data["errors"] == {}


def test_generate_rejects_unknown_action(client: TestClient) -> None:
    response = client.post(
        "/generate",
        json={"repo_url": "https://github.com/octo/demo", "actions": ["changelog"]},
    )

    assert response.status_code == 400


def test_issues_endpoint(config: RepoHealthConfig, llm: RecordingLLMRunner) -> None:
    github = FakeGitHubClient(failing_issues={"Broken"})
    orchestrator = Orchestrator(config, github=github, llm_runner=llm)  # type: ignore[arg-type]
    client = TestClient(create_app(lambda: orchestrator))

    response = client.post(
        "/issues",
        json={
            "owner": "octo",
            "repo": "demo",
            "issues": [{"title": "Add LICENSE", "body": "MIT"}, {"title": "Broken", "body": "x"}],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Created 1 of 2 issues"
    assert data["created_issues"] == [
        {"title": "Add LICENSE", "number": 1, "url": "https://github.com/octo/demo/issues/1"}
    ]
    assert len(data["errors"]) == 1
