"""FastAPI application entrypoint for repohealth service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, TypeVar

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..analyzers.health import score
from ..analyzers.project_type import detect_project_type
from ..analyzers.selection import select_files
from ..errors import GenerationError, GitHubError, InvalidRepositoryURL, LLMError
from ..models import IssueDraft, MissingFiles, RepoMetadata, RepositorySnapshot
from ..orchestrator import Orchestrator
from ..repo_fetcher import detect_missing_files

_T = TypeVar("_T")


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case names are accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MetadataPayload(BaseModel):
    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stars: Optional[int] = None
    topics: List[str] = Field(default_factory=list)


class MissingFilesPayload(BaseModel):
    readme: bool = False
    gitignore: bool = False
    license: bool = False
    contributing: bool = False


class ScoreRequest(CamelModel):
    files: List[str]
    metadata: Optional[MetadataPayload] = None
    missing_files: MissingFilesPayload
    key_files_content: Dict[str, str] = Field(default_factory=dict)


class ScoresPayload(BaseModel):
    overall: int
    documentation: int
    structure: int


class ScoreResponse(BaseModel):
    scores: ScoresPayload
    issues: List[str]
    recommendations: List[str]
    summary: str


class SelectFilesRequest(CamelModel):
    files: List[str]
    package_json_text: Optional[str] = None
    language: Optional[str] = None


class SelectFilesResponse(CamelModel):
    project_type: str
    selected_files: List[str]


class AnalyzeRequest(BaseModel):
    repo_url: str


class DeepAnalyzeRequest(CamelModel):
    owner: Optional[str] = None
    repo: Optional[str] = None
    files: Optional[List[str]] = None
    metadata: Optional[MetadataPayload] = None
    key_files_content: Dict[str, str] = Field(default_factory=dict)


class GenerateRequest(BaseModel):
    repo_url: str
    actions: List[str]


class GeneratedFilePayload(BaseModel):
    file_name: str
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class GenerateResponse(BaseModel):
    files: List[GeneratedFilePayload]
    errors: Dict[str, str]


class IssuePayload(BaseModel):
    title: str
    body: str


class IssuesRequest(BaseModel):
    owner: str
    repo: str
    issues: List[IssuePayload]


class CreatedIssuePayload(BaseModel):
    title: str
    number: int
    url: str


class IssuesResponse(BaseModel):
    success: bool
    created_issues: List[CreatedIssuePayload]
    errors: List[str]
    message: str


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


async def _run_blocking(func: Callable[[], _T]) -> _T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing repohealth operations."""

    app = FastAPI(title="RepoHealth Service", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/score", response_model=ScoreResponse)
    async def score_repository(payload: ScoreRequest) -> Dict[str, Any]:
        metadata = payload.metadata.model_dump() if payload.metadata else None
        report = score(
            payload.files,
            metadata,
            MissingFiles.from_dict(payload.missing_files.model_dump()),
            payload.key_files_content,
        )
        return report.to_dict()

    @app.post("/select-files", response_model=SelectFilesResponse)
    async def select_repository_files(payload: SelectFilesRequest) -> SelectFilesResponse:
        project_type = detect_project_type(
            payload.files, payload.package_json_text, payload.language
        )
        key_files = {"package.json": payload.package_json_text} if payload.package_json_text else {}
        return SelectFilesResponse(
            project_type=project_type,
            selected_files=select_files(payload.files, project_type, key_files),
        )

    @app.post("/analyze")
    async def analyze(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Dict[str, object]:
        result = await _run_blocking(lambda: orchestrator.analyze(payload.repo_url))
        return result.to_dict()

    @app.post("/deep-analyze")
    async def deep_analyze(
        payload: DeepAnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Any:
        if not payload.owner or not payload.repo or payload.files is None or payload.metadata is None:
            return JSONResponse(status_code=400, content={"detail": "Missing required fields"})
        snapshot = RepositorySnapshot(
            owner=payload.owner,
            repo=payload.repo,
            files=tuple(payload.files),
            metadata=RepoMetadata.from_dict(payload.metadata.model_dump()),
            key_files_content=dict(payload.key_files_content),
            missing_files=detect_missing_files(payload.files),
        )
        result = await _run_blocking(lambda: orchestrator.summarize(snapshot))
        return {"success": True, **result.to_dict()}

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        def _run() -> GenerateResponse:
            snapshot = orchestrator.analyze(payload.repo_url).snapshot
            outcome = orchestrator.generate(snapshot, payload.actions)
            return GenerateResponse(
                files=[
                    GeneratedFilePayload(
                        file_name=item.file_name,
                        content=item.content,
                        metadata=item.metadata,
                    )
                    for item in outcome.files
                ],
                errors=outcome.errors,
            )

        return await _run_blocking(_run)

    @app.post("/issues", response_model=IssuesResponse)
    async def create_issues(
        payload: IssuesRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> IssuesResponse:
        drafts = [IssueDraft(title=item.title, body=item.body) for item in payload.issues]
        result = await _run_blocking(
            lambda: orchestrator.create_issues(payload.owner, payload.repo, drafts)
        )
        return IssuesResponse(
            success=result.success,
            created_issues=[
                CreatedIssuePayload(title=item.title, number=item.number, url=item.url)
                for item in result.created
            ],
            errors=result.errors,
            message=result.message,
        )

    @app.exception_handler(InvalidRepositoryURL)
    async def invalid_url_handler(_: Any, exc: InvalidRepositoryURL) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(GitHubError)
    async def github_error_handler(_: Any, exc: GitHubError) -> JSONResponse:
        status = 404 if exc.status == 404 else 502
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    @app.exception_handler(LLMError)
    async def llm_error_handler(_: Any, exc: LLMError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(GenerationError)
    async def generation_error_handler(_: Any, exc: GenerationError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
