"""Minimal GitHub REST API client."""

from __future__ import annotations

import base64
import json
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..errors import GitHubError, InvalidRepositoryURL
from ..logging import get_logger

_GITHUB_URL = re.compile(r"github\.com/([^/]+)/([^/]+)")


def parse_github_url(url: str) -> Optional[Tuple[str, str]]:
    """Return ``(owner, repo)`` for a GitHub URL, or None if it does not match."""
    match = _GITHUB_URL.search(url or "")
    if not match:
        return None
    owner, repo = match.group(1), match.group(2)
    for separator in ("?", "#"):
        repo = repo.split(separator, 1)[0]
    repo = repo.removesuffix(".git")
    if not owner or not repo:
        return None
    return owner, repo


def require_github_url(url: str) -> Tuple[str, str]:
    parsed = parse_github_url(url)
    if parsed is None:
        raise InvalidRepositoryURL(f"Invalid GitHub URL: {url}")
    return parsed


class GitHubClient:
    """Thin wrapper over the endpoints the analyzer needs."""

    DEFAULT_API_BASE = "https://api.github.com"
    FALLBACK_BRANCHES = ("main", "master")

    def __init__(
        self,
        token: str | None = None,
        *,
        api_base: str | None = None,
        request_timeout: float | None = 30.0,
    ) -> None:
        self.token = token
        self.api_base = (api_base or self.DEFAULT_API_BASE).rstrip("/")
        self.request_timeout = request_timeout or 30.0
        self.logger = get_logger("github")

    def get_repo_info(self, owner: str, repo: str) -> Dict[str, Any]:
        data = self._request("GET", f"/repos/{owner}/{repo}")
        if not isinstance(data, dict):
            raise GitHubError(f"Unexpected repository payload for {owner}/{repo}")
        return data

    def get_tree(self, owner: str, repo: str, branch: str | None = None) -> List[Dict[str, Any]]:
        """Return the recursive tree, trying ``branch`` then main and master."""
        candidates: List[str] = []
        for name in (branch, *self.FALLBACK_BRANCHES):
            if name and name not in candidates:
                candidates.append(name)

        last_error: GitHubError | None = None
        for name in candidates:
            try:
                data = self._request(
                    "GET",
                    f"/repos/{owner}/{repo}/git/trees/{quote(name, safe='')}?recursive=true",
                )
            except GitHubError as exc:
                self.logger.debug("Tree lookup for %s/%s@%s failed: %s", owner, repo, name, exc)
                last_error = exc
                continue
            tree = data.get("tree") if isinstance(data, dict) else None
            if isinstance(tree, list):
                if data.get("truncated"):
                    self.logger.warning("Tree for %s/%s is truncated by GitHub", owner, repo)
                return tree
        raise GitHubError(
            f"Unable to list files for {owner}/{repo}: {last_error or 'no branch found'}",
            status=last_error.status if last_error else None,
        )

    def get_file_content(self, owner: str, repo: str, path: str) -> str | None:
        """Return decoded file text, or None when the file cannot be read."""
        try:
            data = self._request("GET", f"/repos/{owner}/{repo}/contents/{quote(path)}")
        except GitHubError as exc:
            self.logger.debug("Could not read %s from %s/%s: %s", path, owner, repo, exc)
            return None
        if not isinstance(data, dict) or "content" not in data:
            return None
        try:
            return base64.b64decode(data["content"]).decode("utf-8")
        except (ValueError, TypeError, UnicodeDecodeError):
            return None

    def create_issue(self, owner: str, repo: str, title: str, body: str) -> Dict[str, Any]:
        data = self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues",
            payload={"title": title, "body": body},
        )
        if not isinstance(data, dict):
            raise GitHubError(f"Unexpected issue payload for {owner}/{repo}")
        return data

    # ------------------------------------------------------------------
    # Internal helpers

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repohealth",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.api_base}{path}"
        headers = self._headers()
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        request = Request(url, data=data, headers=headers, method=method)
        try:
            with urlopen(request, timeout=self.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = _error_message(detail) or exc.reason
            raise GitHubError(
                f"GitHub API {method} {path} failed with status {exc.code}: {message}",
                status=exc.code,
            ) from exc
        except URLError as exc:
            raise GitHubError(f"GitHub API {method} {path} failed: {exc.reason}") from exc

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GitHubError(f"GitHub API {method} {path} returned invalid JSON") from exc


def _error_message(detail: str) -> str:
    if not detail:
        return ""
    try:
        payload = json.loads(detail)
    except json.JSONDecodeError:
        return detail.strip()
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return detail.strip()


__all__ = ["GitHubClient", "parse_github_url", "require_github_url"]
