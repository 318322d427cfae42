"""Adapter around OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import json
import os
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import LLMError
from ..logging import get_logger

_AUTO_API_KEY = object()
_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass
class LLMRequest:
    """Represents an inference request for the runner."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]
    json_mode: bool = False


class LLMRunner:
    """Executes prompts against the configured chat completion API."""

    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    ENV_MODEL_KEYS = ("REPOHEALTH_LLM_MODEL", "OPENAI_MODEL")
    ENV_BASE_URL_KEYS = ("REPOHEALTH_LLM_BASE_URL", "OPENAI_BASE_URL")
    ENV_API_KEY_KEYS = ("REPOHEALTH_LLM_API_KEY", "OPENAI_API_KEY")

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None = None,
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = None,
        api_key: str | None | object = _AUTO_API_KEY,
        request_timeout: Optional[float] = 60.0,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        runner: Callable[[LLMRequest], str] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.model = model or self._first_env_value(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL
        self.base_url = (
            base_url or self._first_env_value(self.ENV_BASE_URL_KEYS) or self.DEFAULT_BASE_URL
        ).rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        if api_key is _AUTO_API_KEY:
            self.api_key = self._first_env_value(self.ENV_API_KEY_KEYS)
        else:
            self.api_key = api_key  # type: ignore[assignment]
        self.request_timeout = request_timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self._runner = runner or self._http_runner
        self._sleep = sleep
        self.logger = get_logger("llm")

    def run(self, prompt: str, *, system: str | None = None) -> str:
        """Send the prompt and return the response text, retrying on failure."""
        return self._run_with_retry(self._build_request(prompt, system, json_mode=False))

    def run_json(self, prompt: str, *, system: str | None = None) -> Dict[str, Any]:
        """Send the prompt and parse the response as a JSON object."""
        text = self._run_with_retry(self._build_request(prompt, system, json_mode=True))
        return parse_json_object(text)

    def _build_request(self, prompt: str, system: str | None, *, json_mode: bool) -> LLMRequest:
        return LLMRequest(
            prompt=prompt,
            system=system,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
            json_mode=json_mode,
        )

    def _run_with_retry(self, request: LLMRequest) -> str:
        for attempt in range(1, self.max_retries + 1):
            try:
                return self._runner(request)
            except LLMError as exc:
                self.logger.warning(
                    "LLM request attempt %d/%d failed: %s", attempt, self.max_retries, exc
                )
                if attempt == self.max_retries:
                    raise
                self._sleep(self.retry_delay)
        raise LLMError("Max retries exceeded")  # pragma: no cover - loop always returns or raises

    @staticmethod
    def _http_runner(request: LLMRequest) -> str:
        body = _chat_payload(request)
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if request.api_key:
            headers["Authorization"] = "Bearer " + request.api_key
        http_request = Request(
            request.base_url + "/chat/completions",
            data=json.dumps(body).encode("utf-8"),
            headers=headers,
            method="POST",
        )

        try:
            with urlopen(http_request, timeout=request.request_timeout or 60.0) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            body_text = exc.read().decode("utf-8", errors="replace").strip() if exc.fp else ""
            raise LLMError(
                f"LLM request failed with status {exc.code}: {body_text or exc.reason}"
            ) from exc
        except URLError as exc:
            raise LLMError(f"LLM request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise LLMError("LLM request timed out") from exc

        try:
            completion = json.loads(raw)
        except ValueError as exc:
            raise LLMError("LLM endpoint returned invalid JSON") from exc

        content = _completion_text(completion)
        if not content:
            raise LLMError("LLM endpoint returned an empty response")
        return content.strip()

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


def _chat_payload(request: LLMRequest) -> Dict[str, Any]:
    messages = [{"role": "user", "content": request.prompt}]
    if request.system:
        messages.insert(0, {"role": "system", "content": request.system})
    body: Dict[str, Any] = {"model": request.model, "messages": messages}
    optional = {"temperature": request.temperature, "max_tokens": request.max_tokens}
    body.update({key: value for key, value in optional.items() if value is not None})
    if request.json_mode:
        body["response_format"] = {"type": "json_object"}
    return body


def _completion_text(completion: Any) -> str:
    """Pull the first choice's text out of a chat (or legacy completion) response."""
    try:
        choice = completion["choices"][0]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(choice, dict):
        return ""
    message = choice.get("message") or {}
    text = message.get("content") if isinstance(message, dict) else None
    if text is None:
        text = choice.get("text")
    return text if isinstance(text, str) else ""


def parse_json_object(text: str) -> Dict[str, Any]:
    """Parse a JSON object from model output, tolerating a Markdown code fence."""
    cleaned = text.strip()
    match = _CODE_FENCE.match(cleaned)
    if match:
        cleaned = match.group(1)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise LLMError(f"LLM response is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise LLMError("LLM response JSON must be an object")
    return data


__all__ = ["LLMRequest", "LLMRunner", "parse_json_object"]
