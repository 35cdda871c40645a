"""LLM client — HTTP connection to a text-generation backend.

The flows take an LLM callable matching the protocol:

    async def __call__(self, stage: str, prompt: str) -> str: ...

`stage` identifies which flow is calling ("scene" or "narrator"). The
implementation may use it for logging or routing; the simplest
implementation ignores it.

Two implementations are provided:

    HttpLLM      — real HTTP client, supports KoboldCpp, OpenAI-compatible
                   completions and OpenAI-compatible chat backends.
                   Selected by provider_format.
    ScriptedLLM  — replays canned replies in order and records the prompts
                   it was given. Used by the tests and the offline demo.

Production code constructs an HttpLLM from config (backend.llm.build_llm)
and hands it to GameSession.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Literal, Protocol

import httpx

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol — every LLM implementation must match this signature
# ---------------------------------------------------------------------------

class LLM(Protocol):
    async def __call__(self, stage: str, prompt: str) -> str: ...


# ---------------------------------------------------------------------------
# HttpLLM — connects to a real backend
# ---------------------------------------------------------------------------

ProviderFormat = Literal["koboldcpp", "openai", "openai_chat"]
PROVIDER_FORMATS: tuple[str, ...] = ("koboldcpp", "openai", "openai_chat")


def _first_item(data: Any, key: str) -> dict:
    """First object of the list at ``data[key]``, or ``{}`` if the body has another shape."""
    items = data.get(key) if isinstance(data, dict) else None
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


class HttpLLM:
    """Async HTTP client for text-generation backends.

    Supported formats:
      "koboldcpp"    — POST /api/v1/generate       {"prompt": ...}
                       Response: {"results": [{"text": "..."}]}
      "openai"       — POST /v1/completions        {"model": ..., "prompt": ...}
                       Response: {"choices": [{"text": "..."}]}
      "openai_chat"  — POST /v1/chat/completions   {"model": ..., "messages": [...]}
                       Response: {"choices": [{"message": {"content": "..."}}]}

    Args:
        provider_url:    Base URL of the backend, e.g. "http://localhost:5001".
        api_key:         Bearer token, or empty string if not required.
        provider_format: Wire format to use. Defaults to "koboldcpp".
        model:           Model identifier, used only by the openai formats.
        timeout:         HTTP timeout in seconds. Defaults to 120.
    """

    def __init__(
        self,
        provider_url: str,
        api_key: str = "",
        provider_format: ProviderFormat = "koboldcpp",
        model: str = "",
        timeout: float = 120.0,
    ) -> None:
        self._base_url = provider_url.rstrip("/")
        self._api_key = api_key
        self._format = provider_format
        self._model = model
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _build_request(self, prompt: str) -> tuple[str, dict]:
        """Return (url, body) for the configured format."""
        if self._format == "openai_chat":
            url = f"{self._base_url}/v1/chat/completions"
            body: dict = {"messages": [{"role": "user", "content": prompt}]}
            if self._model:
                body["model"] = self._model
            return url, body

        if self._format == "openai":
            url = f"{self._base_url}/v1/completions"
            body = {"prompt": prompt}
            if self._model:
                body["model"] = self._model
            return url, body

        # koboldcpp (default)
        url = f"{self._base_url}/api/v1/generate"
        return url, {"prompt": prompt}

    def _parse_response(self, data: Any) -> str:
        """Extract the generated text from the response body."""
        if self._format == "openai_chat":
            message = _first_item(data, "choices").get("message")
            content = message.get("content", 0) if isinstance(message, dict) else 0
            if content is not None and not isinstance(content, str):
                raise LLMError("Unexpected response format from OpenAI-compatible chat backend")
            return content or ""

        if self._format == "openai":
            choice = _first_item(data, "choices")
            if not isinstance(choice.get("text"), str):
                raise LLMError("Unexpected response format from OpenAI-compatible backend")
            return choice["text"]

        # koboldcpp
        result = _first_item(data, "results")
        if not isinstance(result.get("text"), str):
            raise LLMError("Unexpected response format from KoboldCpp backend")
        return result["text"]

    async def __call__(self, stage: str, prompt: str) -> str:
        url, body = self._build_request(prompt)
        logger.debug("llm call stage=%s url=%s prompt_len=%d", stage, url, len(prompt))

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to LLM backend at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(
                f"LLM backend returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise LLMError(f"LLM backend timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise LLMError(f"LLM request to {self._base_url} failed: {e!r}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError("LLM backend returned a non-JSON body") from e

        text = self._parse_response(data)
        logger.debug("llm response stage=%s len=%d", stage, len(text))
        return text


# ---------------------------------------------------------------------------
# ScriptedLLM — canned replies, no network
# ---------------------------------------------------------------------------

class ScriptedLLM:
    """Returns pre-written replies in order. No network calls.

    Each reply is either a string or an exception instance; exceptions are
    raised instead of returned, which lets callers rehearse failures.
    Every call is recorded in `calls` as a (stage, prompt) tuple.
    """

    def __init__(self, replies: Iterable[str | Exception] = ()) -> None:
        self._replies = list(replies)
        self.calls: list[tuple[str, str]] = []

    def queue(self, *replies: str | Exception) -> None:
        self._replies.extend(replies)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def prompt(self, index: int) -> str:
        return self.calls[index][1]

    async def __call__(self, stage: str, prompt: str) -> str:
        self.calls.append((stage, prompt))
        logger.debug("ScriptedLLM stage=%s prompt_len=%d", stage, len(prompt))
        if not self._replies:
            raise LLMError(f"ScriptedLLM has no reply left for stage {stage!r}")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


# ---------------------------------------------------------------------------
# LLMError — raised for all connection, protocol and model-output failures
# ---------------------------------------------------------------------------

class LLMError(RuntimeError):
    """Raised when the LLM backend cannot be reached or returns something unusable."""
