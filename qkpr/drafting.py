"""Drafting of commit messages and branch names with Google Gemini.

The Gemini REST API is called directly with httpx. Drafts are streamed with
``streamGenerateContent?alt=sse`` so that callers can show partial output as it
arrives; the final draft is the concatenation of all chunks.

Failures are never retried here. Callers surface the DraftError and let the
user ask for a regeneration.
"""

import enum
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, List, Optional

import httpx

from .config import get_gemini_base_url, get_gemini_timeout
from .errors import DraftError, ErrorKind
from .locales import get_locale_string
from .preferences import (
    get_custom_branch_prompt,
    get_custom_commit_prompt,
    get_prompt_language,
)

__all__ = [
    "COMMON_MODELS",
    "DraftKind",
    "DraftState",
    "ModelListing",
    "GeminiClient",
    "build_prompt",
    "resolve_custom_prompt",
    "clean_commit_message",
    "clean_branch_name",
    "draft",
    "fetch_available_models",
]

logger = logging.getLogger(__name__)

COMMON_MODELS = [
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-1.5-flash",
    "gemini-1.5-pro",
]


class DraftKind(enum.Enum):
    COMMIT = "commit"
    BRANCH = "branch"


class DraftState(enum.Enum):
    """States of the interactive draft/accept/regenerate loop."""

    IDLE = "idle"
    DRAFTED = "drafted"
    ACCEPTED = "accepted"
    REGENERATING = "regenerating"
    CANCELLED = "cancelled"


@dataclass
class ModelListing:
    """Result of listing models.

    When the API could not be queried, ``degraded`` is True, ``models`` holds
    COMMON_MODELS and ``error`` describes the failure.
    """

    models: List[str] = field(default_factory=list)
    degraded: bool = False
    error: Optional[str] = None


_PROMPT_KEYS = {
    DraftKind.COMMIT: "COMMIT_MESSAGE_PROMPT",
    DraftKind.BRANCH: "BRANCH_NAME_PROMPT",
}


def build_prompt(
    kind: DraftKind, diff: str, language: str, custom_prompt: Optional[str] = None
) -> str:
    """Prompt text sent to the model: instructions followed by the diff."""
    instructions = custom_prompt or get_locale_string(language, _PROMPT_KEYS[kind])
    return f"{instructions}\n\n{diff}"


def resolve_custom_prompt(kind: DraftKind) -> Optional[str]:
    if kind is DraftKind.COMMIT:
        return get_custom_commit_prompt()
    return get_custom_branch_prompt()


_FENCE_RE = re.compile(r"^```[\w-]*\s*\n?|\n?```\s*$")


def clean_commit_message(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def clean_branch_name(text: str) -> str:
    """First non-empty line of the completion, usable as a branch name."""
    for line in clean_commit_message(text).splitlines():
        line = line.strip().strip("`'\"").strip()
        if line:
            return re.sub(r"\s+", "-", line)
    return ""


def _error_detail(response_text: str) -> str:
    try:
        payload = json.loads(response_text)
    except ValueError:
        return response_text.strip()
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return str(payload["error"].get("message", response_text)).strip()
    return response_text.strip()


def _chunk_text(chunk: Any) -> str:
    if not isinstance(chunk, dict):
        return ""
    if isinstance(chunk.get("error"), dict):
        raise DraftError(f"Gemini error: {chunk['error'].get('message', chunk['error'])}")
    candidates = chunk.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(str(part.get("text", "")) for part in parts if isinstance(part, dict))


class GeminiClient:
    """Minimal async client for the Gemini generative language API.

    Usage::

        client = GeminiClient(api_key="...", model="gemini-2.0-flash")
        async for chunk in client.stream("Say hi"):
            print(chunk, end="")
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = (base_url or get_gemini_base_url()).rstrip("/")
        self._timeout = timeout if timeout is not None else get_gemini_timeout()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self._api_key,
            },
        )

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield text chunks of the completion for prompt.

        Raises:
            DraftError: On non-2xx responses or malformed stream events.
            httpx.HTTPError: On transport failures.
        """
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        url = f"{self._base_url}/models/{self._model}:streamGenerateContent"

        async with self._client() as client:
            async with client.stream(
                "POST", url, params={"alt": "sse"}, json=payload
            ) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise DraftError(
                        f"Gemini request failed: HTTP {response.status_code} - "
                        f"{_error_detail(body)}"
                    )
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line[len("data:") :].strip()
                    if not data:
                        continue
                    try:
                        chunk = json.loads(data)
                    except ValueError as e:
                        raise DraftError(f"Malformed response from Gemini: {e}") from e
                    text = _chunk_text(chunk)
                    if text:
                        yield text

    async def list_models(self) -> List[str]:
        """Names of models that support generateContent, without "models/".

        Raises:
            httpx.HTTPError: On transport failures and error statuses.
            ValueError: If the body is not a JSON object with a "models" list.
        """
        async with self._client() as client:
            response = await client.get(
                f"{self._base_url}/models", params={"pageSize": 1000}
            )
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise ValueError(f"Unexpected model list response: {type(data).__name__}")
        entries = data.get("models", [])
        if not isinstance(entries, list):
            raise ValueError("Unexpected model list response: 'models' is not a list")

        models = []
        for model in entries:
            if not isinstance(model, dict):
                continue
            methods = model.get("supportedGenerationMethods") or []
            name = str(model.get("name", ""))
            if "generateContent" not in methods or not name:
                continue
            models.append(name[len("models/") :] if name.startswith("models/") else name)
        return models


async def draft(
    kind: DraftKind,
    diff: str,
    api_key: str,
    model: str,
    on_chunk: Optional[Callable[[str], None]] = None,
    client: Optional[GeminiClient] = None,
) -> str:
    """Draft a commit message or branch name for diff.

    The prompt is the user's custom prompt for kind if one is configured,
    otherwise the built-in template in the configured prompt language.

    Args:
        kind: What to draft
        diff: The staged diff
        api_key: Gemini API key
        model: Gemini model name
        on_chunk: Called with every chunk as it arrives, for progressive display
        client: Client to use instead of a new GeminiClient

    Returns:
        The cleaned-up draft.

    Raises:
        DraftError: If the diff is empty, the request fails or nothing was generated.
    """
    if not diff.strip():
        raise DraftError("No staged changes to describe", kind=ErrorKind.NO_STAGED_CHANGES)

    prompt = build_prompt(kind, diff, get_prompt_language(), resolve_custom_prompt(kind))
    if client is None:
        client = GeminiClient(api_key=api_key, model=model)

    logger.info(f"Drafting {kind.value} with model {model} ({len(diff)} bytes of diff)")
    chunks: List[str] = []
    try:
        async for chunk in client.stream(prompt):
            chunks.append(chunk)
            if on_chunk is not None:
                on_chunk(chunk)
    except httpx.HTTPError as e:
        raise DraftError(f"Could not reach Gemini: {e}") from e

    text = "".join(chunks)
    result = clean_branch_name(text) if kind is DraftKind.BRANCH else clean_commit_message(text)
    if not result:
        raise DraftError("Gemini returned an empty response")
    return result


async def fetch_available_models(
    api_key: str, client: Optional[GeminiClient] = None
) -> ModelListing:
    """List models, substituting COMMON_MODELS if the API cannot be queried."""
    if client is None:
        client = GeminiClient(api_key=api_key, model="")
    try:
        models = await client.list_models()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Could not fetch model list: {e}")
        return ModelListing(models=list(COMMON_MODELS), degraded=True, error=str(e))

    if not models:
        return ModelListing(
            models=list(COMMON_MODELS), degraded=True, error="No models returned"
        )
    return ModelListing(models=models)
