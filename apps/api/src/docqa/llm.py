from __future__ import annotations

import json
from typing import Any, AsyncIterator, Protocol

from google import genai
from google.auth import exceptions as google_auth_exceptions
from google.genai import errors as genai_errors
from google.genai import types as genai_types
import httpx

from docqa.config import Settings

_SAFETY_CATEGORIES = (
    genai_types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    genai_types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    genai_types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    genai_types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)


class LLMClientError(RuntimeError):
    pass


class GenerationClient(Protocol):
    def stream_chunks(self, prompt: str) -> AsyncIterator[Any]: ...


class VertexGeminiClient:
    """Streams Gemini completions through Vertex AI.

    The SDK client is built on first use so that constructing this object
    never touches Google credentials.
    """

    def __init__(
        self,
        *,
        project_id: str,
        location: str,
        model: str,
        max_output_tokens: int = 2048,
    ) -> None:
        self._project_id = project_id
        self._location = location
        self._model = model
        self._max_output_tokens = max_output_tokens
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                vertexai=True,
                project=self._project_id,
                location=self._location,
            )
        return self._client

    def _config(self) -> genai_types.GenerateContentConfig:
        return genai_types.GenerateContentConfig(
            max_output_tokens=self._max_output_tokens,
            safety_settings=[
                genai_types.SafetySetting(
                    category=category,
                    threshold=genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
                )
                for category in _SAFETY_CATEGORIES
            ],
        )

    async def stream_chunks(self, prompt: str) -> AsyncIterator[Any]:
        try:
            stream = await self._get_client().aio.models.generate_content_stream(
                model=self._model,
                contents=prompt,
                config=self._config(),
            )
            async for chunk in stream:
                yield chunk
        except (
            genai_errors.APIError,
            google_auth_exceptions.GoogleAuthError,
            httpx.HTTPError,
            ValueError,
        ) as exc:
            raise LLMClientError(str(exc)) from exc


class OllamaChatClient:
    """Streams an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(
        self,
        *,
        base_url: str,
        model: str,
        max_output_tokens: int = 2048,
        timeout_seconds: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._max_output_tokens = max_output_tokens
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def stream_chunks(self, prompt: str) -> AsyncIterator[dict[str, Any]]:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                async with client.stream(
                    "POST",
                    f"{self._base_url}/chat/completions",
                    json={
                        "model": self._model,
                        "messages": [{"role": "user", "content": prompt}],
                        "max_tokens": self._max_output_tokens,
                        "temperature": 0,
                        "stream": True,
                    },
                ) as response:
                    response.raise_for_status()
                    async for line in response.aiter_lines():
                        if not line.startswith("data:"):
                            continue
                        data = line[len("data:"):].strip()
                        if data == "[DONE]":
                            break
                        yield _decode_event(data)
        except httpx.HTTPError as exc:
            raise LLMClientError(str(exc)) from exc


def _decode_event(data: str) -> dict[str, Any]:
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise LLMClientError(f"Invalid chat completion stream payload: {exc}") from exc
    if not isinstance(payload, dict):
        raise LLMClientError("Invalid chat completion stream payload: expected an object")
    return payload


def build_generation_client(settings: Settings) -> GenerationClient:
    if settings.llm_provider == "vertex":
        return VertexGeminiClient(
            project_id=settings.project_id,
            location=settings.location,
            model=settings.model_name,
            max_output_tokens=settings.max_output_tokens,
        )
    if settings.llm_provider == "ollama":
        return OllamaChatClient(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            max_output_tokens=settings.max_output_tokens,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    raise ValueError(f"Unsupported LLM_PROVIDER: {settings.llm_provider!r}")
