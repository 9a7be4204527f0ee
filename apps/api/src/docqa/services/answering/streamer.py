from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any

from docqa.errors import GenerationError, NotReadyError, ValidationError
from docqa.llm import GenerationClient
from docqa.services.answering.prompt import build_prompt
from docqa.services.documents.types import DocumentPair

logger = logging.getLogger(__name__)

# Gemini responses first, then OpenAI-compatible stream deltas.
_FRAGMENT_PATHS: tuple[tuple[str | int, ...], ...] = (
    ("candidates", 0, "content", "parts", 0, "text"),
    ("choices", 0, "delta", "content"),
)


def _lookup(value: Any, path: tuple[str | int, ...]) -> Any:
    for key in path:
        if value is None:
            return None
        if isinstance(key, int):
            if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
                return None
            if len(value) <= key:
                return None
            value = value[key]
        elif isinstance(value, Mapping):
            value = value.get(key)
        else:
            value = getattr(value, key, None)
    return value


def extract_fragment(chunk: Any) -> str:
    """Return the text carried by one streamed chunk, or ``""`` if it has none."""
    for path in _FRAGMENT_PATHS:
        text = _lookup(chunk, path)
        if isinstance(text, str):
            return text
    return ""


class AnswerStreamer:
    def __init__(self, client: GenerationClient) -> None:
        self._client = client

    async def answer(self, question: str, pair: DocumentPair) -> str:
        if not question:
            raise ValidationError("Question is required.")
        if not pair.is_ready:
            raise NotReadyError()

        prompt = build_prompt(pair.source_text, pair.target_text, question)
        logger.info("Sending question to model: %s", question)

        fragments: list[str] = []
        stream = self._client.stream_chunks(prompt)
        try:
            async for chunk in stream:
                fragments.append(extract_fragment(chunk))
        except Exception as exc:
            partial_answer = "".join(fragments)
            logger.error(
                "Generation stream failed after %d chunks (%d chars): %s",
                len(fragments),
                len(partial_answer),
                exc,
            )
            raise GenerationError(exc, partial_answer=partial_answer) from exc
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

        answer = "".join(fragments)
        logger.info("Answer received from model (%d chars)", len(answer))
        return answer
