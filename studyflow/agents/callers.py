# studyflow/agents/callers.py
import json
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Awaitable, Callable

from studyflow.agents.json_extract import extract_json_payload
from studyflow.agents.llm.base import GenerationConfig, LLMClient, ModelResponse
from studyflow.agents.retry import with_retry
from studyflow.agents.schemas import GroundingSource
from studyflow.errors import MalformedModelOutput
from studyflow.settings import settings

logger = logging.getLogger(__name__)

Retry = Callable[[Callable[[], Awaitable[Any]]], Awaitable[Any]]


def default_retry() -> Retry:
    return partial(
        with_retry,
        max_attempts=settings.retry_max_attempts,
        initial_delay_ms=settings.retry_initial_delay_ms,
    )


@dataclass
class ToolCallResult:
    payload: Any
    sources: list[GroundingSource] = field(default_factory=list)


async def call_structured(
    llm: LLMClient,
    prompt: str,
    schema: dict[str, Any],
    *,
    retry: Retry | None = None,
) -> Any:
    """Structured-output call: JSON constrained to ``schema``, no tools."""
    retry = retry or default_retry()
    config = GenerationConfig(response_schema=schema)
    response: ModelResponse = await retry(lambda: llm.generate_content(prompt=prompt, config=config))

    raw_text = response.text.strip()
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse JSON from structured model: %s", response.text)
        raise MalformedModelOutput("The AI returned an invalid data structure.", raw_text=raw_text) from e


async def call_with_tools(
    llm: LLMClient,
    prompt: str,
    *,
    retry: Retry | None = None,
) -> ToolCallResult:
    """Search-grounded call; the JSON payload is recovered from free-form text."""
    retry = retry or default_retry()
    config = GenerationConfig(use_search=True)
    response: ModelResponse = await retry(lambda: llm.generate_content(prompt=prompt, config=config))

    try:
        payload = extract_json_payload(response.text)
    except MalformedModelOutput:
        logger.error("Failed to parse JSON from tool-enabled model: %s", response.text)
        raise

    return ToolCallResult(payload=payload, sources=list(response.grounding_chunks or []))
