## Base LLM Client Interface
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

from studyflow.agents.schemas import ChatMessage, GroundingSource


@dataclass
class GenerationConfig:
    """Either structured mode (``response_schema``) or tool mode (``use_search``)."""

    response_schema: dict[str, Any] | None = None
    use_search: bool = False
    temperature: float | None = None


@dataclass
class ModelResponse:
    text: str
    grounding_chunks: list[GroundingSource] = field(default_factory=list)


class LLMClient(ABC):
    @abstractmethod
    async def generate_content(self, *, prompt: str, config: GenerationConfig) -> ModelResponse:
        raise NotImplementedError

    @abstractmethod
    async def send_chat_message(
        self,
        *,
        system_instruction: str,
        history: Sequence[ChatMessage],
        message: str,
        use_search: bool = True,
    ) -> str:
        raise NotImplementedError


# Shared by the OpenAI-compatible providers (Groq, Ollama)
JSON_ONLY_SYSTEM = """You must return ONLY valid JSON (no markdown, no code fences, no commentary).
The JSON must match this schema exactly:
{schema}
"""


def openai_messages(
    *,
    system: str,
    history: Sequence[ChatMessage] = (),
    user: str,
) -> list[dict[str, str]]:
    messages = [{"role": "system", "content": system}]
    for m in history:
        messages.append({"role": "assistant" if m.role == "model" else "user", "content": m.text})
    messages.append({"role": "user", "content": user})
    return messages


def openai_request(prompt: str, config: GenerationConfig) -> tuple[list[dict[str, str]], dict[str, Any]]:
    """Messages plus extra request fields for a single-shot OpenAI-style call.

    These providers have no search tool; ``use_search`` is ignored and no
    grounding chunks come back.
    """
    extra: dict[str, Any] = {}
    if config.temperature is not None:
        extra["temperature"] = config.temperature

    if config.response_schema is not None:
        system = JSON_ONLY_SYSTEM.format(schema=json.dumps(config.response_schema, indent=2))
        extra["response_format"] = {"type": "json_object"}
    else:
        system = "You are a helpful assistant."

    return openai_messages(system=system, user=prompt), extra
