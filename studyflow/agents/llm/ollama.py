from typing import Any, Sequence

import httpx

from studyflow.agents.schemas import ChatMessage
from studyflow.agents.llm.base import (
    GenerationConfig,
    LLMClient,
    ModelResponse,
    openai_messages,
    openai_request,
)

class OllamaOpenAIClient(LLMClient):
    def __init__(self, base_url: str, model: str, timeout: float = 120):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    async def _chat_completion(self, messages: list[dict[str, str]], **extra: Any) -> str:
        # Ollama OpenAI-compatible endpoint
        # POST {base_url}/chat/completions with OpenAI message format
        url = f"{self.base_url}/chat/completions"
        payload = {"model": self.model, "messages": messages, **extra}

        headers = {
            "Content-Type": "application/json",
            #OpenAI-compatible clients require an api key field; Ollama ignores it
            "Authorization": "Bearer ollama",
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(url, json=payload, headers=headers)
            r.raise_for_status()
            data = r.json()

        return data["choices"][0]["message"]["content"] or ""

    async def generate_content(self, *, prompt: str, config: GenerationConfig) -> ModelResponse:
        messages, extra = openai_request(prompt, config)
        text = await self._chat_completion(messages, **extra)
        return ModelResponse(text=text.strip())

    async def send_chat_message(
        self,
        *,
        system_instruction: str,
        history: Sequence[ChatMessage],
        message: str,
        use_search: bool = True,
    ) -> str:
        messages = openai_messages(system=system_instruction, history=history, user=message)
        text = await self._chat_completion(messages)
        return text.strip()
