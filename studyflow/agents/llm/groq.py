from typing import Sequence

from openai import AsyncOpenAI

from studyflow.agents.schemas import ChatMessage
from .base import GenerationConfig, LLMClient, ModelResponse, openai_messages, openai_request

class GroqOpenAIClient(LLMClient):
    def __init__(self, * , api_key: str, base_url: str, model: str):
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model

    async def generate_content(self, *, prompt: str, config: GenerationConfig) -> ModelResponse:
        messages, extra = openai_request(prompt, config)
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            **extra,
        )
        return ModelResponse(text=(resp.choices[0].message.content or "").strip())

    async def send_chat_message(
        self,
        *,
        system_instruction: str,
        history: Sequence[ChatMessage],
        message: str,
        use_search: bool = True,
    ) -> str:
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=openai_messages(system=system_instruction, history=history, user=message),
        )
        return (resp.choices[0].message.content or "").strip()
