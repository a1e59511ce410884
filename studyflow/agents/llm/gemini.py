from typing import Sequence

from google import genai
from google.genai import types

from studyflow.agents.llm.base import GenerationConfig, LLMClient, ModelResponse
from studyflow.agents.schemas import ChatMessage, GroundingSource


def _search_tools() -> list[types.Tool]:
    return [types.Tool(google_search=types.GoogleSearch())]


def _grounding_chunks(response: types.GenerateContentResponse) -> list[GroundingSource]:
    if not response.candidates:
        return []
    metadata = response.candidates[0].grounding_metadata
    if metadata is None or not metadata.grounding_chunks:
        return []
    return [chunk.model_dump(mode="json", exclude_none=True) for chunk in metadata.grounding_chunks]


class GeminiClient(LLMClient):
    def __init__(self, *, api_key: str, model: str):
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def generate_content(self, *, prompt: str, config: GenerationConfig) -> ModelResponse:
        options = {}
        if config.temperature is not None:
            options["temperature"] = config.temperature
        if config.response_schema is not None:
            options["response_mime_type"] = "application/json"
            options["response_schema"] = config.response_schema
        if config.use_search:
            options["tools"] = _search_tools()

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(**options),
        )
        return ModelResponse(text=response.text or "", grounding_chunks=_grounding_chunks(response))

    async def send_chat_message(
        self,
        *,
        system_instruction: str,
        history: Sequence[ChatMessage],
        message: str,
        use_search: bool = True,
    ) -> str:
        chat = self.client.aio.chats.create(
            model=self.model,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                tools=_search_tools() if use_search else None,
            ),
            history=[
                types.Content(role=m.role, parts=[types.Part(text=m.text)])
                for m in history
            ],
        )
        response = await chat.send_message(message)
        return response.text or ""
