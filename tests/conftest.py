import asyncio
import json
from typing import Callable, Sequence

from studyflow.agents.llm.base import GenerationConfig, LLMClient, ModelResponse
from studyflow.agents.schemas import ChatMessage


class FakeLLM(LLMClient):
    """Scripted stand-in for a model provider.

    ``structured`` is the text returned for schema-constrained calls (or an
    exception to raise). ``tool_responder`` maps a tool-mode prompt to a
    ModelResponse, or raises.
    """

    def __init__(
        self,
        *,
        structured: str | Exception = "{}",
        tool_responder: Callable[[str], ModelResponse] | None = None,
        chat_reply: str | Exception = "Sure!",
    ):
        self.structured = structured
        self.tool_responder = tool_responder or (lambda prompt: ModelResponse(text='{"resources": []}'))
        self.chat_reply = chat_reply
        self.structured_calls: list[tuple[str, GenerationConfig]] = []
        self.tool_calls: list[tuple[str, GenerationConfig]] = []
        self.chat_calls: list[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate_content(self, *, prompt: str, config: GenerationConfig) -> ModelResponse:
        if config.response_schema is not None:
            self.structured_calls.append((prompt, config))
            if isinstance(self.structured, Exception):
                raise self.structured
            return ModelResponse(text=self.structured)

        self.tool_calls.append((prompt, config))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            return self.tool_responder(prompt)
        finally:
            self.in_flight -= 1

    async def send_chat_message(
        self,
        *,
        system_instruction: str,
        history: Sequence[ChatMessage],
        message: str,
        use_search: bool = True,
    ) -> str:
        self.chat_calls.append({
            "system_instruction": system_instruction,
            "history": list(history),
            "message": message,
            "use_search": use_search,
        })
        if isinstance(self.chat_reply, Exception):
            raise self.chat_reply
        return self.chat_reply


def make_draft(milestones: list[tuple[str, list[tuple[str, str]]]]) -> str:
    """Stage-1 JSON text: [(milestone_id, [(task_id, task_title), ...]), ...]."""
    return json.dumps({
        "title": "Learn Python for Data Science",
        "description": "From zero to pandas.",
        "totalEstimatedHours": 40,
        "overallResources": [
            {"title": "Python for Data Analysis", "url": "https://wesmckinney.com/book/", "type": "book", "rating": 4.8},
        ],
        "milestones": [
            {
                "id": mid,
                "title": f"Milestone {mid}",
                "tasks": [
                    {
                        "id": tid,
                        "title": title,
                        "description": f"Study {title}",
                        "estimatedHours": 4,
                        "subtopics": ["basics", "practice"],
                    }
                    for tid, title in tasks
                ],
            }
            for mid, tasks in milestones
        ],
    })


def resources_response(*titles: str, sources: list[dict] | None = None) -> ModelResponse:
    payload = {
        "resources": [
            {"title": t, "url": f"https://example.com/{i}", "type": "video", "rating": 4.5}
            for i, t in enumerate(titles)
        ]
    }
    text = f"Here is what I found:\n```json\n{json.dumps(payload)}\n```\nHappy learning!"
    return ModelResponse(text=text, grounding_chunks=sources or [])
