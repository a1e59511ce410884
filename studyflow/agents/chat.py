# studyflow/agents/chat.py
"""
Context-aware study assistant.

The UI tells us what the user is looking at through a ``ChatContext``. Each
variant carries only the fields its instruction needs.
"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Union

from studyflow.agents.callers import Retry, default_retry
from studyflow.agents.llm.base import LLMClient
from studyflow.agents.llm.client import get_llm_client
from studyflow.agents.schemas import ChatMessage, Roadmap, Stats
from studyflow.errors import ChatError

logger = logging.getLogger(__name__)

ASSISTANT_NAME = "StudyFlow AI"
CHAT_FALLBACK_MESSAGE = "Sorry, I'm having trouble connecting right now. Please try again later."


@dataclass(frozen=True)
class NoContext:
    pass


@dataclass(frozen=True)
class RoadmapContext:
    title: str
    description: str = ""
    milestone_titles: tuple[str, ...] = ()

    @classmethod
    def from_roadmap(cls, roadmap: Roadmap) -> "RoadmapContext":
        return cls(
            title=roadmap.title,
            description=roadmap.description,
            milestone_titles=tuple(m.title for m in roadmap.milestones),
        )


@dataclass(frozen=True)
class TaskContext:
    title: str
    roadmap_title: str
    description: str = ""
    subtopics: tuple[str, ...] = ()


@dataclass(frozen=True)
class DashboardContext:
    roadmap_titles: tuple[str, ...] = ()
    hours_studied: float = 0
    roadmaps_completed: int = 0

    @classmethod
    def from_state(cls, roadmaps: Sequence[Roadmap], stats: Stats) -> "DashboardContext":
        return cls(
            roadmap_titles=tuple(r.title for r in roadmaps),
            hours_studied=stats.hours_studied,
            roadmaps_completed=stats.roadmaps_completed,
        )


@dataclass(frozen=True)
class CreateContext:
    pass


@dataclass(frozen=True)
class WriteupContext:
    pass


ChatContext = Union[NoContext, RoadmapContext, TaskContext, DashboardContext, CreateContext, WriteupContext]


def _strings(values: Any) -> tuple[str, ...]:
    return tuple(str(v) for v in (values or []))


def parse_chat_context(raw: Mapping[str, Any] | None) -> ChatContext:
    """Map the UI's tagged ``{"type": ..., "data": ...}`` dict onto a variant."""
    if not raw:
        return NoContext()
    data = raw.get("data") or {}

    match raw.get("type"):
        case "roadmap" if data:
            return RoadmapContext(
                title=data.get("title", ""),
                description=data.get("description", ""),
                milestone_titles=tuple(m.get("title", "") for m in data.get("milestones") or []),
            )
        case "task" if data.get("task"):
            task = data["task"]
            return TaskContext(
                title=task.get("title", ""),
                roadmap_title=data.get("roadmapTitle", ""),
                description=task.get("description", ""),
                subtopics=_strings(task.get("subtopics")),
            )
        case "dashboard":
            stats = Stats.model_validate(data.get("stats") or {})
            roadmaps = data.get("roadmaps") or []
            return DashboardContext(
                roadmap_titles=tuple(r.get("title", "") for r in roadmaps),
                hours_studied=stats.hours_studied,
                roadmaps_completed=stats.roadmaps_completed,
            )
        case "create":
            return CreateContext()
        case "writeup":
            return WriteupContext()
        case _:
            return NoContext()


def build_system_instruction(context: ChatContext) -> str:
    match context:
        case RoadmapContext(title=title, description=description, milestone_titles=milestones):
            return f"""You are "{ASSISTANT_NAME}", a helpful AI study assistant.
The user is working on a roadmap for "{title}".
Description: {description}
Milestones: {', '.join(milestones)}.

If the user asks for resources, use Google Search to find relevant YouTube videos, articles, or courses specifically for this roadmap's topic.
Answer concisely."""
        case TaskContext(title=title, roadmap_title=roadmap_title, description=description, subtopics=subtopics):
            return f"""You are "{ASSISTANT_NAME}". The user is studying a specific task: "{title}" (Roadmap: {roadmap_title}).
Description: {description}.
Subtopics: {', '.join(subtopics)}.

If the user asks for help, explain the concept simply.
If the user asks for resources, use Google Search to find YouTube tutorials, documentation, or articles specifically for "{title}"."""
        case DashboardContext(roadmap_titles=titles, hours_studied=hours, roadmaps_completed=done):
            active = ", ".join(titles) if titles else "none yet"
            return f"""You are "{ASSISTANT_NAME}". The user is on their dashboard.
Active roadmaps: {active}.
Hours studied: {hours:g}. Roadmaps completed: {done}.
Help them analyze their stats or suggest what to study next."""
        case CreateContext():
            return f'You are "{ASSISTANT_NAME}". The user is creating a new roadmap. Help them brainstorm topics.'
        case WriteupContext():
            return f"""You are "{ASSISTANT_NAME}". The user is reading the project write-up for this application.
Explain how it was built: a structuring model call designs milestones and tasks, then parallel search-grounded calls curate resources for every task.
Answer questions about the architecture, the AI context handling, the tech stack and the database schema."""
        case NoContext():
            return f"""You are "{ASSISTANT_NAME}", a helpful and encouraging AI study assistant. Answer the user's questions concisely.
Provide encouragement and helpful advice. Keep responses under 200 words. Format your response in markdown.
You have access to Google Search. If the user asks for additional resources (videos, articles, courses), use the search tool to find high-quality, up-to-date links."""
        case _:
            raise TypeError(f"Unsupported chat context: {context!r}")


def chat_greeting(context: ChatContext) -> str:
    match context:
        case RoadmapContext(title=title):
            return f'How can I help you with your "{title}" roadmap?'
        case TaskContext(title=title):
            return f'I can help you understand "{title}". Need an explanation or more resources?'
        case DashboardContext():
            return "I can help with questions about your stats or active roadmaps. What's on your mind?"
        case CreateContext():
            return "Need help brainstorming your next learning goal? Just ask!"
        case WriteupContext():
            return "I can explain how this application was built. Ask away!"
        case _:
            return f"Hi! I'm {ASSISTANT_NAME}. How can I help you today?"


def suggested_questions(context: ChatContext) -> list[str]:
    match context:
        case TaskContext():
            return [
                "Explain this concept simply",
                "Give me a real-world example",
                "Find YouTube tutorials",
                "Quiz me on this topic",
            ]
        case RoadmapContext():
            return [
                "Summarize the learning path",
                "Suggest a project idea",
                "What are the prerequisites?",
                "Find extra video courses",
            ]
        case DashboardContext():
            return [
                "Analyze my study habits",
                "What should I focus on?",
                "Suggest a new topic to learn",
                "How to stay motivated?",
            ]
        case CreateContext():
            return [
                "Roadmap for Full Stack Dev",
                "Roadmap for AI Engineering",
                "Beginner friendly ideas",
            ]
        case WriteupContext():
            return [
                "Explain the architecture",
                "How is AI context managed?",
                "What tech stack is used?",
                "Explain the database schema",
            ]
        case _:
            return [
                "What can you help me with?",
                "How do I create a roadmap?",
                "Find learning resources",
            ]


async def get_chat_response(
    history: Sequence[ChatMessage],
    new_message: str,
    context: ChatContext | None = None,
    *,
    llm: LLMClient | None = None,
    retry: Retry | None = None,
) -> str:
    try:
        llm = llm or get_llm_client()
        retry = retry or default_retry()
        instruction = build_system_instruction(context or NoContext())

        return await retry(
            lambda: llm.send_chat_message(
                system_instruction=instruction,
                history=list(history),
                message=new_message,
                use_search=True,
            )
        )
    except Exception as e:
        logger.exception("Error getting chat response")
        raise ChatError("Failed to get chat response.") from e
