## Pydantic Schemas for Structured Output
import re
from datetime import datetime
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

# Opaque citation object from a search-grounded call
GroundingSource = dict[str, Any]

_LEADING_NUMBER = re.compile(r"\s*\d+(?:\.\d+)?")


class CamelModel(BaseModel):
    # Stored rows may carry integer ids; ids are always strings here
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ResourceType(str, Enum):
    VIDEO = "video"
    ARTICLE = "article"
    BOOK = "book"
    INTERACTIVE = "interactive"
    DOCUMENTATION = "documentation"
    COURSE = "course"


class LearningResource(CamelModel):
    title: str
    url: str
    type: ResourceType = ResourceType.ARTICLE
    # Model-asserted quality hint, never verified
    rating: Optional[float] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_type(cls, v):
        if isinstance(v, ResourceType):
            return v
        value = str(v or "").strip().lower()
        if value in {t.value for t in ResourceType}:
            return value
        return ResourceType.ARTICLE

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, v):
        if v is None or isinstance(v, bool):
            return None
        if not isinstance(v, (int, float)):
            # "4.5/5", "4.5 stars"
            match = _LEADING_NUMBER.match(str(v))
            if match is None:
                return None
            v = match.group(0)
        return min(5.0, max(1.0, float(v)))


class TaskDraft(CamelModel):
    id: str
    title: str
    description: str = ""
    estimated_hours: float = Field(default=0, ge=0)
    subtopics: List[str] = Field(default_factory=list)


class MilestoneDraft(CamelModel):
    id: str
    title: str
    tasks: List[TaskDraft] = Field(default_factory=list)


class RoadmapDraft(CamelModel):
    title: str
    description: str = ""
    total_estimated_hours: float = Field(default=0, ge=0)
    milestones: List[MilestoneDraft] = Field(min_length=1)
    overall_resources: List[LearningResource] = Field(default_factory=list)


class CuratedResources(CamelModel):
    resources: List[LearningResource] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> tuple["CuratedResources", list[ValidationError]]:
        """Validate the curator's items one by one.

        Invalid items are left out and returned as errors, so one bad entry
        never costs the task its other resources. A payload without a
        ``resources`` list is rejected outright.
        """
        items = payload.get("resources") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise ValueError("Curated payload has no 'resources' list")

        resources: list[LearningResource] = []
        errors: list[ValidationError] = []
        for item in items:
            try:
                resources.append(LearningResource.model_validate(item))
            except ValidationError as e:
                errors.append(e)
        return cls(resources=resources), errors


class Task(TaskDraft):
    status: TaskStatus = TaskStatus.NOT_STARTED
    resources: List[LearningResource] = Field(default_factory=list)


class Milestone(CamelModel):
    id: str
    title: str
    tasks: List[Task] = Field(default_factory=list)


class Roadmap(CamelModel):
    id: Optional[str] = None
    title: str
    description: str = ""
    total_estimated_hours: float = 0
    milestones: List[Milestone] = Field(default_factory=list)
    overall_resources: List[LearningResource] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    user_id: Optional[str] = None
    experience_level: Optional[str] = None
    weekly_commitment: Optional[str] = None
    existing_skills: Optional[str] = None

    def all_tasks(self) -> list[Task]:
        return [t for m in self.milestones for t in m.tasks]

    def is_complete(self) -> bool:
        tasks = self.all_tasks()
        return bool(tasks) and all(t.status == TaskStatus.COMPLETED for t in tasks)


class RoadmapResult(BaseModel):
    roadmap: Roadmap
    sources: List[GroundingSource] = Field(default_factory=list)


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    text: str


class Stats(CamelModel):
    hours_studied: float = 0
    roadmaps_completed: int = 0
    current_streak: int = 0


# Wire schemas in the OpenAPI subset the Gemini API accepts.
_RESOURCE_ITEM_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "url": {"type": "STRING"},
        "type": {
            "type": "STRING",
            "description": "Can be 'video', 'article', 'documentation', 'course', 'interactive', or 'book'.",
        },
        "rating": {
            "type": "NUMBER",
            "description": "A quality score from 1.0 to 5.0 based on relevance, depth, and authority.",
        },
    },
    "required": ["title", "url", "type", "rating"],
}

ROADMAP_DRAFT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "description": {"type": "STRING"},
        "totalEstimatedHours": {"type": "NUMBER"},
        "overallResources": {"type": "ARRAY", "items": _RESOURCE_ITEM_SCHEMA},
        "milestones": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "title": {"type": "STRING"},
                    "tasks": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "id": {"type": "STRING"},
                                "title": {"type": "STRING"},
                                "description": {"type": "STRING"},
                                "estimatedHours": {"type": "NUMBER"},
                                "subtopics": {
                                    "type": "ARRAY",
                                    "description": "A list of 2-5 key sub-topics or specific concepts to cover within this task.",
                                    "items": {"type": "STRING"},
                                },
                            },
                            "required": ["id", "title", "description", "estimatedHours"],
                        },
                    },
                },
                "required": ["id", "title", "tasks"],
            },
        },
    },
    "required": ["title", "description", "totalEstimatedHours", "milestones", "overallResources"],
}

CURATED_RESOURCES_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "resources": {
            "type": "ARRAY",
            "description": "A list of 5-7 diverse, high-quality learning resources for this specific task.",
            "items": _RESOURCE_ITEM_SCHEMA,
        }
    },
    "required": ["resources"],
}
