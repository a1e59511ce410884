# studyflow/agents/workflow.py
import asyncio
import json
import logging
from contextlib import nullcontext
from typing import Callable

from pydantic import ValidationError

from studyflow.agents.callers import Retry, call_structured, call_with_tools
from studyflow.agents.llm.base import LLMClient
from studyflow.agents.llm.client import get_llm_client
from studyflow.agents.schemas import (
    CURATED_RESOURCES_SCHEMA,
    ROADMAP_DRAFT_SCHEMA,
    CuratedResources,
    GroundingSource,
    LearningResource,
    Milestone,
    Roadmap,
    RoadmapDraft,
    RoadmapResult,
    Task,
    TaskDraft,
    TaskStatus,
)
from studyflow.errors import GenerationError, MalformedModelOutput
from studyflow.settings import settings

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def build_architect_prompt(
    topic: str, experience_level: str, weekly_commitment: str, existing_skills: str = ""
) -> str:
    skills_line = f"\n- Existing Skills: {existing_skills}" if existing_skills.strip() else ""
    return f"""
You are an expert curriculum designer. Create a detailed learning roadmap structure for the topic: "{topic}".

User Profile:
- Experience Level: {experience_level}
- Weekly Commitment: {weekly_commitment}{skills_line}

The roadmap should be tailored to this profile.
- If Beginner: Focus on fundamentals and build up slowly.
- If Intermediate/Advanced: Skip basics if covered by existing skills, focus on advanced concepts.
- Adjust the depth and number of tasks based on the weekly commitment.

The roadmap should be broken down into logical milestones, which represent the **Main Topics** of the subject.
Each milestone must contain specific, actionable tasks, which represent the **Sub-topics** to be learned within that Main Topic.
Provide 2-3 high-level 'overallResources' (like full courses or books) and assign them a relevance rating (1.0-5.0).
For each task, provide a title, description, estimated hours, and a list of key subtopics.
Do NOT generate task-specific resources; that will be handled by another agent.
The entire output MUST be a single JSON object that strictly adheres to the provided schema.
""".strip()


def build_curator_prompt(task: TaskDraft) -> str:
    return f"""
You are an expert Resource Curator. Your task is to find 5-7 of the best, most relevant, and up-to-date learning resources for the following sub-topic:
- Sub-topic Title: "{task.title}"
- Sub-topic Description: "{task.description}"

Use your search tool to find a diverse mix of high-quality resources. Prioritize the following types:
1. In-depth YouTube video tutorials or series.
2. Comprehensive online courses (from platforms like Coursera, Udemy, freeCodeCamp, etc.).
3. Official documentation or key articles from reputable sources.
4. Interactive tutorials or exercises.

Assign a 'rating' (1.0 to 5.0) to each resource based on its quality, comprehensiveness, and user feedback if available.

You MUST format your findings as a single JSON object inside a markdown code block. The JSON object must strictly adhere to the following schema:
Schema: {json.dumps(CURATED_RESOURCES_SCHEMA, indent=2)}
""".strip()


def _report(on_progress: ProgressCallback | None, message: str) -> None:
    logger.info(message)
    if on_progress is not None:
        on_progress(message)


def dedupe_sources(sources: list[GroundingSource]) -> list[GroundingSource]:
    """Structural dedupe, first occurrence wins."""
    seen: dict[str, GroundingSource] = {}
    for source in sources:
        key = json.dumps(source, sort_keys=True, default=str)
        seen.setdefault(key, source)
    return list(seen.values())


async def design_structure(
    llm: LLMClient,
    topic: str,
    experience_level: str,
    weekly_commitment: str,
    existing_skills: str = "",
    *,
    retry: Retry | None = None,
) -> RoadmapDraft:
    prompt = build_architect_prompt(topic, experience_level, weekly_commitment, existing_skills)
    payload = await call_structured(llm, prompt, ROADMAP_DRAFT_SCHEMA, retry=retry)
    try:
        return RoadmapDraft.model_validate(payload)
    except ValidationError as e:
        logger.error("Roadmap structure did not validate: %s", payload)
        raise MalformedModelOutput(
            f"The AI returned an invalid roadmap structure: {e}",
            raw_text=json.dumps(payload, default=str),
        ) from e


async def curate_resources(
    llm: LLMClient,
    tasks: list[TaskDraft],
    on_progress: ProgressCallback | None = None,
    *,
    retry: Retry | None = None,
    concurrency: int | None = None,
) -> tuple[list[list[LearningResource]], list[GroundingSource]]:
    """One search-grounded call per task, all in flight at once.

    Returns resources aligned with ``tasks`` by position. A failed call yields
    an empty list for that task and never aborts the others.
    """
    total = len(tasks)
    limit = settings.curation_concurrency if concurrency is None else concurrency
    gate = asyncio.Semaphore(limit) if limit and limit > 0 else None

    results: list[list[LearningResource]] = [[] for _ in tasks]
    all_sources: list[GroundingSource] = []
    completed = 0

    async def curate_one(index: int, task: TaskDraft) -> None:
        nonlocal completed
        try:
            async with gate if gate is not None else nullcontext():
                result = await call_with_tools(llm, build_curator_prompt(task), retry=retry)
            curated, dropped = CuratedResources.from_payload(result.payload)
            for error in dropped:
                logger.warning(
                    'Dropped invalid resource for task "%s": %s',
                    task.title, error.errors(include_url=False),
                )
            results[index] = curated.resources
            all_sources.extend(result.sources)
        except Exception as e:
            logger.warning('Failed to get resources for task "%s": %s: %s', task.title, type(e).__name__, e)

        completed += 1
        try:
            _report(on_progress, f"Step 2/2: Curating resources... ({completed}/{total} tasks complete)")
        except Exception:
            # a broken progress listener must not sink the other tasks
            logger.exception('Progress callback failed after task "%s"', task.title)

    await asyncio.gather(*(curate_one(i, t) for i, t in enumerate(tasks)))
    return results, dedupe_sources(all_sources)


def merge_roadmap(draft: RoadmapDraft, resources: list[list[LearningResource]]) -> Roadmap:
    """Attach curated resources (by flattened task position) and initial status."""
    slots = iter(resources)
    milestones = []
    for m in draft.milestones:
        tasks = [
            Task(
                **t.model_dump(),
                status=TaskStatus.NOT_STARTED,
                resources=next(slots, []),
            )
            for t in m.tasks
        ]
        milestones.append(Milestone(id=m.id, title=m.title, tasks=tasks))

    return Roadmap(
        title=draft.title,
        description=draft.description,
        total_estimated_hours=draft.total_estimated_hours,
        milestones=milestones,
        overall_resources=draft.overall_resources,
    )


async def generate_roadmap(
    topic: str,
    on_progress: ProgressCallback | None = None,
    experience_level: str = "Beginner",
    weekly_commitment: str = "Moderate",
    existing_skills: str = "",
    *,
    llm: LLMClient | None = None,
    retry: Retry | None = None,
) -> RoadmapResult:
    try:
        llm = llm or get_llm_client()

        # Stage 1: structure
        _report(on_progress, "Step 1/2: Designing roadmap structure...")
        draft = await design_structure(
            llm, topic, experience_level, weekly_commitment, existing_skills, retry=retry
        )

        # Stage 2: per-task curation
        tasks = [t for m in draft.milestones for t in m.tasks]
        _report(on_progress, f"Step 2/2: Curating resources for {len(tasks)} tasks...")
        resources, sources = await curate_resources(llm, tasks, on_progress, retry=retry)

        # Stage 3: merge
        _report(on_progress, "Finalizing your roadmap...")
        roadmap = merge_roadmap(draft, resources)
        roadmap.experience_level = experience_level
        roadmap.weekly_commitment = weekly_commitment
        roadmap.existing_skills = existing_skills or None

        return RoadmapResult(roadmap=roadmap, sources=sources)

    except Exception as e:
        logger.exception("Error generating roadmap for topic %r", topic)
        raise GenerationError(f"Failed to generate roadmap: {e}") from e
