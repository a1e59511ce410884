# studyflow/roadmaps/supabase_store.py
"""
Hosted Postgres (Supabase) store for signed-in users.

Tables: roadmaps, milestones, tasks, stats. Columns use the camelCase names
the web client writes (``totalEstimatedHours``, ``hoursStudied`` ...).
"""
import logging
from typing import Any

from supabase import Client, create_client

from studyflow.agents.schemas import Roadmap, Stats, TaskStatus
from studyflow.errors import ConfigurationError
from studyflow.roadmaps.store import RoadmapStore
from studyflow.settings import settings

logger = logging.getLogger(__name__)


def supabase_configuration_error() -> str | None:
    """Human-readable reason the hosted store is unusable, or None."""
    if not settings.supabase_url or not settings.supabase_anon_key:
        return (
            "Supabase credentials are not set. Please add SUPABASE_URL and "
            "SUPABASE_ANON_KEY to your .env file."
        )
    return None


def get_supabase_client() -> Client:
    error = supabase_configuration_error()
    if error:
        raise ConfigurationError(error)
    try:
        return create_client(settings.supabase_url, settings.supabase_anon_key)
    except Exception as e:
        # create_client rejects malformed URLs/keys
        raise ConfigurationError(f"Invalid Supabase configuration: {e}") from e


def _stats_row(user_id: str, stats: Stats) -> dict[str, Any]:
    return {"user_id": user_id, **stats.model_dump(by_alias=True)}


class SupabaseRoadmapStore(RoadmapStore):
    def __init__(self, client: Client | None = None):
        self.client = client or get_supabase_client()

    def insert_roadmap(self, user_id: str, roadmap: Roadmap) -> Roadmap:
        roadmap_row = (
            self.client.table("roadmaps")
            .insert({
                "title": roadmap.title,
                "description": roadmap.description,
                "totalEstimatedHours": roadmap.total_estimated_hours,
                "overallResources": [
                    r.model_dump(mode="json", by_alias=True) for r in roadmap.overall_resources
                ],
                "user_id": user_id,
            })
            .execute()
            .data[0]
        )

        milestones = []
        for m in roadmap.milestones:
            milestone_row = (
                self.client.table("milestones")
                .insert({"title": m.title, "roadmap_id": roadmap_row["id"]})
                .execute()
                .data[0]
            )

            tasks_to_insert = [
                {
                    **t.model_dump(mode="json", by_alias=True, exclude={"id"}),
                    "milestone_id": milestone_row["id"],
                }
                for t in m.tasks
            ]
            task_rows = (
                self.client.table("tasks").insert(tasks_to_insert).execute().data
                if tasks_to_insert else []
            )
            milestones.append({**milestone_row, "tasks": task_rows})

        logger.info("Saved roadmap %s for %s (%d milestones)", roadmap_row["id"], user_id, len(milestones))
        return Roadmap.model_validate({**roadmap_row, "milestones": milestones})

    def list_roadmaps(self, user_id: str) -> list[Roadmap]:
        res = (
            self.client.table("roadmaps")
            .select("*, milestones(*, tasks(*))")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [Roadmap.model_validate(row) for row in (res.data or [])]

    def update_task_status(self, task_id: str, status: TaskStatus) -> None:
        self.client.table("tasks").update({"status": TaskStatus(status).value}).eq("id", task_id).execute()

    def get_stats(self, user_id: str) -> Stats:
        res = self.client.table("stats").select("*").eq("user_id", user_id).limit(1).execute()
        if res.data:
            return Stats.model_validate(res.data[0])

        # First visit: create the zeroed row
        stats = Stats()
        self.client.table("stats").insert(_stats_row(user_id, stats)).execute()
        return stats

    def save_stats(self, user_id: str, stats: Stats) -> Stats:
        self.client.table("stats").upsert(_stats_row(user_id, stats), on_conflict="user_id").execute()
        return stats

    def clear_user(self, user_id: str) -> None:
        # milestones/tasks go with the roadmap via ON DELETE CASCADE
        self.client.table("roadmaps").delete().eq("user_id", user_id).execute()
        self.client.table("stats").delete().eq("user_id", user_id).execute()
