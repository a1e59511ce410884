# studyflow/roadmaps/service.py
"""
Roadmap persistence + progress accounting for the current identity.

Signed-in users with a configured hosted store read/write Supabase;
everyone else gets the local store, keyed by their guest id.
"""
import logging

from studyflow.agents.schemas import Roadmap, Stats, TaskStatus
from studyflow.errors import ConfigurationError
from studyflow.roadmaps.identity import Identity
from studyflow.roadmaps.store import RoadmapStore

logger = logging.getLogger(__name__)


class RoadmapService:
    def __init__(
        self,
        identity: Identity,
        *,
        guest_store: RoadmapStore,
        account_store: RoadmapStore | None = None,
        configuration_error: str | None = None,
    ):
        self.identity = identity
        self.guest_store = guest_store
        self.account_store = account_store
        self.configuration_error = configuration_error

    @property
    def is_configured(self) -> bool:
        return self.account_store is not None

    @property
    def uses_account(self) -> bool:
        return bool(self.identity.is_authenticated and self.identity.user_id and self.account_store)

    @property
    def store(self) -> RoadmapStore:
        return self.account_store if self.uses_account else self.guest_store

    @property
    def owner_id(self) -> str:
        return self.identity.user_id if self.uses_account else self.identity.guest_key

    def add_roadmap(self, roadmap: Roadmap) -> Roadmap:
        return self.store.insert_roadmap(self.owner_id, roadmap)

    def list_roadmaps(self) -> list[Roadmap]:
        return self.store.list_roadmaps(self.owner_id)

    def get_roadmap(self, roadmap_id: str) -> Roadmap | None:
        return next((r for r in self.list_roadmaps() if r.id == roadmap_id), None)

    def get_stats(self) -> Stats:
        return self.store.get_stats(self.owner_id)

    def update_task_status(
        self,
        roadmap_id: str,
        milestone_id: str,
        task_id: str,
        status: TaskStatus,
    ) -> Roadmap | None:
        """Persist a status change and keep the user's stats in step.

        Hours move by the task's estimate when it enters or leaves
        ``completed``; the completed-roadmap counter goes up when this update
        finishes the last open task. Returns the updated roadmap, or None if
        any of the ids is unknown.
        """
        status = TaskStatus(status)
        roadmap = self.get_roadmap(roadmap_id)
        if roadmap is None:
            return None
        milestone = next((m for m in roadmap.milestones if m.id == milestone_id), None)
        if milestone is None:
            return None
        task = next((t for t in milestone.tasks if t.id == task_id), None)
        if task is None:
            return None

        was_complete = roadmap.is_complete()
        previous = task.status

        self.store.update_task_status(task_id, status)
        task.status = status

        hours_change = 0.0
        if previous != TaskStatus.COMPLETED and status == TaskStatus.COMPLETED:
            hours_change = task.estimated_hours
        elif previous == TaskStatus.COMPLETED and status != TaskStatus.COMPLETED:
            hours_change = -task.estimated_hours

        finished_now = roadmap.is_complete() and not was_complete

        if hours_change or finished_now:
            stats = self.get_stats()
            stats.hours_studied = max(0.0, stats.hours_studied + hours_change)
            if finished_now:
                stats.roadmaps_completed += 1
                logger.info("Roadmap %s completed by %s", roadmap_id, self.owner_id)
            self.store.save_stats(self.owner_id, stats)

        return roadmap

    def save_to_account(self) -> int:
        """Move guest roadmaps and stats into the signed-in account.

        Returns the number of roadmaps migrated.
        """
        user_id = self.identity.require_user_id()
        if self.account_store is None:
            return 0

        guest_key = self.identity.guest_key
        local_roadmaps = self.guest_store.list_roadmaps(guest_key)
        if not local_roadmaps:
            return 0

        # oldest first so the account keeps the guest's ordering
        for roadmap in reversed(local_roadmaps):
            self.account_store.insert_roadmap(user_id, roadmap)

        local_stats = self.guest_store.get_stats(guest_key)
        if local_stats.hours_studied > 0 or local_stats.roadmaps_completed > 0:
            self.account_store.save_stats(user_id, local_stats)

        self.guest_store.clear_user(guest_key)
        logger.info("Migrated %d guest roadmaps to account %s", len(local_roadmaps), user_id)
        return len(local_roadmaps)


def build_roadmap_service(identity: Identity) -> RoadmapService:
    """Wire stores from settings. A missing hosted config degrades to guest mode."""
    from studyflow.roadmaps.local_store import LocalRoadmapStore
    from studyflow.roadmaps.supabase_store import SupabaseRoadmapStore, supabase_configuration_error

    error = supabase_configuration_error()
    account_store = None
    if not error:
        try:
            account_store = SupabaseRoadmapStore()
        except ConfigurationError as e:
            error = str(e)
    if error:
        logger.warning(error)

    return RoadmapService(
        identity,
        guest_store=LocalRoadmapStore(),
        account_store=account_store,
        configuration_error=error,
    )
