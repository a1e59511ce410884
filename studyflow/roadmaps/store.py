## Persistence contract shared by the hosted and local stores
from abc import ABC, abstractmethod

from studyflow.agents.schemas import Roadmap, Stats, TaskStatus


class RoadmapStore(ABC):
    @abstractmethod
    def insert_roadmap(self, user_id: str, roadmap: Roadmap) -> Roadmap:
        """Insert roadmap + nested milestones and tasks; returns it with stored ids."""
        raise NotImplementedError

    @abstractmethod
    def list_roadmaps(self, user_id: str) -> list[Roadmap]:
        """Newest first."""
        raise NotImplementedError

    @abstractmethod
    def update_task_status(self, task_id: str, status: TaskStatus) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_stats(self, user_id: str) -> Stats:
        """Creates the zeroed stats row on first access."""
        raise NotImplementedError

    @abstractmethod
    def save_stats(self, user_id: str, stats: Stats) -> Stats:
        raise NotImplementedError

    @abstractmethod
    def clear_user(self, user_id: str) -> None:
        raise NotImplementedError
