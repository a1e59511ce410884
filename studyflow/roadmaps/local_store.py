# studyflow/roadmaps/local_store.py
"""
SQLAlchemy-backed store for guests (SQLite file by default).

Ids are random UUIDs so rapid back-to-back generations never collide.
"""
import json
import logging
import uuid

from sqlalchemy.orm import Session, sessionmaker

from studyflow.agents.schemas import (
    LearningResource,
    Milestone,
    Roadmap,
    Stats,
    Task,
    TaskStatus,
)
from studyflow.db.models.milestone import MilestoneRecord
from studyflow.db.models.roadmap import RoadmapRecord
from studyflow.db.models.stats import StatsRecord
from studyflow.db.models.task import TaskRecord
from studyflow.db.session import make_session_factory
from studyflow.roadmaps.store import RoadmapStore

logger = logging.getLogger(__name__)


def _to_uuid(v: str | uuid.UUID | None) -> uuid.UUID | None:
    if v is None:
        return None
    if isinstance(v, uuid.UUID):
        return v
    try:
        return uuid.UUID(str(v))
    except ValueError:
        return None


def _resources_json(resources: list[LearningResource]) -> str:
    return json.dumps([r.model_dump(mode="json", by_alias=True) for r in resources])


def _to_roadmap(rec: RoadmapRecord) -> Roadmap:
    return Roadmap(
        id=str(rec.id),
        user_id=rec.user_id,
        title=rec.title,
        description=rec.description,
        total_estimated_hours=rec.total_estimated_hours,
        overall_resources=json.loads(rec.overall_resources_json),
        experience_level=rec.experience_level,
        weekly_commitment=rec.weekly_commitment,
        existing_skills=rec.existing_skills,
        created_at=rec.created_at,
        milestones=[
            Milestone(
                id=str(m.id),
                title=m.title,
                tasks=[
                    Task(
                        id=str(t.id),
                        title=t.title,
                        description=t.description,
                        estimated_hours=t.estimated_hours,
                        subtopics=json.loads(t.subtopics_json),
                        status=TaskStatus(t.status),
                        resources=json.loads(t.resources_json),
                    )
                    for t in m.tasks
                ],
            )
            for m in rec.milestones
        ],
    )


class LocalRoadmapStore(RoadmapStore):
    def __init__(self, session_factory: sessionmaker | None = None):
        self.SessionLocal = session_factory or make_session_factory()

    def insert_roadmap(self, user_id: str, roadmap: Roadmap) -> Roadmap:
        db: Session = self.SessionLocal()
        try:
            rec = RoadmapRecord(
                user_id=user_id,
                title=roadmap.title,
                description=roadmap.description,
                total_estimated_hours=roadmap.total_estimated_hours,
                overall_resources_json=_resources_json(roadmap.overall_resources),
                experience_level=roadmap.experience_level,
                weekly_commitment=roadmap.weekly_commitment,
                existing_skills=roadmap.existing_skills,
            )
            for mi, m in enumerate(roadmap.milestones):
                mrec = MilestoneRecord(position=mi, title=m.title)
                for ti, t in enumerate(m.tasks):
                    mrec.tasks.append(
                        TaskRecord(
                            position=ti,
                            title=t.title,
                            description=t.description,
                            estimated_hours=t.estimated_hours,
                            status=t.status.value,
                            subtopics_json=json.dumps(t.subtopics),
                            resources_json=_resources_json(t.resources),
                        )
                    )
                rec.milestones.append(mrec)

            db.add(rec)
            db.commit()
            logger.info("Saved roadmap %s for %s (%d milestones)", rec.id, user_id, len(rec.milestones))
            return _to_roadmap(rec)
        finally:
            db.close()

    def list_roadmaps(self, user_id: str) -> list[Roadmap]:
        db: Session = self.SessionLocal()
        try:
            items = (
                db.query(RoadmapRecord)
                .filter(RoadmapRecord.user_id == user_id)
                .order_by(RoadmapRecord.created_at.desc())
                .all()
            )
            return [_to_roadmap(rec) for rec in items]
        finally:
            db.close()

    def update_task_status(self, task_id: str, status: TaskStatus) -> None:
        task_uuid = _to_uuid(task_id)
        if task_uuid is None:
            raise LookupError(f"Task not found: {task_id}")

        db: Session = self.SessionLocal()
        try:
            task = db.query(TaskRecord).filter(TaskRecord.id == task_uuid).first()
            if not task:
                raise LookupError(f"Task not found: {task_id}")
            task.status = TaskStatus(status).value
            db.commit()
        finally:
            db.close()

    def get_stats(self, user_id: str) -> Stats:
        db: Session = self.SessionLocal()
        try:
            rec = db.get(StatsRecord, user_id)
            if rec is None:
                rec = StatsRecord(user_id=user_id, hours_studied=0, roadmaps_completed=0, current_streak=0)
                db.add(rec)
                db.commit()
            return Stats(
                hours_studied=rec.hours_studied,
                roadmaps_completed=rec.roadmaps_completed,
                current_streak=rec.current_streak,
            )
        finally:
            db.close()

    def save_stats(self, user_id: str, stats: Stats) -> Stats:
        db: Session = self.SessionLocal()
        try:
            db.merge(
                StatsRecord(
                    user_id=user_id,
                    hours_studied=stats.hours_studied,
                    roadmaps_completed=stats.roadmaps_completed,
                    current_streak=stats.current_streak,
                )
            )
            db.commit()
            return stats
        finally:
            db.close()

    def clear_user(self, user_id: str) -> None:
        db: Session = self.SessionLocal()
        try:
            # ORM delete so the milestone/task cascade runs on SQLite too
            for rec in db.query(RoadmapRecord).filter(RoadmapRecord.user_id == user_id).all():
                db.delete(rec)
            stats = db.get(StatsRecord, user_id)
            if stats is not None:
                db.delete(stats)
            db.commit()
        finally:
            db.close()
