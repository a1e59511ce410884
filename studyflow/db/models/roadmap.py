## Roadmap table
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyflow.db.base import Base


class RoadmapRecord(Base):
    __tablename__ = "roadmaps"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    total_estimated_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    overall_resources_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    experience_level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    weekly_commitment: Mapped[str | None] = mapped_column(String(50), nullable=True)
    existing_skills: Mapped[str | None] = mapped_column(Text, nullable=True)

    # client-side default keeps sub-second ordering on SQLite
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), server_default=func.now(), nullable=False
    )

    milestones = relationship(
        "MilestoneRecord",
        back_populates="roadmap",
        cascade="all, delete-orphan",
        order_by="MilestoneRecord.position",
    )
