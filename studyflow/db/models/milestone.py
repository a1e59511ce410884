import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyflow.db.base import Base


class MilestoneRecord(Base):
    __tablename__ = "milestones"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    roadmap_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roadmaps.id", ondelete="CASCADE"), index=True)

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    title: Mapped[str] = mapped_column(String(200), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    roadmap = relationship("RoadmapRecord", back_populates="milestones")
    tasks = relationship(
        "TaskRecord",
        back_populates="milestone",
        cascade="all, delete-orphan",
        order_by="TaskRecord.position",
    )
