from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from studyflow.db.base import Base


class StatsRecord(Base):
    __tablename__ = "stats"

    user_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    hours_studied: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    roadmaps_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
