import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from academic_scheduler.db.base import Base


class SubjectStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    department: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    lecturer_id: Mapped[str] = mapped_column(String(36), ForeignKey("lecturers.id"), nullable=False, index=True)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    status: Mapped[SubjectStatus] = mapped_column(
        SAEnum(SubjectStatus, name="subject_status"), nullable=False, default=SubjectStatus.active
    )
    preferred_days: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    preferred_time_ranges: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    session_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    required_venue_types: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
