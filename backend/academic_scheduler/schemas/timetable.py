from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from academic_scheduler.models.timetable import TimetableStatus
from academic_scheduler.schemas.settings import DAY_VALUES, TIME_PATTERN, normalize_day, parse_time_to_minutes


class GenerateTimetableRequest(BaseModel):
    group_id: str | None = Field(default=None, alias="groupId", min_length=1, max_length=36)
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)
    force_regenerate: bool = Field(default=False, alias="forceRegenerate")

    model_config = {"populate_by_name": True}


class GenerateAllTimetablesRequest(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)
    force_regenerate: bool = Field(default=False, alias="forceRegenerate")

    model_config = {"populate_by_name": True}


class FailedGroupOut(BaseModel):
    group_id: str = Field(alias="groupId")
    name: str | None = None
    reason: str

    model_config = {"populate_by_name": True, "from_attributes": True}


class UnassignedSubjectOut(BaseModel):
    group_id: str = Field(alias="groupId")
    subject_id: str = Field(alias="subjectId")
    subject_code: str = Field(alias="subjectCode")
    reason: str

    model_config = {"populate_by_name": True, "from_attributes": True}


class GenerationResultOut(BaseModel):
    success: list[str] = Field(default_factory=list)
    failed: list[FailedGroupOut] = Field(default_factory=list)
    unassigned: list[UnassignedSubjectOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class TimeSlotOut(BaseModel):
    id: str
    day: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    subject_id: str = Field(alias="subjectId")
    venue_id: str = Field(alias="venueId")
    lecturer_id: str = Field(alias="lecturerId")
    is_locked: bool = Field(alias="isLocked")
    manually_assigned: bool = Field(alias="manuallyAssigned")

    model_config = {"populate_by_name": True, "from_attributes": True}


class OptimizationDetailsOut(BaseModel):
    gap_score: float = Field(alias="gapScore", ge=0.0, le=1.0)
    distribution_score: float = Field(alias="distributionScore", ge=0.0, le=1.0)
    preference_score: float = Field(alias="preferenceScore", ge=0.0, le=1.0)

    model_config = {"populate_by_name": True}


class TimetableOut(BaseModel):
    id: str
    group_id: str = Field(alias="groupId")
    month: int
    year: int
    status: TimetableStatus
    generated_at: datetime | None = Field(default=None, alias="generatedAt")
    optimization_score: float | None = Field(default=None, alias="optimizationScore")
    optimization_details: OptimizationDetailsOut | None = Field(default=None, alias="optimizationDetails")
    time_slots: list[TimeSlotOut] = Field(default_factory=list, alias="timeSlots")

    model_config = {"populate_by_name": True, "from_attributes": True}

    @field_validator("optimization_details", mode="before")
    @classmethod
    def empty_details_to_none(cls, value):
        if not value:
            return None
        return value


class TimetableScoreOut(BaseModel):
    timetable_id: str = Field(alias="timetableId")
    gap_score: float = Field(alias="gapScore")
    distribution_score: float = Field(alias="distributionScore")
    preference_score: float = Field(alias="preferenceScore")
    total: float

    model_config = {"populate_by_name": True}


class ManualAssignmentRequest(BaseModel):
    subject_id: str = Field(alias="subjectId", min_length=1, max_length=36)
    venue_id: str = Field(alias="venueId", min_length=1, max_length=36)
    day: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    model_config = {"populate_by_name": True}

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        day = normalize_day(value)
        if day not in DAY_VALUES:
            raise ValueError("Invalid day value")
        return day

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "ManualAssignmentRequest":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        return self


class SlotLockUpdate(BaseModel):
    is_locked: bool = Field(alias="isLocked")

    model_config = {"populate_by_name": True}


class TimetableStatusUpdate(BaseModel):
    status: Literal["draft", "published"]
