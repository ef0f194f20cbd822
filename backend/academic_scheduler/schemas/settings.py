from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

DAY_VALUES = {
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
}

DAY_SHORT_MAP = {
    "Mon": "Monday",
    "Tue": "Tuesday",
    "Wed": "Wednesday",
    "Thu": "Thursday",
    "Fri": "Friday",
    "Sat": "Saturday",
    "Sun": "Sunday",
}

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(value: int) -> str:
    hours = value // 60
    minutes = value % 60
    return f"{hours:02d}:{minutes:02d}"


def normalize_day(value: str) -> str:
    day = value.strip()
    return DAY_SHORT_MAP.get(day, day)


def parse_time_window(value: str) -> tuple[int, int]:
    """Parse an ``HH:MM-HH:MM`` window into minute-of-day bounds."""
    start, separator, end = value.partition("-")
    if not separator:
        raise ValueError(f"Time window {value!r} must look like HH:MM-HH:MM")
    start_minutes = parse_time_to_minutes(start.strip())
    end_minutes = parse_time_to_minutes(end.strip())
    if end_minutes <= start_minutes:
        raise ValueError(f"Time window {value!r} must end after it starts")
    return start_minutes, end_minutes


class TimeRangeEntry(BaseModel):
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    model_config = {"populate_by_name": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "TimeRangeEntry":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        return self


class ScoreWeightsOut(BaseModel):
    gap: float
    distribution: float
    preference: float


class ScheduleSettingsOut(BaseModel):
    days: list[str]
    time_windows: list[TimeRangeEntry] = Field(alias="timeWindows")
    supporting_departments: list[str] = Field(alias="supportingDepartments")
    max_tolerable_gap_minutes: int = Field(alias="maxTolerableGapMinutes")
    score_weights: ScoreWeightsOut = Field(alias="scoreWeights")

    model_config = {"populate_by_name": True}
