"""Read-only values the scheduling core works on.

The core never touches ORM rows directly: groups, subjects, venues and slots
are copied into these frozen dataclasses at the service boundary so the
engine, conflict checker and scorer stay computation-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from academic_scheduler.core.config import Settings
from academic_scheduler.schemas.settings import (
    minutes_to_time,
    normalize_day,
    parse_time_to_minutes,
    parse_time_window,
)

ANY_VENUE_TYPE = "any"


@dataclass(frozen=True, order=True)
class TimeWindow:
    start: int
    end: int

    @classmethod
    def from_strings(cls, start_time: str, end_time: str) -> "TimeWindow":
        return cls(parse_time_to_minutes(start_time), parse_time_to_minutes(end_time))

    @property
    def start_time(self) -> str:
        return minutes_to_time(self.start)

    @property
    def end_time(self) -> str:
        return minutes_to_time(self.end)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def contains(self, other: "TimeWindow") -> bool:
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class ScheduleGrid:
    days: tuple[str, ...]
    windows: tuple[TimeWindow, ...]

    def __post_init__(self) -> None:
        if not self.days:
            raise ValueError("Schedule grid needs at least one day")
        if not self.windows:
            raise ValueError("Schedule grid needs at least one time window")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScheduleGrid":
        days = tuple(normalize_day(day) for day in settings.schedule_days)
        windows = tuple(TimeWindow(*parse_time_window(item)) for item in settings.schedule_time_windows)
        return cls(days=days, windows=windows)

    @property
    def cell_count(self) -> int:
        return len(self.days) * len(self.windows)

    def cell(self, cursor: int) -> tuple[str, TimeWindow]:
        day_index, window_index = divmod(cursor % self.cell_count, len(self.windows))
        return self.days[day_index], self.windows[window_index]


@dataclass(frozen=True)
class GroupSnapshot:
    id: str
    name: str
    department: str
    roster_size: int | None = None

    @classmethod
    def from_model(cls, group) -> "GroupSnapshot":
        return cls(id=group.id, name=group.name, department=group.department, roster_size=group.roster_size)


@dataclass(frozen=True)
class SubjectSnapshot:
    id: str
    code: str
    name: str
    department: str
    lecturer_id: str
    preferred_days: frozenset[str] = field(default_factory=frozenset)
    preferred_time_ranges: tuple[TimeWindow, ...] = ()
    session_duration: int | None = None
    required_venue_types: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_model(cls, subject) -> "SubjectSnapshot":
        return cls(
            id=subject.id,
            code=subject.code,
            name=subject.name,
            department=subject.department,
            lecturer_id=subject.lecturer_id,
            preferred_days=frozenset(normalize_day(day) for day in subject.preferred_days or []),
            preferred_time_ranges=tuple(
                TimeWindow.from_strings(item["start_time"], item["end_time"])
                for item in subject.preferred_time_ranges or []
            ),
            session_duration=subject.session_duration,
            required_venue_types=frozenset(subject.required_venue_types or []),
        )

    @property
    def has_preferences(self) -> bool:
        return bool(self.preferred_days or self.preferred_time_ranges)

    def accepts_venue_type(self, venue_type: str) -> bool:
        if not self.required_venue_types or ANY_VENUE_TYPE in self.required_venue_types:
            return True
        return venue_type in self.required_venue_types

    def accepts_window(self, window: TimeWindow) -> bool:
        return self.session_duration is None or self.session_duration == window.duration


@dataclass(frozen=True)
class VenueSnapshot:
    id: str
    name: str
    department: str
    capacity: int
    type: str

    @classmethod
    def from_model(cls, venue) -> "VenueSnapshot":
        venue_type = venue.type.value if hasattr(venue.type, "value") else str(venue.type)
        return cls(
            id=venue.id,
            name=venue.name,
            department=venue.department,
            capacity=venue.capacity,
            type=venue_type,
        )


@dataclass(frozen=True)
class SlotAssignment:
    day: str
    window: TimeWindow
    subject_id: str
    venue_id: str
    lecturer_id: str
    group_id: str
    locked: bool = False
    manually_assigned: bool = False
    slot_id: str | None = None

    @classmethod
    def from_model(cls, slot, group_id: str) -> "SlotAssignment":
        return cls(
            day=slot.day,
            window=TimeWindow.from_strings(slot.start_time, slot.end_time),
            subject_id=slot.subject_id,
            venue_id=slot.venue_id,
            lecturer_id=slot.lecturer_id,
            group_id=group_id,
            locked=slot.is_locked,
            manually_assigned=slot.manually_assigned,
            slot_id=slot.id,
        )

    @property
    def start_time(self) -> str:
        return self.window.start_time

    @property
    def end_time(self) -> str:
        return self.window.end_time

    def cell(self) -> dict:
        return {"day": self.day, "startTime": self.start_time, "endTime": self.end_time}
