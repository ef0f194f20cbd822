from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from academic_scheduler.core.exceptions import ConflictError
from academic_scheduler.services.conflict_service import GenerationRun
from academic_scheduler.services.snapshots import (
    GroupSnapshot,
    ScheduleGrid,
    SlotAssignment,
    SubjectSnapshot,
    TimeWindow,
    VenueSnapshot,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnassignedSubject:
    subject_id: str
    subject_code: str
    reason: str


@dataclass
class EngineResult:
    group_id: str
    assignments: list[SlotAssignment] = field(default_factory=list)
    locked: list[SlotAssignment] = field(default_factory=list)
    unassigned: list[UnassignedSubject] = field(default_factory=list)

    @property
    def all_assignments(self) -> list[SlotAssignment]:
        return [*self.locked, *self.assignments]


class SlotAssignmentEngine:
    """Greedy advancing-cursor placement over a fixed day/window grid.

    The cursor is a linear index over the grid cells. It starts at ``start``
    (the first cell unless given) and keeps moving across subjects: every
    attempt, successful or not, moves it one window forward, wrapping from the
    last window of a day to the first window of the next day and from the last
    day back to the first.
    """

    def __init__(
        self,
        grid: ScheduleGrid,
        run: GenerationRun,
        lecturer_of: Callable[[SubjectSnapshot], str] | None = None,
    ) -> None:
        self.grid = grid
        self.run = run
        self.lecturer_of = lecturer_of or (lambda subject: subject.lecturer_id)

    def assign(
        self,
        group: GroupSnapshot,
        subjects: Sequence[SubjectSnapshot],
        venues: Sequence[VenueSnapshot],
        locked: Iterable[SlotAssignment] = (),
        *,
        start: int = 0,
    ) -> EngineResult:
        result = EngineResult(group_id=group.id, locked=list(locked))
        for assignment in result.locked:
            self.run.add(assignment)
        locked_subject_ids = {assignment.subject_id for assignment in result.locked}

        cursor = start % self.grid.cell_count
        for subject in subjects:
            if subject.id in locked_subject_ids:
                continue

            subject_venues = [venue for venue in venues if subject.accepts_venue_type(venue.type)]
            if not subject_venues:
                self._record_unassigned(
                    result,
                    group,
                    subject,
                    f"no candidate venue of type {', '.join(sorted(subject.required_venue_types))}",
                )
                continue
            if not any(subject.accepts_window(window) for window in self.grid.windows):
                self._record_unassigned(
                    result,
                    group,
                    subject,
                    f"no time window of {subject.session_duration} minutes",
                )
                continue

            placed: SlotAssignment | None = None
            for _ in range(self.grid.cell_count):
                day, window = self.grid.cell(cursor)
                cursor = (cursor + 1) % self.grid.cell_count
                placed = self._try_cell(group, subject, subject_venues, day, window)
                if placed is not None:
                    break

            if placed is None:
                self._record_unassigned(
                    result,
                    group,
                    subject,
                    f"no conflict-free slot among {self.grid.cell_count} cells",
                )
                continue
            result.assignments.append(placed)

        if not result.assignments and not result.locked:
            raise ConflictError(
                f"No subject of group {group.name} could be placed",
                details={
                    "groupId": group.id,
                    "unassigned": [
                        {"subjectId": item.subject_id, "subjectCode": item.subject_code, "reason": item.reason}
                        for item in result.unassigned
                    ],
                },
            )
        return result

    def _try_cell(
        self,
        group: GroupSnapshot,
        subject: SubjectSnapshot,
        venues: Sequence[VenueSnapshot],
        day: str,
        window: TimeWindow,
    ) -> SlotAssignment | None:
        if not subject.accepts_window(window):
            return None
        if self.run.group_conflict(group.id, day, window):
            return None
        lecturer_id = self.lecturer_of(subject)
        for venue in venues:
            if self.run.is_cell_occupied(venue.id, day, window):
                continue
            if self.run.venue_conflict(venue.id, day, window):
                continue
            if self.run.lecturer_conflict(lecturer_id, day, window):
                continue
            assignment = SlotAssignment(
                day=day,
                window=window,
                subject_id=subject.id,
                venue_id=venue.id,
                lecturer_id=lecturer_id,
                group_id=group.id,
            )
            self.run.add(assignment)
            return assignment
        return None

    @staticmethod
    def _record_unassigned(result: EngineResult, group: GroupSnapshot, subject: SubjectSnapshot, reason: str) -> None:
        logger.warning(
            "SUBJECT UNASSIGNED | group=%s | subject=%s | reason=%s",
            group.name,
            subject.code,
            reason,
        )
        result.unassigned.append(UnassignedSubject(subject_id=subject.id, subject_code=subject.code, reason=reason))
