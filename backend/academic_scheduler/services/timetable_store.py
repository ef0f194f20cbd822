from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from academic_scheduler.core.exceptions import PersistenceError, ResourceNotFoundError
from academic_scheduler.models.timetable import TimeSlot, Timetable, TimetableStatus
from academic_scheduler.services.snapshots import SlotAssignment

logger = logging.getLogger(__name__)


@contextmanager
def persistence_guard(action: str, source: str = "Timetable store") -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("PERSISTENCE FAILED | source=%s | action=%s", source, action)
        raise PersistenceError(f"{source} failed to {action}", details={"error": str(exc)}) from exc


class TimetableStore:
    """Timetable and time-slot persistence keyed by (group, month, year)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, timetable_id: str) -> Timetable:
        with persistence_guard("load timetable"):
            timetable = self.db.get(Timetable, timetable_id)
        if timetable is None:
            raise ResourceNotFoundError("Timetable", timetable_id)
        return timetable

    def find(self, group_id: str, month: int, year: int) -> Timetable | None:
        with persistence_guard("look up timetable"):
            return self.db.execute(
                select(Timetable).where(
                    Timetable.group_id == group_id,
                    Timetable.month == month,
                    Timetable.year == year,
                )
            ).scalar_one_or_none()

    def list_timetables(self, *, month: int | None = None, year: int | None = None, group_id: str | None = None) -> list[Timetable]:
        statement = select(Timetable).options(selectinload(Timetable.time_slots))
        if month is not None:
            statement = statement.where(Timetable.month == month)
        if year is not None:
            statement = statement.where(Timetable.year == year)
        if group_id is not None:
            statement = statement.where(Timetable.group_id == group_id)
        statement = statement.order_by(Timetable.year.desc(), Timetable.month.desc(), Timetable.generated_at.desc())
        with persistence_guard("list timetables"):
            return list(self.db.execute(statement).scalars())

    def period_assignments(self, month: int, year: int) -> list[tuple[Timetable, list[SlotAssignment]]]:
        return [
            (timetable, [SlotAssignment.from_model(slot, timetable.group_id) for slot in timetable.time_slots])
            for timetable in self.list_timetables(month=month, year=year)
        ]

    def save_generated(
        self,
        *,
        group_id: str,
        month: int,
        year: int,
        assignments: Sequence[SlotAssignment],
        existing: Timetable | None = None,
    ) -> Timetable:
        """Create a timetable, or replace the unlocked slots of ``existing``.

        Locked slot rows are left untouched; new slots are appended after them.
        """
        with persistence_guard("save timetable"):
            if existing is None:
                timetable = Timetable(group_id=group_id, month=month, year=year, status=TimetableStatus.draft)
                self.db.add(timetable)
            else:
                timetable = existing
                timetable.status = TimetableStatus.draft
            timetable.generated_at = datetime.now(timezone.utc)
            self.replace_unlocked_slots(timetable, assignments)
        return timetable

    def replace_unlocked_slots(self, timetable: Timetable, assignments: Sequence[SlotAssignment]) -> Timetable:
        with persistence_guard("replace slots"):
            kept = [slot for slot in timetable.time_slots if slot.is_locked]
            next_position = max((slot.position for slot in kept), default=-1) + 1
            fresh = [
                TimeSlot(
                    position=next_position + offset,
                    day=assignment.day,
                    start_time=assignment.start_time,
                    end_time=assignment.end_time,
                    subject_id=assignment.subject_id,
                    venue_id=assignment.venue_id,
                    lecturer_id=assignment.lecturer_id,
                    is_locked=False,
                    manually_assigned=False,
                )
                for offset, assignment in enumerate(assignments)
            ]
            timetable.time_slots = [*kept, *fresh]
            self.db.flush()
        return timetable

    def add_slot(self, timetable: Timetable, assignment: SlotAssignment) -> TimeSlot:
        with persistence_guard("add slot"):
            slot = TimeSlot(
                position=max((item.position for item in timetable.time_slots), default=-1) + 1,
                day=assignment.day,
                start_time=assignment.start_time,
                end_time=assignment.end_time,
                subject_id=assignment.subject_id,
                venue_id=assignment.venue_id,
                lecturer_id=assignment.lecturer_id,
                is_locked=assignment.locked,
                manually_assigned=assignment.manually_assigned,
            )
            timetable.time_slots.append(slot)
            self.db.flush()
        return slot

    def delete(self, timetable: Timetable) -> None:
        with persistence_guard("delete timetable"):
            self.db.delete(timetable)
            self.db.flush()

    def commit(self) -> None:
        with persistence_guard("commit"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
