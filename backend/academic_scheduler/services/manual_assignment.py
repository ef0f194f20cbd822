from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from academic_scheduler.core.config import Settings, get_settings
from academic_scheduler.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from academic_scheduler.models.group import Group
from academic_scheduler.models.lecturer import Lecturer
from academic_scheduler.models.subject import Subject
from academic_scheduler.models.timetable import Timetable
from academic_scheduler.models.venue import Venue
from academic_scheduler.schemas.settings import normalize_day
from academic_scheduler.services.conflict_service import GenerationRun
from academic_scheduler.services.generation import score_timetable, store_score
from academic_scheduler.services.resource_directory import ResourceDirectory
from academic_scheduler.services.snapshots import ScheduleGrid, SlotAssignment, SubjectSnapshot, TimeWindow
from academic_scheduler.services.timetable_store import TimetableStore

logger = logging.getLogger(__name__)

RESOURCE_MODELS = {"venue": Venue, "lecturer": Lecturer, "group": Group}


def _resource_name(db: Session, resource_type: str, resource_id: str) -> str:
    record = db.get(RESOURCE_MODELS[resource_type], resource_id)
    return getattr(record, "name", None) or resource_id


def assign_slot(
    db: Session,
    *,
    timetable_id: str,
    subject_id: str,
    venue_id: str,
    day: str,
    start_time: str,
    end_time: str,
    settings: Settings | None = None,
) -> Timetable:
    """Place a subject into an administrator-chosen cell after the same checks generation uses.

    An unlocked slot of the same subject is moved; a locked one must be
    unlocked first. Venue, lecturer and group occupancy is checked against
    every timetable of the same month and year.
    """
    settings = settings or get_settings()
    grid = ScheduleGrid.from_settings(settings)
    store = TimetableStore(db)
    directory = ResourceDirectory(db, supporting_departments=settings.supporting_departments)
    timetable = store.get(timetable_id)

    subject = db.get(Subject, subject_id)
    if subject is None:
        raise ResourceNotFoundError("Subject", subject_id)
    venue = db.get(Venue, venue_id)
    if venue is None:
        raise ResourceNotFoundError("Venue", venue_id)

    day = normalize_day(day)
    if day not in grid.days:
        raise ValidationError(f"{day} is not a scheduling day", details={"days": list(grid.days)})

    candidate = SlotAssignment(
        day=day,
        window=TimeWindow.from_strings(start_time, end_time),
        subject_id=subject.id,
        venue_id=venue.id,
        lecturer_id=directory.lecturer_of(SubjectSnapshot.from_model(subject)),
        group_id=timetable.group_id,
        manually_assigned=True,
    )

    current = next((slot for slot in timetable.time_slots if slot.subject_id == subject.id), None)
    if current is not None and current.is_locked:
        raise ConflictError(
            f"Slot for subject {subject.code} is locked; unlock it before reassigning",
            conflicts=[{"resourceType": "slot", "resourceId": current.id, "name": subject.code}],
            cell=candidate.cell(),
        )

    run = GenerationRun()
    for _, assignments in store.period_assignments(timetable.month, timetable.year):
        for assignment in assignments:
            if current is not None and assignment.slot_id == current.id:
                continue
            run.add(assignment)

    collisions = run.collisions(candidate)
    if collisions:
        conflicts = []
        seen: set[tuple[str, str]] = set()
        for resource_type, resource_id, existing in collisions:
            if (resource_type, resource_id) in seen:
                continue
            seen.add((resource_type, resource_id))
            conflicts.append(
                {
                    "resourceType": resource_type,
                    "resourceId": resource_id,
                    "name": _resource_name(db, resource_type, resource_id),
                    "slotId": existing.slot_id,
                    "startTime": existing.start_time,
                    "endTime": existing.end_time,
                }
            )
        described = ", ".join(f"{item['resourceType']} {item['name']}" for item in conflicts)
        logger.warning(
            "MANUAL ASSIGNMENT REJECTED | timetable_id=%s | subject=%s | cell=%s %s | conflicts=%s",
            timetable.id,
            subject.code,
            day,
            candidate.window,
            described,
        )
        raise ConflictError(
            f"Cannot assign {subject.code} on {day} {candidate.window}: {described} already booked",
            conflicts=conflicts,
            cell=candidate.cell(),
        )

    if current is not None:
        current.day = candidate.day
        current.start_time = candidate.start_time
        current.end_time = candidate.end_time
        current.venue_id = candidate.venue_id
        current.lecturer_id = candidate.lecturer_id
        current.manually_assigned = True
    else:
        store.add_slot(timetable, candidate)

    store_score(timetable, score_timetable(db, timetable, settings))
    store.commit()
    logger.info(
        "MANUAL ASSIGNMENT ACCEPTED | timetable_id=%s | subject=%s | venue=%s | cell=%s %s",
        timetable.id,
        subject.code,
        venue.name,
        day,
        candidate.window,
    )
    return timetable


def set_slot_lock(db: Session, *, timetable_id: str, slot_id: str, locked: bool) -> Timetable:
    """Flip one slot's lock flag; placement is untouched so no conflict check is needed."""
    store = TimetableStore(db)
    timetable = store.get(timetable_id)
    slot = next((item for item in timetable.time_slots if item.id == slot_id), None)
    if slot is None:
        raise ResourceNotFoundError("Time slot", slot_id)
    slot.is_locked = locked
    store.commit()
    logger.info("SLOT LOCK UPDATED | timetable_id=%s | slot_id=%s | locked=%s", timetable.id, slot_id, locked)
    return timetable
