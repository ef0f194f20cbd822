import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from academic_scheduler.api.deps import get_db
from academic_scheduler.models.group import Group
from academic_scheduler.models.lecturer import Lecturer
from academic_scheduler.models.timetable import TimetableStatus
from academic_scheduler.models.venue import Venue
from academic_scheduler.schemas.conflict import ConflictReport
from academic_scheduler.schemas.timetable import (
    GenerateAllTimetablesRequest,
    GenerateTimetableRequest,
    GenerationResultOut,
    ManualAssignmentRequest,
    SlotLockUpdate,
    TimetableOut,
    TimetableScoreOut,
    TimetableStatusUpdate,
)
from academic_scheduler.services.conflict_service import ConflictService
from academic_scheduler.services.generation import generate_timetables, optimize_timetable, score_timetable
from academic_scheduler.services.manual_assignment import assign_slot, set_slot_lock
from academic_scheduler.services.timetable_store import TimetableStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate", response_model=GenerationResultOut)
def generate(payload: GenerateTimetableRequest, db: Session = Depends(get_db)) -> GenerationResultOut:
    outcome = generate_timetables(
        db,
        month=payload.month,
        year=payload.year,
        group_id=payload.group_id,
        force_regenerate=payload.force_regenerate,
    )
    return GenerationResultOut.model_validate(outcome, from_attributes=True)


@router.post("/generate-all", response_model=GenerationResultOut)
def generate_all(payload: GenerateAllTimetablesRequest, db: Session = Depends(get_db)) -> GenerationResultOut:
    outcome = generate_timetables(
        db,
        month=payload.month,
        year=payload.year,
        force_regenerate=payload.force_regenerate,
    )
    return GenerationResultOut.model_validate(outcome, from_attributes=True)


@router.get("/", response_model=list[TimetableOut])
def list_timetables(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=2000, le=2100),
    db: Session = Depends(get_db),
) -> list[TimetableOut]:
    return TimetableStore(db).list_timetables(month=month, year=year)


@router.get("/conflicts", response_model=ConflictReport)
def detect_conflicts(
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=2000, le=2100),
    db: Session = Depends(get_db),
) -> ConflictReport:
    assignments = [
        assignment
        for _, items in TimetableStore(db).period_assignments(month, year)
        for assignment in items
    ]
    venues = db.execute(select(Venue)).scalars()
    venue_map = {v.id: {"id": v.id, "name": v.name, "capacity": v.capacity} for v in venues}
    lecturers = db.execute(select(Lecturer)).scalars()
    lecturer_map = {item.id: {"id": item.id, "name": item.name} for item in lecturers}
    groups = db.execute(select(Group)).scalars()
    group_map = {g.id: {"id": g.id, "name": g.name, "roster_size": g.roster_size} for g in groups}

    service = ConflictService(assignments, venue_map, lecturer_map, group_map)
    return service.detect_conflicts(month=month, year=year)


@router.get("/group/{group_id}", response_model=list[TimetableOut])
def list_group_timetables(group_id: str, db: Session = Depends(get_db)) -> list[TimetableOut]:
    return TimetableStore(db).list_timetables(group_id=group_id)


@router.get("/{timetable_id}", response_model=TimetableOut)
def get_timetable(timetable_id: str, db: Session = Depends(get_db)) -> TimetableOut:
    return TimetableStore(db).get(timetable_id)


@router.get("/{timetable_id}/score", response_model=TimetableScoreOut)
def get_timetable_score(timetable_id: str, db: Session = Depends(get_db)) -> TimetableScoreOut:
    timetable = TimetableStore(db).get(timetable_id)
    score = score_timetable(db, timetable)
    return TimetableScoreOut(
        timetable_id=timetable.id,
        gap_score=score.gap_score,
        distribution_score=score.distribution_score,
        preference_score=score.preference_score,
        total=score.total,
    )


@router.post("/{timetable_id}/optimize", response_model=TimetableOut)
def optimize(timetable_id: str, db: Session = Depends(get_db)) -> TimetableOut:
    return optimize_timetable(db, timetable_id).timetable


@router.post("/{timetable_id}/assign", response_model=TimetableOut)
def assign(timetable_id: str, payload: ManualAssignmentRequest, db: Session = Depends(get_db)) -> TimetableOut:
    return assign_slot(
        db,
        timetable_id=timetable_id,
        subject_id=payload.subject_id,
        venue_id=payload.venue_id,
        day=payload.day,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )


@router.patch("/{timetable_id}/slot/{slot_id}/lock", response_model=TimetableOut)
def update_slot_lock(
    timetable_id: str,
    slot_id: str,
    payload: SlotLockUpdate,
    db: Session = Depends(get_db),
) -> TimetableOut:
    return set_slot_lock(db, timetable_id=timetable_id, slot_id=slot_id, locked=payload.is_locked)


@router.patch("/{timetable_id}/status", response_model=TimetableOut)
def update_status(
    timetable_id: str,
    payload: TimetableStatusUpdate,
    db: Session = Depends(get_db),
) -> TimetableOut:
    store = TimetableStore(db)
    timetable = store.get(timetable_id)
    timetable.status = TimetableStatus(payload.status)
    store.commit()
    logger.info("TIMETABLE STATUS UPDATED | timetable_id=%s | status=%s", timetable.id, payload.status)
    return timetable


@router.delete("/{timetable_id}")
def delete_timetable(timetable_id: str, db: Session = Depends(get_db)) -> dict:
    store = TimetableStore(db)
    store.delete(store.get(timetable_id))
    store.commit()
    logger.info("TIMETABLE DELETED | timetable_id=%s", timetable_id)
    return {"success": True}
