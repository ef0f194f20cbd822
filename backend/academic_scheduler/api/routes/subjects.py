from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from academic_scheduler.api.deps import get_db
from academic_scheduler.models.lecturer import Lecturer
from academic_scheduler.models.subject import Subject
from academic_scheduler.models.timetable import TimeSlot
from academic_scheduler.schemas.subject import SubjectCreate, SubjectOut

router = APIRouter()


@router.get("/", response_model=list[SubjectOut])
def list_subjects(department: str | None = None, db: Session = Depends(get_db)) -> list[SubjectOut]:
    statement = select(Subject).order_by(Subject.code)
    if department:
        statement = statement.where(Subject.department == department)
    return list(db.execute(statement).scalars())


@router.post("/", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)) -> SubjectOut:
    existing = db.execute(select(Subject).where(Subject.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    if db.get(Lecturer, payload.lecturer_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Lecturer not found")
    subject = Subject(**payload.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}")
def delete_subject(subject_id: str, db: Session = Depends(get_db)) -> dict:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    in_use = db.execute(select(TimeSlot.id).where(TimeSlot.subject_id == subject_id).limit(1)).first()
    if in_use:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject is scheduled in a timetable")
    db.delete(subject)
    db.commit()
    return {"success": True}
