from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from academic_scheduler.api.deps import get_db
from academic_scheduler.models.lecturer import Lecturer
from academic_scheduler.models.subject import Subject
from academic_scheduler.schemas.lecturer import LecturerCreate, LecturerOut

router = APIRouter()


@router.get("/", response_model=list[LecturerOut])
def list_lecturers(db: Session = Depends(get_db)) -> list[LecturerOut]:
    return list(db.execute(select(Lecturer).order_by(Lecturer.name)).scalars())


@router.post("/", response_model=LecturerOut, status_code=status.HTTP_201_CREATED)
def create_lecturer(payload: LecturerCreate, db: Session = Depends(get_db)) -> LecturerOut:
    existing = db.execute(select(Lecturer).where(Lecturer.email == payload.email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Lecturer email already exists")
    lecturer = Lecturer(**payload.model_dump())
    db.add(lecturer)
    db.commit()
    db.refresh(lecturer)
    return lecturer


@router.delete("/{lecturer_id}")
def delete_lecturer(lecturer_id: str, db: Session = Depends(get_db)) -> dict:
    lecturer = db.get(Lecturer, lecturer_id)
    if lecturer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lecturer not found")
    in_use = db.execute(select(Subject.id).where(Subject.lecturer_id == lecturer_id).limit(1)).first()
    if in_use:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Lecturer still teaches subjects")
    db.delete(lecturer)
    db.commit()
    return {"success": True}
