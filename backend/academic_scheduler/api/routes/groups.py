from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from academic_scheduler.api.deps import get_db
from academic_scheduler.models.group import Group
from academic_scheduler.models.timetable import Timetable
from academic_scheduler.schemas.group import GroupCreate, GroupOut

router = APIRouter()


@router.get("/", response_model=list[GroupOut])
def list_groups(db: Session = Depends(get_db)) -> list[GroupOut]:
    return list(db.execute(select(Group).order_by(Group.name)).scalars())


@router.post("/", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def create_group(payload: GroupCreate, db: Session = Depends(get_db)) -> GroupOut:
    existing = db.execute(select(Group).where(Group.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Group name already exists")
    group = Group(**payload.model_dump())
    db.add(group)
    db.commit()
    db.refresh(group)
    return group


@router.delete("/{group_id}")
def delete_group(group_id: str, db: Session = Depends(get_db)) -> dict:
    group = db.get(Group, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    in_use = db.execute(select(Timetable.id).where(Timetable.group_id == group_id).limit(1)).first()
    if in_use:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Group still has timetables")
    db.delete(group)
    db.commit()
    return {"success": True}
