from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from academic_scheduler.api.deps import get_db
from academic_scheduler.models.timetable import TimeSlot
from academic_scheduler.models.venue import Venue
from academic_scheduler.schemas.venue import VenueCreate, VenueOut

router = APIRouter()


@router.get("/", response_model=list[VenueOut])
def list_venues(db: Session = Depends(get_db)) -> list[VenueOut]:
    return list(db.execute(select(Venue).order_by(Venue.name)).scalars())


@router.post("/", response_model=VenueOut, status_code=status.HTTP_201_CREATED)
def create_venue(payload: VenueCreate, db: Session = Depends(get_db)) -> VenueOut:
    existing = db.execute(select(Venue).where(Venue.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Venue name already exists")
    venue = Venue(**payload.model_dump())
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue


@router.delete("/{venue_id}")
def delete_venue(venue_id: str, db: Session = Depends(get_db)) -> dict:
    venue = db.get(Venue, venue_id)
    if venue is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venue not found")
    in_use = db.execute(select(TimeSlot.id).where(TimeSlot.venue_id == venue_id).limit(1)).first()
    if in_use:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Venue is booked in a timetable")
    db.delete(venue)
    db.commit()
    return {"success": True}
