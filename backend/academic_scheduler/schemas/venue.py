from pydantic import BaseModel, Field

from academic_scheduler.models.venue import VenueType


class VenueBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    building: str = Field(min_length=1, max_length=200)
    faculty: str = Field(default="", max_length=200)
    department: str = Field(min_length=1, max_length=200)
    capacity: int = Field(ge=1, le=1000)
    type: VenueType


class VenueCreate(VenueBase):
    pass


class VenueOut(VenueBase):
    id: str

    model_config = {"from_attributes": True}
