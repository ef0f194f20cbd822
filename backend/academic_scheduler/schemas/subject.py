from pydantic import BaseModel, Field, field_validator

from academic_scheduler.models.subject import SubjectStatus
from academic_scheduler.models.venue import VenueType
from academic_scheduler.schemas.settings import DAY_VALUES, TimeRangeEntry, normalize_day

VENUE_TYPE_VALUES = {item.value for item in VenueType} | {"any"}


class SubjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    department: str = Field(min_length=1, max_length=200)
    lecturer_id: str = Field(alias="lecturerId", min_length=1, max_length=36)
    credits: int = Field(default=3, ge=0, le=40)
    status: SubjectStatus = SubjectStatus.active
    preferred_days: list[str] = Field(default_factory=list, alias="preferredDays", max_length=7)
    preferred_time_ranges: list[TimeRangeEntry] = Field(
        default_factory=list, alias="preferredTimeRanges", max_length=20
    )
    session_duration: int | None = Field(default=None, alias="sessionDuration", ge=15, le=600)
    required_venue_types: list[str] = Field(default_factory=list, alias="requiredVenueTypes", max_length=4)

    model_config = {"populate_by_name": True}

    @field_validator("preferred_days")
    @classmethod
    def validate_preferred_days(cls, value: list[str]) -> list[str]:
        cleaned = [normalize_day(day) for day in value if day.strip()]
        invalid = [day for day in cleaned if day not in DAY_VALUES]
        if invalid:
            raise ValueError(f"Invalid preferred day(s): {', '.join(invalid)}")
        return cleaned

    @field_validator("required_venue_types")
    @classmethod
    def validate_venue_types(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip().lower() for item in value if item.strip()]
        invalid = [item for item in cleaned if item not in VENUE_TYPE_VALUES]
        if invalid:
            raise ValueError(f"Invalid venue type(s): {', '.join(invalid)}")
        return cleaned


class SubjectCreate(SubjectBase):
    pass


class SubjectOut(SubjectBase):
    id: str

    model_config = {"populate_by_name": True, "from_attributes": True}
