from typing import List, Literal

from pydantic import BaseModel, Field


class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "venue_conflict",
        "lecturer_conflict",
        "group_conflict",
        "venue_capacity",
    ] = Field(alias="conflictType")
    description: str
    severity: Literal["hard", "soft"]
    affected_slots: List[str] = Field(alias="affectedSlots")  # timetable slot IDs involved

    model_config = {"populate_by_name": True}


class ConflictReport(BaseModel):
    month: int
    year: int
    conflicts: List[ConflictDetail]
