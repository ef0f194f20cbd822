from pydantic import BaseModel, Field, field_validator

from academic_scheduler.models.group import GroupType


class GroupBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    faculty: str = Field(min_length=1, max_length=200)
    department: str = Field(min_length=1, max_length=200)
    year: int = Field(default=1, ge=1, le=4)
    semester: int = Field(default=1, ge=1, le=2)
    group_type: GroupType = Field(default=GroupType.weekday, alias="groupType")
    roster_size: int | None = Field(default=None, alias="rosterSize", ge=0, le=2000)

    model_config = {"populate_by_name": True}

    @field_validator("name", "faculty", "department")
    @classmethod
    def strip_text(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Value cannot be blank")
        return trimmed


class GroupCreate(GroupBase):
    pass


class GroupOut(GroupBase):
    id: str

    model_config = {"populate_by_name": True, "from_attributes": True}
