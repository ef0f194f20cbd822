from pydantic import BaseModel, EmailStr, Field


class LecturerBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    department: str = Field(default="", max_length=200)


class LecturerCreate(LecturerBase):
    pass


class LecturerOut(LecturerBase):
    id: str

    model_config = {"from_attributes": True}
