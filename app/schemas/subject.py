from datetime import datetime

from pydantic import BaseModel, Field


class SubjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=50)
    description: str | None = None


class SubjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = None


class SubjectRead(BaseModel):
    id: str
    name: str
    code: str
    description: str | None
    faculty_id: str
    students: int
    created_at: datetime

    class Config:
        from_attributes = True


class EnrollmentRead(BaseModel):
    id: str
    student_id: str
    subject_id: str
    created_at: datetime

    class Config:
        from_attributes = True
