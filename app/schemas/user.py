from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=8, max_length=72)
    # admins are provisioned out of band, never through signup
    role: Literal["student", "faculty"] = "student"
    institution: str | None = None


class UserRead(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: str
    institution: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
