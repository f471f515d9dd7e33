# services/university_directory/schemas/users.py
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from services.university_directory.models.enums import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = Field(None, max_length=200)
    role: UserRole = UserRole.STUDENT
    is_active: bool = True


class UserUpdate(BaseModel):
    email: EmailStr
    password: Optional[str] = Field(None, min_length=6)  # unchanged when omitted
    full_name: Optional[str] = Field(None, max_length=200)
    role: UserRole
    is_active: bool = True

