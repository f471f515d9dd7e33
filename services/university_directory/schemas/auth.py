# services/university_directory/schemas/auth.py
from datetime import datetime

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    token: str
    email: EmailStr
    user_id: int
    role: str
    expires_at: datetime
