from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal, Dict, Any

from app.modules.profiles.schemas import ProfileResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str
    role: Literal["student", "faculty"] = "student"
    department: Optional[str] = None
    year_of_study: Optional[int] = Field(None, ge=1, le=8)
    bio: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str


class SessionResponse(BaseModel):
    user: Dict[str, Any]
    profile: Optional[ProfileResponse] = None
