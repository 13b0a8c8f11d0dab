from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union, Literal
from datetime import datetime

from app.core.utils import split_csv


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    department: Optional[str] = None
    year_of_study: Optional[int] = Field(None, ge=1, le=8)
    bio: Optional[str] = None
    skills: Optional[Union[List[str], str]] = None
    profile_image_url: Optional[str] = None
    portfolio_url: Optional[str] = None

    @field_validator("skills")
    @classmethod
    def normalize_skills(cls, v):
        return split_csv(v)


class ProfileSummary(BaseModel):
    id: str
    full_name: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    profile_image_url: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Literal["student", "faculty"]
    department: Optional[str] = None
    year_of_study: Optional[int] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    profile_image_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    is_online: bool = False
    last_seen: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
