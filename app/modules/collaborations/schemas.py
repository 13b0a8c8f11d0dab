from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union, Literal
from datetime import datetime

from app.core.utils import split_csv
from app.modules.profiles.schemas import ProfileSummary

CollaborationFilter = Literal["all", "open", "my_requests", "mentoring"]


class CollaborationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str
    type: str
    skills_required: Optional[Union[List[str], str]] = None
    duration_weeks: Optional[int] = Field(None, ge=1)

    @field_validator("skills_required")
    @classmethod
    def normalize_skills(cls, v):
        return split_csv(v)


class CollaborationResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    type: Optional[str] = None
    requester_id: str
    mentor_id: Optional[str] = None
    status: Literal["open", "in_progress", "completed"]
    skills_required: Optional[List[str]] = None
    duration_weeks: Optional[int] = None
    chat_room_id: Optional[str] = None
    created_at: Optional[datetime] = None
    requester: Optional[ProfileSummary] = None
    mentor: Optional[ProfileSummary] = None

    class Config:
        from_attributes = True
