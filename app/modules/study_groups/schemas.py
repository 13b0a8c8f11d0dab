from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime

from app.core.utils import split_csv
from app.modules.profiles.schemas import ProfileSummary


class StudyGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str
    subject: str
    max_members: int = Field(10, ge=2, le=500)
    meeting_schedule: Optional[str] = None
    tags: Optional[Union[List[str], str]] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return split_csv(v)


class StudyGroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    subject: Optional[str] = None
    created_by: str
    max_members: int
    current_members: int = 0
    meeting_schedule: Optional[str] = None
    is_active: bool = True
    tags: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    creator: Optional[ProfileSummary] = None

    @property
    def is_full(self) -> bool:
        return self.current_members >= self.max_members

    class Config:
        from_attributes = True


class StudyGroupMembershipResponse(BaseModel):
    group_id: str
    user_id: str
    joined: bool
    current_members: int
