from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Union, Literal
from datetime import datetime

from app.core.utils import split_csv
from app.modules.profiles.schemas import ProfileSummary


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str
    event_type: str
    start_date: datetime
    end_date: datetime
    location: Optional[str] = None
    max_participants: Optional[int] = Field(None, ge=1)
    tags: Optional[Union[List[str], str]] = None
    image_url: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return split_csv(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    event_type: Optional[str] = None
    created_by: str
    start_date: datetime
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    max_participants: Optional[int] = None
    current_participants: int = 0
    status: Literal["upcoming", "ongoing", "completed", "cancelled"] = "upcoming"
    tags: Optional[List[str]] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    organizer: Optional[ProfileSummary] = None

    @property
    def is_full(self) -> bool:
        return self.max_participants is not None and self.current_participants >= self.max_participants

    class Config:
        from_attributes = True


class EventRegistrationResponse(BaseModel):
    event_id: str
    user_id: str
    registered: bool
    current_participants: int
