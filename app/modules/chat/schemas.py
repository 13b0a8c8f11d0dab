from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.modules.profiles.schemas import ProfileSummary


class MessageCreate(BaseModel):
    content: str = Field(..., max_length=4000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return v.strip()


class DirectMessageCreate(MessageCreate):
    receiver_id: str


class MessageResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: Optional[str] = None
    room_id: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChatRoomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    participant_ids: List[str] = []


class ChatRoomResponse(BaseModel):
    id: str
    name: str
    created_by: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChatParticipantAdd(BaseModel):
    user_id: str


class ChatParticipantResponse(BaseModel):
    room_id: str
    user_id: str
    profile: Optional[ProfileSummary] = None
