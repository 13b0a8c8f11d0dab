from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime

from app.modules.profiles.schemas import ProfileSummary


class ConnectionRequestCreate(BaseModel):
    receiver_id: str


class ConnectionRequestRespond(BaseModel):
    action: Literal["accept", "reject"]


class ConnectionRequestResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    status: Literal["pending", "accepted", "rejected"]
    created_at: Optional[datetime] = None
    sender: Optional[ProfileSummary] = None
    receiver: Optional[ProfileSummary] = None

    class Config:
        from_attributes = True


class ConnectionResponse(BaseModel):
    request_id: str
    user_id: str
    profile: Optional[ProfileSummary] = None
