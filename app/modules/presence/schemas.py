from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class PresenceResponse(BaseModel):
    user_id: str
    is_online: bool
    last_seen: Optional[datetime] = None
