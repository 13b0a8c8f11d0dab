from supabase import Client
from app.modules.presence.schemas import PresenceResponse
from app.core.utils import utc_now_iso
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException
from typing import List
import logging

logger = logging.getLogger(__name__)


class PresenceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _write(self, user_id: str, update_data: dict) -> PresenceResponse:
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")
            row = result.data[0]
            return PresenceResponse(
                user_id=row["id"],
                is_online=bool(row.get("is_online")),
                last_seen=row.get("last_seen"),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def set_online(self, user_id: str) -> PresenceResponse:
        return self._write(user_id, {"is_online": True, "last_seen": utc_now_iso()})

    def set_offline(self, user_id: str) -> PresenceResponse:
        return self._write(user_id, {"is_online": False, "last_seen": utc_now_iso()})

    def heartbeat(self, user_id: str) -> PresenceResponse:
        """Refresh last_seen; also marks the user online in case a sweep flipped them"""
        return self._write(user_id, {"is_online": True, "last_seen": utc_now_iso()})

    def sweep_stale(self, max_age_seconds: int) -> List[str]:
        """Mark users offline whose last heartbeat is older than max_age_seconds. Returns their ids."""
        cutoff = (datetime.now(timezone.utc) - timedelta(seconds=max_age_seconds)).isoformat()
        result = self.supabase.table("profiles")\
            .update({"is_online": False})\
            .eq("is_online", True)\
            .or_(f"last_seen.lt.{cutoff},last_seen.is.null")\
            .execute()
        ids = [row["id"] for row in (result.data or [])]
        if ids:
            logger.info(f"Marked {len(ids)} stale user(s) offline")
        return ids
