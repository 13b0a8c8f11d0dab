from supabase import Client
from app.modules.collaborations.schemas import CollaborationCreate, CollaborationResponse
from app.modules.profiles.schemas import ProfileSummary
from app.modules.profiles.service import ProfileService
from app.modules.chat.service import ChatService
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class CollaborationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)

    def _with_people(self, rows: List[dict]) -> List[CollaborationResponse]:
        ids = [r["requester_id"] for r in rows] + [r["mentor_id"] for r in rows if r.get("mentor_id")]
        people = self.profiles.get_summaries(ids)
        return [
            CollaborationResponse(
                **r,
                requester=people.get(r["requester_id"]),
                mentor=people.get(r.get("mentor_id")) if r.get("mentor_id") else None,
            )
            for r in rows
        ]

    def _get_row(self, collaboration_id: str) -> dict:
        result = self.supabase.table("collaborations")\
            .select("*")\
            .eq("id", collaboration_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Collaboration not found")
        return result.data[0]

    def _update(self, collaboration_id: str, update_data: dict) -> CollaborationResponse:
        result = self.supabase.table("collaborations")\
            .update(update_data)\
            .eq("id", collaboration_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Collaboration not found")
        return self._with_people(result.data)[0]

    def list_collaborations(self, filter: str, user_id: str) -> List[CollaborationResponse]:
        """all | open | my_requests | mentoring, newest first"""
        try:
            query = self.supabase.table("collaborations").select("*")
            if filter == "open":
                query = query.eq("status", "open")
            elif filter == "my_requests":
                query = query.eq("requester_id", user_id)
            elif filter == "mentoring":
                query = query.eq("mentor_id", user_id)
            result = query.order("created_at", desc=True).execute()
            return self._with_people(result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_collaboration(self, collaboration_id: str) -> CollaborationResponse:
        try:
            return self._with_people([self._get_row(collaboration_id)])[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_collaboration(self, data: CollaborationCreate, requester_id: str) -> CollaborationResponse:
        try:
            result = self.supabase.table("collaborations").insert({
                "title": data.title,
                "description": data.description,
                "type": data.type,
                "requester_id": requester_id,
                "skills_required": data.skills_required,
                "duration_weeks": data.duration_weeks,
                "status": "open",
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create collaboration request")
            return self._with_people(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def accept_collaboration(self, collaboration_id: str, mentor_id: str) -> CollaborationResponse:
        """Faculty takes an open request: becomes mentor, status goes in_progress, a shared room is opened"""
        try:
            row = self._get_row(collaboration_id)
            if row["status"] != "open":
                raise HTTPException(status_code=400, detail="Only open collaborations can be accepted")

            room = ChatService(self.supabase).create_room(
                name=row["title"],
                created_by=mentor_id,
                participant_ids=[row["requester_id"]],
            )
            logger.info(f"Collaboration {collaboration_id} accepted by {mentor_id}")
            return self._update(collaboration_id, {
                "mentor_id": mentor_id,
                "status": "in_progress",
                "chat_room_id": room.id,
            })
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def complete_collaboration(self, collaboration_id: str, user_id: str) -> CollaborationResponse:
        try:
            row = self._get_row(collaboration_id)
            if user_id not in (row["requester_id"], row.get("mentor_id")):
                raise HTTPException(status_code=403, detail="Only the requester or mentor can complete this collaboration")
            if row["status"] == "completed":
                raise HTTPException(status_code=400, detail="Collaboration is already completed")
            return self._update(collaboration_id, {"status": "completed"})
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_members(self, collaboration_id: str) -> List[ProfileSummary]:
        collaboration = self.get_collaboration(collaboration_id)
        return [m for m in (collaboration.requester, collaboration.mentor) if m is not None]
