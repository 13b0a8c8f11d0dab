from supabase import Client
from app.modules.chat.schemas import (
    MessageResponse, ChatRoomResponse, ChatParticipantResponse
)
from app.modules.profiles.service import ProfileService
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def direct_pair_filter(user_id: str, peer_id: str) -> str:
    """PostgREST or=() expression matching messages in either direction between two users"""
    return (
        f"and(sender_id.eq.{user_id},receiver_id.eq.{peer_id}),"
        f"and(sender_id.eq.{peer_id},receiver_id.eq.{user_id})"
    )


def _require_content(content: str):
    if not content:
        raise HTTPException(status_code=400, detail="Message cannot be empty")


class ChatService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Direct messages

    def fetch_direct(self, user_id: str, peer_id: str, limit: Optional[int] = None) -> List[MessageResponse]:
        """Messages between user and peer, oldest first"""
        try:
            query = self.supabase.table("messages")\
                .select("*")\
                .or_(direct_pair_filter(user_id, peer_id))\
                .order("created_at")
            if limit:
                query = query.limit(limit)
            result = query.execute()
            return [MessageResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def send_direct(self, sender_id: str, receiver_id: str, content: str) -> MessageResponse:
        """Insert a direct message; the stored row is returned only once the insert succeeded"""
        _require_content(content)
        if sender_id == receiver_id:
            raise HTTPException(status_code=400, detail="You cannot message yourself")
        # 404 when the receiver has no profile
        ProfileService(self.supabase).get_profile(receiver_id)
        return self._insert_message({
            "sender_id": sender_id,
            "receiver_id": receiver_id,
            "content": content,
        })

    # Rooms

    def create_room(self, name: str, created_by: str, participant_ids: List[str]) -> ChatRoomResponse:
        """Create a room; the creator is always a participant"""
        try:
            result = self.supabase.table("chat_rooms").insert({
                "name": name,
                "created_by": created_by,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create chat room")
            room = result.data[0]

            members = [created_by] + [p for p in dict.fromkeys(participant_ids) if p != created_by]
            self.supabase.table("chat_participants").insert([
                {"room_id": room["id"], "user_id": member} for member in members
            ]).execute()

            logger.info(f"Chat room {room['id']} created with {len(members)} participant(s)")
            return ChatRoomResponse(**room)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_room(self, room_id: str) -> ChatRoomResponse:
        try:
            result = self.supabase.table("chat_rooms")\
                .select("*")\
                .eq("id", room_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Chat room not found")
            return ChatRoomResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_rooms(self, user_id: str) -> List[ChatRoomResponse]:
        """Rooms the user participates in, newest first"""
        try:
            memberships = self.supabase.table("chat_participants")\
                .select("room_id")\
                .eq("user_id", user_id)\
                .execute()
            room_ids = [m["room_id"] for m in (memberships.data or [])]
            if not room_ids:
                return []
            result = self.supabase.table("chat_rooms")\
                .select("*")\
                .in_("id", room_ids)\
                .order("created_at", desc=True)\
                .execute()
            return [ChatRoomResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_participants(self, room_id: str) -> List[ChatParticipantResponse]:
        try:
            result = self.supabase.table("chat_participants")\
                .select("room_id, user_id")\
                .eq("room_id", room_id)\
                .execute()
            rows = result.data or []
            people = ProfileService(self.supabase).get_summaries([r["user_id"] for r in rows])
            return [
                ChatParticipantResponse(room_id=r["room_id"], user_id=r["user_id"], profile=people.get(r["user_id"]))
                for r in rows
            ]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def add_participant(self, room_id: str, user_id: str) -> ChatParticipantResponse:
        try:
            existing = self.supabase.table("chat_participants")\
                .select("id")\
                .eq("room_id", room_id)\
                .eq("user_id", user_id)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=400, detail="User is already a participant of this room")

            result = self.supabase.table("chat_participants").insert({
                "room_id": room_id,
                "user_id": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add participant")
            return ChatParticipantResponse(room_id=room_id, user_id=user_id)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def fetch_room(self, room_id: str, limit: Optional[int] = None) -> List[MessageResponse]:
        """Room messages, oldest first"""
        try:
            query = self.supabase.table("messages")\
                .select("*")\
                .eq("room_id", room_id)\
                .order("created_at")
            if limit:
                query = query.limit(limit)
            result = query.execute()
            return [MessageResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def send_room(self, room_id: str, sender_id: str, content: str) -> MessageResponse:
        _require_content(content)
        return self._insert_message({
            "sender_id": sender_id,
            "room_id": room_id,
            "content": content,
        })

    def _insert_message(self, message: dict) -> MessageResponse:
        try:
            result = self.supabase.table("messages").insert(message).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send message")
            return MessageResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
