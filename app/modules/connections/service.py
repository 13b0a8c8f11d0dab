from supabase import Client
from app.modules.connections.schemas import (
    ConnectionRequestResponse, ConnectionResponse
)
from app.modules.profiles.service import ProfileService
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

STATUS_BY_ACTION = {"accept": "accepted", "reject": "rejected"}


class ConnectionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)

    def send_request(self, sender_id: str, receiver_id: str) -> ConnectionRequestResponse:
        """Send a pending request unless one from sender to receiver is already pending"""
        if sender_id == receiver_id:
            raise HTTPException(status_code=400, detail="You cannot send a connection request to yourself")
        try:
            # Advisory check: not atomic with the insert below
            existing = self.supabase.table("connection_requests")\
                .select("id")\
                .eq("sender_id", sender_id)\
                .eq("receiver_id", receiver_id)\
                .eq("status", "pending")\
                .execute()
            if existing.data:
                raise HTTPException(
                    status_code=400,
                    detail="You have already sent a connection request to this user"
                )

            result = self.supabase.table("connection_requests").insert({
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "status": "pending"
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send connection request")

            logger.info(f"Connection request {sender_id} -> {receiver_id}")
            return ConnectionRequestResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def respond(self, request_id: str, user_id: str, action: str) -> ConnectionRequestResponse:
        """Accept or reject a request addressed to user_id"""
        try:
            found = self.supabase.table("connection_requests")\
                .select("*")\
                .eq("id", request_id)\
                .limit(1)\
                .execute()
            if not found.data:
                raise HTTPException(status_code=404, detail="Connection request not found")
            if found.data[0]["receiver_id"] != user_id:
                raise HTTPException(status_code=403, detail="Only the receiver can respond to this request")

            result = self.supabase.table("connection_requests")\
                .update({"status": STATUS_BY_ACTION[action]})\
                .eq("id", request_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Connection request not found")
            return ConnectionRequestResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_incoming_pending(self, user_id: str) -> List[ConnectionRequestResponse]:
        """Pending requests addressed to user_id, with sender profiles attached"""
        try:
            result = self.supabase.table("connection_requests")\
                .select("*")\
                .eq("receiver_id", user_id)\
                .eq("status", "pending")\
                .order("created_at", desc=True)\
                .execute()
            rows = result.data or []
            people = self.profiles.get_summaries([r["sender_id"] for r in rows])
            return [
                ConnectionRequestResponse(**r, sender=people.get(r["sender_id"]))
                for r in rows
            ]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_sent_pending_ids(self, user_id: str) -> List[str]:
        """Receiver ids of the caller's outstanding requests"""
        try:
            result = self.supabase.table("connection_requests")\
                .select("receiver_id")\
                .eq("sender_id", user_id)\
                .eq("status", "pending")\
                .execute()
            return [r["receiver_id"] for r in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_connections(self, user_id: str) -> List[ConnectionResponse]:
        """Accepted requests in either direction, mapped to the other party"""
        try:
            result = self.supabase.table("connection_requests")\
                .select("id, sender_id, receiver_id")\
                .eq("status", "accepted")\
                .or_(f"sender_id.eq.{user_id},receiver_id.eq.{user_id}")\
                .execute()
            rows = result.data or []
            others = [
                (r["id"], r["receiver_id"] if r["sender_id"] == user_id else r["sender_id"])
                for r in rows
            ]
            people = self.profiles.get_summaries([other for _, other in others])
            return [
                ConnectionResponse(request_id=request_id, user_id=other, profile=people.get(other))
                for request_id, other in others
            ]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

