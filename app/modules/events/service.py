from supabase import Client
from app.modules.events.schemas import EventCreate, EventResponse, EventRegistrationResponse
from app.modules.profiles.service import ProfileService
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class EventService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _with_organizers(self, rows: List[dict]) -> List[EventResponse]:
        people = ProfileService(self.supabase).get_summaries([r["created_by"] for r in rows])
        return [EventResponse(**r, organizer=people.get(r["created_by"])) for r in rows]

    def get_event(self, event_id: str) -> EventResponse:
        try:
            result = self.supabase.table("events")\
                .select("*")\
                .eq("id", event_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Event not found")
            return self._with_organizers(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_upcoming(self) -> List[EventResponse]:
        """Upcoming events, soonest first"""
        try:
            result = self.supabase.table("events")\
                .select("*")\
                .eq("status", "upcoming")\
                .order("start_date")\
                .execute()
            return self._with_organizers(result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_event(self, data: EventCreate, creator_id: str) -> EventResponse:
        """Insert the event and register its creator as the first participant"""
        try:
            result = self.supabase.table("events").insert({
                "title": data.title,
                "description": data.description,
                "event_type": data.event_type,
                "created_by": creator_id,
                "start_date": data.start_date.isoformat(),
                "end_date": data.end_date.isoformat(),
                "location": data.location or None,
                "max_participants": data.max_participants,
                "tags": data.tags,
                "image_url": data.image_url,
                "status": "upcoming",
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create event")
            event = result.data[0]

            self.supabase.table("event_registrations").insert({
                "event_id": event["id"],
                "user_id": creator_id,
            }).execute()
            self._refresh_participant_count(event["id"])

            logger.info(f"Event {event['id']} created by {creator_id}")
            return self.get_event(event["id"])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def register(self, event_id: str, user_id: str) -> EventRegistrationResponse:
        try:
            event = self.get_event(event_id)
            if event.status != "upcoming":
                raise HTTPException(status_code=400, detail="Registration is closed for this event")
            if user_id in self.registered_user_ids(event_id):
                raise HTTPException(status_code=400, detail="You are already registered for this event")
            if event.is_full:
                raise HTTPException(status_code=400, detail="Event is full")

            result = self.supabase.table("event_registrations").insert({
                "event_id": event_id,
                "user_id": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to register for event")

            count = self._refresh_participant_count(event_id)
            return EventRegistrationResponse(event_id=event_id, user_id=user_id, registered=True, current_participants=count)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def unregister(self, event_id: str, user_id: str) -> EventRegistrationResponse:
        try:
            result = self.supabase.table("event_registrations")\
                .delete()\
                .eq("event_id", event_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="You are not registered for this event")

            count = self._refresh_participant_count(event_id)
            return EventRegistrationResponse(event_id=event_id, user_id=user_id, registered=False, current_participants=count)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def registered_event_ids(self, user_id: str) -> List[str]:
        try:
            result = self.supabase.table("event_registrations")\
                .select("event_id")\
                .eq("user_id", user_id)\
                .execute()
            return [r["event_id"] for r in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def registered_user_ids(self, event_id: str) -> List[str]:
        result = self.supabase.table("event_registrations")\
            .select("user_id")\
            .eq("event_id", event_id)\
            .execute()
        return [r["user_id"] for r in (result.data or [])]

    def _refresh_participant_count(self, event_id: str) -> int:
        """Recount registrations and store the result on the event row"""
        result = self.supabase.table("event_registrations")\
            .select("id", count="exact")\
            .eq("event_id", event_id)\
            .execute()
        count = result.count or 0
        self.supabase.table("events")\
            .update({"current_participants": count})\
            .eq("id", event_id)\
            .execute()
        return count
