from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.events.schemas import EventCreate, EventResponse, EventRegistrationResponse
from app.modules.events.service import EventService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import get_current_user_id, require_role
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(supabase: Client = Depends(get_supabase)) -> EventService:
    return EventService(supabase)


@router.get("", response_model=List[EventResponse])
async def list_events(
    user_data: Dict = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service)
):
    """Upcoming events ordered by start date"""
    return service.list_upcoming()


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    event_data: EventCreate,
    profile: ProfileResponse = Depends(require_role("faculty")),
    service: EventService = Depends(get_event_service)
):
    """Create an event (faculty). The creator is registered automatically."""
    return service.create_event(event_data, profile.id)


@router.get("/registered", response_model=List[str])
async def list_registered_events(
    user_data: Dict = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service)
):
    """Ids of events the caller is registered for"""
    return service.registered_event_ids(user_data["id"])


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service)
):
    return service.get_event(event_id)


@router.post("/{event_id}/register", response_model=EventRegistrationResponse, status_code=201)
async def register_for_event(
    event_id: str,
    profile: ProfileResponse = Depends(require_role("student")),
    service: EventService = Depends(get_event_service)
):
    return service.register(event_id, profile.id)


@router.delete("/{event_id}/register", response_model=EventRegistrationResponse)
async def unregister_from_event(
    event_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service)
):
    return service.unregister(event_id, user_data["id"])
