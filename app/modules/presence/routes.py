from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.presence.schemas import PresenceResponse
from app.modules.presence.service import PresenceService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/presence", tags=["presence"])


def get_presence_service(supabase: Client = Depends(get_supabase)) -> PresenceService:
    return PresenceService(supabase)


@router.post("/online", response_model=PresenceResponse)
async def go_online(
    user_data: Dict = Depends(get_current_user_id),
    service: PresenceService = Depends(get_presence_service)
):
    return service.set_online(user_data["id"])


@router.post("/heartbeat", response_model=PresenceResponse)
async def heartbeat(
    user_data: Dict = Depends(get_current_user_id),
    service: PresenceService = Depends(get_presence_service)
):
    return service.heartbeat(user_data["id"])


@router.post("/offline", response_model=PresenceResponse)
async def go_offline(
    user_data: Dict = Depends(get_current_user_id),
    service: PresenceService = Depends(get_presence_service)
):
    return service.set_offline(user_data["id"])
