from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.connections.schemas import (
    ConnectionRequestCreate, ConnectionRequestRespond,
    ConnectionRequestResponse, ConnectionResponse
)
from app.modules.connections.service import ConnectionService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/connections", tags=["connections"])


def get_connection_service(supabase: Client = Depends(get_supabase)) -> ConnectionService:
    return ConnectionService(supabase)


@router.get("", response_model=List[ConnectionResponse])
async def list_connections(
    user_data: Dict = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service)
):
    """People the caller is connected with"""
    return service.list_connections(user_data["id"])


@router.post("/requests", response_model=ConnectionRequestResponse, status_code=201)
async def send_connection_request(
    request_data: ConnectionRequestCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.send_request(user_data["id"], request_data.receiver_id)


@router.get("/requests/incoming", response_model=List[ConnectionRequestResponse])
async def list_incoming_requests(
    user_data: Dict = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.list_incoming_pending(user_data["id"])


@router.get("/requests/sent", response_model=List[str])
async def list_sent_requests(
    user_data: Dict = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service)
):
    """Receiver ids of the caller's pending requests"""
    return service.list_sent_pending_ids(user_data["id"])


@router.post("/requests/{request_id}/respond", response_model=ConnectionRequestResponse)
async def respond_to_request(
    request_id: str,
    response_data: ConnectionRequestRespond,
    user_data: Dict = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service)
):
    return service.respond(request_id, user_data["id"], response_data.action)
