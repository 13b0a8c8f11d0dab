from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from app.database.supabase_client import get_supabase, create_realtime_client
from app.modules.auth.service import AuthService
from app.modules.chat.schemas import (
    MessageCreate, DirectMessageCreate, MessageResponse,
    ChatRoomCreate, ChatRoomResponse, ChatParticipantAdd, ChatParticipantResponse
)
from app.modules.chat.service import ChatService
from app.modules.chat.realtime import MessageFeed
from app.core.dependencies import get_current_user_id, check_room_participant
from pydantic import ValidationError
from supabase import Client
from typing import List, Dict, Optional
import asyncio
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def get_chat_service(supabase: Client = Depends(get_supabase)) -> ChatService:
    return ChatService(supabase)


async def open_message_feed(user_id: str, room_id: Optional[str] = None, peer_id: Optional[str] = None) -> MessageFeed:
    client = await create_realtime_client()
    feed = MessageFeed(client, user_id, room_id=room_id, peer_id=peer_id)
    await feed.start()
    return feed


def get_feed_opener():
    return open_message_feed


# Direct messages

@router.get("/direct/{peer_id}", response_model=List[MessageResponse])
async def get_direct_messages(
    peer_id: str,
    limit: Optional[int] = Query(None, ge=1, le=500),
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    """Conversation between the caller and peer_id, oldest first"""
    return service.fetch_direct(user_data["id"], peer_id, limit=limit)


@router.post("/direct", response_model=MessageResponse, status_code=201)
async def send_direct_message(
    message: DirectMessageCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.send_direct(user_data["id"], message.receiver_id, message.content)


# Rooms

@router.post("/rooms", response_model=ChatRoomResponse, status_code=201)
async def create_room(
    room_data: ChatRoomCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.create_room(room_data.name, user_data["id"], room_data.participant_ids)


@router.get("/rooms", response_model=List[ChatRoomResponse])
async def list_rooms(
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service)
):
    return service.list_rooms(user_data["id"])


@router.get("/rooms/{room_id}", response_model=ChatRoomResponse)
async def get_room(
    room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
    supabase: Client = Depends(get_supabase)
):
    check_room_participant(room_id, user_data, supabase)
    return service.get_room(room_id)


@router.get("/rooms/{room_id}/participants", response_model=List[ChatParticipantResponse])
async def list_participants(
    room_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
    supabase: Client = Depends(get_supabase)
):
    check_room_participant(room_id, user_data, supabase)
    return service.list_participants(room_id)


@router.post("/rooms/{room_id}/participants", response_model=ChatParticipantResponse, status_code=201)
async def add_participant(
    room_id: str,
    participant: ChatParticipantAdd,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
    supabase: Client = Depends(get_supabase)
):
    """Any participant may invite another user into the room"""
    check_room_participant(room_id, user_data, supabase)
    return service.add_participant(room_id, participant.user_id)


@router.get("/rooms/{room_id}/messages", response_model=List[MessageResponse])
async def get_room_messages(
    room_id: str,
    limit: Optional[int] = Query(None, ge=1, le=500),
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
    supabase: Client = Depends(get_supabase)
):
    check_room_participant(room_id, user_data, supabase)
    return service.fetch_room(room_id, limit=limit)


@router.post("/rooms/{room_id}/messages", response_model=MessageResponse, status_code=201)
async def send_room_message(
    room_id: str,
    message: MessageCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
    supabase: Client = Depends(get_supabase)
):
    check_room_participant(room_id, user_data, supabase)
    return service.send_room(room_id, user_data["id"], message.content)


# Realtime

@router.websocket("/ws")
async def message_stream(
    websocket: WebSocket,
    token: str,
    room_id: Optional[str] = None,
    peer_id: Optional[str] = None,
    supabase: Client = Depends(get_supabase),
    open_feed=Depends(get_feed_opener),
):
    """
    Push newly inserted messages for one conversation.

    Query: token (access token), and either room_id or peer_id. Incoming client
    frames are ignored; the socket only carries server-to-client messages.
    """
    if bool(room_id) == bool(peer_id):
        await websocket.close(code=4400, reason="Pass exactly one of room_id or peer_id")
        return
    try:
        user_data = AuthService(supabase).get_current_user(token)
        if room_id:
            check_room_participant(room_id, user_data, supabase)
    except HTTPException as e:
        await websocket.close(code=4000 + e.status_code, reason=str(e.detail))
        return

    await websocket.accept()
    try:
        feed = await open_feed(user_data["id"], room_id=room_id, peer_id=peer_id)
    except Exception as e:
        logger.error(f"Could not open message feed for {user_data['id']}: {e}")
        await websocket.close(code=1011, reason="Realtime feed unavailable")
        return

    async def pump():
        while True:
            row = await feed.next_message()
            try:
                payload = MessageResponse(**row).model_dump(mode="json")
            except ValidationError as e:
                logger.warning(f"Skipping malformed message row {row.get('id') if isinstance(row, dict) else row!r}: {e}")
                continue
            await websocket.send_json(payload)

    async def drain():
        while True:
            await websocket.receive_text()

    pump_task = asyncio.create_task(pump())
    drain_task = asyncio.create_task(drain())
    try:
        done, _ = await asyncio.wait({pump_task, drain_task}, return_when=asyncio.FIRST_COMPLETED)
        if drain_task in done:
            if not isinstance(drain_task.exception(), WebSocketDisconnect):
                logger.warning(f"Chat socket receive failed for {user_data['id']}: {drain_task.exception()}")
            logger.debug(f"Chat socket closed for {user_data['id']}")
        else:
            logger.error(f"Message relay stopped for {user_data['id']}: {pump_task.exception()}")
            try:
                await websocket.close(code=1011, reason="Message relay failed")
            except Exception as e:
                logger.debug(f"Socket already closed: {e}")
    finally:
        pump_task.cancel()
        drain_task.cancel()
        await feed.close()
