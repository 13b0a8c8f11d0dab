import asyncio
import logging
from supabase import AsyncClient
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def extract_record(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Pull the inserted row out of a postgres_changes payload."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("record"), dict):
        return data["record"]
    for key in ("record", "new"):
        if isinstance(payload.get(key), dict):
            return payload[key]
    return None


def message_matches(
    row: Dict[str, Any],
    user_id: str,
    room_id: Optional[str] = None,
    peer_id: Optional[str] = None,
) -> bool:
    """Same predicate the history fetch uses: room equality, or the sender/receiver pair."""
    if room_id:
        return row.get("room_id") == room_id
    pair = {row.get("sender_id"), row.get("receiver_id")}
    return pair == {user_id, peer_id} and not row.get("room_id")


class MessageFeed:
    """
    Relays Supabase realtime INSERTs on the messages table for one chat view.

    Rows land on an asyncio.Queue; delivery order is whatever the provider sends,
    with no ordering guarantee relative to writes issued by this process.
    """

    def __init__(self, client: AsyncClient, user_id: str, room_id: Optional[str] = None, peer_id: Optional[str] = None):
        if not room_id and not peer_id:
            raise ValueError("room_id or peer_id is required")
        self.client = client
        self.user_id = user_id
        self.room_id = room_id
        self.peer_id = peer_id
        self.queue: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue()
        self._channels: List[Any] = []

    def _handle(self, payload: Dict[str, Any]):
        row = extract_record(payload)
        if row and message_matches(row, self.user_id, self.room_id, self.peer_id):
            self.queue.put_nowait(row)

    def _filters(self) -> List[str]:
        if self.room_id:
            return [f"room_id=eq.{self.room_id}"]
        # Realtime filters take a single column; the pair check happens in _handle
        return [f"receiver_id=eq.{self.user_id}", f"receiver_id=eq.{self.peer_id}"]

    async def start(self):
        for index, row_filter in enumerate(self._filters()):
            channel = self.client.channel(f"messages:{self.user_id}:{self.room_id or self.peer_id}:{index}")
            channel.on_postgres_changes(
                "INSERT",
                schema="public",
                table="messages",
                filter=row_filter,
                callback=self._handle,
            )
            await channel.subscribe()
            self._channels.append(channel)
        logger.debug(f"Message feed started for {self.user_id} ({len(self._channels)} channel(s))")

    async def next_message(self) -> Dict[str, Any]:
        return await self.queue.get()

    async def close(self):
        for channel in self._channels:
            try:
                await self.client.remove_channel(channel)
            except Exception as e:
                logger.warning(f"Error removing realtime channel: {e}")
        self._channels = []
