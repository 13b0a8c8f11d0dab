import asyncio
import logging
from app.config import settings
from app.database.supabase_client import SupabaseClient
from app.modules.presence.service import PresenceService

logger = logging.getLogger(__name__)


async def sweep_stale_presence():
    """Flip users offline whose client stopped sending heartbeats."""
    try:
        service = PresenceService(SupabaseClient.get_service_client())
        stale = await asyncio.to_thread(service.sweep_stale, settings.presence_stale_after_seconds)
        if not stale:
            logger.debug("No stale presence found")
    except Exception as e:
        logger.error(f"Error sweeping presence: {str(e)}")


async def presence_sweeper_loop():
    """Background task that periodically expires stale online flags"""
    while True:
        await sweep_stale_presence()
        await asyncio.sleep(settings.presence_sweep_interval_seconds)
