"""wal_events persistence and post-commit publication of market events.

write_wal_event runs inside the caller's transaction, so an event exists
exactly when the state change it describes was committed. publish_event is
called after commit; Redis being unavailable is logged and otherwise
ignored, since the durable copy is already in wal_events.
"""

import json
import logging

import redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_clearing.domain.events import MarketResolvedEvent
from src.sb_common.redis_client import get_redis

logger = logging.getLogger(__name__)

_INSERT_WAL_SQL = text("""
    INSERT INTO wal_events (market, event_type, payload)
    VALUES (:market, :event_type, :payload)
""")


async def write_wal_event(db: AsyncSession, event: MarketResolvedEvent) -> None:
    """Insert one row into wal_events within the caller's transaction."""
    await db.execute(
        _INSERT_WAL_SQL,
        {
            "market": event.market,
            "event_type": event.event_type.value,
            "payload": json.dumps(event.as_payload()),
        },
    )


async def publish_event(event: MarketResolvedEvent) -> None:
    message = json.dumps({"event_type": event.event_type.value, **event.as_payload()})
    try:
        client = await get_redis()
        await client.publish(settings.EVENTS_CHANNEL, message)
    except redis.RedisError as exc:
        logger.warning("Event publish failed for market %s: %s", event.market, exc)
