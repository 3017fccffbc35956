# profiles/presence.py
"""Heartbeat-based presence.

Every user writes only their own ``PresenceRecord``. Readers derive the
effective status from the stored flag and the recency of the last heartbeat,
so one missed beat never flips a user offline as long as the staleness
window is at least one heartbeat interval.
"""
import asyncio
import logging
from datetime import timedelta

from channels.db import database_sync_to_async
from django.conf import settings
from django.utils import timezone

from live.broadcast import PRESENCE_GROUP, publish
from profiles.models import PresenceRecord

logger = logging.getLogger(__name__)


def stale_window():
    return timedelta(seconds=settings.PRESENCE_STALE_SECONDS)


def is_effectively_online(record, now=None):
    if record is None:
        return False
    if record.is_online:
        return True
    if record.last_heartbeat is None:
        return False
    now = now or timezone.now()
    return now - record.last_heartbeat < stale_window()


def presence_event(record):
    return {
        "type": "presence.update",
        "user_id": record.user_id,
        "is_online": record.is_online,
        "last_heartbeat": record.last_heartbeat.isoformat() if record.last_heartbeat else None,
        "stamp": record.updated_at.timestamp(),
    }


def _write(user_id, is_online, beat):
    now = timezone.now()
    defaults = {"is_online": is_online, "updated_at": now}
    if beat:
        defaults["last_heartbeat"] = now
    record, _ = PresenceRecord.objects.update_or_create(user_id=user_id, defaults=defaults)
    publish(PRESENCE_GROUP, presence_event(record))
    return record


def heartbeat(user_id):
    record = _write(user_id, True, True)
    logger.debug(f"Heartbeat for user {user_id} at {record.last_heartbeat}")
    return record


def mark_online(user_id):
    record = _write(user_id, True, True)
    logger.info(f"User {user_id} is online")
    return record


def mark_offline(user_id):
    # last_heartbeat is left alone so the offline write does not extend recency.
    record = _write(user_id, False, False)
    logger.info(f"User {user_id} is offline")
    return record


def expire_stale(now=None):
    """Clear online flags left behind by sessions that died without signing off."""
    now = now or timezone.now()
    cutoff = now - stale_window()
    expired = 0
    for record in PresenceRecord.objects.filter(is_online=True, last_heartbeat__lt=cutoff):
        record.is_online = False
        record.updated_at = now
        record.save(update_fields=["is_online", "updated_at"])
        publish(PRESENCE_GROUP, presence_event(record))
        expired += 1
    if expired:
        logger.info(f"Expired {expired} stale presence records")
    return expired


class PresenceTracker:
    def __init__(self, interval=None):
        self.interval = settings.PRESENCE_HEARTBEAT_SECONDS if interval is None else interval

    async def start(self, user_id):
        """Mark ``user_id`` online and keep it fresh until the returned ``cancel`` is awaited."""
        await self._safe_write(mark_online, user_id)
        task = asyncio.ensure_future(self._beat(user_id))
        cancelled = False

        async def cancel():
            nonlocal cancelled
            if cancelled:
                return
            cancelled = True
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            await self._safe_write(mark_offline, user_id)

        return cancel

    async def _beat(self, user_id):
        while True:
            await asyncio.sleep(self.interval)
            await self._safe_write(heartbeat, user_id)

    async def _safe_write(self, write, user_id):
        try:
            await database_sync_to_async(write)(user_id)
            return True
        except Exception as e:
            # Presence is advisory; the next interval retries.
            logger.error(f"Presence write {write.__name__} failed for user {user_id}: {str(e)}")
            return False
