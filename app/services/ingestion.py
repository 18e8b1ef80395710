from datetime import datetime, timezone
from typing import List, Optional
from app.config import settings
from app.db.redis_client import RedisClient
from app.models.events import AnalyticsEvent
from app.services import keys

SIGNUP_STEP_EVENT = "signup_step"


def event_hour(event: AnalyticsEvent) -> int:
    occurred_at = event.occurred_at
    if occurred_at.tzinfo is None:
        occurred_at = occurred_at.replace(tzinfo=timezone.utc)
    return occurred_at.astimezone(timezone.utc).hour


def signup_step(event: AnalyticsEvent) -> Optional[str]:
    if event.event != SIGNUP_STEP_EVENT or not event.properties:
        return None
    step = event.properties.get("step")
    if not step:
        return None
    return str(step)


async def record_batch(client: RedisClient, events: List[AnalyticsEvent], now: Optional[datetime] = None) -> int:
    """Fan a batch out into the day's aggregates in a single MULTI/EXEC round trip.

    Every event lands in the buckets of the day the batch is received, whatever
    its own timestamp says. Counts are plain increments, so a resent batch is
    counted twice.
    """
    now = now or datetime.now(timezone.utc)
    day = keys.today_key(now)
    now_ms = int(now.timestamp() * 1000)

    async with client.pipeline() as pipe:
        for event in events:
            pipe.lpush(keys.DAILY_EVENTS_LIST.format(day=day), event.raw_json())
            pipe.hincrby(keys.DAILY_TYPES_HASH.format(day=day), event.event, 1)

            if event.session_id:
                pipe.sadd(keys.DAILY_SESSIONS_SET.format(day=day), event.session_id)
                pipe.set(
                    keys.SESSION_LAST_SEEN.format(session_id=event.session_id),
                    now_ms,
                    ex=settings.session_ttl_seconds
                )

            step = signup_step(event)
            if step:
                pipe.hincrby(keys.DAILY_SIGNUP_HASH.format(day=day), step, 1)

            if event.device and event.device.device_model:
                pipe.hincrby(keys.DAILY_DEVICES_HASH.format(day=day), event.device.device_model, 1)

            pipe.hincrby(keys.DAILY_HOURLY_HASH.format(day=day), str(event_hour(event)), 1)

        pipe.incrby(keys.DAILY_TOTAL.format(day=day), len(events))
        pipe.incrby(keys.TOTAL_EVENTS, len(events))

        for key in keys.expiring_daily_keys(day):
            pipe.expire(key, settings.daily_ttl_seconds)

        await pipe.execute()

    return len(events)
