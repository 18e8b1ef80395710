import asyncio
import json
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional
from app.config import settings
from app.db.redis_client import RedisClient
from app.models.events import DashboardData
from app.services import keys

SIGNUP_ORDER = ["phone", "verification", "name", "birthday", "reviewTerms"]


def to_count(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(value)


def hourly_series(hourly: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    hourly = hourly or {}
    return [
        {"hour": f"{hour:02d}:00", "count": to_count(hourly.get(str(hour)))}
        for hour in range(24)
    ]


def signup_funnel(steps: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    steps = steps or {}
    return [{"step": step, "count": to_count(steps.get(step))} for step in SIGNUP_ORDER]


def named_counts(counts: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [{"name": name, "count": to_count(count)} for name, count in (counts or {}).items()]


def decode_events(raw_events: Optional[List[Any]]) -> List[Dict[str, Any]]:
    return [json.loads(raw) if isinstance(raw, (str, bytes)) else raw for raw in raw_events or []]


async def daily_totals(client: RedisClient, days: int, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    daily = []
    for day in keys.last_day_keys(days, now):
        total = await client.get(keys.DAILY_TOTAL.format(day=day))
        daily.append({"date": day, "events": to_count(total)})
    return daily


async def build_dashboard(client: RedisClient, now: Optional[datetime] = None) -> DashboardData:
    day = keys.today_key(now)

    (
        total_events,
        events_today,
        recent_raw,
        event_types,
        signup_steps,
        devices,
        hourly,
        sessions_today,
    ) = await asyncio.gather(
        client.get(keys.TOTAL_EVENTS),
        client.get(keys.DAILY_TOTAL.format(day=day)),
        client.lrange(keys.DAILY_EVENTS_LIST.format(day=day), 0, settings.recent_events_limit - 1),
        client.hgetall(keys.DAILY_TYPES_HASH.format(day=day)),
        client.hgetall(keys.DAILY_SIGNUP_HASH.format(day=day)),
        client.hgetall(keys.DAILY_DEVICES_HASH.format(day=day)),
        client.hgetall(keys.DAILY_HOURLY_HASH.format(day=day)),
        client.scard(keys.DAILY_SESSIONS_SET.format(day=day)),
    )

    daily_stats = await daily_totals(client, settings.daily_stats_days, now)

    return DashboardData(
        total_events=to_count(total_events),
        events_today=to_count(events_today),
        active_sessions=to_count(sessions_today),
        recent_events=decode_events(recent_raw),
        events_by_type={name: to_count(count) for name, count in (event_types or {}).items()},
        events_by_hour=hourly_series(hourly),
        signup_funnel=signup_funnel(signup_steps),
        devices=named_counts(devices),
        daily_stats=daily_stats,
    )
