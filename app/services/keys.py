from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

# Global
TOTAL_EVENTS = "stats:total"

# Daily aggregates, scoped by YYYY-MM-DD
DAILY_EVENTS_LIST = "events:{day}"
DAILY_TYPES_HASH = "stats:{day}:types"
DAILY_SIGNUP_HASH = "stats:{day}:signup"
DAILY_DEVICES_HASH = "stats:{day}:devices"
DAILY_HOURLY_HASH = "stats:{day}:hourly"
DAILY_TOTAL = "stats:{day}:total"
DAILY_SESSIONS_SET = "sessions:{day}"

# Sessions
SESSION_LAST_SEEN = "session:{session_id}:last_seen"


def day_key(value: date) -> str:
    return value.isoformat()


def today_key(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return day_key(now.astimezone(timezone.utc).date())


def last_day_keys(days: int, now: Optional[datetime] = None) -> List[str]:
    """Day keys for the last ``days`` calendar days, oldest first, today last."""
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date()
    return [day_key(today - timedelta(days=offset)) for offset in range(days - 1, -1, -1)]


def expiring_daily_keys(day: str) -> List[str]:
    return [
        DAILY_EVENTS_LIST.format(day=day),
        DAILY_TYPES_HASH.format(day=day),
        DAILY_SIGNUP_HASH.format(day=day),
        DAILY_DEVICES_HASH.format(day=day),
        DAILY_HOURLY_HASH.format(day=day),
        DAILY_SESSIONS_SET.format(day=day),
    ]
