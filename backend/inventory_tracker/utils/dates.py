import math
from datetime import datetime, timezone
from typing import Optional

SECONDS_PER_DAY = 86400


# All timestamps are stored as naive UTC
def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def days_until(target: datetime, now: Optional[datetime] = None) -> int:
    """Whole days from now until target, rounded up (negative once past)."""
    now = to_naive_utc(now) or utcnow()
    delta = to_naive_utc(target) - now
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def format_day_month_year(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")
