import math
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

DEFAULT_EASE = 2.5
MIN_EASE = 1.3
LEARNED_INTERVAL_DAYS = 21

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def to_iso(moment: datetime) -> str:
    """Format as a millisecond UTC timestamp ("2024-05-01T08:30:00.000Z") so stored strings sort by time."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"

def from_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

def map_rating_to_quality(rating: str) -> int:
    """Map rating to SM-2 quality score (0-5)."""
    mapping = {
        'NAILED': 5,
        'ALMOST': 3,
        'STUMPED': 1,
    }
    return mapping.get(getattr(rating, "value", rating), 1)

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def update_sm2(
    interval: int,
    ease: float,
    quality: int,
    reps: int,
    now: Optional[datetime] = None,
) -> Tuple[int, float, int, datetime]:
    """Update SM-2 parameters and compute new due timestamp.

    The interval growth uses the ease from before this review; the ease is
    adjusted afterwards and never drops below 1.3.
    """
    if quality < 3:
        new_reps = 0
        new_interval = 1
    else:
        new_reps = reps + 1
        if new_reps == 1:
            new_interval = 1
        elif new_reps == 2:
            new_interval = 6
        else:
            new_interval = _round_half_up(interval * ease)
    new_ease = max(MIN_EASE, ease + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)))
    anchor = now or utc_now()
    new_due = anchor + timedelta(days=new_interval)
    return new_interval, new_ease, new_reps, new_due

def is_learned(interval: int) -> bool:
    return interval >= LEARNED_INTERVAL_DAYS
