from datetime import datetime
from typing import Dict, Optional

from db import repository
from .sm2 import is_learned, map_rating_to_quality, to_iso, update_sm2, utc_now


def update_srs(conn, word_id: str, rating: str, now: Optional[datetime] = None) -> Dict:
    """Apply one rating to a word's schedule, initializing it first if needed."""
    now = now or utc_now()
    srs = repository.get_srs(conn, word_id)
    if not srs:
        srs = repository.initialize_srs(conn, word_id, now)
    quality = map_rating_to_quality(rating)
    new_interval, new_ease, new_reps, new_due = update_sm2(
        srs["interval"], srs["ease"], quality, srs.get("reps") or 0, now
    )
    updated = {
        "word_id": word_id,
        "ease": new_ease,
        "interval": new_interval,
        "due": to_iso(new_due),
        "reps": new_reps,
    }
    repository.set_srs(conn, updated)
    return updated


def get_next_word(conn, now: Optional[datetime] = None) -> Optional[str]:
    """Id of the most overdue word, or None when nothing is due."""
    due_words = repository.get_due_srs(conn, now)
    if not due_words:
        return None
    due_words.sort(key=lambda srs: srs["due"])
    return due_words[0]["word_id"]


def get_study_stats(conn, now: Optional[datetime] = None) -> Dict[str, int]:
    all_srs = repository.get_all_srs(conn)
    due_words = repository.get_due_srs(conn, now)
    learned = sum(1 for srs in all_srs if is_learned(srs["interval"]))
    return {"total": len(all_srs), "due": len(due_words), "learned": learned}


def is_new_word(conn, word_id: str) -> bool:
    return repository.get_srs(conn, word_id) is None
