"""Word, review and SRS persistence.

Reviews and SRS rows point at words by id only. Nothing cascades: deleting
a word removes its reviews and SRS row with explicit deletes in the same
transaction.
"""
import sqlite3
import time
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from utils.sm2 import DEFAULT_EASE, from_iso, to_iso, utc_now


def _word_from_row(row) -> Dict:
    return {
        "id": row["id"],
        "text": row["text"],
        "hint": row["hint"],
        "source_prompt_hash": row["source_prompt_hash"],
    }


def _srs_from_row(row) -> Dict:
    return {
        "word_id": row["word_id"],
        "ease": float(row["ease"]),
        "interval": int(row["interval"]),
        "due": row["due"],
        "reps": int(row["reps"] or 0),
    }


# Words

def get_all_words(conn: sqlite3.Connection) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute("SELECT id, text, hint, source_prompt_hash FROM words ORDER BY rowid")
    return [_word_from_row(row) for row in cursor.fetchall()]


def get_word(conn: sqlite3.Connection, word_id: str) -> Optional[Dict]:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id, text, hint, source_prompt_hash FROM words WHERE id = ?",
        (word_id,),
    )
    row = cursor.fetchone()
    return _word_from_row(row) if row else None


def add_word(conn: sqlite3.Connection, text: str, hint: str, source_prompt_hash: Optional[str] = None) -> str:
    word_id = add_words(conn, [{"text": text, "hint": hint, "source_prompt_hash": source_prompt_hash}])[0]
    return word_id


def add_words(conn: sqlite3.Connection, words: Iterable[Dict]) -> List[str]:
    """Insert words with fresh UUIDs and return the ids in input order."""
    rows = []
    for word in words:
        rows.append((
            str(uuid.uuid4()),
            word["text"],
            word["hint"],
            word.get("source_prompt_hash"),
        ))
    conn.executemany(
        "INSERT INTO words (id, text, hint, source_prompt_hash) VALUES (?, ?, ?, ?)",
        rows,
    )
    conn.commit()
    return [row[0] for row in rows]


def delete_word(conn: sqlite3.Connection, word_id: str) -> bool:
    with conn:
        cursor = conn.execute("DELETE FROM words WHERE id = ?", (word_id,))
        deleted = cursor.rowcount > 0
        conn.execute("DELETE FROM reviews WHERE word_id = ?", (word_id,))
        conn.execute("DELETE FROM srs WHERE word_id = ?", (word_id,))
    return deleted


def clear_all(conn: sqlite3.Connection) -> None:
    with conn:
        conn.execute("DELETE FROM words")
        conn.execute("DELETE FROM reviews")
        conn.execute("DELETE FROM srs")


def export_data(conn: sqlite3.Connection) -> Dict[str, List[Dict]]:
    return {
        "words": get_all_words(conn),
        "reviews": get_all_reviews(conn),
        "srs": get_all_srs(conn),
    }


def import_data(conn: sqlite3.Connection, data: Dict[str, List[Dict]]) -> None:
    """Replace every table with the given snapshot; all or nothing.

    Reviews and SRS rows whose word is not in the snapshot are dropped.
    """
    words = data.get("words", [])
    word_ids = {w["id"] for w in words}
    with conn:
        conn.execute("DELETE FROM words")
        conn.execute("DELETE FROM reviews")
        conn.execute("DELETE FROM srs")
        conn.executemany(
            "INSERT INTO words (id, text, hint, source_prompt_hash) VALUES (?, ?, ?, ?)",
            [(w["id"], w["text"], w["hint"], w.get("source_prompt_hash")) for w in words],
        )
        conn.executemany(
            "INSERT INTO reviews (word_id, ts, rating) VALUES (?, ?, ?)",
            [(r["word_id"], int(r["ts"]), r["rating"]) for r in data.get("reviews", []) if r["word_id"] in word_ids],
        )
        conn.executemany(
            "INSERT INTO srs (word_id, ease, interval, due, reps) VALUES (?, ?, ?, ?, ?)",
            [
                (s["word_id"], s["ease"], s["interval"], to_iso(from_iso(s["due"])), s.get("reps") or 0)
                for s in data.get("srs", [])
                if s["word_id"] in word_ids
            ],
        )


# Reviews

def add_review(conn: sqlite3.Connection, word_id: str, rating: str, ts: Optional[int] = None) -> None:
    if ts is None:
        ts = int(time.time() * 1000)
    conn.execute(
        "INSERT INTO reviews (word_id, ts, rating) VALUES (?, ?, ?)",
        (word_id, ts, getattr(rating, "value", rating)),
    )
    conn.commit()


def get_reviews(conn: sqlite3.Connection, word_id: str) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT word_id, ts, rating FROM reviews WHERE word_id = ? ORDER BY ts, id",
        (word_id,),
    )
    return [dict(row) for row in cursor.fetchall()]


def get_all_reviews(conn: sqlite3.Connection) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute("SELECT word_id, ts, rating FROM reviews ORDER BY ts, id")
    return [dict(row) for row in cursor.fetchall()]


# SRS

def get_srs(conn: sqlite3.Connection, word_id: str) -> Optional[Dict]:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT word_id, ease, interval, due, reps FROM srs WHERE word_id = ?",
        (word_id,),
    )
    row = cursor.fetchone()
    return _srs_from_row(row) if row else None


def set_srs(conn: sqlite3.Connection, srs: Dict) -> None:
    conn.execute(
        """
        INSERT INTO srs (word_id, ease, interval, due, reps) VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(word_id) DO UPDATE SET
            ease = excluded.ease,
            interval = excluded.interval,
            due = excluded.due,
            reps = excluded.reps
        """,
        (srs["word_id"], srs["ease"], srs["interval"], srs["due"], srs.get("reps", 0)),
    )
    conn.commit()


def get_due_srs(conn: sqlite3.Connection, now: Optional[datetime] = None) -> List[Dict]:
    cutoff = to_iso(now or utc_now())
    cursor = conn.cursor()
    cursor.execute(
        "SELECT word_id, ease, interval, due, reps FROM srs WHERE due <= ? ORDER BY due, word_id",
        (cutoff,),
    )
    return [_srs_from_row(row) for row in cursor.fetchall()]


def get_all_srs(conn: sqlite3.Connection) -> List[Dict]:
    cursor = conn.cursor()
    cursor.execute("SELECT word_id, ease, interval, due, reps FROM srs ORDER BY due, word_id")
    return [_srs_from_row(row) for row in cursor.fetchall()]


def initialize_srs(conn: sqlite3.Connection, word_id: str, now: Optional[datetime] = None) -> Dict:
    """Fresh schedule for a word: default ease, zero interval, due immediately."""
    srs = {
        "word_id": word_id,
        "ease": DEFAULT_EASE,
        "interval": 0,
        "due": to_iso(now or utc_now()),
        "reps": 0,
    }
    set_srs(conn, srs)
    return srs


def ensure_srs_for_all_words(conn: sqlite3.Connection, now: Optional[datetime] = None) -> int:
    """Initialize scheduling for any word that is missing it; returns how many were added."""
    cursor = conn.cursor()
    cursor.execute(
        "SELECT w.id FROM words w LEFT JOIN srs s ON s.word_id = w.id WHERE s.word_id IS NULL"
    )
    missing = [row[0] for row in cursor.fetchall()]
    for word_id in missing:
        initialize_srs(conn, word_id, now)
    return len(missing)


def list_words_with_stats(conn: sqlite3.Connection) -> List[Dict]:
    """Words joined with review count, last review and schedule, soonest due first."""
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT
            w.id,
            w.text,
            w.hint,
            w.source_prompt_hash,
            COUNT(r.id) AS review_count,
            MAX(r.ts) AS last_reviewed_ts,
            s.interval,
            s.due
        FROM words w
        LEFT JOIN reviews r ON r.word_id = w.id
        LEFT JOIN srs s ON s.word_id = w.id
        GROUP BY w.id
        ORDER BY s.due IS NULL, s.due, w.rowid
        """
    )
    words = []
    for row in cursor.fetchall():
        word = dict(row)
        word["interval"] = int(word["interval"] or 0)
        word["next_due"] = word.pop("due")
        words.append(word)
    return words


def add_generated_words(conn: sqlite3.Connection, words: Iterable[Dict], source_prompt_hash: Optional[str] = None) -> List[str]:
    """Store a generated batch and schedule every new word as due now."""
    word_ids = add_words(
        conn,
        [{"text": w["text"], "hint": w["hint"], "source_prompt_hash": source_prompt_hash} for w in words],
    )
    now = utc_now()
    for word_id in word_ids:
        initialize_srs(conn, word_id, now)
    return word_ids
