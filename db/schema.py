# SQL schema for Be-Spelling database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Words (id is a UUID string so exports stay portable)
CREATE TABLE IF NOT EXISTS words (
    id TEXT PRIMARY KEY,
    text TEXT NOT NULL,
    hint TEXT NOT NULL,
    source_prompt_hash TEXT
);

-- Review log (ts is epoch milliseconds)
CREATE TABLE IF NOT EXISTS reviews (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word_id TEXT NOT NULL,
    ts INTEGER NOT NULL,
    rating TEXT NOT NULL CHECK(rating IN ('NAILED', 'ALMOST', 'STUMPED'))
);

-- SM-2 scheduling state, one row per word
CREATE TABLE IF NOT EXISTS srs (
    word_id TEXT PRIMARY KEY,
    ease REAL NOT NULL DEFAULT 2.5 CHECK(ease >= 1.3),
    interval INTEGER NOT NULL DEFAULT 0 CHECK(interval >= 0),
    due TEXT NOT NULL,
    reps INTEGER NOT NULL DEFAULT 0
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_words_text ON words (text);
CREATE INDEX IF NOT EXISTS idx_reviews_word ON reviews (word_id);
CREATE INDEX IF NOT EXISTS idx_reviews_ts ON reviews (ts);
CREATE INDEX IF NOT EXISTS idx_srs_due ON srs (due);
"""
