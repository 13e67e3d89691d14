"""SQLite storage for words, reviews and schedules."""
