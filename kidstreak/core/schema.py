"""SQLite schema (code-first approach)."""

# Creation order matters: tasks and streaks reference kids.
TABLE_SCHEMAS: dict[str, str] = {
    "kids": """CREATE TABLE IF NOT EXISTS kids (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        color TEXT NOT NULL,
        photo_data_url TEXT NOT NULL DEFAULT ''
    )""",
    "tasks": """CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        kid_id TEXT NOT NULL REFERENCES kids(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        icon_type TEXT NOT NULL CHECK (icon_type IN ('emoji', 'image')),
        icon_value TEXT NOT NULL DEFAULT '',
        "order" INTEGER NOT NULL DEFAULT 1,
        is_done INTEGER NOT NULL DEFAULT 0,
        is_active INTEGER NOT NULL DEFAULT 1
    )""",
    "meta": """CREATE TABLE IF NOT EXISTS meta (
        key TEXT PRIMARY KEY,
        value TEXT
    )""",
    "streaks": """CREATE TABLE IF NOT EXISTS streaks (
        kid_id TEXT PRIMARY KEY REFERENCES kids(id) ON DELETE CASCADE,
        streak_count INTEGER NOT NULL DEFAULT 0 CHECK (streak_count >= 0),
        last_perfect_date TEXT,
        longest_streak INTEGER NOT NULL DEFAULT 0 CHECK (longest_streak >= 0)
    )""",
    "idx_tasks_kid": "CREATE INDEX IF NOT EXISTS idx_tasks_kid ON tasks (kid_id)",
}

LAST_RESET_DATE_KEY = "lastResetDate"
