"""SQLite-backed catalog and progress storage.

Timestamps are stored as UTC ISO-8601 strings with millisecond precision so
the SQL due checks compare the same instants the pure engine does.
"""
import logging
from datetime import datetime, timezone

from vocab_srs.db import get_connection
from vocab_srs.intervals import INTERVAL_DAYS, MAX_LEVEL, MIN_LEVEL
from vocab_srs.mastery import apply_answer
from vocab_srs.models import Item, ProgressRecord, ReviewEvent

logger = logging.getLogger(__name__)

_TS_FORMAT = "%Y-%m-%dT%H:%M:%f"

_INTERVAL_CASE = "CASE p.mastery_level {} END".format(
    " ".join(f"WHEN {level} THEN {days}" for level, days in enumerate(INTERVAL_DAYS))
)

# Mirrors due.is_record_due: no record or no timestamp means due; boundary inclusive.
_DUE_SQL = f"""(p.id IS NULL OR p.last_practiced IS NULL
    OR strftime('{_TS_FORMAT}', p.last_practiced, '+' || ({_INTERVAL_CASE}) || ' days')
       <= strftime('{_TS_FORMAT}', :now))"""

_PROGRESS_JOIN = "FROM words w LEFT JOIN user_progress p ON p.word_id = w.id AND p.user_id = :user_id"


def to_db_timestamp(value: datetime) -> str:
    """Serialize a datetime as UTC. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def from_db_timestamp(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _row_to_record(row) -> ProgressRecord:
    return ProgressRecord(
        item_id=row["word_id"],
        mastery_level=row["mastery_level"],
        correct_count=row["correct_count"],
        wrong_count=row["wrong_count"],
        last_practiced_at=from_db_timestamp(row["last_practiced"]),
    )


def add_word(db_path: str, source_text: str, target_text: str, category: str = "General") -> int | None:
    """Insert a word pair; returns its id, or None if the pair already exists."""
    conn = get_connection(db_path)
    cursor = conn.execute(
        "INSERT OR IGNORE INTO words (source_text, target_text, category, created_at) VALUES (?, ?, ?, ?)",
        (source_text, target_text, category, to_db_timestamp(datetime.now(timezone.utc))),
    )
    conn.commit()
    conn.close()
    return cursor.lastrowid if cursor.rowcount else None


def load_catalog(db_path: str) -> list[Item]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM words ORDER BY id").fetchall()
    conn.close()
    return [Item(id=r["id"], source_text=r["source_text"], target_text=r["target_text"], category=r["category"]) for r in rows]


def load_progress(db_path: str, user_id: str) -> dict[int, ProgressRecord]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM user_progress WHERE user_id = ?", (user_id,)).fetchall()
    conn.close()
    return {row["word_id"]: _row_to_record(row) for row in rows}


def _upsert(conn, user_id: str, record: ProgressRecord) -> None:
    last_practiced = to_db_timestamp(record.last_practiced_at) if record.last_practiced_at else None
    conn.execute(
        """INSERT INTO user_progress
        (user_id, word_id, mastery_level, correct_count, wrong_count, last_practiced)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT(user_id, word_id) DO UPDATE SET
            mastery_level=excluded.mastery_level,
            correct_count=excluded.correct_count,
            wrong_count=excluded.wrong_count,
            last_practiced=excluded.last_practiced""",
        (user_id, record.item_id, record.mastery_level, record.correct_count,
         record.wrong_count, last_practiced),
    )


def save_progress(db_path: str, user_id: str, record: ProgressRecord) -> None:
    conn = get_connection(db_path)
    _upsert(conn, user_id, record)
    conn.commit()
    conn.close()


def record_answer(
    db_path: str,
    user_id: str,
    word_id: int,
    correct: bool,
    now: datetime,
    response_time_ms: int | None = None,
) -> ProgressRecord:
    """Apply one answer, persist the new record and log it to review history."""
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT * FROM user_progress WHERE user_id = ? AND word_id = ?", (user_id, word_id)
    ).fetchone()
    previous = _row_to_record(row) if row else None
    updated = apply_answer(previous, word_id, correct, now)
    _upsert(conn, user_id, updated)
    conn.execute(
        """INSERT INTO review_history
        (user_id, word_id, review_date, correct, response_time_ms, previous_level, new_level)
        VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (user_id, word_id, to_db_timestamp(now), int(correct), response_time_ms,
         previous.mastery_level if previous else 0, updated.mastery_level),
    )
    conn.commit()
    conn.close()
    logger.info(
        "User %s answered word %d %s (level %d -> %d)",
        user_id, word_id, "correctly" if correct else "wrongly",
        previous.mastery_level if previous else 0, updated.mastery_level,
    )
    return updated


def load_review_history(db_path: str, user_id: str, since: datetime | None = None) -> list[ReviewEvent]:
    conn = get_connection(db_path)
    query = "SELECT * FROM review_history WHERE user_id = ?"
    params: list = [user_id]
    if since is not None:
        query += " AND review_date >= ?"
        params.append(to_db_timestamp(since))
    rows = conn.execute(query + " ORDER BY review_date, id", params).fetchall()
    conn.close()
    return [
        ReviewEvent(
            item_id=r["word_id"],
            reviewed_at=from_db_timestamp(r["review_date"]),
            correct=bool(r["correct"]),
            previous_level=r["previous_level"],
            new_level=r["new_level"],
            response_time_ms=r["response_time_ms"],
        )
        for r in rows
    ]


def reset_progress(db_path: str, user_id: str) -> None:
    """Delete all progress, review history and achievements for a user."""
    conn = get_connection(db_path)
    conn.execute("DELETE FROM user_progress WHERE user_id = ?", (user_id,))
    conn.execute("DELETE FROM review_history WHERE user_id = ?", (user_id,))
    conn.execute("DELETE FROM achievements WHERE user_id = ?", (user_id,))
    conn.commit()
    conn.close()
    logger.info("Reset progress for user %s", user_id)


def load_achievements(db_path: str, user_id: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT achievement_type FROM achievements WHERE user_id = ? ORDER BY unlocked_at, id", (user_id,),
    ).fetchall()
    conn.close()
    return [r["achievement_type"] for r in rows]


def unlock_achievements(db_path: str, user_id: str, keys: list[str], now: datetime) -> list[str]:
    """Store achievements; returns only the ones not unlocked before."""
    conn = get_connection(db_path)
    unlocked = []
    for key in keys:
        cur = conn.execute(
            "INSERT OR IGNORE INTO achievements (user_id, achievement_type, unlocked_at) VALUES (?, ?, ?)",
            (user_id, key, to_db_timestamp(now)),
        )
        if cur.rowcount:
            unlocked.append(key)
    conn.commit()
    conn.close()
    if unlocked:
        logger.info("User %s unlocked %s", user_id, ", ".join(unlocked))
    return unlocked


def sql_due_count(db_path: str, user_id: str, now: datetime) -> int:
    conn = get_connection(db_path)
    count = conn.execute(
        f"SELECT COUNT(*) {_PROGRESS_JOIN} WHERE {_DUE_SQL}",
        {"user_id": user_id, "now": to_db_timestamp(now)},
    ).fetchone()[0]
    conn.close()
    return count


def sql_mastery_distribution(db_path: str, user_id: str) -> dict[int, int]:
    conn = get_connection(db_path)
    rows = conn.execute(
        f"""SELECT COALESCE(p.mastery_level, 0) as level, COUNT(*) as n
        {_PROGRESS_JOIN} GROUP BY level""",
        {"user_id": user_id},
    ).fetchall()
    conn.close()
    distribution = {level: 0 for level in range(MIN_LEVEL, MAX_LEVEL + 1)}
    for row in rows:
        distribution[row["level"]] = row["n"]
    return distribution


def sql_due_count_by_category(db_path: str, user_id: str, now: datetime) -> dict[str, int]:
    conn = get_connection(db_path)
    rows = conn.execute(
        f"""SELECT w.category, SUM(CASE WHEN {_DUE_SQL} THEN 1 ELSE 0 END) as due
        {_PROGRESS_JOIN} GROUP BY w.category ORDER BY w.category""",
        {"user_id": user_id, "now": to_db_timestamp(now)},
    ).fetchall()
    conn.close()
    return {row["category"]: row["due"] for row in rows}
