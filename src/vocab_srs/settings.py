"""Persistent user preferences stored in the user_settings table."""
from vocab_srs.db import get_connection
from vocab_srs.models import Direction, ReviewMode, SessionConfig


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def get_saved_session_config(db_path: str) -> SessionConfig:
    """Last used session preferences; unreadable values fall back to defaults."""
    try:
        mode = ReviewMode(get_setting(db_path, "review_mode", ReviewMode.SMART.value))
    except ValueError:
        mode = ReviewMode.SMART
    try:
        direction = Direction(get_setting(db_path, "direction", Direction.SOURCE_TO_TARGET.value))
    except ValueError:
        direction = Direction.SOURCE_TO_TARGET
    category = get_setting(db_path, "category")
    if mode is ReviewMode.CATEGORY and not category:
        mode = ReviewMode.SMART
    return SessionConfig(review_mode=mode, category_filter=category, direction=direction)


def save_session_config(db_path: str, config: SessionConfig) -> None:
    set_setting(db_path, "review_mode", config.review_mode.value)
    set_setting(db_path, "direction", config.direction.value)
    if config.category_filter:
        set_setting(db_path, "category", config.category_filter)
