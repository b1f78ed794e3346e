"""Seed the database with a starter vocabulary."""
import json
from pathlib import Path

from vocab_srs.db import get_connection
from vocab_srs.progress import add_word

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the database already holds any words."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM words").fetchone()[0]
    conn.close()
    return count > 0


def seed_words(db_path: str) -> int:
    """Insert the bundled words.json vocabulary. Returns the number of words added."""
    if is_seeded(db_path):
        return 0
    data = json.loads((CONTENT_DIR / "words.json").read_text(encoding="utf-8"))
    added = 0
    for word in data["words"]:
        if add_word(db_path, word["source"], word["target"], word["category"]) is not None:
            added += 1
    return added
