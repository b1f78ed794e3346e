"""Runtime configuration and tunables."""
import os
from pathlib import Path

DEFAULT_DB_PATH = os.environ.get(
    "VOCAB_SRS_DB", str(Path.home() / ".vocab_srs" / "vocab.db")
)
DEFAULT_LOG_PATH = str(Path.home() / ".vocab_srs" / "vocab_srs.log")
DEFAULT_USER_ID = "local"

# Session length estimate assumes a fixed time per item.
SECONDS_PER_ITEM = 12

# Most recently practiced records considered for the answer streak.
STREAK_WINDOW = 10

# Lowest level counted as "well known or mastered" on the dashboard.
MASTERED_LEVEL = 4
