from datetime import datetime, timezone

import pytest

from vocab_srs.models import Item


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_vocab.db")
    return db_path


@pytest.fixture
def now():
    return datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def catalog():
    return [
        Item(id=1, source_text="хлеб", target_text="pane", category="Food"),
        Item(id=2, source_text="вода", target_text="acqua", category="Food"),
        Item(id=3, source_text="мать", target_text="madre", category="Family"),
        Item(id=4, source_text="отец", target_text="padre", category="Family"),
        Item(id=5, source_text="один", target_text="uno", category="Numbers"),
    ]
