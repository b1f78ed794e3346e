"""Tests for data model classes."""
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from vocab_srs.errors import SchedulingError, UnpracticedRecordError
from vocab_srs.models import Direction, Item, ProgressRecord, ReviewMode, SessionConfig


def test_item_defaults_to_general_category():
    item = Item(id=1, source_text="дом", target_text="casa")
    assert item.category == "General"


def test_item_is_immutable():
    item = Item(id=1, source_text="дом", target_text="casa")
    with pytest.raises(FrozenInstanceError):
        item.category = "Places"


def test_progress_record_defaults():
    record = ProgressRecord(item_id=3)
    assert record.mastery_level == 0
    assert record.correct_count == 0
    assert record.wrong_count == 0
    assert record.last_practiced_at is None
    assert record.total_attempts == 0
    assert record.accuracy is None


def test_progress_record_accuracy():
    practiced = datetime(2026, 3, 1, tzinfo=timezone.utc)
    record = ProgressRecord(item_id=3, correct_count=3, wrong_count=1, last_practiced_at=practiced)
    assert record.total_attempts == 4
    assert record.accuracy == 0.75


@pytest.mark.parametrize("fields", [
    {"mastery_level": 2},
    {"correct_count": 1},
    {"wrong_count": 1},
])
def test_progress_record_with_answers_needs_practice_time(fields):
    with pytest.raises(UnpracticedRecordError) as exc:
        ProgressRecord(item_id=3, **fields)
    assert isinstance(exc.value, SchedulingError)
    assert exc.value.item_id == 3


def test_session_config_defaults():
    config = SessionConfig()
    assert config.review_mode is ReviewMode.SMART
    assert config.direction is Direction.SOURCE_TO_TARGET
    assert config.category_filter is None


def test_session_config_accepts_strings():
    config = SessionConfig(review_mode="category", category_filter="Food", direction="target-source")
    assert config.review_mode is ReviewMode.CATEGORY
    assert config.direction is Direction.TARGET_TO_SOURCE


def test_session_config_rejects_unknown_mode():
    with pytest.raises(ValueError):
        SessionConfig(review_mode="random")
