"""Due-date evaluation for a single item.

"now" is always passed in; nothing here reads the system clock. Intervals are
whole days added to the last-practiced instant, and an item becomes due at
the exact instant the interval elapses. Clock skew between the host that
stamped ``last_practiced_at`` and the one evaluating is not compensated.
"""
from datetime import datetime, timedelta

from vocab_srs.intervals import interval_days
from vocab_srs.models import ProgressRecord


def next_review_date(level: int, last_practiced_at: datetime) -> datetime:
    """Projected review instant, for display. Not defined for new items."""
    if last_practiced_at is None:
        raise ValueError("New items have no next review date; treat them as due now")
    return last_practiced_at + timedelta(days=interval_days(level))


def is_due(level: int, last_practiced_at: datetime | None, now: datetime) -> bool:
    if last_practiced_at is None:
        # Still validate the level so a bad record surfaces even when new.
        interval_days(level)
        return True
    return now >= next_review_date(level, last_practiced_at)


def is_record_due(record: ProgressRecord | None, now: datetime) -> bool:
    """Due-ness of an item given its progress record (None means new)."""
    if record is None:
        return True
    return is_due(record.mastery_level, record.last_practiced_at, now)


def days_overdue(record: ProgressRecord | None, now: datetime) -> int:
    """Whole days past the due instant, never negative. 0 for new items."""
    if record is None or record.last_practiced_at is None:
        return 0
    late = now - next_review_date(record.mastery_level, record.last_practiced_at)
    return max(0, late.days)
