"""Learning analytics over the review history log."""
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from vocab_srs.intervals import MAX_LEVEL
from vocab_srs.models import (
    HeatmapDay, LevelRetention, RetentionMetrics, ReviewEvent, TimeToMastery, WeeklyVelocity,
)

TREND_THRESHOLD = 0.05
SECONDS_PER_DAY = 86400


def _percent(correct: int, total: int) -> float:
    return correct / total * 100 if total else 0.0


def _between(events: Iterable[ReviewEvent], start: datetime, end: datetime) -> list[ReviewEvent]:
    return sorted((e for e in events if start <= e.reviewed_at <= end), key=lambda e: e.reviewed_at)


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def learning_velocity(events: Iterable[ReviewEvent], now: datetime, weeks: int = 12) -> list[WeeklyVelocity]:
    weekly: dict[date, list[ReviewEvent]] = {}
    for event in _between(events, now - timedelta(weeks=weeks), now):
        weekly.setdefault(week_start(event.reviewed_at.date()), []).append(event)
    return [
        WeeklyVelocity(
            week_start=start,
            items_reviewed=len({e.item_id for e in reviews}),
            items_mastered=len({e.item_id for e in reviews if e.new_level == MAX_LEVEL}),
            accuracy=_percent(sum(1 for e in reviews if e.correct), len(reviews)),
        )
        for start, reviews in sorted(weekly.items())
    ]


def retention_metrics(events: Iterable[ReviewEvent], now: datetime, days: int = 30) -> RetentionMetrics:
    reviews = _between(events, now - timedelta(days=days), now)
    if not reviews:
        return RetentionMetrics(overall_retention_rate=0.0)

    by_level: dict[int, list[bool]] = {}
    for event in reviews:
        by_level.setdefault(event.previous_level, []).append(event.correct)
    retention_by_level = [
        LevelRetention(level=level, retention_rate=_percent(sum(results), len(results)), total_reviews=len(results))
        for level, results in sorted(by_level.items())
    ]

    # Compare the older half of the window against the newer half.
    midpoint = len(reviews) // 2
    first, second = reviews[:midpoint], reviews[midpoint:]
    second_rate = sum(e.correct for e in second) / len(second)
    first_rate = sum(e.correct for e in first) / len(first) if first else second_rate
    if second_rate > first_rate + TREND_THRESHOLD:
        trend = "improving"
    elif second_rate < first_rate - TREND_THRESHOLD:
        trend = "declining"
    else:
        trend = "stable"

    return RetentionMetrics(
        overall_retention_rate=_percent(sum(e.correct for e in reviews), len(reviews)),
        retention_by_level=retention_by_level,
        recent_trend=trend,
    )


def review_heatmap(events: Iterable[ReviewEvent], now: datetime, days: int = 90) -> list[HeatmapDay]:
    daily: dict[date, list[bool]] = {}
    for event in _between(events, now - timedelta(days=days), now):
        daily.setdefault(event.reviewed_at.date(), []).append(event.correct)
    return [
        HeatmapDay(day=day, review_count=len(results), accuracy=_percent(sum(results), len(results)))
        for day, results in sorted(daily.items())
    ]


def time_to_mastery(events: Iterable[ReviewEvent]) -> TimeToMastery:
    """Days from an item's first review until it first reached each level."""
    first_review: dict[int, datetime] = {}
    level_reached: dict[int, dict[int, datetime]] = {}
    for event in sorted(events, key=lambda e: e.reviewed_at):
        first_review.setdefault(event.item_id, event.reviewed_at)
        level_reached.setdefault(event.item_id, {}).setdefault(event.new_level, event.reviewed_at)

    days_by_level: dict[int, list[float]] = {}
    for item_id, reached in level_reached.items():
        for level, when in reached.items():
            if level > 0:
                elapsed = (when - first_review[item_id]).total_seconds() / SECONDS_PER_DAY
                days_by_level.setdefault(level, []).append(elapsed)

    mastery_days = days_by_level.get(MAX_LEVEL, [])
    return TimeToMastery(
        average_days=sum(mastery_days) / len(mastery_days) if mastery_days else 0.0,
        fastest_days=min(mastery_days, default=0.0),
        slowest_days=max(mastery_days, default=0.0),
        average_days_by_level={
            level: sum(days) / len(days) for level, days in sorted(days_by_level.items())
        },
    )
