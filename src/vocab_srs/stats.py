"""Dashboard statistics over a catalog and a user's progress map.

All functions are pure: the same inputs give the same outputs, and nothing
passed in is mutated.
"""
import math
from collections.abc import Mapping
from datetime import datetime

from vocab_srs.config import MASTERED_LEVEL, STREAK_WINDOW
from vocab_srs.due import is_record_due
from vocab_srs.intervals import MAX_LEVEL, MIN_LEVEL, validate_level
from vocab_srs.models import CategoryPerformance, Item, LearningStats, ProgressRecord


def _studied_records(catalog: list[Item], progress: Mapping[int, ProgressRecord]) -> list[ProgressRecord]:
    return [progress[item.id] for item in catalog if item.id in progress]


def due_count(catalog: list[Item], progress: Mapping[int, ProgressRecord], now: datetime) -> int:
    return sum(1 for item in catalog if is_record_due(progress.get(item.id), now))


def mastery_distribution(catalog: list[Item], progress: Mapping[int, ProgressRecord]) -> dict[int, int]:
    """Item count per level 0-5. Items without a record land in level 0."""
    distribution = {level: 0 for level in range(MIN_LEVEL, MAX_LEVEL + 1)}
    for item in catalog:
        record = progress.get(item.id)
        level = validate_level(record.mastery_level) if record else 0
        distribution[level] += 1
    return distribution


def due_count_by_category(
    catalog: list[Item],
    progress: Mapping[int, ProgressRecord],
    now: datetime,
) -> dict[str, int]:
    """Due items per category. Every category in the catalog is present, zeros included."""
    counts: dict[str, int] = {}
    for item in catalog:
        counts.setdefault(item.category, 0)
        if is_record_due(progress.get(item.id), now):
            counts[item.category] += 1
    return counts


def _current_streak(records: list[ProgressRecord]) -> int:
    practiced = [r for r in records if r.last_practiced_at is not None]
    practiced.sort(key=lambda r: r.last_practiced_at, reverse=True)
    streak = 0
    for record in practiced[:STREAK_WINDOW]:
        if record.correct_count > record.wrong_count:
            streak += 1
        else:
            break
    return streak


def learning_stats(catalog: list[Item], progress: Mapping[int, ProgressRecord]) -> LearningStats:
    records = _studied_records(catalog, progress)
    attempted = [r for r in records if r.total_attempts > 0]
    average_accuracy = (
        sum(r.accuracy for r in attempted) / len(attempted) if attempted else None
    )
    total_attempts = sum(r.total_attempts for r in records)
    correct_answers = sum(r.correct_count for r in records)
    accuracy_percent = (
        math.floor(correct_answers / total_attempts * 100 + 0.5) if total_attempts else 0
    )
    return LearningStats(
        total_items=len(catalog),
        items_studied=len(records),
        mastered_items=sum(1 for r in records if r.mastery_level >= MASTERED_LEVEL),
        items_in_progress=sum(1 for r in records if 0 < r.mastery_level < MASTERED_LEVEL),
        average_accuracy=average_accuracy,
        total_attempts=total_attempts,
        correct_answers=correct_answers,
        accuracy_percent=accuracy_percent,
        current_streak=_current_streak(records),
    )


def category_performance(
    catalog: list[Item],
    progress: Mapping[int, ProgressRecord],
) -> list[CategoryPerformance]:
    """Per-category summary, strongest categories first."""
    by_category: dict[str, list[Item]] = {}
    for item in catalog:
        by_category.setdefault(item.category, []).append(item)

    results = []
    for category, items in by_category.items():
        records = _studied_records(items, progress)
        attempts = sum(r.total_attempts for r in records)
        correct = sum(r.correct_count for r in records)
        results.append(CategoryPerformance(
            category=category,
            total_items=len(items),
            mastered_items=sum(1 for r in records if r.mastery_level == MAX_LEVEL),
            average_level=sum(r.mastery_level for r in records) / len(records) if records else 0.0,
            accuracy=correct / attempts * 100 if attempts else 0.0,
        ))
    results.sort(key=lambda c: (-c.average_level, c.category))
    return results
