"""Accuracy-threshold mastery levels (Leitner boxes 0-5)."""
from dataclasses import replace
from datetime import datetime

from vocab_srs.errors import InvalidCountError
from vocab_srs.intervals import validate_level
from vocab_srs.models import ProgressRecord

# (minimum accuracy, minimum attempts, level), strictest first.
LEVEL_THRESHOLDS = (
    (0.90, 5, 5),
    (0.80, 4, 4),
    (0.70, 3, 3),
    (0.60, 2, 2),
)

MASTERY_LABELS = {
    0: ("New", "Never seen"),
    1: ("Learning", "Review daily"),
    2: ("Familiar", "Review every 3 days"),
    3: ("Known", "Review weekly"),
    4: ("Well Known", "Review bi-weekly"),
    5: ("Mastered", "Review monthly"),
}


def _validate_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def calculate_mastery_level(correct_count: int, wrong_count: int) -> int:
    """Map an answer history to a mastery level.

    Args:
        correct_count: Number of correct answers so far (>= 0)
        wrong_count: Number of wrong answers so far (>= 0)

    Returns:
        Level 0-5. Perfect accuracy still needs enough attempts to climb:
        one correct answer is level 1, not 5.
    """
    if not (_validate_count(correct_count) and _validate_count(wrong_count)):
        raise InvalidCountError(correct_count, wrong_count)

    total = correct_count + wrong_count
    if total == 0:
        return 0
    accuracy = correct_count / total
    for min_accuracy, min_attempts, level in LEVEL_THRESHOLDS:
        if accuracy >= min_accuracy and total >= min_attempts:
            return level
    return 1


def apply_answer(
    record: ProgressRecord | None,
    item_id: int,
    correct: bool,
    now: datetime,
) -> ProgressRecord:
    """Return the record that results from answering ``item_id`` once at ``now``.

    A missing record is treated as a fresh 0/0 history. The input is not mutated.
    """
    if record is None:
        record = ProgressRecord(item_id=item_id)
    correct_count = record.correct_count + (1 if correct else 0)
    wrong_count = record.wrong_count + (0 if correct else 1)
    return replace(
        record,
        correct_count=correct_count,
        wrong_count=wrong_count,
        mastery_level=calculate_mastery_level(correct_count, wrong_count),
        last_practiced_at=now,
    )


def get_mastery_label(level: int) -> str:
    return MASTERY_LABELS[validate_level(level)][0]


def get_mastery_description(level: int) -> str:
    return MASTERY_LABELS[validate_level(level)][1]
