"""Review interval per mastery level (Leitner boxes)."""
from vocab_srs.errors import InvalidLevelError

MIN_LEVEL = 0
MAX_LEVEL = 5

# Days until the next review, indexed by mastery level.
INTERVAL_DAYS = (1, 3, 7, 14, 30, 90)


def validate_level(level: int) -> int:
    """Return ``level`` unchanged or raise InvalidLevelError. Never clamps."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevelError(level)
    if level < MIN_LEVEL or level > MAX_LEVEL:
        raise InvalidLevelError(level)
    return level


def interval_days(level: int) -> int:
    return INTERVAL_DAYS[validate_level(level)]
