"""Data classes for the vocabulary scheduling domain."""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from vocab_srs.errors import UnpracticedRecordError


class ReviewMode(str, Enum):
    SMART = "smart"
    ALL = "all"
    CATEGORY = "category"


class Direction(str, Enum):
    SOURCE_TO_TARGET = "source-target"
    TARGET_TO_SOURCE = "target-source"


@dataclass(frozen=True)
class Item:
    id: int
    source_text: str
    target_text: str
    category: str = "General"


@dataclass(frozen=True)
class ProgressRecord:
    item_id: int
    mastery_level: int = 0
    correct_count: int = 0
    wrong_count: int = 0
    last_practiced_at: Optional[datetime] = None

    def __post_init__(self):
        attempted = self.mastery_level or self.correct_count or self.wrong_count
        if self.last_practiced_at is None and attempted:
            raise UnpracticedRecordError(self.item_id)

    @property
    def total_attempts(self) -> int:
        return self.correct_count + self.wrong_count

    @property
    def accuracy(self) -> Optional[float]:
        """Fraction of correct answers, or None if never attempted."""
        if self.total_attempts == 0:
            return None
        return self.correct_count / self.total_attempts


@dataclass(frozen=True)
class SessionConfig:
    review_mode: ReviewMode = ReviewMode.SMART
    category_filter: Optional[str] = None
    direction: Direction = Direction.SOURCE_TO_TARGET

    def __post_init__(self):
        # Hosts may pass plain strings.
        object.__setattr__(self, "review_mode", ReviewMode(self.review_mode))
        object.__setattr__(self, "direction", Direction(self.direction))


@dataclass(frozen=True)
class SessionPlan:
    items: list[int]
    is_empty: bool
    review_mode: ReviewMode
    direction: Direction
    estimated_minutes: int
    due_count: int
    category_filter: Optional[str] = None


@dataclass(frozen=True)
class LearningStats:
    total_items: int
    items_studied: int
    mastered_items: int
    items_in_progress: int
    average_accuracy: Optional[float]
    total_attempts: int
    correct_answers: int
    accuracy_percent: int
    current_streak: int


@dataclass(frozen=True)
class CategoryPerformance:
    category: str
    total_items: int
    mastered_items: int
    average_level: float
    accuracy: float


@dataclass(frozen=True)
class ReviewEvent:
    item_id: int
    reviewed_at: datetime
    correct: bool
    previous_level: int
    new_level: int
    response_time_ms: Optional[int] = None


@dataclass(frozen=True)
class WeeklyVelocity:
    week_start: date
    items_reviewed: int
    items_mastered: int
    accuracy: float


@dataclass(frozen=True)
class LevelRetention:
    level: int
    retention_rate: float
    total_reviews: int


@dataclass(frozen=True)
class RetentionMetrics:
    overall_retention_rate: float
    retention_by_level: list[LevelRetention] = field(default_factory=list)
    recent_trend: str = "stable"


@dataclass(frozen=True)
class HeatmapDay:
    day: date
    review_count: int
    accuracy: float


@dataclass(frozen=True)
class TimeToMastery:
    average_days: float
    fastest_days: float
    slowest_days: float
    average_days_by_level: dict[int, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Achievement:
    key: str
    name: str
    description: str
    xp_reward: int


@dataclass(frozen=True)
class GamificationState:
    total_xp: int = 0
    level: int = 1
    current_streak: int = 0
    longest_streak: int = 0
    last_practice_date: Optional[date] = None
