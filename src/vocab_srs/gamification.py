"""Experience points, day streaks and achievements.

Everything here is pure. The current date and hour are always passed in, and
the state is rebuilt from review history, so nothing depends on the wall clock.
"""
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from vocab_srs.intervals import MAX_LEVEL
from vocab_srs.models import Achievement, GamificationState, Item, ProgressRecord, ReviewEvent

XP_CORRECT_ANSWER = 10
XP_WRONG_ANSWER = 2
XP_LEVEL_UP = 50
XP_STREAK_BONUS = 5
MAX_STREAK_BONUS = 100
XP_PER_LEVEL = 100

EARLY_BIRD_HOUR = 8
NIGHT_OWL_HOUR = 22

ACHIEVEMENTS = {
    a.key: a for a in [
        Achievement("FIRST_WORD", "First Steps", "Study your first word", 50),
        Achievement("STREAK_3", "Getting Started", "Maintain a 3-day streak", 100),
        Achievement("STREAK_7", "Week Warrior", "Maintain a 7-day streak", 200),
        Achievement("STREAK_30", "Month Master", "Maintain a 30-day streak", 500),
        Achievement("STREAK_100", "Legendary", "Maintain a 100-day streak", 2000),
        Achievement("MASTER_10", "Novice", "Master 10 words", 100),
        Achievement("MASTER_50", "Scholar", "Master 50 words", 300),
        Achievement("MASTER_100", "Expert", "Master 100 words", 500),
        Achievement("MASTER_500", "Grand Master", "Master 500 words", 2000),
        Achievement("SPEED_DEMON", "Speed Demon", "Complete 100 reviews in one session", 300),
        Achievement("PERFECTIONIST", "Perfectionist", "Get 50 correct answers in a row", 500),
        Achievement("CATEGORY_MASTER", "Category Master", "Master all words in a category", 400),
        Achievement("EARLY_BIRD", "Early Bird", "Practice before 8 AM", 50),
        Achievement("NIGHT_OWL", "Night Owl", "Practice after 10 PM", 50),
        Achievement("DEDICATED", "Dedicated", "Complete 1000 total reviews", 1000),
        Achievement("CHAMPION", "Champion", "Reach level 10", 1000),
    ]
}

# Highest tier first; only the best tier reached is reported.
STREAK_TIERS = ((100, "STREAK_100"), (30, "STREAK_30"), (7, "STREAK_7"), (3, "STREAK_3"))
MASTERY_TIERS = ((500, "MASTER_500"), (100, "MASTER_100"), (50, "MASTER_50"), (10, "MASTER_10"))


def xp_for_level(level: int) -> int:
    return level * XP_PER_LEVEL


def level_from_xp(xp: int) -> int:
    return xp // XP_PER_LEVEL + 1


def xp_progress(xp: int) -> float:
    """Fraction of the way from the current level to the next, in 0..1."""
    floor = xp_for_level(level_from_xp(xp) - 1)
    return min(max((xp - floor) / XP_PER_LEVEL, 0.0), 1.0)


def are_consecutive_days(first: date, second: date) -> bool:
    return abs((second - first).days) == 1


def update_streak(last_practice_date: Optional[date], current_streak: int, today: date) -> tuple[int, bool]:
    """Return ``(new_streak, streak_broken)`` for practice on ``today``."""
    if last_practice_date is None:
        return 1, False
    if last_practice_date == today:
        return current_streak, False
    if are_consecutive_days(last_practice_date, today):
        return current_streak + 1, False
    return 1, True


def streak_bonus(streak: int) -> int:
    if streak <= 1:
        return 0
    return min(streak * XP_STREAK_BONUS, MAX_STREAK_BONUS)


def xp_for_answer(correct: bool, streak: int = 0) -> int:
    base = XP_CORRECT_ANSWER if correct else XP_WRONG_ANSWER
    return base + streak_bonus(streak)


def award_answer(state: GamificationState, correct: bool, today: date) -> tuple[GamificationState, int]:
    """Apply one answer given on ``today``.

    Args:
        state: Totals before the answer.
        correct: Whether the answer was right.
        today: Calendar day of the answer.

    Returns:
        Tuple of (new state, XP earned). A level-up adds ``XP_LEVEL_UP`` on top.
    """
    streak, _ = update_streak(state.last_practice_date, state.current_streak, today)
    earned = xp_for_answer(correct, streak)
    level = level_from_xp(state.total_xp + earned)
    if level > state.level:
        earned += XP_LEVEL_UP
    new_state = GamificationState(
        total_xp=state.total_xp + earned,
        level=level,
        current_streak=streak,
        longest_streak=max(streak, state.longest_streak),
        last_practice_date=today,
    )
    return new_state, earned


def add_xp(state: GamificationState, xp: int) -> GamificationState:
    """Add bonus XP, such as an achievement reward. No level-up bonus applies."""
    total = state.total_xp + xp
    return replace(state, total_xp=total, level=level_from_xp(total))


def replay_history(events: Iterable[ReviewEvent]) -> GamificationState:
    state = GamificationState()
    for event in sorted(events, key=lambda e: e.reviewed_at):
        state, _ = award_answer(state, event.correct, event.reviewed_at.date())
    return state


def active_streak(state: GamificationState, today: date) -> int:
    """Streak still alive on ``today``: practiced today or yesterday."""
    last = state.last_practice_date
    if last is None or last > today or (today - last).days > 1:
        return 0
    return state.current_streak


def correct_run(events: Iterable[ReviewEvent]) -> int:
    """Length of the run of correct answers ending with the latest review."""
    run = 0
    for event in sorted(events, key=lambda e: e.reviewed_at, reverse=True):
        if not event.correct:
            break
        run += 1
    return run


def completed_categories(catalog: Iterable[Item], progress: Mapping[int, ProgressRecord]) -> list[str]:
    """Categories whose every item is at the top mastery level."""
    complete: dict[str, bool] = {}
    for item in catalog:
        record = progress.get(item.id)
        mastered = record is not None and record.mastery_level == MAX_LEVEL
        complete[item.category] = complete.get(item.category, True) and mastered
    return sorted(category for category, done in complete.items() if done)


def check_achievements(
    now: datetime,
    total_reviews: int,
    mastered_words: int,
    current_streak: int,
    session_reviews: int = 0,
    consecutive_correct: int = 0,
    level: int = 1,
    categories_completed: tuple[str, ...] | list[str] = (),
) -> list[str]:
    """Achievement keys the user qualifies for right now, unlocked or not."""
    earned = []
    if total_reviews >= 1:
        earned.append("FIRST_WORD")
    earned.extend(_best_tier(STREAK_TIERS, current_streak))
    earned.extend(_best_tier(MASTERY_TIERS, mastered_words))
    if session_reviews >= 100:
        earned.append("SPEED_DEMON")
    if consecutive_correct >= 50:
        earned.append("PERFECTIONIST")
    if now.hour < EARLY_BIRD_HOUR:
        earned.append("EARLY_BIRD")
    elif now.hour >= NIGHT_OWL_HOUR:
        earned.append("NIGHT_OWL")
    if total_reviews >= 1000:
        earned.append("DEDICATED")
    if level >= 10:
        earned.append("CHAMPION")
    if categories_completed:
        earned.append("CATEGORY_MASTER")
    return earned


def _best_tier(tiers, value: int) -> list[str]:
    for threshold, key in tiers:
        if value >= threshold:
            return [key]
    return []


def new_achievements(eligible: Iterable[str], unlocked: Iterable[str]) -> list[str]:
    already = set(unlocked)
    return [key for key in eligible if key not in already]
