"""Errors raised by the scheduling engine."""


class SchedulingError(ValueError):
    """Base class for caller contract violations detected by the engine."""


class InvalidLevelError(SchedulingError):
    def __init__(self, level):
        super().__init__(f"Mastery level must be an integer in 0-5, got {level!r}")
        self.level = level


class InvalidCountError(SchedulingError):
    def __init__(self, correct_count, wrong_count):
        super().__init__(
            f"Answer counts must be non-negative integers, got correct={correct_count!r}, wrong={wrong_count!r}"
        )
        self.correct_count = correct_count
        self.wrong_count = wrong_count


class MissingCategoryError(SchedulingError):
    def __init__(self):
        super().__init__("Category review mode requires a non-empty category filter")


class UnpracticedRecordError(SchedulingError):
    def __init__(self, item_id):
        super().__init__(
            f"Progress for item {item_id!r} has answers or a level above 0 but no last practiced time"
        )
        self.item_id = item_id
