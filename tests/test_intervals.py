# tests/test_intervals.py
import pytest

from vocab_srs.errors import InvalidLevelError, SchedulingError
from vocab_srs.intervals import INTERVAL_DAYS, interval_days


def test_interval_table_values():
    assert [interval_days(level) for level in range(6)] == [1, 3, 7, 14, 30, 90]
    assert INTERVAL_DAYS == (1, 3, 7, 14, 30, 90)


@pytest.mark.parametrize("level", [-1, 6, 100])
def test_out_of_range_level_is_rejected(level):
    with pytest.raises(InvalidLevelError):
        interval_days(level)


@pytest.mark.parametrize("level", [2.0, "2", None, True])
def test_non_integer_level_is_rejected(level):
    with pytest.raises(InvalidLevelError):
        interval_days(level)


def test_invalid_level_error_is_a_value_error():
    with pytest.raises(ValueError):
        interval_days(9)
    assert issubclass(InvalidLevelError, SchedulingError)
