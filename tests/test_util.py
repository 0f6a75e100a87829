import time
from datetime import datetime, timedelta, timezone

import pytest

from kafkit.util import Timeout, current_time_millis, millis_to_epoch


def test_never_as_millis_is_minus_one():
    assert Timeout.never().as_millis() == -1


def test_after_as_millis_matches_duration():
    assert Timeout.after(timedelta(milliseconds=1500)).as_millis() == 1500
    assert Timeout.after(timedelta(0)).as_millis() == 0


def test_as_millis_truncates_sub_millisecond():
    t = Timeout.after(timedelta(milliseconds=7, microseconds=900))
    assert t.as_millis() == 7


def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        Timeout.after(timedelta(seconds=-1))


def test_from_value():
    d = timedelta(seconds=3)
    assert Timeout.from_value(d) == Timeout.after(d)
    assert Timeout.from_value(None) == Timeout.never()
    t = Timeout.after(d)
    assert Timeout.from_value(t) is t


def test_from_value_rejects_other_types():
    with pytest.raises(TypeError):
        Timeout.from_value("5s")


def test_subtraction_of_finite_timeouts():
    a = Timeout.after(timedelta(seconds=5))
    b = Timeout.after(timedelta(seconds=2))
    assert (a - b) == Timeout.after(timedelta(seconds=5) - timedelta(seconds=2))
    assert (a - b) + b if False else (a - b).duration + b.duration == a.duration


def test_never_minus_finite_is_never():
    result = Timeout.never() - Timeout.after(timedelta(seconds=1))
    assert result == Timeout.never()
    assert result.is_never


def test_subtracting_never_raises():
    with pytest.raises(ValueError):
        Timeout.after(timedelta(seconds=1)) - Timeout.never()
    with pytest.raises(ValueError):
        Timeout.never() - Timeout.never()


def test_subtraction_underflow_raises():
    with pytest.raises(ValueError):
        Timeout.after(timedelta(seconds=1)) - Timeout.after(timedelta(seconds=2))


def test_ordering_finite_before_never():
    short = Timeout.after(timedelta(seconds=1))
    long = Timeout.after(timedelta(seconds=10))
    never = Timeout.never()
    assert short < long < never
    assert sorted([never, long, short]) == [short, long, never]
    assert max(short, never) == never


def test_millis_to_epoch_at_epoch_is_zero():
    assert millis_to_epoch(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0


def test_millis_to_epoch_before_epoch_is_zero():
    assert millis_to_epoch(datetime(1960, 6, 1, tzinfo=timezone.utc)) == 0


def test_millis_to_epoch_known_time():
    moment = datetime.fromtimestamp(1589652530, tz=timezone.utc)
    assert millis_to_epoch(moment) == 1589652530 * 1000


def test_millis_to_epoch_naive_is_utc():
    aware = datetime(2020, 5, 16, 18, 8, 50, 123000, tzinfo=timezone.utc)
    naive = aware.replace(tzinfo=None)
    assert millis_to_epoch(naive) == millis_to_epoch(aware)


def test_millis_to_epoch_respects_timezone():
    aware = datetime(2020, 5, 16, 18, 0, tzinfo=timezone.utc)
    shifted = aware.astimezone(timezone(timedelta(hours=3)))
    assert millis_to_epoch(shifted) == millis_to_epoch(aware)


def test_current_time_millis_is_near_now():
    before = int(time.time() * 1000)
    now = current_time_millis()
    after = int(time.time() * 1000)
    assert before - 1 <= now <= after + 1


def test_current_time_millis_is_monotonic_enough():
    first = current_time_millis()
    second = current_time_millis()
    assert second >= first