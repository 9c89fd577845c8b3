from datetime import datetime, timedelta, timezone
from itertools import islice
from unittest.mock import patch

import pytest

from flareidx.timeutil import (
    ShiftedTime,
    parse_time,
    parse_timestamp,
    randomized_ticker,
    timestamp_to_time,
)

TOLERANCE = timedelta(seconds=2)


def test_shifted_time_starts_at_given_time():
    target = parse_time("2023-02-02T14:00:00Z")
    clock = ShiftedTime(target)
    assert abs(clock.now() - target) < TOLERANCE


def test_shifted_time_advance():
    target = parse_time("2023-02-02T14:00:00Z")
    clock = ShiftedTime(target)
    clock.advance_now(timedelta(hours=1))
    assert abs(clock.now() - (target + timedelta(hours=1))) < TOLERANCE


def test_shifted_time_set_now_unix():
    clock = ShiftedTime()
    clock.set_now_unix(1676629054)
    assert abs(clock.now().timestamp() - 1676629054) < 2


def test_shifted_time_default_tracks_real_time():
    clock = ShiftedTime()
    assert abs(clock.now() - datetime.now(timezone.utc)) < TOLERANCE


def test_parse_time_zulu_and_offset_agree():
    assert parse_time("2023-01-01T02:00:00+02:00") == parse_time("2023-01-01T00:00:00Z")


def test_parse_time_value():
    assert parse_time("2023-01-01T00:00:00Z") == datetime(2023, 1, 1, tzinfo=timezone.utc)


def test_parse_time_fraction():
    whole = parse_time("2023-01-01T00:00:00Z")
    assert parse_time("2023-01-01T00:00:00.5Z") - whole == timedelta(milliseconds=500)


@pytest.mark.parametrize("text", ["2023-01-01", "not a time", "2023-13-01T00:00:00Z"])
def test_parse_time_invalid(text):
    with pytest.raises(ValueError):
        parse_time(text)


def test_parse_timestamp_rfc3339():
    assert parse_timestamp("2023-01-01T00:00:00Z") == parse_time("2023-01-01T00:00:00Z")


def test_parse_timestamp_unix():
    assert parse_timestamp("1676629054").timestamp() == 1676629054


def test_parse_timestamp_invalid():
    with pytest.raises(ValueError, match="RFC3339 or Unix timestamp"):
        parse_timestamp("yesterday")


def test_timestamp_seconds_and_nanoseconds_agree():
    assert timestamp_to_time(1678825429) == timestamp_to_time(1678825429 * 10**9)


def test_timestamp_threshold_is_nanoseconds():
    assert timestamp_to_time(253370764800).year == 1970
    assert timestamp_to_time(253370764799) > timestamp_to_time(253370764800)


def test_randomized_ticker_sleeps_with_jitter():
    with patch("flareidx.timeutil.time.sleep") as sleep:
        ticks = list(islice(randomized_ticker(timedelta(seconds=1), timedelta(milliseconds=50)), 3))
    assert len(ticks) == 3
    assert sleep.call_count == 3
    for call in sleep.call_args_list:
        assert 1.0 <= call.args[0] < 1.05
    assert ticks == sorted(ticks)


def test_randomized_ticker_without_jitter():
    with patch("flareidx.timeutil.time.sleep") as sleep:
        tick = next(randomized_ticker(timedelta(seconds=2), timedelta(0)))
    sleep.assert_called_once_with(2.0)
    assert abs(tick - datetime.now(timezone.utc)) < TOLERANCE