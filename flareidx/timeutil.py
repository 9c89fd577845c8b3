"""Time helpers: a shiftable clock, timestamp parsing and a jittered ticker."""

from __future__ import annotations

import random
import re
import time
from datetime import datetime, timedelta, timezone
from typing import Iterator

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Timestamps below this (9999-01-01T00:00:00Z in seconds) are taken as seconds.
_SECONDS_LIMIT = 253370764800

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)
_INTEGER = re.compile(r"[+-]?\d+")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShiftedTime:
    """A clock running at real speed but offset by ``shift``."""

    def __init__(self, start_now: datetime | None = None) -> None:
        self.shift = timedelta(0)
        if start_now is not None:
            self.set_now(start_now)

    def set_now(self, start_now: datetime) -> None:
        """Shift the clock so that it reads ``start_now`` right now."""
        self.shift = _aware(start_now) - _utcnow()

    def now(self) -> datetime:
        """Return the shifted current time (UTC)."""
        return _utcnow() + self.shift

    def set_now_unix(self, now: int) -> None:
        """Like :meth:`set_now`, with a Unix timestamp in seconds."""
        self.set_now(_EPOCH + timedelta(seconds=now))

    def advance_now(self, duration: timedelta) -> None:
        """Move the clock forward by ``duration``."""
        self.shift += duration


def parse_time(s: str) -> datetime:
    """Parse an RFC 3339 timestamp; raises ValueError when it is malformed."""
    match = _RFC3339.fullmatch(s)
    if match is None:
        raise ValueError(f"cannot parse {s!r} as RFC3339")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction, zone = match.group(7), match.group(8)
    micros = int((fraction or "0")[:6].ljust(6, "0"))
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"invalid time zone offset in {s!r}")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return datetime(year, month, day, hour, minute, second, micros, tzinfo=tz)


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp or an integer Unix timestamp in seconds."""
    try:
        return parse_time(text)
    except ValueError:
        pass
    if _INTEGER.fullmatch(text):
        seconds = int(text)
        if _INT64_MIN <= seconds <= _INT64_MAX:
            try:
                return _EPOCH + timedelta(seconds=seconds)
            except OverflowError:
                pass
    raise ValueError("timestamp must be in RFC3339 or Unix timestamp format")


def _random_duration(delta_ms: int) -> timedelta:
    delta = random.randrange(delta_ms) if delta_ms > 0 else 0
    return timedelta(milliseconds=delta)


def randomized_ticker(interval: timedelta, random_delta: timedelta) -> Iterator[datetime]:
    """Yield the current time forever, sleeping ``interval`` plus random jitter
    below ``random_delta`` before each tick."""
    delta_ms = int(random_delta / timedelta(milliseconds=1))
    while True:
        time.sleep((interval + _random_duration(delta_ms)).total_seconds())
        yield _utcnow()


def timestamp_to_time(timestamp: int) -> datetime:
    """Convert a timestamp in seconds or nanoseconds to a UTC datetime.

    Values below 253370764800 (year 9999 in seconds) are taken as seconds.
    """
    if timestamp < _SECONDS_LIMIT:
        return _EPOCH + timedelta(seconds=timestamp)
    seconds, nanos = divmod(timestamp, 10**9)
    return _EPOCH + timedelta(seconds=seconds, microseconds=nanos // 1000)