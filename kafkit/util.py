"""Timeouts and wall-clock helpers."""

from __future__ import annotations

import time as _time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import total_ordering
from typing import Optional, Union

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MILLISECOND = timedelta(milliseconds=1)


@total_ordering
@dataclass(frozen=True)
class Timeout:
    """A timeout for a Kafka operation.

    A finite timeout holds a non-negative ``duration``. A timeout that never
    expires has ``duration`` set to ``None``. Finite timeouts sort before
    the infinite one.
    """

    duration: Optional[timedelta] = None

    def __post_init__(self) -> None:
        if self.duration is not None:
            if not isinstance(self.duration, timedelta):
                raise TypeError(
                    f"timeout duration must be a timedelta, not {type(self.duration).__name__}"
                )
            if self.duration < timedelta(0):
                raise ValueError("timeout duration cannot be negative")

    @classmethod
    def after(cls, duration: timedelta) -> "Timeout":
        """Return a timeout that expires once ``duration`` has elapsed."""
        if duration is None:
            raise TypeError("use Timeout.never() for a timeout that never expires")
        return cls(duration)

    @classmethod
    def never(cls) -> "Timeout":
        """Return a timeout that blocks forever."""
        return cls(None)

    @classmethod
    def from_value(cls, value: Union["Timeout", timedelta, None]) -> "Timeout":
        """Build a timeout from a timedelta, ``None`` (never) or a timeout."""
        if isinstance(value, Timeout):
            return value
        if value is None:
            return cls.never()
        if isinstance(value, timedelta):
            return cls.after(value)
        raise TypeError(f"cannot convert {type(value).__name__} to a Timeout")

    @property
    def is_never(self) -> bool:
        """Whether this timeout never expires."""
        return self.duration is None

    def as_millis(self) -> int:
        """Return the timeout in milliseconds, or -1 if it never expires."""
        if self.duration is None:
            return -1
        return self.duration // _ONE_MILLISECOND

    def __sub__(self, other: "Timeout") -> "Timeout":
        if not isinstance(other, Timeout):
            return NotImplemented
        if other.duration is None:
            raise ValueError("subtraction of a never-expiring timeout is ill-defined")
        if self.duration is None:
            return self
        remaining = self.duration - other.duration
        if remaining < timedelta(0):
            raise ValueError("overflow when subtracting timeouts")
        return Timeout(remaining)

    def _sort_key(self) -> tuple:
        if self.duration is None:
            return (1, timedelta(0))
        return (0, self.duration)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Timeout):
            return NotImplemented
        return self._sort_key() < other._sort_key()


def millis_to_epoch(time: datetime) -> int:
    """Return the milliseconds from the Unix epoch to ``time``.

    Naive datetimes are taken as UTC. Times before the epoch give 0.
    """
    if time.tzinfo is None:
        time = time.replace(tzinfo=timezone.utc)
    delta = time - _EPOCH
    if delta < timedelta(0):
        return 0
    return delta // _ONE_MILLISECOND


def current_time_millis() -> int:
    """Return the current time in milliseconds since the Unix epoch."""
    return _time.time_ns() // 1_000_000