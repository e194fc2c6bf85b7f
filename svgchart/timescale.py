from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
import datetime as dt
from typing import Any, Callable, Sequence

from svgchart.scales import DEFAULT_TICK_COUNT, _nice_number


EPOCH = dt.datetime(1970, 1, 1)

_SECOND = 1.0
_MINUTE = 60.0
_HOUR = 3600.0
_DAY = 86400.0
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY


def to_datetime(value: Any) -> dt.datetime:
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            return value.astimezone(dt.timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        return EPOCH + dt.timedelta(seconds=float(value))
    raise TypeError(f"cannot use {type(value)!r} as a time value")


def to_seconds(value: Any) -> float:
    return (to_datetime(value) - EPOCH).total_seconds()


def from_seconds(seconds: float) -> dt.datetime:
    return EPOCH + dt.timedelta(seconds=seconds)


@dataclass(frozen=True)
class TimeInterval:
    """Calendar interval used for nice rounding and tick generation."""

    name: str
    approx_seconds: float

    def floor(self, value: dt.datetime, step: int = 1) -> dt.datetime:
        if self.name == "year":
            return dt.datetime(value.year - value.year % step, 1, 1)
        if self.name == "month":
            month0 = (value.month - 1) - (value.month - 1) % step
            return dt.datetime(value.year, month0 + 1, 1)
        if self.name == "week":
            day = dt.datetime(value.year, value.month, value.day)
            # Weeks start on Sunday.
            return day - dt.timedelta(days=(day.weekday() + 1) % 7)
        if self.name == "day":
            day0 = (value.day - 1) - (value.day - 1) % step
            return dt.datetime(value.year, value.month, day0 + 1)
        unit = {"hour": _HOUR, "minute": _MINUTE, "second": _SECOND}[self.name] * step
        seconds = to_seconds(value)
        return from_seconds(seconds - seconds % unit)

    def offset(self, value: dt.datetime, step: int = 1) -> dt.datetime:
        if self.name == "year":
            return value.replace(year=value.year + step)
        if self.name == "month":
            month0 = value.month - 1 + step
            return value.replace(year=value.year + month0 // 12, month=month0 % 12 + 1)
        if self.name == "week":
            return value + dt.timedelta(weeks=step)
        if self.name == "day":
            return value + dt.timedelta(days=step)
        unit = {"hour": _HOUR, "minute": _MINUTE, "second": _SECOND}[self.name]
        return value + dt.timedelta(seconds=unit * step)

    def ceil(self, value: dt.datetime, step: int = 1) -> dt.datetime:
        floored = self.floor(value, step)
        if floored == value:
            return floored
        return self.offset(floored, step)

    def range(self, start: dt.datetime, stop: dt.datetime, step: int = 1) -> list[dt.datetime]:
        out: list[dt.datetime] = []
        current = self.ceil(start, step)
        while current <= stop:
            out.append(current)
            current = self.offset(current, step)
        return out


INTERVALS: dict[str, TimeInterval] = {
    "second": TimeInterval("second", _SECOND),
    "minute": TimeInterval("minute", _MINUTE),
    "hour": TimeInterval("hour", _HOUR),
    "day": TimeInterval("day", _DAY),
    "week": TimeInterval("week", _WEEK),
    "month": TimeInterval("month", _MONTH),
    "year": TimeInterval("year", _YEAR),
}

_TICK_STEPS: tuple[tuple[str, int], ...] = (
    ("second", 1),
    ("second", 5),
    ("second", 15),
    ("second", 30),
    ("minute", 1),
    ("minute", 5),
    ("minute", 15),
    ("minute", 30),
    ("hour", 1),
    ("hour", 3),
    ("hour", 6),
    ("hour", 12),
    ("day", 1),
    ("day", 2),
    ("week", 1),
    ("month", 1),
    ("month", 3),
    ("year", 1),
)
_TICK_DURATIONS = [INTERVALS[name].approx_seconds * step for name, step in _TICK_STEPS]


def resolve_interval(value: str | TimeInterval) -> TimeInterval:
    if isinstance(value, TimeInterval):
        return value
    try:
        return INTERVALS[value]
    except KeyError:
        raise ValueError(f"unknown time interval: {value!r}") from None


def tick_interval(start: dt.datetime, stop: dt.datetime, count: int) -> tuple[TimeInterval, int]:
    target = abs((stop - start).total_seconds()) / max(1, count)
    i = bisect_left(_TICK_DURATIONS, target)
    if i == len(_TICK_DURATIONS):
        years = _nice_number(max(target / _YEAR, 1.0), round_result=True)
        return INTERVALS["year"], max(1, int(years))
    if i == 0:
        return INTERVALS["second"], 1
    lower = _TICK_DURATIONS[i - 1]
    upper = _TICK_DURATIONS[i]
    pick = i - 1 if target / lower < upper / target else i
    name, step = _TICK_STEPS[pick]
    return INTERVALS[name], step


def multi_format(value: dt.datetime) -> str:
    if value.microsecond:
        return value.strftime(".%f")[:4]
    if value.second:
        return value.strftime(":%S")
    if value.minute:
        return value.strftime("%I:%M")
    if value.hour:
        return value.strftime("%I %p")
    if value.day != 1:
        return value.strftime("%b %d")
    if value.month != 1:
        return value.strftime("%B")
    return value.strftime("%Y")


class TimeScale:
    """Calendar-aware continuous scale; domain values are datetimes."""

    def __init__(self) -> None:
        self._domain: tuple[dt.datetime, dt.datetime] = (dt.datetime(2000, 1, 1), dt.datetime(2000, 1, 2))
        self._range: tuple[float, float] = (0.0, 1.0)

    def __call__(self, value: Any) -> float:
        d0, d1 = (to_seconds(v) for v in self._domain)
        r0, r1 = self._range
        span = d1 - d0
        t = 0.0 if span == 0 else (to_seconds(value) - d0) / span
        return r0 + t * (r1 - r0)

    def invert(self, px: float) -> dt.datetime:
        d0, d1 = (to_seconds(v) for v in self._domain)
        r0, r1 = self._range
        span = r1 - r0
        t = 0.0 if span == 0 else (float(px) - r0) / span
        return from_seconds(d0 + t * (d1 - d0))

    def domain(self, values: Sequence[Any] | None = None) -> Any:
        if values is None:
            return self._domain
        lo, hi = values
        self._domain = (to_datetime(lo), to_datetime(hi))
        return self

    def range(self, values: Sequence[float] | None = None) -> Any:
        if values is None:
            return self._range
        r0, r1 = values
        self._range = (float(r0), float(r1))
        return self

    def range_extent(self) -> tuple[float, float]:
        r0, r1 = self._range
        return (min(r0, r1), max(r0, r1))

    def nice(self, interval: str | TimeInterval | None = None, step: int = 1) -> "TimeScale":
        d0, d1 = self._domain
        lo, hi = (d0, d1) if d0 <= d1 else (d1, d0)
        if interval is None:
            resolved, step = tick_interval(lo, hi, DEFAULT_TICK_COUNT)
        else:
            resolved = resolve_interval(interval)
        lo = resolved.floor(lo, step)
        hi = resolved.ceil(hi, step)
        self._domain = (lo, hi) if d0 <= d1 else (hi, lo)
        return self

    def ticks(self, count: int = DEFAULT_TICK_COUNT) -> list[dt.datetime]:
        d0, d1 = self._domain
        lo, hi = (d0, d1) if d0 <= d1 else (d1, d0)
        if lo == hi:
            return [lo]
        interval, step = tick_interval(lo, hi, count)
        return interval.range(lo, hi, step)

    def tick_format(self, count: int = DEFAULT_TICK_COUNT) -> Callable[[Any], str]:
        return lambda value: multi_format(to_datetime(value))
