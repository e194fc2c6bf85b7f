from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Hashable, Sequence

import numpy as np

from svgchart.errors import ChartDataError


DEFAULT_TICK_COUNT = 10


class LinearScale:
    """Continuous numeric scale mapping a domain interval onto a pixel range."""

    def __init__(self) -> None:
        self._domain: tuple[float, float] = (0.0, 1.0)
        self._range: tuple[float, float] = (0.0, 1.0)

    def __call__(self, value: Any) -> float:
        d0, d1 = self._domain
        r0, r1 = self._range
        span = d1 - d0
        t = 0.0 if span == 0 else (float(value) - d0) / span
        return r0 + t * (r1 - r0)

    def invert(self, px: float) -> float:
        d0, d1 = self._domain
        r0, r1 = self._range
        span = r1 - r0
        t = 0.0 if span == 0 else (float(px) - r0) / span
        return d0 + t * (d1 - d0)

    def domain(self, values: Sequence[Any] | None = None) -> Any:
        if values is None:
            return self._domain
        lo, hi = values
        self._domain = (float(lo), float(hi))
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

    def nice(self, count: int | None = None) -> "LinearScale":
        d0, d1 = self._domain
        lo, hi = (d0, d1) if d0 <= d1 else (d1, d0)
        step = tick_step(lo, hi, count or DEFAULT_TICK_COUNT)
        if step is None:
            return self
        lo = float(np.floor(lo / step) * step)
        hi = float(np.ceil(hi / step) * step)
        self._domain = (lo, hi) if d0 <= d1 else (hi, lo)
        return self

    def ticks(self, count: int = DEFAULT_TICK_COUNT) -> list[float]:
        d0, d1 = self._domain
        lo, hi = (d0, d1) if d0 <= d1 else (d1, d0)
        ticks = generate_nice_ticks(lo, hi, count)
        return [float(v) for v in ticks_within_range(ticks, vmin=lo, vmax=hi).tolist()]

    def tick_format(self, count: int = DEFAULT_TICK_COUNT) -> Callable[[Any], str]:
        ticks = np.asarray(self.ticks(count), dtype=np.float64)
        step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else None
        return lambda value: format_tick(float(value), step=step)


class PointScale:
    """Ordinal scale placing each distinct domain value at an evenly spaced point."""

    def __init__(self) -> None:
        self._domain: list[Hashable] = []
        self._index: dict[Hashable, int] = {}
        self._interval: tuple[float, float] = (0.0, 1.0)
        self._padding = 0.0
        self._points: list[float] = []

    def __call__(self, value: Any) -> float:
        idx = self._index.get(value)
        if idx is None:
            raise ChartDataError(f"value not in point scale domain: {value!r}")
        return self._points[idx]

    def domain(self, values: Sequence[Hashable] | None = None) -> Any:
        if values is None:
            return list(self._domain)
        self._domain = []
        self._index = {}
        for value in values:
            if value in self._index:
                continue
            self._index[value] = len(self._domain)
            self._domain.append(value)
        self._layout()
        return self

    def range(self) -> list[float]:
        return list(self._points)

    def range_points(self, interval: Sequence[float], padding: float = 0.0) -> "PointScale":
        start, stop = interval
        self._interval = (float(start), float(stop))
        self._padding = float(padding)
        self._layout()
        return self

    def range_extent(self) -> tuple[float, float]:
        start, stop = self._interval
        return (min(start, stop), max(start, stop))

    def ticks(self, count: int = DEFAULT_TICK_COUNT) -> list[Hashable]:
        return list(self._domain)

    def tick_format(self, count: int = DEFAULT_TICK_COUNT) -> Callable[[Any], str]:
        return str

    def _layout(self) -> None:
        start, stop = self._interval
        n = len(self._domain)
        if n < 2:
            self._points = [(start + stop) * 0.5] * n
            return
        step = (stop - start) / (n - 1 + self._padding)
        first = start + step * self._padding * 0.5
        self._points = [first + step * i for i in range(n)]


def tick_step(vmin: float, vmax: float, target: int) -> float | None:
    if target <= 0:
        raise ValueError("target must be > 0")
    if not (np.isfinite(vmin) and np.isfinite(vmax)) or vmin == vmax:
        return None
    span = _nice_number(vmax - vmin, round_result=False)
    return _nice_number(span / max(target - 1, 1), round_result=True)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    step = tick_step(vmin, vmax, target)
    assert step is not None
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def ticks_within_range(ticks: np.ndarray, *, vmin: float, vmax: float) -> np.ndarray:
    if ticks.size == 0:
        return ticks
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else max(1e-12, abs(vmax - vmin))
    eps = max(1e-12, step * 1e-6)
    mask = (ticks >= (vmin - eps)) & (ticks <= (vmax + eps))
    return ticks[mask]


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
