"""Horizontal and per-unit vertical scale computation.

One horizontal scale is shared by every dataset; vertical scales are keyed by
the dataset's ``yunits`` value so series with different units get independent
axes. Scale descriptors live on the chart between renders: an ``auto``
descriptor is re-aggregated from the data on every render, a pinned one keeps
the bounds its caller set.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from typing import Any, Hashable, Iterable, Literal

from svgchart.axis import Axis
from svgchart.config import LayoutMetrics


LOGGER = logging.getLogger(__name__)

Orientation = Literal["left", "right"]
ORIENTATIONS: tuple[Orientation, Orientation] = ("left", "right")
TICK_SIZES = (4.0, 2.0, 1.0)


@dataclass
class ScaleState:
    """Retained descriptor for one scale.

    ``domain_min``/``domain_max`` hold the aggregated (pre-nice) bounds. With
    ``auto`` false they are pinned and never recomputed. ``nice`` is the
    rounding hint: for the horizontal scale an interval or tick count passed
    to ``scale.nice``; for vertical scales ``None`` rounds auto scales only,
    ``True``/``False`` force it on or off.
    """

    domain_min: Any = None
    domain_max: Any = None
    auto: bool = True
    nice: Any = None
    invert: bool = False
    orient: Orientation | None = None
    unit: Hashable | None = None
    sets: int = 0
    points: list[Any] = field(default_factory=list)
    scale: Any = None
    axis: Axis | None = None

    def fold(self, lo: Any, hi: Any) -> None:
        if lo is not None:
            self.domain_min = lo if self.domain_min is None else min(self.domain_min, lo)
        if hi is not None:
            self.domain_max = hi if self.domain_max is None else max(self.domain_max, hi)

    def domain(self) -> tuple[Any, Any]:
        if self.invert:
            return (self.domain_max, self.domain_min)
        return (self.domain_min, self.domain_max)

    def copy(self) -> "ScaleState":
        return replace(self, points=list(self.points))


def pinned(domain_min: Any, domain_max: Any, **kwargs: Any) -> ScaleState:
    return ScaleState(domain_min=domain_min, domain_max=domain_max, auto=False, **kwargs)


class ScaleCoordinator:
    def __init__(self, chart: Any) -> None:
        self.chart = chart

    def compute(self, datasets: Iterable[Any], metrics: LayoutMetrics) -> tuple[ScaleState, dict[Hashable, ScaleState]]:
        chart = self.chart
        xstate = chart.xscale()
        if xstate is None:
            xstate = ScaleState()
            chart.xscale(xstate)
        yscales = chart.yscales()
        if yscales is None:
            yscales = {}
            chart.yscales(yscales)

        xscale = chart.xscalefn()()
        point_placement = hasattr(xscale, "range_points")

        if xstate.auto:
            xstate.domain_min = None
            xstate.domain_max = None
        xstate.points = []
        xstate.sets = 0
        for state in yscales.values():
            if state.auto:
                state.domain_min = 0
                state.domain_max = 0
            state.sets = 0

        items = chart.items()
        xvalue = chart.xvalue()
        xmin, xmax = chart.xmin(), chart.xmax()
        ymin, ymax = chart.ymin(), chart.ymax()
        yunits = chart.yunits()
        seen_points: set[Any] = set()

        for dataset in datasets:
            xstate.sets += 1
            if point_placement:
                # Categories need not be orderable; only distinct values matter.
                for item in items(dataset):
                    value = xvalue(item)
                    if value not in seen_points:
                        seen_points.add(value)
                        xstate.points.append(value)
            elif xstate.auto:
                xstate.fold(xmin(dataset), xmax(dataset))

            unit = yunits(dataset)
            state = yscales.get(unit)
            if state is None:
                state = ScaleState(domain_min=0, domain_max=0)
                yscales[unit] = state
            if state.unit is None:
                state.unit = unit
            if state.orient is None:
                oriented = sum(1 for s in yscales.values() if s.orient is not None)
                state.orient = ORIENTATIONS[oriented % 2]
            state.sets += 1
            if state.auto:
                state.fold(ymin(dataset), ymax(dataset))

        self._materialize_x(xstate, xscale, point_placement, metrics)
        for unit, state in yscales.items():
            self._materialize_y(unit, state, metrics)
        return xstate, yscales

    def _materialize_x(self, state: ScaleState, scale: Any, point_placement: bool, metrics: LayoutMetrics) -> None:
        if point_placement:
            scale.domain(state.points).range_points((0.0, metrics.gwidth), 1.0)
        else:
            if state.domain_min is not None and state.domain_max is not None:
                scale.domain(state.domain())
            else:
                LOGGER.debug("horizontal scale has no data; keeping default domain %r", scale.domain())
            scale.range((0.0, metrics.gwidth))
            hint = state.nice if state.nice is not None else self.chart.xnice()
            if hint is not None and hasattr(scale, "nice"):
                scale.nice(hint)
        state.scale = scale
        state.axis = Axis(scale, orient="bottom", stroke=self.chart.style().axis_stroke).tick_size(*TICK_SIZES)

    def _materialize_y(self, unit: Hashable, state: ScaleState, metrics: LayoutMetrics) -> None:
        scale = self.chart.yscalefn()()
        lo, hi = state.domain()
        if lo is None or hi is None:
            LOGGER.debug("vertical scale %r has no bounds; using [0, 0]", unit)
            lo = 0 if lo is None else lo
            hi = 0 if hi is None else hi
        scale.domain((lo, hi))
        nice = state.auto if state.nice is None else bool(state.nice)
        if nice:
            scale.nice()
        scale.range((metrics.gheight, 0.0))
        state.scale = scale
        orient = state.orient or "left"
        state.axis = Axis(scale, orient=orient, stroke=self.chart.style().axis_stroke).tick_size(*TICK_SIZES)
