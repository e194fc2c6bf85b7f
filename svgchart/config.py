from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Callable, Literal


LegendPosition = Literal["bottom", "right"]

_UNSET: Any = object()


@dataclass(frozen=True)
class Margins:
    left: float = 80.0
    right: float = 10.0
    top: float = 10.0
    bottom: float = 30.0

    @classmethod
    def coerce(cls, value: Any) -> "Margins":
        if isinstance(value, Margins):
            return value
        if isinstance(value, Mapping):
            return cls(**{k: float(v) for k, v in value.items()})
        raise TypeError(f"cannot use {type(value)!r} as chart margins")


@dataclass(frozen=True)
class LegendSpec:
    position: LegendPosition = "bottom"
    size: float = 0.0
    auto: bool = False

    def apply(self, margins: Margins) -> Margins:
        if self.position == "bottom":
            return replace(margins, bottom=self.size + 30.0, right=10.0)
        return replace(margins, bottom=30.0, right=self.size + 20.0)


@dataclass(frozen=True)
class LayoutMetrics:
    padding: float
    gwidth: float
    gheight: float
    cwidth: float
    cheight: float

    @classmethod
    def compute(cls, *, width: float, height: float, padding: float, margins: Margins) -> "LayoutMetrics":
        cwidth = width - padding - padding
        cheight = height - padding - padding
        return cls(
            padding=padding,
            gwidth=cwidth - margins.left - margins.right,
            gheight=cheight - margins.top - margins.bottom,
            cwidth=cwidth,
            cheight=cheight,
        )


@dataclass(frozen=True)
class ChartStyle:
    outer_fill: str = "#eee"
    inner_fill: str = "#ccc"
    axis_stroke: str = "#000"
    mark_stroke: str = "black"
    point_radius: float = 3.0
    hover_fill: str = "#9999ff"
    legend_fill: str = "white"
    legend_stroke: str = "#999"
    box_stroke: str = "#000"


class Option:
    """Chained getter/setter.

    ``chart.width()`` returns the current value; ``chart.width(800)`` stores
    the value and returns the chart so configuration calls can be chained.
    Values are stored as given; nothing is validated until render time.
    """

    def __init__(self, coerce: Callable[[Any], Any] | None = None) -> None:
        self.coerce = coerce
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, chart: Any, owner: type | None = None) -> Any:
        if chart is None:
            return self
        return option_accessor(chart, self.name, self.coerce)


def option_accessor(chart: Any, name: str, coerce: Callable[[Any], Any] | None = None) -> Callable[..., Any]:
    def option(value: Any = _UNSET) -> Any:
        if value is _UNSET:
            return chart.get_option(name)
        if coerce is not None and value is not None:
            value = coerce(value)
        return chart.set_option(name, value)

    option.__name__ = name
    return option
