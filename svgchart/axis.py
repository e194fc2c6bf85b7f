from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from svgchart.scales import DEFAULT_TICK_COUNT
from svgchart.scene import Node, format_number
from svgchart.shapes import translate


Orient = Literal["top", "bottom", "left", "right"]


@dataclass
class Axis:
    """Tick marks and labels for one scale, drawn on one side of the graph."""

    scale: Any
    orient: Orient = "bottom"
    inner_tick_size: float = 6.0
    outer_tick_size: float = 6.0
    tick_padding: float = 3.0
    tick_count: int = DEFAULT_TICK_COUNT
    stroke: str = "#000"

    def __post_init__(self) -> None:
        if self.orient not in {"top", "bottom", "left", "right"}:
            raise ValueError(f"unsupported axis orient: {self.orient!r}")

    def tick_size(self, *sizes: float) -> "Axis":
        # (inner, [minor,] outer); the minor size has no effect.
        if not sizes:
            raise ValueError("tick_size requires at least one size")
        self.inner_tick_size = float(sizes[0])
        self.outer_tick_size = float(sizes[-1])
        return self

    @property
    def horizontal(self) -> bool:
        return self.orient in {"top", "bottom"}

    def tick_values(self) -> list[Any]:
        return list(self.scale.ticks(self.tick_count))

    def render(self, group: Node) -> Node:
        fmt = self.scale.tick_format(self.tick_count)
        sign = -1.0 if self.orient in {"top", "left"} else 1.0
        inner = self.inner_tick_size * sign
        label_offset = (max(self.inner_tick_size, 0.0) + self.tick_padding) * sign

        # Keyed by tick value: formatted labels can repeat (e.g. "April" every year).
        ticks = group.join(self.tick_values(), key=str, tag="g", cls="tick")
        for node in ticks.nodes:
            pos = float(self.scale(node.datum))
            line = node.select_or_append("line")
            text = node.select_or_append("text")
            if self.horizontal:
                node.attr("transform", translate(pos, 0))
                line.attr("x2", 0).attr("y2", inner)
                text.attr("x", 0).attr("y", label_offset).attr("dy", ".71em" if sign > 0 else "0em")
                text.attr("text-anchor", "middle")
            else:
                node.attr("transform", translate(0, pos))
                line.attr("x2", inner).attr("y2", 0)
                text.attr("x", label_offset).attr("y", 0).attr("dy", ".32em")
                text.attr("text-anchor", "end" if sign < 0 else "start")
            line.attr("stroke", self.stroke)
            text.set_text(fmt(node.datum))

        start, stop = self.scale.range_extent()
        outer = format_number(self.outer_tick_size * sign)
        r0 = format_number(start)
        r1 = format_number(stop)
        if self.horizontal:
            d = f"M{r0},{outer}V0H{r1}V{outer}"
        else:
            d = f"M{outer},{r0}H0V{r1}H{outer}"
        group.select_or_append("path", "domain").attr("d", d).attr("fill", "none").attr("stroke", self.stroke)
        return group
