from __future__ import annotations

from typing import Any, Callable

from svgchart.accessors import extent_max, extent_min, uses_chart
from svgchart.adapters.records import record_field
from svgchart.chart import Chart
from svgchart.scales import PointScale
from svgchart.scene import Node
from svgchart.shapes import translate


SUMMARY_FIELDS = ("min", "p25", "median", "p75", "max")
BOX_WIDTH = 20

# name, x1, x2, field for y1, field for y2
SEGMENTS: tuple[tuple[str, float, float, str, str], ...] = (
    ("p25", 0, BOX_WIDTH, "p25", "p25"),
    ("p75", 0, BOX_WIDTH, "p75", "p75"),
    ("median", 0, BOX_WIDTH, "median", "median"),
    ("box-left", 0, 0, "p25", "p75"),
    ("box-right", BOX_WIDTH, BOX_WIDTH, "p25", "p75"),
    ("max-cap", 5, 15, "max", "max"),
    ("min-cap", 5, 15, "min", "min"),
    ("upper-whisker", 10, 10, "max", "p75"),
    ("lower-whisker", 10, 10, "min", "p25"),
)


def summary(item: Any) -> dict[str, Any]:
    if item is None:
        return {}
    return {name: record_field(item, name, None) for name in SUMMARY_FIELDS}


def has_summary(item: Any) -> bool:
    values = summary(item)
    return any(values.get(name) is not None for name in ("median", "min", "max"))


@uses_chart
def box_ymin(chart: Chart, dataset: Any) -> Any:
    return extent_min(record_field(item, "min", None) for item in chart.items()(dataset))


@uses_chart
def box_ymax(chart: Chart, dataset: Any) -> Any:
    return extent_max(record_field(item, "max", None) for item in chart.items()(dataset))


@uses_chart
def category_id(chart: Chart, item: Any) -> str:
    return str(chart.xvalue()(item))


def draw_box(node: Node, item: Any, y: Callable[[float], float], stroke: str = "#000") -> bool:
    """Draw the nine-segment glyph for one summary into ``node``.

    Returns False and leaves no glyph when the item has none of
    ``median``, ``min`` or ``max``.
    """
    existing = node.select("g", "box")
    if not has_summary(item):
        if existing is not None:
            existing.remove()
        return False
    values = summary(item)
    box = existing if existing is not None else node.append("g", "box")
    box.attr("transform", translate(-BOX_WIDTH / 2, 0))
    drawable = [seg for seg in SEGMENTS if values[seg[3]] is not None and values[seg[4]] is not None]
    lines = box.join(drawable, key=lambda seg: seg[0], tag="line")
    for line in lines.nodes:
        _, x1, x2, f1, f2 = line.datum
        line.attr("x1", x1).attr("x2", x2)
        line.attr("y1", y(values[f1])).attr("y2", y(values[f2]))
        line.attr("stroke", stroke)
    return True


def render_boxes(chart: Chart, group: Node, dataset: Any) -> None:
    items = [item for item in chart.items()(dataset) if has_summary(item)]
    state = chart.yscales()[chart.yunits()(dataset)]
    xscale = chart.xscale().scale
    xvalue = chart.xvalue()
    stroke = chart.style().box_stroke
    zero = state.scale(0)

    def y(value: float) -> float:
        return state.scale(value) - zero

    boxes = group.join(items, key=chart.itemid(), tag="g", cls="data")
    for node in boxes.nodes:
        node.attr("transform", translate(xscale(xvalue(node.datum)), zero))
        draw_box(node, node.datum, y, stroke)


def boxplot(base: Chart | None = None) -> Chart:
    """Box-and-whisker glyphs for precomputed per-category summaries."""
    chart = Chart() if base is None else base
    return (
        chart.xscalefn(PointScale)
        .required(("xvalue",))
        .yvalue(lambda item: record_field(item, "median", None))
        .ymin(box_ymin)
        .ymax(box_ymax)
        .itemid(category_id)
        .render(render_boxes)
    )
