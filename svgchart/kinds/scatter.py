from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from svgchart.accessors import uses_chart
from svgchart.adapters.records import record_field
from svgchart.chart import Chart
from svgchart.colors import CategoryColors
from svgchart.config import LayoutMetrics, LegendSpec
from svgchart.scene import Node
from svgchart.shapes import line_path, translate


DENSITY_THRESHOLD = 50
LEGEND_ROW_HEIGHT = 22


def _coerce_legend(value: Any) -> LegendSpec:
    if isinstance(value, LegendSpec):
        return value
    if isinstance(value, Mapping):
        return LegendSpec(**value)
    raise TypeError(f"cannot use {type(value)!r} as a legend")


def _apply_legend(chart: Chart, legend: LegendSpec | None) -> None:
    if legend is not None:
        chart.margins(legend.apply(chart.margins()))


def _auto_legend(chart: Chart, datasets: list[Any]) -> None:
    legend = chart.legend()
    if legend is not None and not legend.auto:
        return
    rows = len(datasets)
    if rows > 5:
        chart.legend(LegendSpec(position="right", size=200, auto=True))
    else:
        chart.legend(LegendSpec(position="bottom", size=rows * LEGEND_ROW_HEIGHT + 20, auto=True))


def point_shape(sid: Any) -> str:
    return "circle"


@uses_chart
def point_style(chart: Chart, sid: Any) -> Callable[[Node], None]:
    color = chart.cscale()(sid)
    style = chart.style()

    def apply(node: Node) -> None:
        node.attr("r", style.point_radius).attr("fill", color).attr("stroke", style.mark_stroke).attr("cursor", "pointer")

    return apply


@uses_chart
def line_style(chart: Chart, sid: Any) -> Callable[[Node], None]:
    color = chart.cscale()(sid)
    return lambda node: node.attr("stroke", color)


@uses_chart
def pointover(chart: Chart, sid: Any) -> Callable[[Node, Any], None]:
    shape = chart.point_shape()(sid)
    fill = chart.style().hover_fill

    def handler(node: Node, item: Any) -> None:
        for mark in node.select_all(shape):
            mark.attr("fill", fill)

    return handler


@uses_chart
def pointout(chart: Chart, sid: Any) -> Callable[[Node, Any], None]:
    shape = chart.point_shape()(sid)
    cscale = chart.cscale()

    def handler(node: Node, item: Any) -> None:
        for mark in node.select_all(shape):
            mark.attr("fill", cscale(sid))

    return handler


@uses_chart
def point_label(chart: Chart, sid: Any) -> Callable[[Any], str]:
    x = chart.xvalue()
    y = chart.yvalue()
    return lambda item: f"{sid} at {x(item)}: {y(item)}"


@uses_chart
def draw_points_if(chart: Chart, dataset: Any) -> bool:
    items = chart.items()(dataset)
    return bool(items) and len(items) <= DENSITY_THRESHOLD


@uses_chart
def draw_lines_if(chart: Chart, dataset: Any) -> bool:
    items = chart.items()(dataset)
    return bool(items) and len(items) > DENSITY_THRESHOLD


def render_lines(chart: Chart, group: Node, dataset: Any) -> None:
    """Background pass: one connected path per dense dataset."""
    path = group.select("path", "data")
    if not chart.draw_lines_if()(dataset):
        if path is not None:
            path.remove()
        return
    items = chart.items()(dataset)
    sid = chart.id()(dataset)
    xscaled = chart.xscaled()
    yscaled = chart.yscaled()(chart.yunits()(dataset))
    if path is None:
        path = group.append("path", "data").attr("fill", "none")
    path.datum = items
    path.attr("d", line_path((xscaled(item), yscaled(item)) for item in items))
    chart.line_style()(sid)(path)


def render_points(chart: Chart, group: Node, dataset: Any) -> None:
    """Foreground pass: one interactive mark per item, keyed by item id."""
    drawn = chart.draw_points_if()(dataset)
    items = chart.items()(dataset) if drawn else []
    points = group.join(items, key=chart.itemid(), tag="g", cls="data")
    if not drawn:
        return
    sid = chart.id()(dataset)
    shape = chart.point_shape()(sid)
    for node in points.enter:
        node.on("mouseover", chart.pointover()(sid))
        node.on("mouseout", chart.pointout()(sid))
        node.append(shape)
        node.append("title")

    place = chart.translate()(chart.yunits()(dataset))
    style = chart.point_style()(sid)
    label = chart.point_label()(sid)
    for node in points.nodes:
        node.attr("transform", place(node.datum))
        style(node.select_or_append(shape))
        node.select_or_append("title").set_text(label(node.datum))


def render_legend(chart: Chart, root: Node, datasets: list[Any], metrics: LayoutMetrics) -> None:
    legend = chart.legend()
    if legend is None:
        return
    margins = chart.margins()
    style = chart.style()
    if legend.position == "bottom":
        x = margins.left
        y = metrics.cheight - margins.bottom + 30
        w = metrics.gwidth
        h = legend.size
    else:
        x = metrics.cwidth - margins.right + 10
        y = margins.top
        w = legend.size
        h = metrics.gheight

    outer = root.select_or_append("g", "outer")
    box = outer.select_or_append("g", "legend").attr("transform", translate(x, y))
    box.select_or_append("rect").attr("width", w).attr("height", h).attr("fill", style.legend_fill).attr(
        "stroke", style.legend_stroke
    )

    dataset_id = chart.id()
    label = chart.label()
    entries = box.join(datasets, key=dataset_id, tag="g", cls="legenditem")
    for node in entries.enter:
        sid = dataset_id(node.datum)
        mark = node.append("g", "data")
        mark.append(chart.point_shape()(sid))
        mark.append("text")
    for i, node in enumerate(entries.nodes):
        sid = dataset_id(node.datum)
        mark = node.select_or_append("g", "data")
        mark.attr("transform", translate(20, 20 + i * LEGEND_ROW_HEIGHT))
        chart.point_style()(sid)(mark.select_or_append(chart.point_shape()(sid)))
        text = label(node.datum)
        mark.select_or_append("text").set_text("" if text is None else str(text)).attr("transform", translate(10, 5))


def scatter(base: Chart | None = None) -> Chart:
    """Points for sparse series, a connecting line for dense ones, and a legend."""
    chart = Chart() if base is None else base
    chart.define_option("cscale", CategoryColors())
    chart.define_option("legend", None, on_set=_apply_legend, coerce=_coerce_legend)
    chart.define_option("point_shape", point_shape)
    chart.define_option("point_style", point_style)
    chart.define_option("line_style", line_style)
    chart.define_option("pointover", pointover)
    chart.define_option("pointout", pointout)
    chart.define_option("point_label", point_label)
    chart.define_option("draw_points_if", draw_points_if)
    chart.define_option("draw_lines_if", draw_lines_if)

    return (
        chart.xvalue(lambda item: record_field(item, "x"))
        .xunits(lambda dataset: record_field(dataset, "xunits", None))
        .yvalue(lambda item: record_field(item, "y"))
        .yunits(lambda dataset: record_field(dataset, "yunits", record_field(dataset, "units", None)))
        .init(_auto_legend)
        .render_background(render_lines)
        .render(render_points)
        .wrapup(render_legend)
    )
