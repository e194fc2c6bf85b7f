from __future__ import annotations

from typing import Any

from svgchart.chart import Chart
from svgchart.kinds.scatter import scatter
from svgchart.scene import Node
from svgchart.shapes import closed_path


def render_contour(chart: Chart, group: Node, dataset: Any) -> None:
    """Fill the polygon traced by the dataset's items, in item order."""
    items = chart.items()(dataset)
    sid = chart.id()(dataset)
    paths = group.join([items] if items else [], key=lambda _: sid, tag="path", cls="contour")
    if not items:
        return
    xscaled = chart.xscaled()
    yscaled = chart.yscaled()(chart.yunits()(dataset))
    for path in paths.nodes:
        path.attr("d", closed_path((xscaled(item), yscaled(item)) for item in items))
        path.attr("fill", chart.cscale()(sid))


def contour(base: Chart | None = None) -> Chart:
    return scatter(base).render(render_contour)
