from __future__ import annotations

import datetime as dt
from typing import Any, Callable

from svgchart.accessors import uses_chart
from svgchart.adapters.records import record_field
from svgchart.chart import Chart
from svgchart.kinds.scatter import scatter
from svgchart.timescale import TimeScale


DEFAULT_TIME_FORMAT = "%Y-%m-%d"


@uses_chart
def parse_date(chart: Chart, item: Any) -> dt.datetime:
    value = record_field(item, "date")
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    return dt.datetime.strptime(str(value), chart.time_format())


@uses_chart
def dated_point_label(chart: Chart, sid: Any) -> Callable[[Any], str]:
    x = chart.xvalue()
    y = chart.yvalue()
    fmt = chart.time_format()
    return lambda item: f"{sid} on {x(item).strftime(fmt)}: {y(item)}"


def time_series(base: Chart | None = None) -> Chart:
    """Scatter chart over a calendar axis rounded out to whole years."""
    chart = scatter(base)
    chart.define_option("time_format", DEFAULT_TIME_FORMAT)
    return (
        chart.xvalue(parse_date)
        .xscalefn(TimeScale)
        .xnice("year")
        .yvalue(lambda item: record_field(item, "value"))
        .point_label(dated_point_label)
    )
