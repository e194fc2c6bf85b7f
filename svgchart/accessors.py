"""Default accessors for the conventional dataset/item record shape.

Accessors take a record and return a value. Accessors that need to consult
the chart's current configuration (for example ``xmax``, which depends on the
current ``items`` and ``xvalue``) are marked with :func:`uses_chart`; the
chart passes itself as their first argument when they are read back through
an option getter.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import functools
import math
from typing import Any, Callable

from svgchart.adapters.records import as_records, record_field
from svgchart.errors import ChartDataError, ContractViolation
from svgchart.shapes import translate as translate_str


def uses_chart(fn: Callable[..., Any]) -> Callable[..., Any]:
    fn.__uses_chart__ = True  # type: ignore[attr-defined]
    return fn


def bind(chart: Any, value: Any) -> Any:
    if callable(value) and getattr(value, "__uses_chart__", False):
        return functools.partial(value, chart)
    return value


def unset(name: str) -> Callable[..., Any]:
    """Placeholder for an accessor that a chart kind must provide."""

    def accessor(*args: Any) -> Any:
        raise ContractViolation(f"{name} accessor not defined!")

    accessor.__name__ = name
    accessor.__unset_accessor__ = name  # type: ignore[attr-defined]
    return accessor


def is_unset(fn: Any) -> bool:
    return getattr(fn, "__unset_accessor__", None) is not None


def _present(values: Any) -> list[Any]:
    out: list[Any] = []
    for value in values:
        if value is None:
            continue
        if isinstance(value, float) and math.isnan(value):
            continue
        out.append(value)
    return out


def extent_min(values: Any) -> Any:
    present = _present(values)
    return min(present) if present else None


def extent_max(values: Any) -> Any:
    present = _present(values)
    return max(present) if present else None


def datasets(data: Any) -> Any:
    if isinstance(data, Mapping):
        if "data" not in data:
            raise ChartDataError("chart data mapping has no 'data' entry")
        return data["data"]
    if not isinstance(data, Sequence) and hasattr(data, "data"):
        return data.data
    return data


def dataset_id(dataset: Any) -> Any:
    return record_field(dataset, "id")


def dataset_label(dataset: Any) -> Any:
    return record_field(dataset, "label", None)


def dataset_items(dataset: Any) -> list[Any]:
    return as_records(record_field(dataset, "list", None))


def dataset_units(dataset: Any) -> Any:
    return record_field(dataset, "units", None)


@uses_chart
def xmin(chart: Any, dataset: Any) -> Any:
    xvalue = chart.xvalue()
    return extent_min(xvalue(item) for item in chart.items()(dataset))


@uses_chart
def xmax(chart: Any, dataset: Any) -> Any:
    xvalue = chart.xvalue()
    return extent_max(xvalue(item) for item in chart.items()(dataset))


@uses_chart
def ymin(chart: Any, dataset: Any) -> Any:
    yvalue = chart.yvalue()
    return extent_min(yvalue(item) for item in chart.items()(dataset))


@uses_chart
def ymax(chart: Any, dataset: Any) -> Any:
    yvalue = chart.yvalue()
    return extent_max(yvalue(item) for item in chart.items()(dataset))


@uses_chart
def itemid(chart: Any, item: Any) -> str:
    return f"{chart.xvalue()(item)}={chart.yvalue()(item)}"


@uses_chart
def xscaled(chart: Any, item: Any) -> float:
    return chart.xscale().scale(chart.xvalue()(item))


@uses_chart
def yscaled(chart: Any, scaleid: Any) -> Callable[[Any], float]:
    state = chart.yscales()[scaleid]
    yvalue = chart.yvalue()
    return lambda item: state.scale(yvalue(item))


@uses_chart
def translate(chart: Any, scaleid: Any) -> Callable[[Any], str]:
    xfn = chart.xscaled()
    yfn = chart.yscaled()(scaleid)
    return lambda item: translate_str(xfn(item), yfn(item))
