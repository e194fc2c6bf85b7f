"""Chart configuration and the render pipeline.

A ``Chart`` is a bag of named options (dimensions, scale knobs, accessors and
lifecycle hooks), each exposed as a chained getter/setter. Chart kinds are
built by taking a base chart and overriding a subset of those options, never
by subclassing. Calling the chart with a data object runs one render pass:

    prepare -> scales -> background draw -> foreground draw -> axes -> finalize

Every draw phase reconciles keyed scene nodes against the previous render, so
retained datasets and items keep their nodes.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Hashable, Iterable

from svgchart import accessors
from svgchart.colors import CategoryColors
from svgchart.config import ChartStyle, LayoutMetrics, Margins, Option, option_accessor
from svgchart.coordinator import ScaleCoordinator, ScaleState
from svgchart.errors import ChartDataError, ContractViolation
from svgchart.scales import LinearScale
from svgchart.scene import Join, Node
from svgchart.shapes import translate as translate_str


LOGGER = logging.getLogger(__name__)

OnSet = Callable[["Chart", Any], None]

DEFAULT_REQUIRED: tuple[str, ...] = ("xvalue", "yvalue")


def _noop_init(chart: "Chart", datasets: list[Any]) -> None:
    return None


def _noop_render(chart: "Chart", group: Node, dataset: Any) -> None:
    return None


def _noop_wrapup(chart: "Chart", root: Node, datasets: list[Any], metrics: LayoutMetrics) -> None:
    return None


def _default_options() -> dict[str, Any]:
    return {
        "width": 700.0,
        "height": 300.0,
        "padding": 7.5,
        "margins": Margins(),
        "style": ChartStyle(),
        "required": DEFAULT_REQUIRED,
        "xscale": None,
        "xscalefn": LinearScale,
        "xnice": None,
        "yscales": {},
        "yscalefn": LinearScale,
        "xscaled": accessors.xscaled,
        "yscaled": accessors.yscaled,
        "translate": accessors.translate,
        "datasets": accessors.datasets,
        "id": accessors.dataset_id,
        "label": accessors.dataset_label,
        "items": accessors.dataset_items,
        "xunits": accessors.unset("xunits"),
        "xvalue": accessors.unset("xvalue"),
        "xmin": accessors.xmin,
        "xmax": accessors.xmax,
        "yunits": accessors.dataset_units,
        "yvalue": accessors.unset("yvalue"),
        "ymin": accessors.ymin,
        "ymax": accessors.ymax,
        "itemid": accessors.itemid,
        "init": _noop_init,
        "render_background": None,
        "render": _noop_render,
        "wrapup": _noop_wrapup,
    }


def _copy_value(value: Any) -> Any:
    if isinstance(value, ScaleState):
        return value.copy()
    if isinstance(value, dict):
        return {k: _copy_value(v) for k, v in value.items()}
    if isinstance(value, CategoryColors):
        return value.copy()
    return value


class Chart:
    # dimensions and layout
    width = Option()
    height = Option()
    padding = Option()
    margins = Option(coerce=Margins.coerce)
    style = Option()
    required = Option(coerce=tuple)

    # scales
    xscale = Option()
    xscalefn = Option()
    xnice = Option()
    yscales = Option()
    yscalefn = Option()
    xscaled = Option()
    yscaled = Option()
    translate = Option()

    # accessors
    datasets = Option()
    id = Option()
    label = Option()
    items = Option()
    xunits = Option()
    xvalue = Option()
    xmin = Option()
    xmax = Option()
    yunits = Option()
    yvalue = Option()
    ymin = Option()
    ymax = Option()
    itemid = Option()

    # lifecycle hooks: init(chart, datasets), render_background/render(chart, group, dataset),
    # wrapup(chart, root, datasets, metrics)
    init = Option()
    render_background = Option()
    render = Option()
    wrapup = Option()

    def __init__(self) -> None:
        self._options: dict[str, Any] = _default_options()
        self._extra_options: dict[str, tuple[OnSet | None, Callable[[Any], Any] | None]] = {}
        self.root = Node("svg")

    def __getattr__(self, name: str) -> Any:
        extras = self.__dict__.get("_extra_options")
        if extras is not None and name in extras:
            _, coerce = extras[name]
            return option_accessor(self, name, coerce)
        raise AttributeError(f"{type(self).__name__!s} has no option {name!r}")

    def __call__(self, data: Any, root: Node | None = None) -> Node:
        return self.draw(data, root)

    def define_option(
        self,
        name: str,
        default: Any = None,
        *,
        on_set: OnSet | None = None,
        coerce: Callable[[Any], Any] | None = None,
    ) -> "Chart":
        """Add a kind-specific option reachable as ``chart.<name>()``."""
        if hasattr(type(self), name):
            raise ValueError(f"option {name!r} shadows a chart attribute")
        self._extra_options[name] = (on_set, coerce)
        self._options[name] = default
        return self

    def get_option(self, name: str) -> Any:
        try:
            value = self._options[name]
        except KeyError:
            raise AttributeError(f"unknown chart option: {name!r}") from None
        return accessors.bind(self, value)

    def set_option(self, name: str, value: Any) -> "Chart":
        if name not in self._options:
            raise AttributeError(f"unknown chart option: {name!r}")
        self._options[name] = value
        extra = self._extra_options.get(name)
        if extra is not None and extra[0] is not None:
            extra[0](self, value)
        return self

    def derive(self, **overrides: Any) -> "Chart":
        """Copy this chart's configuration into a new chart and apply ``overrides``.

        The copy has its own scale descriptors and an empty scene root.
        """
        child = type(self).__new__(type(self))
        child._options = {name: _copy_value(value) for name, value in self._options.items()}
        child._extra_options = dict(self._extra_options)
        child.root = Node("svg")
        for name, value in overrides.items():
            getattr(child, name)(value)
        return child

    def validate(self) -> "Chart":
        for name in self._options["required"]:
            if accessors.is_unset(self._options.get(name)):
                raise ContractViolation(f"{name} accessor not defined!")
        return self

    def metrics(self) -> LayoutMetrics:
        return LayoutMetrics.compute(
            width=float(self.width()),
            height=float(self.height()),
            padding=float(self.padding()),
            margins=self.margins(),
        )

    def draw(self, data: Any, root: Node | None = None) -> Node:
        self.validate()
        svg = self.root if root is None else root
        datasets = self._prepare(data)
        metrics = self.metrics()
        if metrics.gwidth <= 0 or metrics.gheight <= 0:
            raise ChartDataError("chart too small for graphing area")
        margins = self.margins()
        style = self.style()

        svg.attr("width", self.width()).attr("height", self.height())
        defs = svg.select_or_append("defs")
        clip = defs.select_or_append("clipPath", id="clip")
        clip.select_or_append("rect").attr("width", metrics.gwidth).attr("height", metrics.gheight)

        outer = svg.select_or_append("g", "outer")
        outer.attr("transform", translate_str(metrics.padding, metrics.padding, True))
        outer.select_or_append("rect").attr("width", metrics.cwidth).attr("height", metrics.cheight).attr(
            "fill", style.outer_fill
        )
        inner = outer.select_or_append("g", "inner")
        inner.attr("clip-path", "url(#clip)").attr("transform", translate_str(margins.left, margins.top))
        inner.select_or_append("rect").attr("width", metrics.gwidth).attr("height", metrics.gheight).attr(
            "fill", style.inner_fill
        )
        background_layer = inner.select_or_append("g", "background-layer")
        foreground_layer = inner.select_or_append("g", "foreground-layer")

        xstate, yscales = ScaleCoordinator(self).compute(datasets, metrics)

        background = self.render_background()
        bg_join = self._join_datasets(background_layer, datasets if background is not None else [], "dataset-background")
        if background is not None:
            for group in bg_join.nodes:
                background(self, group, group.datum)

        render = self.render()
        fg_join = self._join_datasets(foreground_layer, datasets, "dataset")
        for group in fg_join.nodes:
            render(self, group, group.datum)

        xaxis = outer.select_or_append("g", "xaxis")
        xaxis.attr("transform", translate_str(margins.left, metrics.cheight - margins.bottom))
        assert xstate.axis is not None
        xstate.axis.render(xaxis)
        self._render_yaxes(outer, yscales, metrics)

        self.wrapup()(self, svg, datasets, metrics)
        LOGGER.debug(
            "rendered %d datasets (%d entered, %d updated, %d exited)",
            len(datasets),
            len(fg_join.enter),
            len(fg_join.update),
            len(fg_join.exit),
        )
        return svg

    def _prepare(self, data: Any) -> list[Any]:
        datasets = self.datasets()(data)
        if datasets is None:
            raise ChartDataError("chart data has no datasets")
        datasets = list(datasets)
        dataset_id = self.id()
        seen: set[str] = set()
        for dataset in datasets:
            key = str(dataset_id(dataset))
            if key in seen:
                raise ChartDataError(f"duplicate dataset id: {key!r}")
            seen.add(key)
        self.init()(self, datasets)
        return datasets

    def _join_datasets(self, layer: Node, datasets: Iterable[Any], cls: str) -> Join:
        return layer.join(datasets, key=self.id(), tag="g", cls=cls, unique=True)

    def _render_yaxes(self, outer: Node, yscales: dict[Hashable, ScaleState], metrics: LayoutMetrics) -> None:
        margins = self.margins()
        join = outer.join(list(yscales), key=str, tag="g", cls="axis")
        for node in join.nodes:
            state = yscales[node.datum]
            if state.orient == "right":
                x = metrics.cwidth - margins.right
            else:
                x = margins.left
            node.attr("transform", translate_str(x, margins.top))
            assert state.axis is not None
            state.axis.render(node)
