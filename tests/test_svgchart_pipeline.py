from __future__ import annotations

from types import SimpleNamespace
import unittest
from unittest import mock

from svgchart import Chart, ChartDataError, ContractViolation, Margins, scatter


def xy_chart() -> Chart:
    return Chart().xvalue(lambda item: item["x"]).yvalue(lambda item: item["y"])


def dataset(sid: str, units: str = "kg", count: int = 3) -> dict:
    return {"id": sid, "label": sid.upper(), "units": units, "list": [{"x": i, "y": i * 2} for i in range(count)]}


def groups(root, cls: str) -> dict:
    return {node.key: node for node in root.find_all("g", cls)}


class ConfigurationTests(unittest.TestCase):
    def test_setters_chain_and_getters_return_values(self) -> None:
        chart = Chart()
        self.assertIs(chart.width(800).height(400), chart)
        self.assertEqual((chart.width(), chart.height()), (800, 400))
        self.assertEqual(chart.margins(), Margins())

    def test_margins_accept_mappings(self) -> None:
        chart = Chart().margins({"left": 40, "right": 5, "top": 5, "bottom": 20})
        self.assertEqual(chart.margins(), Margins(40.0, 5.0, 5.0, 20.0))

    def test_define_option_adds_accessor(self) -> None:
        chart = Chart().define_option("tooltip", "off")
        self.assertEqual(chart.tooltip(), "off")
        self.assertIs(chart.tooltip("on"), chart)
        self.assertEqual(chart.tooltip(), "on")
        with self.assertRaises(AttributeError):
            chart.not_an_option()
        with self.assertRaises(ValueError):
            chart.define_option("width", 1)

    def test_on_set_callback_runs_when_option_changes(self) -> None:
        seen = mock.Mock()
        chart = Chart().define_option("theme", None, on_set=seen)
        chart.theme("dark")
        seen.assert_called_once_with(chart, "dark")

    def test_derive_copies_configuration(self) -> None:
        base = xy_chart()
        base([dataset("a")])
        child = base.derive(width=400)
        self.assertEqual(child.width(), 400)
        self.assertEqual(base.width(), 700)
        self.assertIsNot(child.yscales(), base.yscales())
        self.assertIsNot(child.yscales()["kg"], base.yscales()["kg"])
        self.assertIsNot(child.root, base.root)
        self.assertEqual(child.root.children, [])

    def test_derive_keeps_kind_options(self) -> None:
        base = scatter()
        base.cscale()("a")
        child = base.derive(point_shape=lambda sid: "rect")
        self.assertEqual(child.point_shape()("a"), "rect")
        self.assertEqual(base.point_shape()("a"), "circle")
        self.assertIsNot(child.cscale(), base.cscale())
        self.assertEqual(child.cscale().domain(), ["a"])


class ContractTests(unittest.TestCase):
    def test_base_chart_fails_before_drawing(self) -> None:
        chart = Chart()
        with self.assertRaises(ContractViolation):
            chart([dataset("a")])
        self.assertEqual(chart.root.children, [])
        self.assertEqual(chart.root.attrs, {})

    def test_unset_accessor_raises_when_called(self) -> None:
        with self.assertRaises(ContractViolation):
            Chart().xunits()({"id": "a"})

    def test_required_names_are_configurable(self) -> None:
        chart = Chart().xvalue(lambda item: item["x"]).required(("xvalue",))
        self.assertIs(chart.validate(), chart)

    def test_duplicate_dataset_ids_are_rejected(self) -> None:
        with self.assertRaises(ChartDataError):
            xy_chart()([dataset("a"), dataset("a")])

    def test_mapping_without_data_is_rejected(self) -> None:
        with self.assertRaises(ChartDataError):
            xy_chart()({"datasets": []})

    def test_graph_area_must_be_positive(self) -> None:
        with self.assertRaises(ChartDataError):
            xy_chart().width(80)([dataset("a")])


class RenderPipelineTests(unittest.TestCase):
    def test_skeleton_layout(self) -> None:
        chart = xy_chart()
        root = chart([dataset("a", "kg"), dataset("b", "m")])
        metrics = chart.metrics()
        self.assertEqual((metrics.gwidth, metrics.gheight), (595.0, 245.0))

        clip_rect = root.select("defs").select("clipPath", id="clip").select("rect")
        self.assertEqual(clip_rect.attr("width"), 595.0)
        outer = root.select("g", "outer")
        self.assertEqual(outer.attr("transform"), "translate(7,7)")
        inner = outer.select("g", "inner")
        self.assertEqual(inner.attr("clip-path"), "url(#clip)")
        self.assertEqual(inner.attr("transform"), "translate(80,10)")
        self.assertEqual([c.tag for c in inner.children], ["rect", "g", "g"])
        self.assertEqual(inner.children[1].classes, ("background-layer",))
        self.assertEqual(outer.select("g", "xaxis").attr("transform"), "translate(80,255)")

        axes = groups(outer, "axis")
        self.assertEqual(axes["kg"].attr("transform"), "translate(80,10)")
        self.assertEqual(axes["m"].attr("transform"), "translate(675,10)")

    def test_accepts_wrapped_datasets(self) -> None:
        for data in ({"data": [dataset("a")]}, SimpleNamespace(data=[dataset("a")])):
            chart = xy_chart()
            chart(data)
            self.assertEqual(list(groups(chart.root, "dataset")), ["a"])

    def test_hooks_receive_chart_and_dataset(self) -> None:
        calls = []
        chart = (
            xy_chart()
            .init(lambda c, ds: calls.append(("init", len(ds))))
            .render_background(lambda c, g, d: calls.append(("background", d["id"])))
            .render(lambda c, g, d: calls.append(("render", g.key)))
            .wrapup(lambda c, root, ds, metrics: calls.append(("wrapup", metrics.gwidth)))
        )
        chart([dataset("a"), dataset("b")])
        self.assertEqual(
            calls,
            [
                ("init", 2),
                ("background", "a"),
                ("background", "b"),
                ("render", "a"),
                ("render", "b"),
                ("wrapup", 595.0),
            ],
        )

    def test_no_background_groups_without_hook(self) -> None:
        chart = xy_chart()
        chart([dataset("a")])
        self.assertEqual(groups(chart.root, "dataset-background"), {})

    def test_rerender_with_same_data_is_stable(self) -> None:
        chart = scatter()
        data = [dataset("a"), dataset("b", "m", count=60)]
        chart(data)
        before = [id(node) for node in chart.root.walk()]
        chart(data)
        self.assertEqual([id(node) for node in chart.root.walk()], before)

    def test_removing_dataset_removes_only_its_group(self) -> None:
        chart = scatter()
        chart([dataset("a"), dataset("b"), dataset("c")])
        before = groups(chart.root, "dataset")

        chart([dataset("a"), dataset("c")])
        after = groups(chart.root, "dataset")
        self.assertEqual(sorted(after), ["a", "c"])
        self.assertIs(after["a"], before["a"])
        self.assertIs(after["c"], before["c"])
        self.assertIsNone(before["b"].parent)

    def test_svg_output(self) -> None:
        markup = xy_chart()([dataset("a")]).to_svg()
        self.assertIn('<clipPath id="clip">', markup)
        self.assertIn('class="xaxis"', markup)

    def test_draw_into_caller_root(self) -> None:
        chart = xy_chart()
        root = chart.root.__class__("svg")
        out = chart([dataset("a")], root)
        self.assertIs(out, root)
        self.assertEqual(chart.root.children, [])


if __name__ == "__main__":
    unittest.main()
