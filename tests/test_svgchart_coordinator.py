from __future__ import annotations

import unittest

from svgchart import Chart, PointScale, ScaleState, pinned


def xy_chart() -> Chart:
    return Chart().xvalue(lambda item: item["x"]).yvalue(lambda item: item["y"])


def dataset(sid: str, units: str, *points: tuple[float, float]) -> dict:
    return {"id": sid, "label": sid, "units": units, "list": [{"x": x, "y": y} for x, y in points]}


class ScaleCoordinatorTests(unittest.TestCase):
    def test_shared_unit_domain_is_zero_anchored_union(self) -> None:
        chart = xy_chart()
        chart([dataset("a", "kg", (1, 2), (2, 5)), dataset("b", "kg", (1, 1))])

        kg = chart.yscales()["kg"]
        self.assertEqual((kg.domain_min, kg.domain_max), (0, 5))
        self.assertEqual(kg.sets, 2)
        self.assertEqual(kg.scale.domain(), (0.0, 5.0))

        x = chart.xscale()
        self.assertEqual((x.domain_min, x.domain_max), (1, 2))
        self.assertEqual(x.scale.domain(), (1.0, 2.0))
        self.assertEqual(x.scale.range(), (0.0, chart.metrics().gwidth))

    def test_vertical_domain_covers_every_value(self) -> None:
        chart = xy_chart()
        data = [dataset("a", "m", (0, -3.2), (1, 7.9)), dataset("b", "m", (2, 12.4))]
        chart(data)
        lo, hi = chart.yscales()["m"].scale.domain()
        for ds in data:
            for item in ds["list"]:
                self.assertLessEqual(lo, item["y"])
                self.assertGreaterEqual(hi, item["y"])

    def test_pinned_vertical_bounds_are_exact(self) -> None:
        chart = xy_chart().yscales({"kg": pinned(-3, 17)})
        chart([dataset("a", "kg", (1, 2), (2, 50))])
        kg = chart.yscales()["kg"]
        self.assertEqual(kg.scale.domain(), (-3.0, 17.0))
        self.assertEqual((kg.domain_min, kg.domain_max), (-3, 17))
        self.assertEqual(kg.orient, "left")

    def test_pinned_scale_can_opt_into_rounding(self) -> None:
        chart = xy_chart().yscales({"kg": pinned(0, 4.7, nice=True)})
        chart([dataset("a", "kg", (1, 2))])
        self.assertEqual(chart.yscales()["kg"].scale.domain(), (0.0, 5.0))

    def test_pinned_horizontal_is_not_reset(self) -> None:
        chart = xy_chart().xscale(pinned(0, 10))
        chart([dataset("a", "kg", (1, 2), (2, 5))])
        self.assertEqual(chart.xscale().scale.domain(), (0.0, 10.0))
        self.assertFalse(chart.xscale().auto)

    def test_inverted_scale_reverses_domain(self) -> None:
        chart = xy_chart().yscales({"kg": ScaleState(invert=True)})
        chart([dataset("a", "kg", (1, 2), (2, 5))])
        scale = chart.yscales()["kg"].scale
        self.assertEqual(scale.domain(), (5.0, 0.0))
        self.assertAlmostEqual(scale(5), chart.metrics().gheight)

    def test_distinct_units_alternate_orientation(self) -> None:
        chart = xy_chart()
        chart([dataset("a", "kg", (1, 1)), dataset("b", "m", (1, 1)), dataset("c", "s", (1, 1))])
        scales = chart.yscales()
        self.assertEqual([scales[u].orient for u in ("kg", "m", "s")], ["left", "right", "left"])
        self.assertEqual(len({id(scales[u].scale) for u in ("kg", "m", "s")}), 3)

    def test_orientation_survives_later_renders(self) -> None:
        chart = xy_chart()
        chart([dataset("a", "kg", (1, 1)), dataset("b", "m", (1, 1))])
        chart([dataset("b", "m", (1, 1)), dataset("c", "h", (1, 1))])
        scales = chart.yscales()
        self.assertEqual(scales["m"].orient, "right")
        self.assertEqual(scales["kg"].orient, "left")
        self.assertEqual(scales["kg"].sets, 0)
        self.assertEqual(scales["h"].orient, "left")

    def test_empty_items_fold_nothing(self) -> None:
        chart = xy_chart()
        chart([dataset("a", "kg")])
        self.assertEqual(chart.yscales()["kg"].scale.domain(), (0.0, 0.0))
        self.assertEqual(chart.xscale().scale.domain(), (0.0, 1.0))

    def test_auto_domain_recomputed_each_render(self) -> None:
        chart = xy_chart()
        chart([dataset("a", "kg", (1, 2), (9, 80))])
        chart([dataset("a", "kg", (1, 2), (2, 5))])
        kg = chart.yscales()["kg"]
        self.assertEqual((kg.domain_min, kg.domain_max), (0, 5))
        self.assertEqual((chart.xscale().domain_min, chart.xscale().domain_max), (1, 2))

    def test_point_scale_collects_values_in_first_seen_order(self) -> None:
        chart = xy_chart().xscalefn(PointScale)
        chart([dataset("a", "kg", (3, 1), (1, 1)), dataset("b", "kg", (1, 2), (2, 2))])
        x = chart.xscale()
        self.assertEqual(x.points, [3, 1, 2])
        self.assertAlmostEqual(x.scale(1), chart.metrics().gwidth / 2)


if __name__ == "__main__":
    unittest.main()
