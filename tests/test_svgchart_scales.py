from __future__ import annotations

import datetime as dt
import unittest

from svgchart import ChartDataError, LinearScale, Node, PointScale, TimeScale
from svgchart.axis import Axis
from svgchart.timescale import INTERVALS, multi_format, tick_interval, to_datetime


class LinearScaleTests(unittest.TestCase):
    def test_maps_and_inverts(self) -> None:
        scale = LinearScale().domain((0, 5)).range((0, 100))
        self.assertAlmostEqual(scale(2.5), 50.0)
        self.assertAlmostEqual(scale.invert(50.0), 2.5)

    def test_nice_rounds_outward(self) -> None:
        scale = LinearScale().domain((0, 4.7)).nice()
        self.assertEqual(scale.domain(), (0.0, 5.0))

    def test_nice_preserves_descending_domain(self) -> None:
        scale = LinearScale().domain((10, 0.3)).nice()
        self.assertEqual(scale.domain(), (10.0, 0.0))

    def test_nice_leaves_degenerate_domain(self) -> None:
        scale = LinearScale().domain((0, 0)).nice()
        self.assertEqual(scale.domain(), (0.0, 0.0))
        self.assertEqual(scale(0), 0.0)

    def test_ticks_cover_domain(self) -> None:
        scale = LinearScale().domain((0, 5))
        ticks = scale.ticks(10)
        self.assertEqual(len(ticks), 11)
        self.assertEqual(ticks[0], 0.0)
        self.assertEqual(ticks[-1], 5.0)

    def test_tick_format_uses_step_decimals(self) -> None:
        fmt = LinearScale().domain((0, 5)).tick_format(10)
        self.assertEqual(fmt(1.0), "1")
        self.assertEqual(fmt(2.5), "2.5")


class PointScaleTests(unittest.TestCase):
    def test_range_points_with_padding(self) -> None:
        scale = PointScale().domain(["a", "b", "c", "b"]).range_points((0, 100), 1.0)
        self.assertEqual(scale.domain(), ["a", "b", "c"])
        self.assertAlmostEqual(scale("a"), 100 / 6)
        self.assertAlmostEqual(scale("b"), 50.0)
        self.assertAlmostEqual(scale("c"), 500 / 6)

    def test_single_value_sits_in_middle(self) -> None:
        scale = PointScale().domain(["only"]).range_points((0, 100), 1.0)
        self.assertAlmostEqual(scale("only"), 50.0)

    def test_unknown_value_raises(self) -> None:
        scale = PointScale().domain(["a"]).range_points((0, 10))
        with self.assertRaises(ChartDataError):
            scale("z")


class TimeScaleTests(unittest.TestCase):
    def test_nice_to_year_boundaries(self) -> None:
        scale = TimeScale().domain((dt.datetime(2001, 3, 5), dt.datetime(2003, 7, 1))).nice("year")
        self.assertEqual(scale.domain(), (dt.datetime(2001, 1, 1), dt.datetime(2004, 1, 1)))

    def test_nice_keeps_exact_boundaries(self) -> None:
        scale = TimeScale().domain((dt.date(2001, 1, 1), dt.date(2002, 1, 1))).nice("year")
        self.assertEqual(scale.domain(), (dt.datetime(2001, 1, 1), dt.datetime(2002, 1, 1)))

    def test_maps_linearly_in_time(self) -> None:
        scale = TimeScale().domain((dt.datetime(2000, 1, 1), dt.datetime(2000, 1, 11))).range((0, 100))
        self.assertAlmostEqual(scale(dt.datetime(2000, 1, 6)), 50.0)
        self.assertEqual(scale.invert(50.0), dt.datetime(2000, 1, 6))

    def test_multi_year_ticks_are_quarterly(self) -> None:
        start, stop = dt.datetime(2001, 1, 1), dt.datetime(2004, 1, 1)
        interval, step = tick_interval(start, stop, 10)
        self.assertEqual((interval, step), (INTERVALS["month"], 3))
        ticks = TimeScale().domain((start, stop)).ticks(10)
        self.assertEqual(ticks[0], start)
        self.assertEqual(ticks[-1], stop)
        self.assertTrue(all(t.day == 1 and t.month in (1, 4, 7, 10) for t in ticks))

    def test_month_offset_wraps_year(self) -> None:
        self.assertEqual(INTERVALS["month"].offset(dt.datetime(2001, 11, 1), 3), dt.datetime(2002, 2, 1))

    def test_multi_format_picks_coarsest_field(self) -> None:
        self.assertEqual(multi_format(dt.datetime(2001, 1, 1)), "2001")
        self.assertEqual(multi_format(dt.datetime(2001, 4, 1)), "April")
        self.assertEqual(multi_format(dt.datetime(2001, 4, 9)), "Apr 09")

    def test_aware_datetimes_convert_to_utc(self) -> None:
        aware = dt.datetime(2000, 1, 1, 5, tzinfo=dt.timezone(dt.timedelta(hours=5)))
        self.assertEqual(to_datetime(aware), dt.datetime(2000, 1, 1))


class AxisTests(unittest.TestCase):
    def test_left_axis_ticks_and_domain_path(self) -> None:
        scale = LinearScale().domain((0, 5)).range((100, 0))
        group = Node("g")
        Axis(scale, orient="left").tick_size(4, 2, 1).render(group)

        ticks = group.select_all("g", "tick")
        self.assertEqual(len(ticks), 11)
        top = ticks[-1]
        self.assertEqual(top.attr("transform"), "translate(0,0)")
        self.assertEqual(top.select("text").text, "5")
        self.assertEqual(top.select("line").attr("x2"), -4.0)
        self.assertEqual(group.select("path", "domain").attr("d"), "M-1,0H0V100H-1")

    def test_rerender_keeps_tick_nodes(self) -> None:
        scale = LinearScale().domain((0, 5)).range((0, 100))
        group = Node("g")
        axis = Axis(scale, orient="bottom")
        axis.render(group)
        before = [id(node) for node in group.select_all("g", "tick")]
        axis.render(group)
        self.assertEqual([id(node) for node in group.select_all("g", "tick")], before)

    def test_rejects_unknown_orient(self) -> None:
        with self.assertRaises(ValueError):
            Axis(LinearScale(), orient="middle")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
