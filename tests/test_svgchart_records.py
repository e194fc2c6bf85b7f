from __future__ import annotations

from types import SimpleNamespace
import unittest

import numpy as np

from svgchart import ChartDataError, scatter
from svgchart.adapters import as_records, record_field
from svgchart.adapters import records as records_module


class RecordAdapterTests(unittest.TestCase):
    def test_record_field_reads_keys_and_attributes(self) -> None:
        self.assertEqual(record_field({"x": 1}, "x"), 1)
        self.assertEqual(record_field(SimpleNamespace(x=2), "x"), 2)
        self.assertIsNone(record_field({}, "x", None))
        with self.assertRaises(KeyError):
            record_field({}, "x")

    def test_as_records_normalizes_containers(self) -> None:
        self.assertEqual(as_records(None), [])
        self.assertEqual(as_records(({"x": 1},)), [{"x": 1}])
        self.assertEqual(as_records(iter([1, 2])), [1, 2])

    def test_structured_array_becomes_row_dicts(self) -> None:
        arr = np.array([(1.0, 2.0), (3.0, 4.0)], dtype=[("x", "f8"), ("y", "f8")])
        self.assertEqual(as_records(arr), [{"x": 1.0, "y": 2.0}, {"x": 3.0, "y": 4.0}])

    def test_rejects_unsupported_containers(self) -> None:
        for value in ({"x": 1}, "xy", np.zeros((2, 2))):
            with self.assertRaises(ChartDataError):
                as_records(value)

    @unittest.skipIf(records_module.pd is None, "pandas not installed")
    def test_dataframe_items(self) -> None:
        frame = records_module.pd.DataFrame({"x": [1, 2, 3], "y": [4, 5, 6]})
        chart = scatter()
        chart([{"id": "df", "units": "kg", "list": frame}])
        self.assertEqual(chart.yscales()["kg"].domain_max, 6)
        self.assertEqual(len(chart.root.find_all("g", "data")), 3 + 1)

    def test_attribute_records_render(self) -> None:
        chart = scatter()
        items = [SimpleNamespace(x=1, y=2), SimpleNamespace(x=2, y=3)]
        chart([SimpleNamespace(id="obj", label="objects", units="kg", list=items)])
        self.assertEqual(chart.yscales()["kg"].domain_max, 3)
        self.assertEqual(chart.xscale().domain_min, 1)


if __name__ == "__main__":
    unittest.main()
