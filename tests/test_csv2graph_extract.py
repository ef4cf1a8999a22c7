from __future__ import annotations

import math
import unittest

from csv2graph.errors import CellParseError, NoDataToPlotError, NoSeriesSelectedError, TabularParseError, UnknownColumnError
from csv2graph.extract import ROW_NUMBER_LABEL, extract_series
from csv2graph.tabular import read_table


HEADER = ["t", "a", "b"]
ROWS = [["0", "1", "2"], ["1", "3", "4"], ["2", "5", "6"]]


class ExtractSeriesTests(unittest.TestCase):
    def test_xdata_uses_first_column(self) -> None:
        out = extract_series(HEADER, ROWS, ["a", "b"], xdata=True)
        self.assertEqual(len(out.series), 2)
        self.assertEqual([len(s) for s in out.series], [3, 3])
        self.assertEqual(out.series[0].name, "a")
        self.assertEqual(out.series[0].points(), [(0.0, 1.0), (1.0, 3.0), (2.0, 5.0)])
        self.assertEqual(out.series[1].points(), [(0.0, 2.0), (1.0, 4.0), (2.0, 6.0)])
        self.assertEqual(out.x_label, "t")

    def test_row_ordinal_is_x_without_xdata(self) -> None:
        out = extract_series(HEADER, ROWS, ["t", "b"], xdata=False)
        self.assertEqual(out.series[0].points(), [(1.0, 0.0), (2.0, 1.0), (3.0, 2.0)])
        self.assertEqual(out.x_label, ROW_NUMBER_LABEL)

    def test_first_column_is_dropped_from_y_with_xdata(self) -> None:
        out = extract_series(HEADER, ROWS, ["t", "b"], xdata=True)
        self.assertEqual([s.name for s in out.series], ["b"])

    def test_only_first_column_with_xdata_selects_nothing(self) -> None:
        with self.assertRaises(NoSeriesSelectedError):
            extract_series(HEADER, ROWS, ["t"], xdata=True)

    def test_unknown_column(self) -> None:
        with self.assertRaises(UnknownColumnError) as ctx:
            extract_series(HEADER, ROWS, ["a", "missing"], xdata=True)
        self.assertEqual(ctx.exception.name, "missing")
        self.assertIn("missing", str(ctx.exception))

    def test_skip_keeps_rows_at_raw_index_multiples(self) -> None:
        rows = [[str(i), str(i * 10)] for i in range(5)]
        out = extract_series(["x", "y"], rows, ["y"], xdata=True, skip=2)
        self.assertEqual(out.series[0].points(), [(0.0, 0.0), (2.0, 20.0), (4.0, 40.0)])

    def test_skip_row_ordinals_follow_raw_position(self) -> None:
        rows = [[str(i)] for i in range(5)]
        out = extract_series(["y"], rows, ["y"], xdata=False, skip=2)
        self.assertEqual(out.series[0].x.tolist(), [1.0, 3.0, 5.0])

    def test_max_range_skips_whole_row(self) -> None:
        rows = [["0", "1", "2"], ["5", "3", "4"], ["1", "5", "6"]]
        out = extract_series(HEADER, rows, ["a", "b"], xdata=True, max_range=2.0)
        self.assertEqual(out.series[0].x.tolist(), [0.0, 1.0])
        self.assertEqual(out.series[1].x.tolist(), [0.0, 1.0])
        self.assertEqual(out.bounds.xmax, 1.0)
        self.assertEqual(out.bounds.ymax, 6.0)

    def test_max_range_below_all_data_means_no_data(self) -> None:
        with self.assertRaises(NoDataToPlotError):
            extract_series(HEADER, ROWS, ["a"], xdata=True, max_range=-1.0)

    def test_no_rows_means_no_data(self) -> None:
        with self.assertRaises(NoDataToPlotError):
            extract_series(HEADER, [], ["a"], xdata=True)

    def test_bounds_cover_retained_points(self) -> None:
        out = extract_series(HEADER, ROWS, ["a", "b"], xdata=True)
        b = out.bounds
        self.assertEqual((b.xmin, b.xmax, b.ymin, b.ymax), (0.0, 2.0, 1.0, 6.0))

    def test_malformed_cell_reports_row_and_column(self) -> None:
        rows = [["0", "1", "2"], ["1", "oops", "4"]]
        with self.assertRaises(CellParseError) as ctx:
            extract_series(HEADER, rows, ["a", "b"], xdata=True)
        self.assertEqual(ctx.exception.row, 2)
        self.assertEqual(ctx.exception.column, "a")
        self.assertEqual(ctx.exception.raw, "oops")

    def test_missing_cell_is_a_parse_error(self) -> None:
        rows = [["0", "1"]]
        with self.assertRaises(CellParseError) as ctx:
            extract_series(HEADER, rows, ["b"], xdata=True)
        self.assertIsNone(ctx.exception.raw)

    def test_non_finite_cell_is_a_parse_error(self) -> None:
        rows = [["0", "nan", "1"]]
        with self.assertRaises(CellParseError):
            extract_series(HEADER, rows, ["a"], xdata=True)

    def test_cells_are_trimmed(self) -> None:
        out = extract_series(HEADER, [[" 1 ", " 2.5", "3 "]], ["a", "b"], xdata=True)
        self.assertEqual(out.series[0].points(), [(1.0, 2.5)])

    def test_bad_x_cell_fails_even_if_y_is_valid(self) -> None:
        with self.assertRaises(CellParseError) as ctx:
            extract_series(HEADER, [["x", "1", "2"]], ["a"], xdata=True)
        self.assertEqual(ctx.exception.column, "t")

    def test_single_row_bounds_are_degenerate(self) -> None:
        out = extract_series(HEADER, ROWS[:1], ["a"], xdata=True)
        self.assertTrue(math.isfinite(out.bounds.xmin))
        self.assertEqual(out.bounds.xmin, out.bounds.xmax)


class ReadTableTests(unittest.TestCase):
    def test_header_and_rows(self) -> None:
        table = read_table("t,a\n0,1\n1,2\n")
        self.assertEqual(table.header, ("t", "a"))
        self.assertEqual(table.rows, (("0", "1"), ("1", "2")))

    def test_blank_lines_are_ignored(self) -> None:
        table = read_table("t,a\n\n0,1\n\n")
        self.assertEqual(len(table.rows), 1)

    def test_empty_input_has_no_header(self) -> None:
        with self.assertRaises(TabularParseError):
            read_table("")


if __name__ == "__main__":
    unittest.main()
