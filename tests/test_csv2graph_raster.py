from __future__ import annotations

import threading
import unittest

import numpy as np

from csv2graph.palette import PALETTE, series_color
from csv2graph.raster import (
    draw_disc,
    draw_hline,
    draw_line,
    draw_markers,
    draw_polyline,
    draw_text,
    draw_vline,
    load_font,
    new_canvas,
    text_size,
)


WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)


def _painted(canvas: np.ndarray) -> np.ndarray:
    return np.any(canvas[:, :, :3] != 255, axis=2)


class CanvasTests(unittest.TestCase):
    def test_new_canvas_is_filled(self) -> None:
        canvas = new_canvas(4, 3, color=(1, 2, 3, 255))
        self.assertEqual(canvas.shape, (3, 4, 4))
        self.assertEqual(canvas.dtype, np.uint8)
        self.assertTrue(np.all(canvas == np.asarray([1, 2, 3, 255], dtype=np.uint8)))

    def test_lines_clip_outside_canvas(self) -> None:
        canvas = new_canvas(10, 10, color=WHITE)
        draw_hline(canvas, -5, 50, 3, RED)
        draw_vline(canvas, 4, -20, 20, RED)
        draw_hline(canvas, 0, 9, 99, RED)
        draw_vline(canvas, -1, 0, 9, RED)
        self.assertEqual(int(_painted(canvas).sum()), 19)

    def test_translucent_color_blends(self) -> None:
        canvas = new_canvas(2, 1, color=WHITE)
        draw_hline(canvas, 0, 1, 0, (0, 0, 0, 128))
        self.assertTrue(np.all(canvas[0, :, 0] < 255))
        self.assertTrue(np.all(canvas[0, :, 0] > 0))
        self.assertTrue(np.all(canvas[0, :, 3] == 255))


class LineTests(unittest.TestCase):
    def test_diagonal_segment_includes_endpoints(self) -> None:
        canvas = new_canvas(10, 10, color=WHITE)
        draw_line(canvas, 1, 1, 8, 8, RED)
        painted = _painted(canvas)
        self.assertEqual(int(painted.sum()), 8)
        for i in range(1, 9):
            self.assertTrue(painted[i, i])

    def test_segment_is_one_pixel_wide(self) -> None:
        canvas = new_canvas(20, 10, color=WHITE)
        draw_line(canvas, 0, 2, 19, 7, RED)
        painted = _painted(canvas)
        self.assertEqual(painted.sum(axis=0).tolist(), [1] * 20)

    def test_partially_offscreen_segment_is_clipped(self) -> None:
        canvas = new_canvas(10, 10, color=WHITE)
        draw_line(canvas, -5, 5, 15, 5, RED)
        self.assertEqual(int(_painted(canvas).sum()), 10)

    def test_polyline_joins_points(self) -> None:
        canvas = new_canvas(10, 10, color=WHITE)
        draw_polyline(canvas, np.asarray([0, 9, 9]), np.asarray([0, 0, 9]), RED)
        painted = _painted(canvas)
        self.assertTrue(painted[0, :].all())
        self.assertTrue(painted[:, 9].all())

    def test_single_point_polyline_draws_nothing(self) -> None:
        canvas = new_canvas(5, 5, color=WHITE)
        draw_polyline(canvas, np.asarray([2]), np.asarray([2]), RED)
        self.assertFalse(_painted(canvas).any())


class MarkerTests(unittest.TestCase):
    def test_disc_is_round_and_filled(self) -> None:
        canvas = new_canvas(20, 20, color=WHITE)
        draw_disc(canvas, 10, 10, 3, RED)
        painted = _painted(canvas)
        self.assertTrue(painted[10, 10])
        self.assertTrue(painted[10, 13])
        self.assertTrue(painted[7, 10])
        self.assertFalse(painted[7, 7])
        self.assertFalse(painted[10, 14])
        self.assertEqual(int(painted.sum()), 29)

    def test_disc_at_corner_is_clipped(self) -> None:
        canvas = new_canvas(10, 10, color=WHITE)
        draw_disc(canvas, 0, 0, 3, RED)
        draw_disc(canvas, 100, 100, 3, RED)
        self.assertTrue(_painted(canvas)[0, 0])
        self.assertEqual(int(_painted(canvas).sum()), 11)

    def test_markers_stamp_every_point(self) -> None:
        canvas = new_canvas(30, 10, color=WHITE)
        draw_markers(canvas, np.asarray([5, 15, 25]), np.asarray([5, 5, 5]), RED, radius=1)
        painted = _painted(canvas)
        self.assertTrue(painted[5, 5] and painted[5, 15] and painted[5, 25])
        self.assertEqual(int(painted.sum()), 15)


class TextTests(unittest.TestCase):
    def test_text_size_grows_with_length_and_font(self) -> None:
        w1, h1 = text_size("12", font_size_px=12.0)
        w2, _ = text_size("12345", font_size_px=12.0)
        w3, h3 = text_size("12", font_size_px=24.0)
        self.assertGreater(w1, 0)
        self.assertGreater(w2, w1)
        self.assertGreater(w3, w1)
        self.assertGreater(h3, h1)

    def test_rotated_text_size_swaps_dimensions(self) -> None:
        w0, h0 = text_size("Values", font_size_px=14.0)
        self.assertEqual(text_size("Values", font_size_px=14.0, rotate_deg=90), (h0, w0))
        with self.assertRaises(ValueError):
            text_size("Values", rotate_deg=45)

    def test_draw_text_stays_inside_measured_box(self) -> None:
        canvas = new_canvas(120, 40, color=WHITE)
        w, h = text_size("Hello", font_size_px=16.0)
        draw_text(canvas, 10, 5, "Hello", (0, 0, 0, 255), font_size_px=16.0)
        ys, xs = np.nonzero(_painted(canvas))
        self.assertGreater(xs.size, 0)
        self.assertGreaterEqual(int(xs.min()), 10)
        self.assertLess(int(xs.max()), 10 + w)
        self.assertGreaterEqual(int(ys.min()), 5)
        self.assertLess(int(ys.max()), 5 + h)

    def test_draw_text_offscreen_is_noop(self) -> None:
        canvas = new_canvas(20, 20, color=WHITE)
        draw_text(canvas, 500, 500, "far", (0, 0, 0, 255))
        draw_text(canvas, 0, 0, "", (0, 0, 0, 255))
        self.assertFalse(_painted(canvas).any())

    def test_font_is_loaded_once_across_threads(self) -> None:
        seen = []

        def worker() -> None:
            seen.append(load_font(17))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len({id(font) for font in seen}), 1)
        self.assertIs(load_font(17), seen[0])


class PaletteTests(unittest.TestCase):
    def test_colors_are_distinct_and_opaque(self) -> None:
        self.assertEqual(len(set(PALETTE)), len(PALETTE))
        self.assertTrue(all(c[3] == 255 for c in PALETTE))

    def test_assignment_wraps_modulo_palette(self) -> None:
        self.assertEqual(series_color(0), PALETTE[0])
        self.assertEqual(series_color(len(PALETTE) + 2), PALETTE[2])


if __name__ == "__main__":
    unittest.main()
