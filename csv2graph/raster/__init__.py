from .canvas import draw_hline, draw_pixel, draw_rect_outline, draw_vline, fill, new_canvas
from .draw_lines import draw_line, draw_polyline
from .draw_markers import draw_disc, draw_markers
from .draw_text import draw_text, load_font, text_size

__all__ = [
    "draw_disc",
    "draw_hline",
    "draw_line",
    "draw_markers",
    "draw_pixel",
    "draw_polyline",
    "draw_rect_outline",
    "draw_text",
    "draw_vline",
    "fill",
    "load_font",
    "new_canvas",
    "text_size",
]
