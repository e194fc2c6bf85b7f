from .canvas import blit, draw_hline, fill_circle, fill_polygon, fill_rect, new_canvas
from .draw_lines import draw_polyline
from .draw_text import draw_text, text_size
from .rasterize import parse_color, rasterize

__all__ = [
    "blit",
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "fill_circle",
    "fill_polygon",
    "fill_rect",
    "new_canvas",
    "parse_color",
    "rasterize",
    "text_size",
]
