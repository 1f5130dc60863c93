from .canvas import blend_mask, draw_hline, draw_vline, new_canvas
from .draw_text import draw_text, load_font, text_size
from .shapes import draw_discs, draw_polyline, fill_polygon, polyline_prefix

__all__ = [
    "blend_mask",
    "draw_discs",
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_polygon",
    "load_font",
    "new_canvas",
    "polyline_prefix",
    "text_size",
]
