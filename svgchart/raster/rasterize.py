"""Rasterize a chart scene graph into an RGBA pixel buffer.

Only the subset of SVG the chart kinds emit is understood: ``rect``,
``line``, ``circle``, ``path`` (absolute ``M/L/H/V/Z``) and ``text`` inside
``g`` groups positioned with ``translate`` transforms, plus rectangular
``clipPath`` references. ``defs`` and ``title`` elements are not painted.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Optional

import numpy as np

from svgchart.raster.canvas import RGBA, blit, fill_circle, fill_polygon, fill_rect, new_canvas
from svgchart.raster.draw_lines import draw_polyline
from svgchart.raster.draw_text import DEFAULT_FONT_SIZE_PX, draw_text, text_size
from svgchart.scene import Node
from svgchart.shapes import parse_path, parse_translate


LOGGER = logging.getLogger(__name__)

NAMED_COLORS: dict[str, RGBA] = {
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
    "red": (255, 0, 0, 255),
    "green": (0, 128, 0, 255),
    "blue": (0, 0, 255, 255),
    "gray": (128, 128, 128, 255),
    "grey": (128, 128, 128, 255),
}

SKIPPED_TAGS = frozenset({"defs", "title", "clipPath"})
BLACK: RGBA = (0, 0, 0, 255)


@dataclass(frozen=True)
class _Clip:
    x0: int
    y0: int
    x1: int
    y1: int

    def intersect(self, other: "_Clip | None") -> "_Clip":
        if other is None:
            return self
        return _Clip(max(self.x0, other.x0), max(self.y0, other.y0), min(self.x1, other.x1), min(self.y1, other.y1))


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    if not value:
        return None
    value = str(value).strip().lower()
    if value in ("none", "transparent"):
        return None
    if value in NAMED_COLORS:
        return NAMED_COLORS[value]
    if value.startswith("#"):
        hex_value = value[1:]
        if len(hex_value) in (3, 4):
            channels = [int(c * 2, 16) for c in hex_value]
        elif len(hex_value) in (6, 8):
            channels = [int(hex_value[i : i + 2], 16) for i in range(0, len(hex_value), 2)]
        else:
            return None
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    if value.startswith("rgb"):
        numbers = value[value.find("(") + 1 : value.find(")")].split(",")
        if len(numbers) >= 3:
            try:
                return (int(numbers[0]), int(numbers[1]), int(numbers[2]), 255)
            except ValueError:
                return None
    LOGGER.debug("unsupported colour %r", value)
    return None


def rasterize(root: Node, width: int | None = None, height: int | None = None, background: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    """Paint ``root`` into a new ``(height, width, 4)`` uint8 array."""
    w = int(width if width is not None else float(root.attr("width") or 0))
    h = int(height if height is not None else float(root.attr("height") or 0))
    if w <= 0 or h <= 0:
        raise ValueError("rasterize requires a positive width and height")
    canvas = new_canvas(w, h, background)
    clips = _collect_clips(root)
    _paint(canvas, root, 0.0, 0.0, clips)
    return canvas


def _collect_clips(root: Node) -> dict[str, tuple[float, float, float, float]]:
    clips: dict[str, tuple[float, float, float, float]] = {}
    for node in root.find_all("clipPath"):
        rect = node.select("rect")
        clip_id = node.attr("id")
        if rect is None or clip_id is None:
            continue
        clips[str(clip_id)] = (
            _num(rect, "x"),
            _num(rect, "y"),
            _num(rect, "width"),
            _num(rect, "height"),
        )
    return clips


def _paint(dst: np.ndarray, node: Node, ox: float, oy: float, clips: dict[str, tuple[float, float, float, float]]) -> None:
    if node.tag in SKIPPED_TAGS:
        return
    tx, ty = parse_translate(node.attr("transform"))
    ox += tx
    oy += ty

    clip = _clip_for(node, ox, oy, clips)
    if clip is not None:
        clip = clip.intersect(_Clip(0, 0, dst.shape[1], dst.shape[0]))
        if clip.x0 >= clip.x1 or clip.y0 >= clip.y1:
            return
        layer = new_canvas(dst.shape[1], dst.shape[0], (0, 0, 0, 0))
        _paint_node(layer, node, ox, oy, clips)
        blit(dst, layer[clip.y0 : clip.y1, clip.x0 : clip.x1], clip.x0, clip.y0)
        return
    _paint_node(dst, node, ox, oy, clips)


def _paint_node(dst: np.ndarray, node: Node, ox: float, oy: float, clips: dict[str, tuple[float, float, float, float]]) -> None:
    painter = _PAINTERS.get(node.tag)
    if painter is not None:
        painter(dst, node, ox, oy)
    for child in node.children:
        _paint(dst, child, ox, oy, clips)


def _clip_for(node: Node, ox: float, oy: float, clips: dict[str, tuple[float, float, float, float]]) -> _Clip | None:
    ref = node.attr("clip-path")
    if not ref:
        return None
    ref = str(ref)
    clip_id = ref[ref.find("#") + 1 : ref.rfind(")")] if ref.startswith("url(") else ref
    rect = clips.get(clip_id)
    if rect is None:
        LOGGER.debug("unknown clip path %r", ref)
        return None
    x, y, w, h = rect
    x0 = int(round(ox + x))
    y0 = int(round(oy + y))
    return _Clip(x0, y0, x0 + int(round(w)), y0 + int(round(h)))


def _num(node: Node, name: str, default: float = 0.0) -> float:
    value = node.attr(name)
    if value is None:
        return default
    return float(value)


def _fill(node: Node) -> RGBA | None:
    value = node.attr("fill")
    if value is None:
        return BLACK
    return parse_color(value)


def _paint_rect(dst: np.ndarray, node: Node, ox: float, oy: float) -> None:
    x = int(round(ox + _num(node, "x")))
    y = int(round(oy + _num(node, "y")))
    w = int(round(_num(node, "width")))
    h = int(round(_num(node, "height")))
    fill = _fill(node)
    if fill is not None:
        fill_rect(dst, x, y, w, h, fill)
    stroke = parse_color(node.attr("stroke"))
    if stroke is not None:
        draw_polyline(dst, [(x, y), (x + w, y), (x + w, y + h), (x, y + h), (x, y)], stroke)


def _paint_line(dst: np.ndarray, node: Node, ox: float, oy: float) -> None:
    stroke = parse_color(node.attr("stroke"))
    if stroke is None:
        return
    draw_polyline(
        dst,
        [
            (ox + _num(node, "x1"), oy + _num(node, "y1")),
            (ox + _num(node, "x2"), oy + _num(node, "y2")),
        ],
        stroke,
    )


def _paint_circle(dst: np.ndarray, node: Node, ox: float, oy: float) -> None:
    cx = int(round(ox + _num(node, "cx")))
    cy = int(round(oy + _num(node, "cy")))
    r = int(round(_num(node, "r")))
    fill = _fill(node)
    if fill is not None:
        fill_circle(dst, cx, cy, r, fill)
    stroke = parse_color(node.attr("stroke"))
    if stroke is not None and r > 0:
        steps = max(8, 4 * r)
        angles = np.linspace(0.0, 2.0 * np.pi, steps + 1)
        draw_polyline(dst, list(zip((cx + r * np.cos(angles)).tolist(), (cy + r * np.sin(angles)).tolist())), stroke)


def _paint_path(dst: np.ndarray, node: Node, ox: float, oy: float) -> None:
    fill = _fill(node)
    stroke = parse_color(node.attr("stroke"))
    for points, closed in parse_path(node.attr("d")):
        shifted = [(ox + x, oy + y) for x, y in points]
        if fill is not None:
            fill_polygon(dst, [(int(round(x)), int(round(y))) for x, y in shifted], fill)
        if stroke is not None:
            draw_polyline(dst, shifted + shifted[:1] if closed else shifted, stroke)


def _paint_text(dst: np.ndarray, node: Node, ox: float, oy: float) -> None:
    if not node.text:
        return
    color = _fill(node)
    if color is None:
        return
    w, h = text_size(node.text)
    x = ox + _num(node, "x")
    # The baseline sits at y; shift by the em offset in dy.
    y = oy + _num(node, "y") - h + _em(node.attr("dy")) * DEFAULT_FONT_SIZE_PX
    anchor = node.attr("text-anchor")
    if anchor == "middle":
        x -= w / 2
    elif anchor == "end":
        x -= w
    draw_text(dst, int(round(x)), int(round(y)), node.text, color)


def _em(value: Any) -> float:
    if value is None:
        return 0.0
    text = str(value).strip()
    if text.endswith("em"):
        text = text[:-2]
    try:
        return float(text)
    except ValueError:
        return 0.0


_PAINTERS = {
    "rect": _paint_rect,
    "line": _paint_line,
    "circle": _paint_circle,
    "path": _paint_path,
    "text": _paint_text,
}
