from __future__ import annotations

from typing import Sequence

import numpy as np

from svgchart.raster.canvas import RGBA


def draw_polyline(dst: np.ndarray, points: Sequence[tuple[float, float]], color: RGBA) -> None:
    """Stroke a one-pixel polyline through ``points``."""
    if not points:
        return
    xs: list[np.ndarray] = []
    ys: list[np.ndarray] = []
    pts = list(points) if len(points) > 1 else list(points) * 2
    for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
        n = int(max(abs(x1 - x0), abs(y1 - y0))) + 2
        xs.append(np.rint(np.linspace(x0, x1, n)).astype(np.int64))
        ys.append(np.rint(np.linspace(y0, y1, n)).astype(np.int64))
    _plot(dst, np.concatenate(xs), np.concatenate(ys), color)


def _plot(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA) -> None:
    inside = (xs >= 0) & (xs < dst.shape[1]) & (ys >= 0) & (ys < dst.shape[0])
    if not np.any(inside):
        return
    # Deduplicate so translucent strokes blend once per pixel.
    flat = np.unique(ys[inside] * dst.shape[1] + xs[inside])
    rows, cols = np.divmod(flat, dst.shape[1])
    a = color[3] / 255.0
    rgb = np.asarray(color[:3], dtype=np.float32)
    current = dst[rows, cols, :3].astype(np.float32)
    dst[rows, cols, :3] = (rgb * a + current * (1.0 - a)).astype(np.uint8)
    dst[rows, cols, 3] = 255
