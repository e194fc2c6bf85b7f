from __future__ import annotations

from typing import Iterable

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = color
    return canvas


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    """Alpha-composite ``src`` onto ``dst`` with its top-left corner at ``(x0, y0)``."""
    h, w, _ = src.shape
    sx0 = max(0, -x0)
    sy0 = max(0, -y0)
    x0 = max(0, x0)
    y0 = max(0, y0)
    y1 = min(dst.shape[0], y0 + h - sy0)
    x1 = min(dst.shape[1], x0 + w - sx0)
    if y0 >= y1 or x0 >= x1:
        return

    view = dst[y0:y1, x0:x1]
    patch = src[sy0 : sy0 + (y1 - y0), sx0 : sx0 + (x1 - x0)]
    alpha = patch[:, :, 3:4].astype(np.float32) / 255.0
    inv = 1.0 - alpha
    view[:, :, :3] = (patch[:, :, :3] * alpha + view[:, :, :3] * inv).astype(np.uint8)
    view[:, :, 3] = np.maximum(view[:, :, 3], patch[:, :, 3])


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    a = color[3] / 255.0
    inv = 1.0 - a
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, 0:3] = (np.asarray(color[0:3], dtype=np.float32) * a + current * inv).astype(np.uint8)
    dst[y, x, 3] = 255


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    _blend(dst[y, xa : xb + 1], color)


def fill_rect(dst: np.ndarray, x: int, y: int, width: int, height: int, color: RGBA) -> None:
    xa = max(0, x)
    ya = max(0, y)
    xb = min(dst.shape[1], x + width)
    yb = min(dst.shape[0], y + height)
    if xa >= xb or ya >= yb:
        return
    _blend(dst[ya:yb, xa:xb], color)


def fill_polygon(dst: np.ndarray, points: Iterable[tuple[int, int]], color: RGBA) -> None:
    """Even-odd scanline fill."""
    pts = list(points)
    if len(pts) < 3:
        return
    min_y = max(0, min(y for _, y in pts))
    max_y = min(dst.shape[0] - 1, max(y for _, y in pts))
    for y in range(min_y, max_y + 1):
        intersections: list[int] = []
        for (x0, y0), (x1, y1) in zip(pts, pts[1:] + pts[:1]):
            if y0 == y1:
                continue
            if min(y0, y1) <= y < max(y0, y1):
                intersections.append(int(x0 + (y - y0) * (x1 - x0) / (y1 - y0)))
        intersections.sort()
        for xa, xb in zip(intersections[0::2], intersections[1::2]):
            draw_hline(dst, xa, xb, y, color)


def fill_circle(dst: np.ndarray, cx: int, cy: int, radius: int, color: RGBA) -> None:
    r2 = radius * radius
    for dy in range(-radius, radius + 1):
        span = int((r2 - dy * dy) ** 0.5)
        draw_hline(dst, cx - span, cx + span, cy + dy, color)


def _blend(segment: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    inv = 1.0 - a
    rgb = np.asarray(color[0:3], dtype=np.float32)
    segment[..., :3] = (rgb * a + segment[..., :3].astype(np.float32) * inv).astype(np.uint8)
    segment[..., 3] = 255
