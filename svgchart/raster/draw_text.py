from __future__ import annotations

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from svgchart.raster.canvas import RGBA


DEFAULT_FONT_SIZE_PX = 10.0

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(dst: np.ndarray, x: int, y: int, text: str, color: RGBA, *, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> None:
    """Blend ``text`` with its bounding box's top-left corner at ``(x, y)``."""
    if not text:
        return
    mask = _glyph_mask(text, _font(font_size_px))
    h, w = mask.shape
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + w), min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    alpha = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0 * (color[3] / 255.0)
    patch = dst[y0:y1, x0:x1]
    rgb = np.asarray(color[:3], dtype=np.float32)
    patch[:, :, :3] = (rgb * alpha[:, :, None] + patch[:, :, :3].astype(np.float32) * (1.0 - alpha[:, :, None])).astype(np.uint8)
    patch[:, :, 3] = np.maximum(patch[:, :, 3], (alpha * 255.0).astype(np.uint8))


def text_size(text: str, *, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> tuple[int, int]:
    font = _font(font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


@lru_cache(maxsize=16)
def _font(font_size_px: float) -> Font:
    # Pillow ships a scalable default face; no system font lookup needed.
    return ImageFont.load_default(size=max(1, int(round(font_size_px))))


@lru_cache(maxsize=128)
def _glyph_mask(text: str, font: Font) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)
