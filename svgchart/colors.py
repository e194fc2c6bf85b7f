from __future__ import annotations

from typing import Hashable


CATEGORY20: tuple[str, ...] = (
    "#1f77b4",
    "#aec7e8",
    "#ff7f0e",
    "#ffbb78",
    "#2ca02c",
    "#98df8a",
    "#d62728",
    "#ff9896",
    "#9467bd",
    "#c5b0d5",
    "#8c564b",
    "#c49c94",
    "#e377c2",
    "#f7b6d2",
    "#7f7f7f",
    "#c7c7c7",
    "#bcbd22",
    "#dbdb8d",
    "#17becf",
    "#9edae5",
)


class CategoryColors:
    """Ordinal colour scale: each new key takes the next palette entry, cycling."""

    def __init__(self, palette: tuple[str, ...] = CATEGORY20) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self.palette = palette
        self._assigned: dict[Hashable, str] = {}

    def __call__(self, key: Hashable) -> str:
        color = self._assigned.get(key)
        if color is None:
            color = self.palette[len(self._assigned) % len(self.palette)]
            self._assigned[key] = color
        return color

    def domain(self) -> list[Hashable]:
        return list(self._assigned)

    def copy(self) -> "CategoryColors":
        out = CategoryColors(self.palette)
        out._assigned = dict(self._assigned)
        return out
