from __future__ import annotations

import re
from typing import Iterable

from svgchart.errors import ChartDataError
from svgchart.scene import format_number


Point = tuple[float, float]

_TRANSLATE_RE = re.compile(r"translate\(\s*([-+0-9.eE]+)(?:[\s,]+([-+0-9.eE]+))?\s*\)")
_PATH_TOKEN_RE = re.compile(r"[MLHVZmlhvz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def translate(x: float, y: float, offset: bool = False) -> str:
    if offset:
        x -= 0.5
        y -= 0.5
    return f"translate({format_number(float(x))},{format_number(float(y))})"


def parse_translate(value: str | None) -> Point:
    if not value:
        return (0.0, 0.0)
    match = _TRANSLATE_RE.search(value)
    if match is None:
        return (0.0, 0.0)
    x = float(match.group(1))
    y = float(match.group(2)) if match.group(2) is not None else 0.0
    return (x, y)


def line_path(points: Iterable[Point]) -> str:
    parts: list[str] = []
    for i, (x, y) in enumerate(points):
        parts.append(f"{'M' if i == 0 else 'L'}{format_number(float(x))},{format_number(float(y))}")
    return "".join(parts)


def closed_path(points: Iterable[Point]) -> str:
    path = line_path(points)
    return path + "Z" if path else path


def parse_path(d: str | None) -> list[tuple[list[Point], bool]]:
    """Split absolute ``M/L/H/V/Z`` path data into ``(points, closed)`` subpaths."""
    if not d:
        return []
    tokens = _PATH_TOKEN_RE.findall(d.replace(",", " "))
    subpaths: list[tuple[list[Point], bool]] = []
    current: list[Point] = []
    cmd = ""
    x = y = 0.0
    i = 0

    def _number() -> float:
        nonlocal i
        if i >= len(tokens) or tokens[i].isalpha():
            raise ChartDataError(f"malformed path data: {d!r}")
        value = float(tokens[i])
        i += 1
        return value

    while i < len(tokens):
        tok = tokens[i]
        if tok.isalpha():
            if tok.islower():
                raise ChartDataError(f"relative path commands are not supported: {tok!r}")
            cmd = tok
            i += 1
            if cmd == "Z":
                if current:
                    subpaths.append((current, True))
                    x, y = current[0]
                current = []
            continue
        if cmd == "M":
            if current:
                subpaths.append((current, False))
            x, y = _number(), _number()
            current = [(x, y)]
            cmd = "L"
        elif cmd == "L":
            x, y = _number(), _number()
            current.append((x, y))
        elif cmd == "H":
            x = _number()
            current.append((x, y))
        elif cmd == "V":
            y = _number()
            current.append((x, y))
        else:
            raise ChartDataError(f"malformed path data: {d!r}")
    if current:
        subpaths.append((current, False))
    return subpaths

