from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from svgchart.errors import ChartDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


_MISSING: Any = object()


def record_field(record: Any, name: str, default: Any = _MISSING) -> Any:
    """Read ``name`` from a mapping key or an attribute of ``record``."""
    if isinstance(record, Mapping):
        if name in record:
            return record[name]
    elif hasattr(record, name):
        return getattr(record, name)
    if default is _MISSING:
        raise KeyError(name)
    return default


def as_records(value: Any) -> list[Any]:
    """Normalize an item container into a list of records."""
    if value is None:
        return []
    if pd is not None and isinstance(value, pd.DataFrame):
        return value.to_dict("records")
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ChartDataError("item arrays must be 1-D")
        names = value.dtype.names
        if names:
            return [{name: row[name].item() for name in names} for row in value]
        return value.tolist()
    if isinstance(value, Mapping):
        raise ChartDataError("items must be a sequence of records, not a mapping")
    if isinstance(value, (str, bytes, bytearray)):
        raise ChartDataError(f"unsupported item container: {type(value)!r}")
    if isinstance(value, Sequence):
        return list(value)
    try:
        return list(value)
    except TypeError as exc:
        raise ChartDataError(f"unsupported item container: {type(value)!r}") from exc
