from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
import logging
import math
from typing import Any

import numpy as np

from chartgeom.errors import ChartDataError
from chartgeom.model import BarDataSet, BarFraction, DataPoint


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)


def normalize_points(y: Any = None, *, x: Any = None) -> tuple[DataPoint, ...]:
    """Coerce y (and optional x) values into ordered data points.

    Accepts sequences, 1-D numpy arrays and pandas Series. Missing x defaults
    to the sample index. Pairs with a non-finite member are dropped. The x
    ordering is left as given.
    """
    if y is None:
        raise ChartDataError("y input is required")
    y_arr = _as_float_array(y, label="y")
    x_arr = np.arange(y_arr.size, dtype=np.float64) if x is None else _as_float_array(x, label="x")
    if x_arr.shape != y_arr.shape:
        raise ChartDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")

    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    dropped = int(mask.size - np.count_nonzero(mask))
    if dropped:
        LOGGER.debug("dropped %d non-finite point(s)", dropped)
    return tuple(DataPoint(x_value=float(xv), y_value=float(yv)) for xv, yv in zip(x_arr[mask], y_arr[mask]))


def normalize_fractions(values: Any) -> tuple[BarFraction, ...]:
    arr = _as_float_array(values, label="fractions")
    mask = np.isfinite(arr)
    if not np.all(mask):
        LOGGER.debug("dropped %d non-finite fraction(s)", int(arr.size - np.count_nonzero(mask)))
    return tuple(BarFraction(value=float(v)) for v in arr[mask])


def normalize_bar_datasets(raw: Any) -> tuple[BarDataSet, ...]:
    """Build bar datasets from `{label: value | [fractions]}` or a list of `{"label", "fractions"}` records."""
    if isinstance(raw, Mapping):
        items = list(raw.items())
    elif isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)):
        items = []
        for i, record in enumerate(raw):
            if not isinstance(record, Mapping) or "label" not in record:
                raise ChartDataError(f"bar record {i} must be a mapping with a `label`")
            items.append((record["label"], record.get("fractions", record.get("value", ()))))
    else:
        raise ChartDataError(f"unsupported bar data input type: {type(raw)!r}")

    out: list[BarDataSet] = []
    for label, values in items:
        if isinstance(values, (int, float, Decimal)) and not isinstance(values, bool):
            values = [values]
        out.append(BarDataSet(label=str(label), fractions=normalize_fractions(values)))
    return tuple(out)


def _as_float_array(values: Any, *, label: str) -> np.ndarray:
    if pd is not None and isinstance(values, pd.Series):
        values = values.to_numpy()
    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise ChartDataError(f"{label} must be 1-D")
        if values.dtype.kind in {"i", "u", "f", "b"}:
            return values.astype(np.float64, copy=False)
        items = values.tolist()
    elif isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
        items = list(values)
    else:
        raise ChartDataError(f"unsupported {label} input type: {type(values)!r}")

    out = np.empty(len(items), dtype=np.float64)
    for i, item in enumerate(items):
        out[i] = _as_float(item, label=label, index=i)
    return out


def _as_float(item: Any, *, label: str, index: int) -> float:
    if item is None or (pd is not None and item is pd.NA):
        return math.nan
    if isinstance(item, (list, tuple, np.ndarray)):
        raise ChartDataError(f"{label} must be 1-D")
    try:
        return float(item)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"{label} contains non-numeric value at index {index}: {item!r}") from exc
