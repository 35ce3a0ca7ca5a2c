from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable, Literal


MIN_SPAN = 1e-6

SignGroup = Literal["positive", "negative"]


@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            raise ValueError("value range bounds must be finite")
        if self.max < self.min:
            raise ValueError(f"value range max must be >= min (got {self.min}..{self.max})")

    @classmethod
    def of(cls, values: Iterable[float]) -> "ValueRange":
        vals = [float(v) for v in values]
        if not vals:
            return cls(0.0, 0.0)
        return cls(min(vals), max(vals))

    @property
    def is_degenerate(self) -> bool:
        return self.max == self.min

    @property
    def span(self) -> float:
        return max(self.max - self.min, MIN_SPAN)

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class RangeOverride:
    min: float | None = None
    max: float | None = None

    def apply(self, value_range: ValueRange) -> ValueRange:
        lo = value_range.min if self.min is None else float(self.min)
        hi = value_range.max if self.max is None else float(self.max)
        if hi < lo:
            lo, hi = hi, lo
        return ValueRange(lo, hi)


@dataclass(frozen=True)
class AxisScale:
    min: float
    max: float
    interval: float
    tick_count: int

    @property
    def value_range(self) -> ValueRange:
        return ValueRange(self.min, self.max)


@dataclass(frozen=True)
class DataPoint:
    x_value: float
    y_value: float


@dataclass(frozen=True)
class LineDataSet:
    points: tuple[DataPoint, ...]
    label: str | None = None

    @property
    def x_values_min_max(self) -> ValueRange:
        return ValueRange.of(p.x_value for p in self.points)

    @property
    def y_values_min_max(self) -> ValueRange:
        return ValueRange.of(p.y_value for p in self.points)


@dataclass(frozen=True)
class BarFraction:
    value: float
    label: str | None = None

    @property
    def sign_group(self) -> SignGroup:
        return "positive" if self.value >= 0 else "negative"


@dataclass(frozen=True)
class BarDataSet:
    label: str
    fractions: tuple[BarFraction, ...] = ()

    @classmethod
    def single(cls, label: str, value: float) -> "BarDataSet":
        return cls(label=label, fractions=(BarFraction(float(value)),))

    @property
    def positive_fractions(self) -> tuple[BarFraction, ...]:
        return tuple(f for f in self.fractions if f.value >= 0)

    @property
    def negative_fractions(self) -> tuple[BarFraction, ...]:
        return tuple(f for f in self.fractions if f.value < 0)

    @property
    def positive_y_value(self) -> float:
        return float(sum(f.value for f in self.positive_fractions))

    @property
    def negative_y_value(self) -> float:
        return float(sum(f.value for f in self.negative_fractions))


@dataclass(frozen=True)
class SelectionResult:
    fractional_index: float
    snapped_index: int


@dataclass
class SelectionState:
    """Host-owned selection; only `apply` writes it."""

    selected_index: int = 0

    def apply(self, result: SelectionResult) -> bool:
        changed = result.snapped_index != self.selected_index
        self.selected_index = result.snapped_index
        return changed
