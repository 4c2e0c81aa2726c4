"""Trailing-window averages of per-frame measurements."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import List, Optional

from maskfit.types import HeadMeasures


class MovingAverage:
    """Mean over the last ``max_length`` values.

    None values (unavailable measurements) are not added.
    """

    def __init__(self, max_length: int = 50):
        if max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {max_length}")
        self.max_length = max_length
        self._data: deque = deque(maxlen=max_length)

    def update(self, value: Optional[float]) -> None:
        if value is None:
            return
        self._data.append(float(value))

    def average(self) -> Optional[float]:
        if not self._data:
            return None
        return sum(self._data) / len(self._data)

    @property
    def last(self) -> Optional[float]:
        return self._data[-1] if self._data else None

    @property
    def values(self) -> List[float]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


@dataclass
class MeasureAverages:
    """One moving average per facial dimension."""

    window: int = 50
    nose_width: MovingAverage = field(init=False)
    nose_depth: MovingAverage = field(init=False)
    face_height: MovingAverage = field(init=False)
    face_width: MovingAverage = field(init=False)

    def __post_init__(self):
        self.nose_width = MovingAverage(self.window)
        self.nose_depth = MovingAverage(self.window)
        self.face_height = MovingAverage(self.window)
        self.face_width = MovingAverage(self.window)

    def update(self, measures: HeadMeasures) -> None:
        self.nose_width.update(measures.nose_width)
        self.nose_depth.update(measures.nose_depth)
        self.face_height.update(measures.face_height)
        self.face_width.update(measures.face_width)

    def average(self) -> HeadMeasures:
        return HeadMeasures(
            nose_width=self.nose_width.average(),
            nose_depth=self.nose_depth.average(),
            face_height=self.face_height.average(),
            face_width=self.face_width.average(),
        )

    def clear(self) -> None:
        for avg in (self.nose_width, self.nose_depth, self.face_height, self.face_width):
            avg.clear()


__all__ = ["MovingAverage", "MeasureAverages"]
