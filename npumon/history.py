"""Rolling history of utilization samples."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from npumon import HISTORY_CAPACITY


@dataclass(frozen=True)
class RateSample:
    elapsed_index: float    # tick number, not seconds
    percentage: float


class HistoryWindow:
    """Fixed-capacity FIFO of RateSample, oldest first."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self.capacity = capacity
        self._data: deque[RateSample] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._data)

    def append(self, sample: RateSample) -> None:
        # deque drops from the left once maxlen is reached
        self._data.append(sample)

    def snapshot(self) -> list[RateSample]:
        return list(self._data)

    def latest_index(self) -> float:
        if not self._data:
            return 0.0
        return self._data[-1].elapsed_index

    def points(self) -> tuple[list[float], list[float]]:
        """Split the window into x and y lists for plotting."""
        xs = [s.elapsed_index for s in self._data]
        ys = [s.percentage for s in self._data]
        return xs, ys
