"""Rate estimator — active-time deltas to utilization percentage."""

from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class EstimatorState:
    """Baseline carried from one tick to the next."""
    previous_raw: float
    previous_instant: float     # wall-clock seconds

    @classmethod
    def initial(cls, now: float | None = None) -> EstimatorState:
        return cls(previous_raw=0.0, previous_instant=time.time() if now is None else now)


def derive(current_raw: float, now: float,
           state: EstimatorState) -> tuple[float, EstimatorState]:
    """Compute utilization since ``state`` and return it with the next state.

    The counter is in milliseconds of active time, so active ms over
    elapsed ms gives the busy fraction. If the wall clock stepped
    backwards the elapsed time counts as zero and so does the result.

    The baseline always moves to ``current_raw``, even when the read
    failed and came back as 0.0. The next good read is then measured
    against zero and spikes for one tick.
    """
    delta_counter = current_raw - state.previous_raw
    delta_time_ms = max(0.0, (now - state.previous_instant) * 1000.0)

    if delta_time_ms > 0.0:
        percentage = (delta_counter / delta_time_ms) * 100.0
    else:
        percentage = 0.0

    return percentage, EstimatorState(previous_raw=current_raw, previous_instant=now)
