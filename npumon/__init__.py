"""npumon — terminal monitor for Intel NPU utilization.

Samples the NPU's power/runtime_active_time counter once per tick,
turns counter deltas into a utilization percentage and draws the last
minute of history as a scrolling chart.
"""

__version__ = "0.1.0"

# ---- config ----
TICK_SECONDS = 1.0
HISTORY_CAPACITY = 60
