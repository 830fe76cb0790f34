"""Counter reader — cumulative NPU active time from sysfs."""

from __future__ import annotations

import logging
from pathlib import Path

log = logging.getLogger(__name__)


def read_counter(path: str | Path) -> float:
    """Return the counter value at ``path``, or 0.0 if it can't be read.

    A single bad sample is not worth stopping the monitor for, so read and
    parse failures are swallowed here and show up as a dip in the chart.
    """
    try:
        raw = Path(path).read_text(encoding="ascii")
        return float(raw.strip())
    except (OSError, ValueError) as exc:
        log.debug("counter read failed for %s: %s", path, exc)
        return 0.0
