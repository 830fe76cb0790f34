"""NpuMonitor — sampling loop and chart rendering.

Handles: counter sampling, rate derivation, rolling history, plotext
chart drawing, SIGWINCH redraw, ANSI cursor-home double-buffering and
the key-gated tick loop.
"""

from __future__ import annotations

import enum
import signal
import sys
import time
from pathlib import Path
from typing import Callable

import plotext as plt

from npumon import HISTORY_CAPACITY, TICK_SECONDS
from npumon.counter import read_counter
from npumon.history import HistoryWindow, RateSample
from npumon.keys import KeyGate, QuitReason
from npumon.rate import EstimatorState, derive
from npumon.terminal import TerminalSession

# ---- chart style ----
LINE_COLOR = "cyan"
LINE_MARKER = "braille"
X_LABELS = ["60", "30", "now"]
Y_TICKS = [0, 50, 100]
Y_LABEL = "Usage %"
REDRAW_MIN_INTERVAL = 0.05


class MonitorState(enum.Enum):
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


def chart_title(device_name: str) -> str:
    if device_name:
        return f"NPU ({device_name}) Usage History"
    return "NPU Usage History"


class NpuMonitor:
    """Single-device utilization monitor.

    Lifecycle:
        1. __init__() sets the estimator baseline to (0.0, now)
        2. run() enters the blocking main loop
        3. tick() + render() are called each tick, then the key gate waits
        4. cleanup() is called once a quit key is seen
    """

    def __init__(self, counter_path: str | Path, device_name: str = "", *,
                 terminal: TerminalSession | None = None,
                 gate: KeyGate | None = None,
                 clock: Callable[[], float] = time.time,
                 capacity: int = HISTORY_CAPACITY):
        self.counter_path = counter_path
        self.title = chart_title(device_name)
        self.terminal = terminal
        self.gate = gate
        self.clock = clock
        self.capacity = capacity

        self.state = MonitorState.RUNNING
        self.estimator = EstimatorState.initial(clock())
        self.history = HistoryWindow(capacity)
        self.quit_reason: QuitReason | None = None
        self._last_draw = 0.0
        self._drawing = False

    @property
    def index(self) -> float:
        """Tick number of the newest sample, 0.0 before the first tick."""
        return self.history.latest_index()

    # ---- sampling ----

    def tick(self) -> RateSample:
        """Read, derive and record one sample."""
        raw = read_counter(self.counter_path)
        percentage, self.estimator = derive(raw, self.clock(), self.estimator)

        sample = RateSample(elapsed_index=self.index + 1.0, percentage=percentage)
        self.history.append(sample)
        return sample

    # ---- rendering ----

    def build_frame(self) -> str:
        xs, ys = self.history.points()
        x_now = self.history.latest_index()
        x_low = x_now - self.capacity
        x_mid = x_now - self.capacity / 2

        plt.clf()
        plt.theme("clear")
        plt.plotsize(None, None)

        plt.plot(xs, ys, color=LINE_COLOR, marker=LINE_MARKER)

        plt.frame(True)
        plt.grid(False, False)
        plt.title(self.title)
        plt.ylabel(Y_LABEL)
        plt.xlim(x_low, x_now)
        plt.ylim(0, 100)
        plt.xticks([x_low, x_mid, x_now], X_LABELS)
        plt.yticks(Y_TICKS, [str(t) for t in Y_TICKS])

        return plt.build().rstrip()

    def render(self) -> None:
        # plotext keeps one global figure; a resize redraw must not nest in here
        self._last_draw = time.monotonic()
        self._drawing = True
        try:
            frame = self.build_frame()
            if self.terminal is not None:
                self.terminal.write(frame)
            else:
                sys.stdout.write("\033[H" + frame + "\033[J")
                sys.stdout.flush()
        finally:
            self._drawing = False

    def _on_resize(self, signum, frame) -> None:
        if self._drawing or not len(self.history):
            return
        if time.monotonic() - self._last_draw < REDRAW_MIN_INTERVAL:
            return
        self.render()

    # ---- main loop ----

    def run(self) -> QuitReason | None:
        """Blocking main loop. 'q' or Ctrl+C to exit.

        Errors from reading or drawing are not caught here; they end the
        process without going through STOPPING.
        """
        if self.gate is None:
            self.gate = KeyGate()
        previous = signal.signal(signal.SIGWINCH, self._on_resize)

        try:
            while self.state is MonitorState.RUNNING:
                self.tick()
                self.render()
                reason = self.gate.poll(TICK_SECONDS)
                if reason is not None:
                    self.request_stop(reason)
        except KeyboardInterrupt:
            self.request_stop(QuitReason.INTERRUPT)
        finally:
            signal.signal(signal.SIGWINCH, previous)

        self._finish()
        return self.quit_reason

    def request_stop(self, reason: QuitReason) -> None:
        if self.state is MonitorState.RUNNING:
            self.quit_reason = reason
            self.state = MonitorState.STOPPING

    def _finish(self) -> None:
        if self.state is MonitorState.STOPPING:
            self.cleanup()
            self.state = MonitorState.STOPPED

    def cleanup(self) -> None:
        """Hand the terminal back to the shell."""
        if self.terminal is not None:
            self.terminal.leave()
