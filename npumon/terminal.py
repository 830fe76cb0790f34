"""Managed full-screen terminal mode for the chart.

Entering switches stdin to unbuffered, non-echoing input with signal keys
disabled (so Ctrl+C reaches the key gate as a byte), moves to the
alternate screen and hides the cursor. Leaving undoes all of it.
"""

from __future__ import annotations

import sys
import termios
from typing import TextIO

ENTER_ALT_SCREEN = "\033[?1049h"
LEAVE_ALT_SCREEN = "\033[?1049l"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"


class TerminalSession:
    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None):
        self.stdin = sys.stdin if stdin is None else stdin
        self.stdout = sys.stdout if stdout is None else stdout
        self._saved_attrs = None
        self.active = False

    def __enter__(self) -> TerminalSession:
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.leave()

    def enter(self) -> None:
        if self.stdin.isatty():
            fd = self.stdin.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            attrs = termios.tcgetattr(fd)
            attrs[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG)
            attrs[6][termios.VMIN] = 1
            attrs[6][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSANOW, attrs)

        self.stdout.write(ENTER_ALT_SCREEN + HIDE_CURSOR)
        self.stdout.flush()
        self.active = True

    def leave(self) -> None:
        """Restore the terminal. Safe to call more than once."""
        if not self.active:
            return
        self.active = False

        if self._saved_attrs is not None:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

        self.stdout.write(SHOW_CURSOR + LEAVE_ALT_SCREEN)
        self.stdout.flush()

    def write(self, frame: str) -> None:
        """Paint a frame from the top-left corner, clearing leftovers."""
        self.stdout.write("\033[H" + frame + "\033[J")
        self.stdout.flush()
