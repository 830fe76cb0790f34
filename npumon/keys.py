"""Input gate — waits for a quit key while pacing the tick loop."""

from __future__ import annotations

import enum
import os
import select
import sys
import time

# ---- config ----
QUIT_KEYS = (b"q",)
INTERRUPT_KEY = b"\x03"     # Ctrl+C, arrives as a byte with ISIG off
ESC = 0x1B


class QuitReason(enum.Enum):
    KEY = "key"
    INTERRUPT = "interrupt"


class KeyGate:
    """Blocking, bounded wait for operator input on a file descriptor."""

    def __init__(self, fd: int | None = None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._eof = False

    def poll(self, timeout: float) -> QuitReason | None:
        """Wait up to ``timeout`` seconds for a key.

        Returns the quit reason if a quit key was pressed, otherwise None.
        Unrelated keys return early; the caller just starts the next tick.
        """
        if self._eof:
            # Nothing left to read; still hold the cadence.
            time.sleep(timeout)
            return None

        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None

        data = os.read(self.fd, 64)
        if not data:
            self._eof = True
            return None
        return classify(data)


def split_keys(data: bytes) -> list[bytes]:
    """Split raw input into one token per key press.

    Escape sequences stay whole: CSI (``ESC [ ... final``), SS3
    (``ESC O x``) and Alt+key (``ESC x``). Everything else is one byte.
    """
    keys = []
    i, n = 0, len(data)
    while i < n:
        if data[i] != ESC:
            keys.append(data[i:i + 1])
            i += 1
            continue

        j = i + 1
        if j < n and data[j] == ord("["):
            j += 1
            while j < n and not 0x40 <= data[j] <= 0x7E:
                j += 1
            j += 1
        elif j < n and data[j] == ord("O"):
            j += 2
        elif j < n:
            j += 1
        j = min(j, n)
        keys.append(data[i:j])
        i = j
    return keys


def classify(data: bytes) -> QuitReason | None:
    """Map a chunk of raw input to a quit reason, if any key in it is one."""
    for key in split_keys(data):
        if key == INTERRUPT_KEY:
            return QuitReason.INTERRUPT
        if key in QUIT_KEYS:
            return QuitReason.KEY
    return None
