"""Entry point: ``python -m npumon`` or ``npumon``."""

from __future__ import annotations

import logging
import sys

from npumon.base import NpuMonitor
from npumon.devices import DeviceNotFoundError, resolve_npu
from npumon.keys import KeyGate
from npumon.terminal import TerminalSession


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        device, path = resolve_npu()
    except DeviceNotFoundError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    with TerminalSession() as terminal:
        monitor = NpuMonitor(path, device.display_name, terminal=terminal, gate=KeyGate())
        monitor.run()


if __name__ == "__main__":
    main()
