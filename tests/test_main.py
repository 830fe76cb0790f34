import pytest

from npumon import __main__ as cli
from npumon.devices import DeviceNotFoundError, PciDevice


def test_no_device_exits_1(monkeypatch, capsys):
    def missing():
        raise DeviceNotFoundError("Cannot get any NPU device.")
    monkeypatch.setattr(cli, "resolve_npu", missing)

    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1
    assert "Cannot get any NPU device." in capsys.readouterr().err


def test_runs_monitor_inside_terminal(monkeypatch):
    npu = PciDevice(0, 0, 0x0B, 0, 0x8086, 0x7D1D, "Intel Corporation", "Meteor Lake NPU")
    monkeypatch.setattr(cli, "resolve_npu", lambda: (npu, "/tmp/counter"))
    events = []

    class FakeSession:
        def __enter__(self):
            events.append("enter")
            return self

        def __exit__(self, *exc):
            events.append("exit")

    class FakeMonitor:
        def __init__(self, path, name, *, terminal, gate):
            events.append(("monitor", path, name, isinstance(terminal, FakeSession)))

        def run(self):
            events.append("run")

    monkeypatch.setattr(cli, "TerminalSession", FakeSession)
    monkeypatch.setattr(cli, "NpuMonitor", FakeMonitor)
    monkeypatch.setattr(cli, "KeyGate", lambda: None)

    cli.main()
    assert events == [
        "enter",
        ("monitor", "/tmp/counter", "Meteor Lake NPU", True),
        "run",
        "exit",
    ]
