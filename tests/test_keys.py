import os

import pytest

from npumon.keys import KeyGate, QuitReason, classify, split_keys


@pytest.fixture
def pipe():
    r, w = os.pipe()
    yield r, w
    for fd in (r, w):
        try:
            os.close(fd)
        except OSError:
            pass


@pytest.mark.parametrize("data, expected", [
    (b"q", QuitReason.KEY),
    (b"\x03", QuitReason.INTERRUPT),
    (b"xq", QuitReason.KEY),
    (b"\x1b[Aq", QuitReason.KEY),
    (b"Q", None),
    (b"x", None),
    (b"\x1b[A", None),
    (b"\x1bOQ", None),          # F2 function key
    (b"\x1bOq", None),          # keypad 1, application mode
    (b"\x1b[1;2Q", None),       # Shift+F2
    (b"\x1bq", None),           # Alt+q
    (b"\x1b", None),
])
def test_classify(data, expected):
    assert classify(data) is expected


def test_split_keys():
    assert split_keys(b"a\x1b[15~\x1bOQq\x1bx\x03") == [
        b"a", b"\x1b[15~", b"\x1bOQ", b"q", b"\x1bx", b"\x03",
    ]


def test_split_keys_truncated_sequence():
    assert split_keys(b"\x1b[1;") == [b"\x1b[1;"]
    assert split_keys(b"\x1bO") == [b"\x1bO"]


def test_timeout_without_input(pipe):
    r, _ = pipe
    assert KeyGate(r).poll(0) is None


def test_quit_key(pipe):
    r, w = pipe
    os.write(w, b"q")
    assert KeyGate(r).poll(0.5) is QuitReason.KEY


def test_ctrl_c(pipe):
    r, w = pipe
    os.write(w, b"\x03")
    assert KeyGate(r).poll(0.5) is QuitReason.INTERRUPT


def test_other_key_is_consumed(pipe):
    r, w = pipe
    os.write(w, b"a")
    gate = KeyGate(r)
    assert gate.poll(0.5) is None
    assert gate.poll(0) is None


def test_eof_keeps_cadence(pipe, monkeypatch):
    r, w = pipe
    os.close(w)
    slept = []
    monkeypatch.setattr("npumon.keys.time.sleep", slept.append)

    gate = KeyGate(r)
    assert gate.poll(1.0) is None
    assert gate.poll(1.0) is None
    assert slept == [1.0]


def test_function_key_does_not_quit(pipe):
    r, w = pipe
    os.write(w, b"\x1bOQ")
    assert KeyGate(r).poll(0.5) is None
