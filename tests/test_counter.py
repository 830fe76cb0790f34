from npumon.counter import read_counter


def test_reads_and_strips(tmp_path):
    path = tmp_path / "runtime_active_time"
    path.write_text("  12345\n")
    assert read_counter(path) == 12345.0


def test_accepts_str_path(tmp_path):
    path = tmp_path / "runtime_active_time"
    path.write_text("7.5")
    assert read_counter(str(path)) == 7.5


def test_missing_file_is_zero(tmp_path):
    assert read_counter(tmp_path / "nope") == 0.0


def test_garbage_is_zero(tmp_path):
    path = tmp_path / "runtime_active_time"
    path.write_text("not a number\n")
    assert read_counter(path) == 0.0


def test_empty_is_zero(tmp_path):
    path = tmp_path / "runtime_active_time"
    path.write_text("")
    assert read_counter(path) == 0.0


def test_directory_is_zero(tmp_path):
    assert read_counter(tmp_path) == 0.0
