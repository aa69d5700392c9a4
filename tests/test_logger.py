import re
from datetime import datetime

import pytest

from x360make.logger import (
    AsyncFileLogger,
    LoggerConfig,
    LogLevel,
    format_line,
    format_timestamp,
)

LINE_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[(\w+)\] (.*)$")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _read(path):
    return path.read_bytes().decode("utf-8")


def test_format_timestamp_pads_fields():
    assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02 03:04:05"


def test_format_line_worked_example():
    line = format_line(LogLevel.WARNING, "disk", datetime(2024, 1, 2, 3, 4, 5))
    assert line == "[2024-01-02 03:04:05] [WARN] disk\n"


@pytest.mark.parametrize(
    "level, label",
    [
        (LogLevel.DEBUG, "[DEBUG]"),
        (LogLevel.INFO, "[INFO]"),
        (LogLevel.WARNING, "[WARN]"),
        (LogLevel.ERROR, "[ERROR]"),
        (LogLevel.FATAL, "[FATAL]"),
    ],
)
def test_level_labels(level, label):
    assert f" {label} msg\n" in format_line(level, "msg")


def test_default_timestamp_is_current_local_time():
    before = datetime.now().replace(microsecond=0)
    stamp = format_timestamp()
    after = datetime.now()
    parsed = datetime.strptime(stamp, TIMESTAMP_FORMAT)
    assert before <= parsed <= after


def test_config_defaults():
    config = LoggerConfig(filename="x.log")
    assert config.max_file_size == 10 * 1024 * 1024
    assert config.min_level is LogLevel.INFO
    assert config.console_output is True


def test_writes_bom_and_lines(tmp_path):
    path = tmp_path / "build.log"
    with AsyncFileLogger(LoggerConfig(filename=path, console_output=False)) as logger:
        logger.log(LogLevel.INFO, "first")
        logger.log(LogLevel.ERROR, "second")
    text = _read(path)
    assert text.startswith("\ufeff")
    lines = text[1:].splitlines()
    parsed = [LINE_RE.match(line).groups() for line in lines]
    assert parsed == [("INFO", "first"), ("ERROR", "second")]


def test_levels_below_minimum_are_dropped(tmp_path):
    path = tmp_path / "build.log"
    config = LoggerConfig(filename=path, console_output=False, min_level=LogLevel.WARNING)
    with AsyncFileLogger(config) as logger:
        logger.log(LogLevel.DEBUG, "hidden-debug")
        logger.log(LogLevel.INFO, "hidden-info")
        logger.log(LogLevel.FATAL, "shown")
    text = _read(path)
    assert "hidden" not in text
    assert "[FATAL] shown" in text


def test_order_preserved_across_many_records(tmp_path):
    path = tmp_path / "build.log"
    with AsyncFileLogger(LoggerConfig(filename=path, console_output=False)) as logger:
        for n in range(200):
            logger.log(LogLevel.INFO, f"record {n}")
    messages = [LINE_RE.match(line).group(2) for line in _read(path)[1:].splitlines()]
    assert messages == [f"record {n}" for n in range(200)]


def test_existing_file_is_truncated(tmp_path):
    path = tmp_path / "build.log"
    path.write_text("old content\n", encoding="utf-8")
    AsyncFileLogger(LoggerConfig(filename=path, console_output=False)).close()
    assert _read(path) == "\ufeff"


def test_console_output(tmp_path, capsys):
    path = tmp_path / "build.log"
    with AsyncFileLogger(LoggerConfig(filename=path, console_output=True)) as logger:
        logger.log(LogLevel.INFO, "to console")
    out = capsys.readouterr().out
    assert "[INFO] to console" in out


def test_rotation_keeps_every_record(tmp_path):
    path = tmp_path / "build.log"
    config = LoggerConfig(filename=path, console_output=False, max_file_size=10)
    with AsyncFileLogger(config) as logger:
        for n in range(3):
            logger.log(LogLevel.INFO, f"rotated {n}")
    rotated = sorted(tmp_path.glob("build.log.*.log"))
    assert len(rotated) == 3
    combined = "".join(_read(p) for p in rotated)
    for n in range(3):
        assert f"rotated {n}" in combined
    assert _read(path) == "\ufeff"


def test_unopenable_file_raises(tmp_path):
    path = tmp_path / "missing" / "build.log"
    with pytest.raises(OSError):
        AsyncFileLogger(LoggerConfig(filename=path, console_output=False))


def test_close_is_idempotent(tmp_path):
    path = tmp_path / "build.log"
    logger = AsyncFileLogger(LoggerConfig(filename=path, console_output=False))
    logger.log(LogLevel.INFO, "once")
    logger.close()
    logger.close()
    assert _read(path).count("once") == 1