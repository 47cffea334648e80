"""Tests for LogLevel and Logger classes."""

import io
from datetime import date

import pytest
from conftest import make_filter

from file_date_filter import DateRangeRule, FileRecord, Logger, LogLevel


@pytest.mark.parametrize("prefix, expected", [("e", LogLevel.ERROR), ("WARN", LogLevel.WARN), ("i", LogLevel.INFO), ("3", LogLevel.DEBUG)])
def test_log_level_from_name_or_number(prefix: str, expected: LogLevel) -> None:
    assert LogLevel.from_name_or_number(prefix) == expected


def test_log_level_invalid() -> None:
    with pytest.raises(ValueError, match="Invalid log level: x"):
        LogLevel.from_name_or_number("x")


def test_verbose_respects_level() -> None:
    stream = io.StringIO()
    logger = Logger(LogLevel.INFO, stream)
    logger.verbose(LogLevel.INFO, "shown")
    logger.verbose(LogLevel.DEBUG, "hidden")
    logger.verbose(LogLevel.ERROR, "custom", prefix="UNEXPECTED ERROR")
    assert stream.getvalue() == "[INFO] shown\n[UNEXPECTED ERROR] custom\n"


def test_default_stream_is_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    Logger(LogLevel.WARN).verbose(LogLevel.WARN, "careful")
    captured = capsys.readouterr()
    assert captured.err == "[WARN] careful\n"
    assert captured.out == ""


def test_logger_add_and_print_decisions() -> None:
    """Logger should accumulate decisions and print them based on the verbosity level."""
    a = FileRecord(date(2014, 1, 1), "a.tar")
    longer = FileRecord(date(2014, 1, 2), "longer.tar")
    stream = io.StringIO()
    logger = Logger(LogLevel.INFO, stream)
    logger.add_decision(LogLevel.INFO, a, "Decision A")
    logger.add_decision(LogLevel.INFO, a, "Second A")
    logger.add_decision(LogLevel.DEBUG, longer, "hidden")
    logger.print_decisions([a, longer])
    assert stream.getvalue() == "[INFO] a.tar: Decision A\n"

    # Now with DEBUG level to see history
    stream = io.StringIO()
    logger_debug = Logger(LogLevel.DEBUG, stream)
    logger_debug.add_decision(LogLevel.INFO, a, "Decision A")
    logger_debug.add_decision(LogLevel.INFO, a, "Second A")
    logger_debug.add_decision(LogLevel.INFO, longer, "Decision B")
    logger_debug.print_decisions([a, longer])
    lines = stream.getvalue().splitlines()
    assert lines[0] == "[INFO] a.tar     : Decision A"
    assert lines[1].startswith("[DEBUG] ") and lines[1].endswith("└── Second A")
    assert lines[2] == "[INFO] longer.tar: Decision B"


def test_print_decisions_without_decisions() -> None:
    stream = io.StringIO()
    Logger(LogLevel.DEBUG, stream).print_decisions([FileRecord(date(2014, 1, 1), "a")])
    assert stream.getvalue() == ""


def test_engine_records_decisions_and_trace() -> None:
    stream = io.StringIO()
    logger = Logger(LogLevel.DEBUG, stream)
    engine = make_filter(["2014-01-01", "2014-01-15", "2013-12-01"], today=date(2014, 1, 15), logger=logger)
    engine.rule().every_month().keep_newest()
    engine.rule().within(DateRangeRule.days(1)).keep_all()
    newest = engine.files[-1]
    assert logger.decisions(newest) == ["Keeping by rule 01: newest of 2", "Keeping by rule 02: all"]
    assert logger.decisions(engine.files[1]) == []
    trace = stream.getvalue()
    assert "[DEBUG] Rule 01: active size 3" in trace
    assert "[DEBUG] Rule 01: every month, 2 groups" in trace
    assert "contains: 2014-01-15 bounds=(2014-01-15, 2014-01-15) = True" in trace
    assert "[DEBUG] Rule 02: within 1 days [2014-01-15, 2014-01-15], active size 1" in trace


def test_logging_never_changes_decisions() -> None:
    days = ["2013-10-01", "2013-11-15", "2013-12-01", "2013-12-24", "2014-01-01", "2014-01-15"]
    plain = make_filter(days, today=date(2014, 1, 15))
    logged = make_filter(days, today=date(2014, 1, 15), logger=Logger(LogLevel.DEBUG, io.StringIO()))
    for engine in (plain, logged):
        engine.rule().every_week().keep_newest().rule().within(DateRangeRule.calendar_months(1)).keep_all()
    assert [r.name for r in plain.kept()] == [r.name for r in logged.kept()]
