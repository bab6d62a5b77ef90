from __future__ import annotations

import io
import logging

import pytest

from staticserve.log import configure_logging, level_name, select_level


@pytest.mark.parametrize(
    "log_level, verbosity, expected",
    [
        ("warn", 0, "warn"),
        ("debug", 0, "debug"),
        ("error", 0, "error"),
        ("bogus", 0, "warn"),
        (None, 0, "warn"),
        ("debug", 1, "error"),
        ("debug", 2, "warn"),
        ("warn", 3, "info"),
        ("warn", 4, "debug"),
        ("warn", 9, "debug"),
    ],
)
def test_level_name(log_level, verbosity, expected) -> None:  # noqa: ANN001
    assert level_name(log_level, verbosity) == expected


def test_select_level_maps_to_logging_constants() -> None:
    assert select_level("warn", 0) == logging.WARNING
    assert select_level("info", 0) == logging.INFO
    assert select_level("warn", 4) == logging.DEBUG


def test_configure_logging_attaches_one_handler() -> None:
    stream = io.StringIO()
    server_log = configure_logging("info", 0, stream=stream)
    again = configure_logging("warn", 1, stream=io.StringIO())

    assert server_log is again
    assert server_log.name == "staticserve"
    assert len(server_log.handlers) == 1
    assert server_log.level == logging.ERROR
    assert server_log.propagate is False

    module_log = logging.getLogger("staticserve.static_files")
    module_log.error("boom")
    module_log.warning("quiet")
    assert stream.getvalue() == "ERROR: boom\n"


def test_configure_logging_uses_log_flag_without_verbosity() -> None:
    assert configure_logging("debug", 0, stream=io.StringIO()).level == logging.DEBUG
    assert configure_logging("bogus", None, stream=io.StringIO()).level == logging.WARNING
