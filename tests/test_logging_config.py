from __future__ import annotations

import logging

import logging_config
from logging_config import ContextualFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.sensors",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Discovered sensors",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context_keys() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    message = formatter.format(
        _record(root_path="/sensors/temperature", sensor_count=3, unrelated="x")
    )

    assert message == "Discovered sensors | root_path=/sensors/temperature sensor_count=3"


def test_formatter_quotes_values_with_spaces_and_skips_none() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    message = formatter.format(_record(reason="bus unavailable", provider=None))

    assert message == "Discovered sensors | reason='bus unavailable'"


def test_formatter_without_context_leaves_message_untouched() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    assert formatter.format(_record()) == "INFO Discovered sensors"


def test_explicit_level_reconfigures_after_first_call(monkeypatch) -> None:
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, list(root.handlers)
    monkeypatch.setattr(logging_config, "_configured", False)
    try:
        configure_logging("WARNING")
        configure_logging("DEBUG")
        assert root.level == logging.DEBUG

        configure_logging()
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
