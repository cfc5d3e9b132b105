from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Iterable, Sequence

from settings import get_settings

SENSOR_CONTEXT_KEYS = (
    "root_path",
    "category",
    "sensor_path",
    "provider",
    "sensor_count",
    "interval",
    "status_code",
    "reason",
)

_configured = False


def _render_context(key: str, value: object) -> str:
    text = str(value)
    if not text or any(char.isspace() for char in text):
        text = repr(text)
    return f"{key}={text}"


class ContextualFormatter(logging.Formatter):
    """Appends whitelisted ``extra=`` fields to the message as ``key=value``."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or SENSOR_CONTEXT_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            _render_context(key, getattr(record, key))
            for key in self._extra_keys
            if getattr(record, key, None) is not None
        ]
        if not context:
            return message
        return f"{message} | {' '.join(context)}"


def configure_logging(level: str | int | None = None) -> None:
    """Configure logging for the process.

    Without an explicit ``level`` only the first call takes effect; passing
    one always re-applies the configuration at that level. Records go to
    stderr so that sensor tables printed on stdout stay clean.
    """
    global _configured
    if _configured and level is None:
        return

    log_level = level if level is not None else get_settings().log_level

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "style": "%",
                    "extra_keys": list(SENSOR_CONTEXT_KEYS),
                }
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "level": log_level,
                    "formatter": "contextual",
                }
            },
            "root": {"handlers": ["stderr"], "level": log_level},
        }
    )

    _configured = True
