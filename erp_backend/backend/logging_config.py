# backend/logging_config.py
"""
PATH: backend/logging_config.py

Django LOGGING builder.

- console: human-readable lines (development)
- json:    one JSON object per line on stdout (production log shipping)

Services log through logging.getLogger(__name__) and pass context with
extra={...}; the JSON formatter lifts those fields into "extra".
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

APP_LOGGERS = ("accounting", "assets", "payroll", "quotes")

_STANDARD_ATTRS = frozenset(
    {
        "name", "msg", "args", "levelname", "levelno", "pathname",
        "filename", "module", "lineno", "funcName", "created",
        "msecs", "relativeCreated", "thread", "threadName", "taskName",
        "processName", "process", "exc_info", "exc_text", "stack_info",
        "message", "asctime",
    }
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extras = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extras:
            entry["extra"] = extras

        return json.dumps(entry, default=str)


def get_logging_config(*, level: str = "INFO", fmt: str = "console", debug: bool = False) -> dict:
    level = (level or "INFO").upper()

    if fmt == "json":
        formatters = {"json": {"()": "backend.logging_config.JsonFormatter"}}
        formatter = "json"
    else:
        formatters = {
            "verbose": {
                "format": "[{asctime}] {levelname} {name} {message}",
                "style": "{",
            },
        }
        formatter = "verbose"

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
            "null": {"class": "logging.NullHandler"},
        },
        "loggers": {
            "": {"handlers": ["console"], "level": level},
            "django": {"handlers": ["console"], "level": level, "propagate": False},
            "django.request": {
                "handlers": ["console"],
                "level": level if debug else "ERROR",
                "propagate": False,
            },
            "django.db.backends": {"handlers": ["null"], "level": "INFO", "propagate": False},
        },
    }

    for name in APP_LOGGERS:
        config["loggers"][name] = {"handlers": ["console"], "level": level, "propagate": False}

    return config
