"""Log setup — one root stream handler, as plain text or one JSON object per line."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a record as a single-line JSON object.

    Request context handed to the logger through ``extra=`` is copied in
    when present; see :attr:`context_fields`.
    """

    context_fields: tuple[str, ...] = ("method", "path", "status", "operation")

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in self.context_fields:
            if (value := getattr(record, field, None)) is not None:
                entry[field] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _RootHandler(logging.StreamHandler):
    """Marks the handler installed by :func:`setup_logging`."""


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Point the root logger at stderr with the *fmt* formatter.

    A handler left by an earlier call is replaced, so every application
    lifespan in a process can call this without duplicating log lines.
    """
    for handler in [h for h in logging.root.handlers if isinstance(h, _RootHandler)]:
        logging.root.removeHandler(handler)
        handler.close()

    handler = _RootHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))
    logging.root.addHandler(handler)
    logging.root.setLevel(level.upper())
