"""
Centralized Logging Utilities

This module configures process-wide logging for the board service. Every
module logs through ``logging.getLogger(__name__)``; this module only decides
where those records go and how they are rendered.
"""

import json
import logging
import sys
from datetime import datetime
from typing import Optional


TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text", stream: Optional[object] = None) -> logging.Logger:
    """
    Install a single root handler.

    Args:
        level: Log level name (``DEBUG``, ``INFO``, ...)
        fmt: ``text`` or ``json``
        stream: Optional stream for the handler (defaults to stderr)

    Returns:
        The configured root logger
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())

    # The transport layer of the search client is chatty at INFO.
    logging.getLogger("elastic_transport").setLevel(logging.WARNING)
    return root
