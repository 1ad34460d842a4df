"""
Root logger setup for the style-atlas CLI.

Library modules only create module loggers; the CLI calls
``configure_logging`` once per command, after the config is loaded and
before the catalog is read.  Log lines go to stderr so that tables and
contour paths printed on stdout can be piped without filtering.

With ``[logging] json_format = true`` each record becomes a single JSON
object, e.g.::

    {"ts": "2025-03-01T09:30:15Z", "level": "DEBUG", "logger": "style_atlas.engine",
     "msg": "Published rank snapshot v1 for pair A (5 entities)"}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from style_atlas.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Fields set on every LogRecord; the rest were passed via ``extra=``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Keys are ``ts``, ``level``, ``logger`` and ``msg``, plus ``exc`` for
    exceptions and any ``extra=`` fields (e.g. ``axis_pair``).
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        for key, val in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = val
        return json.dumps(payload, default=str)


def configure_logging(config: "LoggingConfig") -> None:
    """Replace the root logger's handlers according to ``config``.

    Args:
        config: The ``[logging]`` section.  ``log_file`` adds a UTF-8 file
            handler (its directory is created on demand); ``json_format``
            switches both handlers to ``_JsonFormatter``.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter: logging.Formatter = (
        _JsonFormatter()
        if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
