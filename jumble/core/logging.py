"""
jumble.core.logging — JSON log lines for scans and tool calls.

With ``structured_logging: true`` in the config, every ``jumble.*``
logger writes one JSON object per line to stderr.  Besides the usual
level / logger / message fields, the scan and dispatch code attach
context through ``extra=``:

    log.warning("Skipping %s: %s", path, exc,
                extra={"path": str(path), "kind": exc.kind})

and those keys (see ``CONTEXT_FIELDS``) become top-level JSON keys, so
a log shipper can filter on ``kind == "parse"`` without regexes.

stdout is never touched: in stdio transport mode it carries the MCP
protocol stream.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict

#: Record attributes copied into the JSON object when present.
CONTEXT_FIELDS = ("root", "path", "kind", "tool", "project", "projects", "diagnostics")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Always present: ``ts``, ``level``, ``logger``, ``msg``, ``line``.
    Any ``CONTEXT_FIELDS`` set on the record via ``extra=`` are added,
    and ``exception`` carries the traceback when ``exc_info`` is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S")
            + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "line": record.lineno,
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    structured: bool = False,
    level: str = "INFO",
    logger_name: str = "jumble",
) -> None:
    """Set the level of the ``jumble`` logger tree.

    With *structured* the tree gets its own stderr handler using
    ``StructuredFormatter`` and stops propagating, so JSON lines are not
    duplicated by a handler installed with ``logging.basicConfig``.
    Without it, whatever the application configured stays in charge.
    Unknown level names fall back to INFO.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not structured:
        return

    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False
