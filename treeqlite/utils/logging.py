"""Loguru configuration for TreeQLite.

Usage:
    from treeqlite.utils.logging import logger
    logger.debug("resolved paths: ...")  # Only shows if TREEQLITE_LOG_LEVEL=DEBUG

Environment Variables:
    TREEQLITE_LOG_LEVEL: TRACE|DEBUG|INFO|WARNING|ERROR (default: INFO)
    TREEQLITE_LOG_JSON: 0|1 (default: 0, human-readable on stderr)
    TREEQLITE_LOG_FILE: append Pino-format NDJSON to this file (optional)
    TREEQLITE_REQUEST_ID: correlation ID stamped on every JSON record

The CLI reconfigures the console handler with --log-level and adds a
rotating file handler with --log-dir.
"""

import json
import os
import sys
import uuid
from pathlib import Path

from loguru import logger

# Pino-compatible numeric levels
PINO_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

HUMAN_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]} | {name}:{line} - {message}"

_request_id = os.environ.get("TREEQLITE_REQUEST_ID") or str(uuid.uuid4())

# Handler ids installed by configure_logging(); handlers added elsewhere are left alone
_handler_ids: list[int] = []


def get_request_id() -> str:
    """Correlation id of this process, as stamped on JSON records."""
    return _request_id


def _pino_record(record) -> dict:
    """Build the Pino NDJSON payload for one loguru record."""
    pino_log = {
        "level": PINO_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
        "request_id": record["extra"].get("request_id", _request_id),
    }

    for key, value in record["extra"].items():
        if key != "request_id":
            pino_log[key] = value if isinstance(value, (str, int, float, bool)) else str(value)

    if record["exception"]:
        pino_log["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }

    return pino_log


def pino_compatible_sink(message):
    """Write one record as Pino-compatible NDJSON to stdout.

    {"level":30,"time":1715629847123,"msg":"...","pid":12345,"request_id":"..."}
    """
    # Never call logger.* inside a sink - causes infinite recursion
    sys.stdout.write(json.dumps(_pino_record(message.record)) + "\n")
    sys.stdout.flush()


def _stderr_sink(message):
    # Looks sys.stderr up per record so swapped streams (click's runner, pytest) are honoured
    sys.stderr.write(message)


def _ndjson_file_sink(log_file: Path):
    def sink(message):
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(_pino_record(message.record)) + "\n")

    return sink


def configure_logging(
    level: str | None = None,
    json_mode: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install the console handler and the optional NDJSON file handler.

    Arguments left as None are read from the TREEQLITE_LOG_* environment
    variables. Calling it again replaces the handlers of the previous call.
    """
    level = (level or os.environ.get("TREEQLITE_LOG_LEVEL", "INFO")).upper()
    if json_mode is None:
        json_mode = os.environ.get("TREEQLITE_LOG_JSON", "0") == "1"
    if log_file is None:
        log_file = os.environ.get("TREEQLITE_LOG_FILE")

    for handler_id in _handler_ids:
        logger.remove(handler_id)
    _handler_ids.clear()

    if json_mode:
        _handler_ids.append(logger.add(pino_compatible_sink, level=level, colorize=False))
    else:
        _handler_ids.append(
            logger.add(
                _stderr_sink,
                level=level,
                format=HUMAN_FORMAT,
                colorize=sys.stderr.isatty(),
            )
        )

    if log_file:
        # File always captures everything
        _handler_ids.append(logger.add(_ndjson_file_sink(Path(log_file)), level="DEBUG"))


def configure_file_logging(log_dir: Path, level: str = "DEBUG") -> int:
    """Add a rotating plain-text log file ``treeqlite.log`` under log_dir.

    Returns:
        The loguru handler ID, so callers can remove it again.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    return logger.add(
        log_dir / "treeqlite.log",
        rotation="10 MB",
        retention="7 days",
        level=level,
        format=FILE_FORMAT,
    )


logger.remove()
logger.configure(extra={"component": "treeqlite", "request_id": _request_id})
configure_logging()


__all__ = [
    "logger",
    "configure_logging",
    "configure_file_logging",
    "get_request_id",
    "pino_compatible_sink",
]
