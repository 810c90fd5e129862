"""
Logging configuration for lifeos.
JSON structured logging for hosted deployments; human-readable text for local dev.
Includes rotating file handler to manage log file size.

Turn-level log calls pass ``extra={"conversation_id": ..., "provider": ...}``;
both formatters surface those fields so one turn can be followed across the
primary attempt and its fallback.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone

# Record attributes set via ``extra=`` that the formatters surface
CONTEXT_FIELDS = ("conversation_id", "provider", "failure_reason")


def _context(record: logging.LogRecord) -> dict:
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with the turn context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(_context(record))
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, default=str)


class ContextTextFormatter(logging.Formatter):
    """Plain text, with ``key=value`` context appended after the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if not context:
            return line
        suffix = " ".join(f"{k}={v}" for k, v in context.items())
        return f"{line} [{suffix}]"


def setup_logging(log_level: str, logs_dir: str, json_logs: bool) -> None:
    """Configure root logger with appropriate format and handlers."""
    os.makedirs(logs_dir, exist_ok=True)

    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    if json_logs:
        console.setFormatter(JsonFormatter())
    else:
        console.setFormatter(
            ContextTextFormatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    handlers.append(console)

    # 10MB per file, keep 5 backups
    log_file = os.path.join(logs_dir, "lifeos.log")
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(JsonFormatter())
    handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # Provider SDKs log every HTTP request at INFO
    for name in ("httpx", "httpcore", "anthropic", "google_genai"):
        logging.getLogger(name).setLevel(logging.WARNING)
