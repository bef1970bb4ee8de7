import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

LOG_DIR_ENV = "SECURITY_HOOK_LOG_DIR"
DEFAULT_LOG_DIR = "~/.security-hook/logs"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_file_handler() -> logging.Handler | None:
    logs_dir = Path(os.getenv(LOG_DIR_ENV, DEFAULT_LOG_DIR)).expanduser()
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = logs_dir / f"security_hook_{datetime.now(timezone.utc).strftime('%Y%m%d')}.jsonl"
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        return None
    handler.setFormatter(JsonFormatter())
    return handler


def _build_logger() -> logging.Logger:
    logger_instance = logging.getLogger("SecurityHook")
    logger_instance.setLevel(logging.INFO)
    logger_instance.handlers.clear()

    # Diagnostics go to stderr; stdout carries only the scan report.
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter("security-hook %(levelname)s: %(message)s"))
    logger_instance.addHandler(stream_handler)

    file_handler = _build_file_handler()
    if file_handler is not None:
        logger_instance.addHandler(file_handler)
    logger_instance.propagate = False
    return logger_instance


logger = _build_logger()
