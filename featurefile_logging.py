import json
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "taskName",
    "asctime",
}

# Always present in JSON output so log consumers can rely on the keys.
_MANDATORY_FIELDS = ("source", "feature", "frame_count", "frame_index", "error_code")


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS
    }


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "service": record.name,
            "message": record.getMessage(),
        }
        extras = _extras(record)
        for m in _MANDATORY_FIELDS:
            payload[m] = extras.get(m)
        payload.update(extras)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        extras = _extras(record)
        if extras:
            extra_pairs = " ".join(f"{key}={value}" for key, value in extras.items())
            msg = f"{msg} | {extra_pairs}"
        return msg


def setup_logging(
    service_name: str = "featurefile",
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_dir: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    logger = logging.getLogger(service_name)
    if logger.handlers:
        return logger

    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    if os.getenv("DEBUG", "false").lower() == "true":
        level_name = "DEBUG"
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    log_format = (log_format or os.getenv("LOG_FORMAT") or "text").lower()
    if log_format == "json":
        formatter = JsonFormatter()
    else:
        formatter = TextFormatter(fmt)

    # Stream handler (stderr keeps stdout free for command output)
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    sh.setLevel(numeric_level)
    logger.addHandler(sh)

    logs_dir = log_dir or os.getenv("LOG_DIR")
    if logs_dir:
        os.makedirs(logs_dir, exist_ok=True)
        fh_path = os.path.join(logs_dir, f"{service_name}.log")
        fh = RotatingFileHandler(fh_path, maxBytes=max_bytes, backupCount=backup_count)
        fh.setFormatter(formatter)
        fh.setLevel(numeric_level)
        logger.addHandler(fh)

    logger.setLevel(numeric_level)
    logger.propagate = False
    return logger
