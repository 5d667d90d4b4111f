"""
Minimal JSON logging for cache events.
Why: one machine-readable line per event, quiet unless DEBUG is enabled.
"""

import json
import logging
from typing import Any, Dict, Union


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        cache_key = getattr(record, "cache_key", None)
        if cache_key is not None:
            payload["cache_key"] = cache_key
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    if isinstance(level, str):
        name = level.strip().upper()
        level = logging.getLevelName(name)
        # getLevelName maps unknown names to "Level <NAME>" instead of failing
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name!r}")
    root = logging.getLogger()
    root.setLevel(level)
    if any(isinstance(h.formatter, _JsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
