import json
import logging
import sys
from typing import Optional, TextIO, Union


ROOT_LOGGER = "fnevent"

# attributes every LogRecord has; anything else came in through `extra=`
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, keys sorted."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, sort_keys=True, default=str)


def configure_logging(level: Union[int, str] = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    for h in logger.handlers:
        if getattr(h, "_fnevent", False):
            return logger
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    handler._fnevent = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
