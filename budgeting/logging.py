from __future__ import annotations

import json
import logging
import os
import sys
from logging import Logger

DEFAULT_LEVEL = os.getenv("BUDGET_LOG_LEVEL", "INFO")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        for key in ("budget_id", "user_id", "category"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str = "budgeting", json_output: bool | None = None) -> Logger:
    """Return a configured logger; handlers are attached once per name.

    JSON output is the default unless BUDGET_LOG_JSON is set to "0".
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    if json_output is None:
        json_output = os.getenv("BUDGET_LOG_JSON", "1") != "0"

    logger.setLevel(DEFAULT_LEVEL.upper())

    handler = logging.StreamHandler(stream=sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.propagate = False
    return logger
