"""
Structured JSON logging. Every record carries the request id of the HTTP request that
produced it; order, product, variation and stock fields passed via `extra` become
top-level keys so stock movements can be traced per order.
"""
from __future__ import annotations

import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Record attributes promoted to top-level JSON keys when passed via `extra`
_CONTEXT_FIELDS = (
    "user_id",
    "order_id",
    "product_id",
    "variation_id",
    "quantity",
    "stock_before",
    "stock_after",
    "status_code",
)


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or None outside a request) to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            log["request_id"] = request_id
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log[field] = value if isinstance(value, int) else str(value)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log)


def get_logger(name: str, level: str | int = logging.INFO) -> logging.Logger:
    """Install the JSON handler on `name` once; child loggers propagate to it."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.addFilter(RequestIdFilter())
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
