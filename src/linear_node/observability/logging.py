"""Structured logging configuration for linear-node.

Provides JSON-formatted structured logging with contextual fields
(resource, operation, item_index, webhook_id) via contextvars.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Optional

# Context variables for execution-scoped logging fields
_resource: ContextVar[Optional[str]] = ContextVar("resource", default=None)
_operation: ContextVar[Optional[str]] = ContextVar("operation", default=None)
_item_index: ContextVar[Optional[int]] = ContextVar("item_index", default=None)
_webhook_id: ContextVar[Optional[str]] = ContextVar("webhook_id", default=None)


def set_log_context(
    resource: Optional[str] = None,
    operation: Optional[str] = None,
    item_index: Optional[int] = None,
    webhook_id: Optional[str] = None,
):
    """Set contextual logging fields for the current async context."""
    if resource is not None:
        _resource.set(resource)
    if operation is not None:
        _operation.set(operation)
    if item_index is not None:
        _item_index.set(item_index)
    if webhook_id is not None:
        _webhook_id.set(webhook_id)


def clear_log_context():
    """Clear all contextual logging fields."""
    _resource.set(None)
    _operation.set(None)
    _item_index.set(None)
    _webhook_id.set(None)


def _context_fields() -> dict:
    fields = {}
    resource = _resource.get()
    if resource:
        fields["resource"] = resource
    operation = _operation.get()
    if operation:
        fields["operation"] = operation
    item_index = _item_index.get()
    if item_index is not None:
        fields["item_index"] = item_index
    webhook_id = _webhook_id.get()
    if webhook_id:
        fields["webhook_id"] = webhook_id
    return fields


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter with context fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(_context_fields())

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable log formatter with context fields for development."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"[{self.formatTime(record, self.datefmt)}]",
            f"{record.levelname:8s}",
            f"{record.name}:",
            record.getMessage(),
        ]

        ctx = _context_fields()
        if ctx:
            parts.append(f"[{', '.join(f'{k}={v}' for k, v in ctx.items())}]")

        msg = " ".join(parts)

        if record.exc_info and record.exc_info[1]:
            msg += "\n" + self.formatException(record.exc_info)

        return msg


def configure_logging(environment: str = "development", log_level: str = "INFO"):
    """Configure structured logging for the application.

    Args:
        environment: "production" for JSON output, anything else for human-readable.
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove existing handlers
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)

    if environment == "production":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(HumanReadableFormatter(datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.addHandler(handler)

    # Quiet noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
