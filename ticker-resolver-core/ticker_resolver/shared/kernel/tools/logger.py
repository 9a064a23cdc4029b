from __future__ import annotations

import contextvars
import json
import logging
import os
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TypedDict

_SERVICE_NAME = "ticker-resolver-core"
_ENVIRONMENT = "dev"

# Request-scoped fields copied onto every record emitted while they are bound.
_CONTEXT_KEYS = ("request_id", "run_id", "node", "market", "language")

_RESERVED_RECORD_KEYS = frozenset(logging.makeLogRecord({}).__dict__.keys()) | {
    "message",
    "asctime",
    "service",
    "environment",
    "event",
    "error_code",
    "fields",
}

_SECRET_KEYS = frozenset(
    {
        "authorization",
        "cookie",
        "password",
        "token",
        "secret",
        "api_key",
        "x_api_key",
        "openai_api_key",
        "openrouter_api_key",
        "fmp_api_key",
        "apikey",
    }
)

_configured = False


class LogContext(TypedDict, total=False):
    request_id: str
    run_id: str
    node: str
    market: str
    language: str


_LOG_CONTEXT: contextvars.ContextVar[LogContext | None] = contextvars.ContextVar(
    "ticker_log_context", default=None
)


def _canonical_key(key: str) -> str:
    return key.strip().lower().replace("-", "_")


def _secret_keys() -> frozenset[str]:
    extra = {
        _canonical_key(item)
        for item in os.getenv("LOG_REDACT_KEYS", "").split(",")
        if item.strip()
    }
    return _SECRET_KEYS | extra


def sanitize_for_logging(value: object, *, key: str | None = None) -> object:
    """Recursively replace values stored under secret-looking keys."""
    if key is not None and _canonical_key(key) in _secret_keys():
        return "[REDACTED]"
    if isinstance(value, Mapping):
        return {
            str(item_key): sanitize_for_logging(item, key=str(item_key))
            for item_key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [sanitize_for_logging(item) for item in value]
    return value


def _merge_context(base: LogContext, fields: Mapping[str, str | None]) -> LogContext:
    merged: LogContext = dict(base)  # type: ignore[assignment]
    for key, value in fields.items():
        if value is None:
            continue
        text = value.strip()
        if text:
            merged[key] = text  # type: ignore[literal-required]
    return merged


def get_log_context() -> LogContext:
    current = _LOG_CONTEXT.get()
    return dict(current) if current else {}  # type: ignore[return-value]


@contextmanager
def log_context(**fields: str | None) -> Iterator[None]:
    token = _LOG_CONTEXT.set(_merge_context(get_log_context(), fields))
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _record_fields(record: logging.LogRecord) -> dict[str, object]:
    collected: dict[str, object] = {}
    explicit = getattr(record, "fields", None)
    if isinstance(explicit, Mapping):
        collected.update({str(key): value for key, value in explicit.items()})
    elif explicit is not None:
        collected["fields"] = explicit
    for key, value in record.__dict__.items():
        if key in _RESERVED_RECORD_KEYS or key in _CONTEXT_KEYS:
            continue
        collected[key] = value
    return collected


def _timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).isoformat()


def _context_items(record: logging.LogRecord) -> list[tuple[str, str]]:
    items: list[tuple[str, str]] = []
    for key in _CONTEXT_KEYS:
        value = getattr(record, key, None)
        if isinstance(value, str) and value:
            items.append((key, value))
    return items


def _optional_text(record: logging.LogRecord, attr: str) -> str | None:
    value = getattr(record, attr, None)
    return value if isinstance(value, str) and value else None


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": _timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "service": getattr(record, "service", _SERVICE_NAME),
            "environment": getattr(record, "environment", _ENVIRONMENT),
            "message": record.getMessage(),
        }
        payload.update(_context_items(record))
        for attr in ("event", "error_code"):
            text = _optional_text(record, attr)
            if text:
                payload[attr] = text
        extra = _record_fields(record)
        if extra:
            payload["fields"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(
            sanitize_for_logging(payload),
            ensure_ascii=True,
            sort_keys=True,
            default=str,
        )


class TextLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            _timestamp(record.created),
            record.levelname,
            record.name,
            record.getMessage(),
        ]
        for attr in ("event", "error_code"):
            text = _optional_text(record, attr)
            if text:
                parts.append(f"{attr}={text}")
        parts.extend(f"{key}={value}" for key, value in _context_items(record))
        extra = _record_fields(record)
        if extra:
            encoded = json.dumps(
                sanitize_for_logging(extra), ensure_ascii=True, sort_keys=True, default=str
            )
            parts.append(f"fields={encoded}")
        if record.exc_info:
            parts.append(f"exception={self.formatException(record.exc_info)}")
        return " ".join(parts)


class LogContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        context = get_log_context()
        for key in _CONTEXT_KEYS:
            setattr(record, key, context.get(key))
        record.service = os.getenv("LOG_SERVICE", _SERVICE_NAME)
        record.environment = os.getenv("APP_ENV", _ENVIRONMENT)
        return True


def _level_from_env() -> int:
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _formatter_from_env() -> logging.Formatter:
    if os.getenv("LOG_FORMAT", "json").strip().lower() == "text":
        return TextLogFormatter()
    return JsonLogFormatter()


def configure_logging() -> None:
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(_level_from_env())
    if root.handlers:
        for handler in root.handlers:
            handler.addFilter(LogContextFilter())
    else:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_formatter_from_env())
        handler.addFilter(LogContextFilter())
        root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger,
    *,
    event: str,
    message: str,
    level: int = logging.INFO,
    error_code: str | None = None,
    fields: Mapping[str, object] | None = None,
) -> None:
    extra: dict[str, object] = {"event": event}
    if error_code is not None:
        extra["error_code"] = error_code
    if fields is not None:
        extra["fields"] = sanitize_for_logging(fields)
    logger.log(level, message, extra=extra)
