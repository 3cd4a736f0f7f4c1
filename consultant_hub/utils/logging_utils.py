"""Structured logging utilities."""

import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from dataclasses import fields, is_dataclass
from functools import wraps
from typing import Any, Dict, Optional

from consultant_hub.config import settings


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class StructuredLogger:
    """Structured logger that outputs JSON logs."""

    def __init__(self, name: str = "consultant_hub"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

        # Handlers are attached to the root package logger only once
        root = logging.getLogger(name.split(".")[0])
        if not root.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            root.addHandler(handler)

    def _log(self, level: int, message: str, correlation_id: Optional[str] = None, **kwargs):
        """Internal logging method with structured data."""
        log_data = {
            "timestamp": _utc_now_iso(),
            "level": logging.getLevelName(level),
            "logger": self.logger.name,
            "message": message,
            "correlation_id": correlation_id,
            **kwargs
        }
        self.logger.log(level, json.dumps(log_data, default=str))

    def info(self, message: str, correlation_id: Optional[str] = None, **kwargs):
        self._log(logging.INFO, message, correlation_id, **kwargs)

    def debug(self, message: str, correlation_id: Optional[str] = None, **kwargs):
        self._log(logging.DEBUG, message, correlation_id, **kwargs)

    def warning(self, message: str, correlation_id: Optional[str] = None, **kwargs):
        self._log(logging.WARNING, message, correlation_id, **kwargs)

    def error(self, message: str, correlation_id: Optional[str] = None, **kwargs):
        self._log(logging.ERROR, message, correlation_id, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record):
        # StructuredLogger already serialized the payload
        if isinstance(record.msg, str) and record.msg.startswith('{'):
            return record.msg

        log_data = {
            "timestamp": _utc_now_iso(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }
        for extra in ("correlation_id", "duration_ms", "data_shape"):
            if hasattr(record, extra):
                log_data[extra] = getattr(record, extra)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracking."""
    return str(uuid.uuid4())


def _data_shape(result: Any) -> Optional[Dict[str, str]]:
    if is_dataclass(result):
        result = {f.name: getattr(result, f.name) for f in fields(result)}
    if isinstance(result, dict):
        return {k: f"{len(v)} items" if isinstance(v, list) else type(v).__name__ for k, v in result.items()}
    if isinstance(result, str):
        return {"str": f"{len(result)} chars"}
    return None


def log_pipeline_step(func):
    """Decorator to log pipeline step execution with timing.

    Works for both coroutine functions and plain functions. The step is
    identified by the wrapped function's name; a ``correlation_id`` keyword
    argument, when passed, is reused instead of generating a new one.
    """
    step_name = func.__name__
    logger = StructuredLogger("consultant_hub.pipeline")

    def _started(kwargs) -> tuple:
        correlation_id = kwargs.get('correlation_id') or generate_correlation_id()
        logger.info(f"Pipeline step started: {step_name}", correlation_id=correlation_id, step=step_name)
        return correlation_id, datetime.now(timezone.utc)

    def _elapsed_ms(start_time: datetime) -> float:
        return (datetime.now(timezone.utc) - start_time).total_seconds() * 1000

    def _completed(correlation_id, start_time, result):
        logger.info(
            f"Pipeline step completed: {step_name}",
            correlation_id=correlation_id,
            step=step_name,
            duration_ms=_elapsed_ms(start_time),
            data_shape=_data_shape(result)
        )

    def _failed(correlation_id, start_time, exc: Exception):
        logger.error(
            f"Pipeline step failed: {step_name}",
            correlation_id=correlation_id,
            step=step_name,
            duration_ms=_elapsed_ms(start_time),
            error=str(exc),
            error_type=type(exc).__name__
        )

    @wraps(func)
    async def async_wrapper(*args, **kwargs):
        correlation_id, start_time = _started(kwargs)
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            _failed(correlation_id, start_time, e)
            raise
        _completed(correlation_id, start_time, result)
        return result

    @wraps(func)
    def sync_wrapper(*args, **kwargs):
        correlation_id, start_time = _started(kwargs)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _failed(correlation_id, start_time, e)
            raise
        _completed(correlation_id, start_time, result)
        return result

    if asyncio.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
