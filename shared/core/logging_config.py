"""
Structured logging configuration

Every record is emitted as one JSON document carrying the service identity,
the request trace context and, when present, the exception and any
``extra_fields`` passed by the caller.
"""

import logging
import logging.handlers
import sys
import json
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Context variables for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

class StructuredFormatter(logging.Formatter):
    """JSON formatter; service identity is fixed at construction time."""

    def __init__(self, service_name: str, environment: str = "development", version: str = "1.0.0"):
        super().__init__()
        self.service_name = service_name
        self.environment = environment
        self.version = version

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "@timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
            "version": self.version,
        }

        trace_context = get_trace_context()
        if trace_context:
            log_obj["trace"] = trace_context

        log_obj["location"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
            "module": record.module
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_obj["custom"] = record.extra_fields

        if hasattr(record, 'duration_ms'):
            log_obj["performance"] = {
                "duration_ms": record.duration_ms
            }

        return json.dumps(log_obj, default=str)

class RedactionFilter(logging.Filter):
    """Masks values of sensitive keys in ``extra_fields``."""

    SENSITIVE_FIELDS = (
        'password', 'token', 'api_key', 'secret',
        'authorization', 'cookie', 'database_url'
    )

    def filter(self, record: logging.LogRecord) -> bool:
        fields = getattr(record, 'extra_fields', None)
        if isinstance(fields, dict):
            record.extra_fields = {
                key: "***REDACTED***" if key.lower() in self.SENSITIVE_FIELDS else value
                for key, value in fields.items()
            }
        return True

def setup_logging(
    service_name: str,
    level: str = "INFO",
    environment: str = "development",
    version: str = "1.0.0",
    log_file: Optional[str] = None
) -> None:
    """
    Setup structured logging for the service

    Args:
        service_name: Name reported in every record
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Deployment environment label
        version: Service version label
        log_file: Optional path of a rotating log file, in addition to stdout
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = []

    formatter = StructuredFormatter(service_name, environment, version)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(RedactionFilter())
        root_logger.addHandler(handler)

    # Configure third-party loggers
    logging.getLogger('uvicorn').setLevel(logging.WARNING)
    logging.getLogger('fastapi').setLevel(logging.INFO)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized",
        extra={
            'extra_fields': {
                'service': service_name,
                'level': level,
                'file': log_file
            }
        }
    )

class LoggerAdapter(logging.LoggerAdapter):
    """Merges caller ``extra`` instead of replacing it with the adapter's own."""

    def process(self, msg, kwargs):
        extra = dict(self.extra or {})
        extra.update(kwargs.get('extra', {}))
        kwargs['extra'] = extra
        return msg, kwargs

def get_logger(name: str) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), {})

def get_trace_context() -> Optional[Dict[str, str]]:
    context = {}
    request_id = request_id_var.get()
    if request_id:
        context["request_id"] = request_id
    correlation_id = correlation_id_var.get()
    if correlation_id:
        context["correlation_id"] = correlation_id
    return context or None

def set_request_context(
    request_id: Optional[str] = None,
    correlation_id: Optional[str] = None
) -> None:
    request_id_var.set(request_id)
    correlation_id_var.set(correlation_id)

def generate_request_id() -> str:
    return str(uuid.uuid4())

# Middleware for FastAPI

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with its outcome and duration.
    Reuses an incoming X-Request-ID or generates one, and echoes it back.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        set_request_context(
            request_id=request_id,
            correlation_id=request.headers.get('X-Correlation-ID')
        )

        logger = get_logger(__name__)
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                'extra_fields': {
                    'method': request.method,
                    'path': request.url.path,
                    'client_host': request.client.host if request.client else None
                }
            }
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={
                    'extra_fields': {
                        'method': request.method,
                        'path': request.url.path,
                    },
                    'duration_ms': (time.perf_counter() - start_time) * 1000
                }
            )
            raise

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={
                'extra_fields': {
                    'method': request.method,
                    'path': request.url.path,
                    'status_code': response.status_code,
                },
                'duration_ms': (time.perf_counter() - start_time) * 1000
            }
        )
        response.headers['X-Request-ID'] = request_id
        return response
