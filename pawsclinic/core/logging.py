"""
Structured logging for the clinic service.

Every log line emitted while a request is being handled carries that
request's correlation id, path and method. The id is also returned to the
caller in the ``X-Correlation-ID`` header.
"""
import logging
import time
import uuid
from typing import Optional

import structlog
from fastapi import Request

SLOW_REQUEST_SECONDS = 2.0
CORRELATION_HEADER = "X-Correlation-ID"


class TruncateLongValues:
    """Cap the event text and any error string at ``max_length`` characters."""

    keys = ("event", "error")

    def __init__(self, max_length: int = 200):
        self.max_length = max_length

    def __call__(self, logger, method_name, event_dict):
        for key in self.keys:
            value = event_dict.get(key)
            if value is not None:
                text = str(value)
                if len(text) > self.max_length:
                    event_dict[key] = text[:self.max_length]
        return event_dict


def setup_logging(debug: bool = False, max_log_length: int = 200, level: str = "INFO"):
    """Configure structlog on top of the standard library root logger."""
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        TruncateLongValues(max_length=max_log_length),
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=log_level, format="%(message)s")
    logging.getLogger().setLevel(log_level)


def get_logger(name: str = __name__):
    return structlog.get_logger(name)


def mask_phone(s: Optional[str]) -> str:
    """Keep only the ends of a phone number for log output."""
    if not s:
        return ""
    s = s.strip()
    if s.startswith("+") and len(s) > 4:
        return s[:3] + "****" + s[-3:]
    if len(s) > 4:
        return s[:2] + "****" + s[-2:]
    return s


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:8]


class LoggingMiddleware:
    """
    Bind a correlation id for the duration of each request.

    Only slow or failing requests are logged unless ``log_requests`` is on.
    """

    def __init__(self, log_requests: bool = False):
        self.log_requests = log_requests
        self.logger = get_logger("pawsclinic.http")

    async def __call__(self, request: Request, call_next):
        correlation_id = new_correlation_id()
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            endpoint=request.url.path,
            method=request.method,
        )
        request.state.correlation_id = correlation_id
        started = time.perf_counter()

        if self.log_requests:
            self.logger.info("request_start")

        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(
                "request_error",
                error=str(e),
                error_type=type(e).__name__,
                duration=round(time.perf_counter() - started, 3),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id", "endpoint", "method")

        duration = time.perf_counter() - started
        slow = duration > SLOW_REQUEST_SECONDS
        if self.log_requests or slow or response.status_code >= 400:
            log = self.logger.warning if slow else self.logger.info
            log(
                "request_complete",
                correlation_id=correlation_id,
                endpoint=request.url.path,
                status_code=response.status_code,
                duration=round(duration, 3),
                slow=slow,
            )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
