"""
Structured Logging
Version: 1.0

One structlog pipeline for the API and the maintenance scripts.
Request-scoped fields (trace_id, method, path) live in structlog
contextvars and are merged into every entry logged while a request runs.
"""
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Optional

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars, merge_contextvars

NOISY_LOGGERS = ('httpx', 'httpcore', 'redis', 'uvicorn.access')


def bind_request_context(trace_id: str, **fields) -> None:
    """Start a fresh log context for one HTTP request."""
    clear_contextvars()
    bind_contextvars(trace_id=trace_id, **fields)


def get_trace_id() -> Optional[str]:
    return get_contextvars().get('trace_id')


def utc_timestamp(logger, method_name, event_dict):
    event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
    return event_dict


def service_info(service: str, version: str, environment: str):
    """Processor factory: stamp service metadata on JSON entries."""
    def processor(logger, method_name, event_dict):
        event_dict.setdefault('service', service)
        event_dict.setdefault('version', version)
        event_dict.setdefault('environment', environment)
        return event_dict
    return processor


def event_to_message(logger, method_name, event_dict):
    if 'event' in event_dict:
        event_dict['message'] = event_dict.pop('event')
    return event_dict


def configure_logging(
    json_format: bool = False,
    log_level: str = "INFO",
    service: str = "zeno-knows",
    version: str = "unknown",
    environment: str = "development"
) -> None:
    """
    Configure structlog and route stdlib logging to stdout.

    Args:
        json_format: JSON lines for log collectors, else coloured console output
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service, version, environment: metadata added to JSON entries
    """
    processors = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        utc_timestamp,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors += [
            service_info(service, version, environment),
            event_to_message,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LogTimer:
    """
    Log how long a block took.

        with LogTimer(logger, "Knowledge base load", tools_path=path):
            await kb.initialize(...)

    duration_ms is available after the block exits.
    """

    def __init__(self, logger, operation: str, **fields):
        self.logger = logger
        self.operation = operation
        self.fields = fields
        self.duration_ms: Optional[float] = None
        self._started = 0.0

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = round((time.perf_counter() - self._started) * 1000, 2)
        if exc_type is None:
            self.logger.info(f"{self.operation} completed", duration_ms=self.duration_ms, **self.fields)
        else:
            self.logger.error(f"{self.operation} failed", duration_ms=self.duration_ms, error=str(exc_val), **self.fields)
        return False
