import logging
import sys
import json
from typing import Optional
from datetime import datetime, timezone

from .config import Settings, get_settings

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName', 'taskName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'request_id', 'message', 'asctime',
}


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging with request IDs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if getattr(record, 'request_id', None):
            log_entry['request_id'] = record.request_id

        # Add any extra fields from the record
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class CorrelationFilter(logging.Filter):
    """Filter to add request IDs to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        # Set by the request middleware when available
        if not hasattr(record, 'request_id'):
            record.request_id = None
        return True


def setup_logging(settings: Optional[Settings] = None):
    """Setup structured logging with request IDs."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(StructuredFormatter())
    console_handler.addFilter(CorrelationFilter())
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)

    # Reduce noise from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return root_logger


def log_with_context(logger: logging.Logger, level: int, message: str,
                     request_id: str = None, **kwargs):
    """Log a message with correlation context."""
    extra = kwargs.copy()
    if request_id:
        extra['request_id'] = request_id

    logger.log(level, message, extra=extra)


def log_request_end(logger: logging.Logger, request_id: str, method: str, path: str,
                    status_code: int, duration: float, **kwargs):
    """Log request end with correlation context."""
    log_with_context(
        logger, logging.INFO,
        f"Request completed: {method} {path} - {status_code} in {duration:.3f}s",
        request_id=request_id,
        method=method,
        path=path,
        status_code=status_code,
        duration=duration,
        **kwargs
    )
